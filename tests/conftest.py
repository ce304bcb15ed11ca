"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
import base64
from pathlib import Path

import pytest

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.hmac_datasource.models import PluginSettings, SecretSettings  # noqa: E402

SERVER_URL = "https://sensors.example.com"
BASE_PATH = "/data-export"
CLIENT_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
SECRET_KEY = base64.b64encode(b"not-a-real-signing-key").decode("ascii")
AUTH_METHOD = "xCloud"


@pytest.fixture
def settings():
    """Complete datasource settings pointing at a fake server."""
    return PluginSettings(
        server_url=SERVER_URL,
        base_path=BASE_PATH,
        auth_method=AUTH_METHOD,
        secrets=SecretSettings(secret_key=SECRET_KEY, client_id=CLIENT_ID),
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring API access"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
