"""
Exception hierarchy for the HMAC sensor datasource.

Messages never include credentials; remote bodies are kept verbatim because
they usually carry the server's own explanation.
"""

from typing import Optional


class DatasourceError(Exception):
    """Base class for all datasource errors."""


class ConfigurationError(DatasourceError, ValueError):
    """Missing or malformed credentials or endpoint settings."""


class TransportError(DatasourceError):
    """Network-level failure while reaching the remote API."""


class RemoteError(DatasourceError):
    """Non-2xx response from the remote API."""

    def __init__(self, status_code: int, body: str, path: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.path = path
        super().__init__(body or f"HTTP {status_code}")


class DecodeError(DatasourceError, ValueError):
    """Response body is not the JSON shape that was expected."""


class QueryCancelled(DatasourceError):
    """The caller cancelled the query or its deadline passed."""
