"""
Health check service.

Validates configuration completeness, then checks that the sites index is
reachable and not empty.
"""

import logging
from typing import Optional, TYPE_CHECKING

from ..core import constants
from ..exceptions import ConfigurationError, DecodeError, RemoteError, TransportError
from ..models.query import HealthResult, HealthStatus
from ..models.settings import PluginSettings

if TYPE_CHECKING:
    from ..api import SensorAPI

HEALTHY_MESSAGE = "Data source is working"
NO_THINGS_MESSAGE = "No root nodes found"


class HealthProbe:
    """Check that the datasource is configured and can reach the remote API."""

    def __init__(
        self,
        settings: PluginSettings,
        api_client: "SensorAPI",
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize health probe.

        Args:
            settings: Datasource settings
            api_client: API client instance
            logger: Logger instance
        """
        self.settings = settings
        self.api_client = api_client
        self.logger = logger or logging.getLogger(__name__)

    def _fail(self, message: str) -> HealthResult:
        self.logger.warning(f"Health check failed: {message}")
        return HealthResult(status=HealthStatus.ERROR, message=message)

    def check(self) -> HealthResult:
        """
        Run the health check. Never raises.

        Settings are checked in order (secret key, client id, server URL,
        base path, auth method) and the first missing one is reported.

        Returns:
            Health status and message
        """
        missing = self.settings.first_missing()
        if missing:
            return self._fail(f"{missing} is missing")

        try:
            things = self.api_client.get_things(constants.INDEX_NAME)
        except ConfigurationError as e:
            return self._fail(f"Configuration error: {e}")
        except RemoteError as e:
            return self._fail(f"Request failed: {e.body or f'HTTP {e.status_code}'}")
        except TransportError as e:
            return self._fail(f"Request failed: {e}")
        except DecodeError as e:
            return self._fail(f"Unmarshaling failed: {e}")

        if not things:
            return self._fail(NO_THINGS_MESSAGE)

        self.logger.info(f"Health check passed, {len(things)} things found")
        return HealthResult(status=HealthStatus.OK, message=HEALTHY_MESSAGE)
