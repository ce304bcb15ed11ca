"""
Base API client for the remote sensor API.

Handles signed requests, the pooled HTTP session, and error mapping.
"""

import json
import logging
from typing import Any, Optional

import requests  # type: ignore
from requests.adapters import HTTPAdapter  # type: ignore
from urllib3.util.retry import Retry  # type: ignore

from ..core import constants
from ..core.cancellation import CancellationToken
from ..exceptions import ConfigurationError, DecodeError, RemoteError, TransportError
from ..models.settings import PluginSettings
from .signing import HmacSigner, build_signed_get


def build_session(
    max_retries: int = constants.DEFAULT_MAX_RETRIES,
    pool_maxsize: int = constants.DEFAULT_POOL_MAXSIZE
) -> requests.Session:
    """
    Create a session with a connection pool mounted for http and https.

    Retries are off by default. When enabled they never raise on status, so
    the remote body of the last attempt is still available to the caller.
    """
    session = requests.Session()
    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False
    )
    adapter = HTTPAdapter(
        pool_connections=pool_maxsize,
        pool_maxsize=pool_maxsize,
        max_retries=retry_strategy
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class APIClient:
    """Base client for signed GET requests against the sensor API."""

    def __init__(
        self,
        settings: PluginSettings,
        timeout: float = constants.DEFAULT_TIMEOUT,
        max_retries: int = constants.DEFAULT_MAX_RETRIES,
        pool_maxsize: int = constants.DEFAULT_POOL_MAXSIZE,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize API client.

        Args:
            settings: Endpoint configuration and credentials
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            pool_maxsize: Pooled connections per host
            verify_ssl: Whether to verify SSL certificates
            session: Shared session; one is created when omitted
            logger: Logger instance

        Raises:
            ConfigurationError: If the secret key is present but not valid base64
        """
        self.settings = settings
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.logger = logger or logging.getLogger(__name__)

        # An empty key is reported by the health check, a malformed one is fatal
        self.signer: Optional[HmacSigner] = None
        if settings.secrets.secret_key:
            self.signer = HmacSigner(settings.secrets.secret_key)

        if not verify_ssl:
            import urllib3
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        self._owns_session = session is None
        self.session = session or build_session(max_retries, pool_maxsize)

    @property
    def base_path(self) -> str:
        return self.settings.base_path

    def ensure_configured(self) -> None:
        """
        Raise if any required setting is empty.

        Raises:
            ConfigurationError: Naming the first missing setting
        """
        missing = self.settings.first_missing()
        if missing:
            raise ConfigurationError(f"{missing} is missing")

    def _make_request(
        self,
        path: str,
        token: Optional[CancellationToken] = None
    ) -> requests.Response:
        """
        Send a signed GET request and return the fully read response.

        Args:
            path: Path below the server URL, including any query string
            token: Cancellation token of the calling query

        Returns:
            Response object with a 2xx status

        Raises:
            ConfigurationError: If settings are incomplete or the URL is malformed
            QueryCancelled: If the token is cancelled
            TransportError: On network failure
            RemoteError: On a non-2xx response
        """
        self.ensure_configured()
        if token:
            token.raise_if_cancelled()

        prepared = build_signed_get(
            self.settings.server_url,
            path,
            self.settings.secrets.client_id,
            self.signer,
            self.settings.auth_method,
        )
        timeout = token.bound_timeout(self.timeout) if token else self.timeout

        self.logger.debug(f"GET {path}")

        try:
            response = self.session.send(prepared, timeout=timeout, verify=self.verify_ssl)
        except requests.exceptions.RequestException as e:
            if token:
                token.raise_if_cancelled()
            self.logger.error(f"API request failed: GET {path} - {e}")
            raise TransportError(f"GET {path} failed: {e}") from e

        if token:
            token.raise_if_cancelled()

        if not 200 <= response.status_code < 300:
            self.logger.error(f"API request failed: GET {path} - HTTP {response.status_code}")
            raise RemoteError(response.status_code, response.text, path=path)

        return response

    def get(self, path: str, token: Optional[CancellationToken] = None) -> Any:
        """
        Make a signed GET request and decode its JSON body.

        Args:
            path: Path below the server URL
            token: Cancellation token of the calling query

        Returns:
            Decoded JSON document

        Raises:
            DecodeError: If the body is not valid JSON
        """
        response = self._make_request(path, token)
        try:
            return json.loads(response.content)
        except ValueError as e:
            self.logger.error(f"Invalid JSON from GET {path}: {e}")
            raise DecodeError(f"GET {path}: invalid JSON: {e}") from e

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
