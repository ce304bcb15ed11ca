"""
API layer for the remote sensor API.

Provides request signing and a client for sites, datastreams and observations.
"""

import logging
from typing import Optional

import requests  # type: ignore

from ..core import constants
from ..models.settings import PluginSettings
from .client import APIClient, build_session
from .sites import SitesAPI
from .datastreams import DataStreamsAPI
from .observations import ObservationsAPI
from .signing import HmacSigner, authorization_header, build_signed_get, string_to_sign


class SensorAPI(APIClient, SitesAPI, DataStreamsAPI, ObservationsAPI):
    """
    Unified API client for the sensor API.

    Combines sites, datastreams and observations operations.
    """

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
        Initialize unified API client.

        Args:
            settings: Endpoint configuration and credentials
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            pool_maxsize: Pooled connections per host
            verify_ssl: Whether to verify SSL certificates
            session: Shared session; one is created when omitted
            logger: Logger instance
        """
        super().__init__(
            settings=settings,
            timeout=timeout,
            max_retries=max_retries,
            pool_maxsize=pool_maxsize,
            verify_ssl=verify_ssl,
            session=session,
            logger=logger
        )


__all__ = [
    "APIClient",
    "build_session",
    "SitesAPI",
    "DataStreamsAPI",
    "ObservationsAPI",
    "SensorAPI",
    "HmacSigner",
    "authorization_header",
    "build_signed_get",
    "string_to_sign",
]
