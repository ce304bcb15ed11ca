"""
Datasource adapter for the HMAC-signed sensor API.

One instance holds the settings and the pooled HTTP session for its whole
lifetime and serves queries, resource calls and health checks. Instances
keep no per-query state, so concurrent calls on one instance are safe.
"""

import json
import logging
from typing import Dict, Iterable, Optional

import requests  # type: ignore

from .api import SensorAPI
from .core import constants
from .core.cancellation import CancellationToken
from .core.config import Config
from .exceptions import DatasourceError, DecodeError, QueryCancelled, RemoteError
from .models.query import (
    DataQuery,
    DataResponse,
    HealthResult,
    QueryModel,
    ResourceResponse,
)
from .models.settings import PluginSettings
from .services import HealthProbe, QueryPipeline, ResourceAggregator


class Datasource:
    """Host-facing datasource instance."""

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
        Initialize datasource.

        Args:
            settings: Endpoint configuration and credentials
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            pool_maxsize: Pooled connections per host
            verify_ssl: Whether to verify SSL certificates
            session: Shared session; one is created when omitted
            logger: Logger instance

        Raises:
            ConfigurationError: If the secret key is not valid base64
        """
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

        self.api_client = SensorAPI(
            settings=settings,
            timeout=timeout,
            max_retries=max_retries,
            pool_maxsize=pool_maxsize,
            verify_ssl=verify_ssl,
            session=session,
            logger=self.logger
        )
        self.pipeline = QueryPipeline(self.api_client, logger=self.logger)
        self.aggregator = ResourceAggregator(self.api_client, logger=self.logger)
        self.health_probe = HealthProbe(settings, self.api_client, logger=self.logger)

    @classmethod
    def from_config(
        cls,
        config: Config,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ) -> "Datasource":
        """Create a datasource from application configuration."""
        return cls(
            settings=config.to_settings(),
            timeout=config.api_timeout,
            max_retries=config.api_max_retries,
            pool_maxsize=config.api_pool_maxsize,
            verify_ssl=config.api_verify_ssl,
            session=session,
            logger=logger
        )

    def query_data(
        self,
        queries: Iterable[DataQuery],
        token: Optional[CancellationToken] = None
    ) -> Dict[str, DataResponse]:
        """
        Handle several queries, each independently.

        Args:
            queries: Queries from the host
            token: Cancellation token shared by all queries

        Returns:
            Mapping of ref id to the query's response

        Raises:
            QueryCancelled: If the token is cancelled; partial results are discarded
        """
        responses: Dict[str, DataResponse] = {}
        for query in queries:
            responses[query.ref_id] = self.query(query, token)
        return responses

    def query(
        self,
        query: DataQuery,
        token: Optional[CancellationToken] = None
    ) -> DataResponse:
        """
        Handle a single query.

        Failures become a bad-request response whose message embeds the cause.

        Raises:
            QueryCancelled: If the token is cancelled
        """
        try:
            model = QueryModel.parse(query.json)
        except DecodeError as e:
            return DataResponse.failure(f"json unmarshal: {e}")

        try:
            series = self.pipeline.run(model.thing_id, query.time_range, token=token)
        except QueryCancelled:
            raise
        except RemoteError as e:
            self.logger.error(f"Query {query.ref_id} failed: HTTP {e.status_code}")
            return DataResponse.failure(f"request failed: {e.body or f'HTTP {e.status_code}'}")
        except DatasourceError as e:
            self.logger.error(f"Query {query.ref_id} failed: {e}")
            return DataResponse.failure(f"request: {e}")

        return DataResponse(series=series)

    def call_resource(
        self,
        path: str,
        token: Optional[CancellationToken] = None
    ) -> ResourceResponse:
        """
        List the things at a path below the base path, with their datastreams.

        Args:
            path: Resource path relative to the base path (e.g. 'sites')
            token: Cancellation token

        Returns:
            JSON response; the remote status and body when the listing call
            is rejected; 500 with the error text for any other failure
        """
        try:
            things = self.api_client.get_things(path.lstrip("/"), token=token)
        except RemoteError as e:
            return ResourceResponse(status=e.status_code, body=e.body.encode("utf-8"))
        except DatasourceError as e:
            return self._resource_error(e)

        try:
            resource = self.aggregator.aggregate(things, token=token)
        except DatasourceError as e:
            return self._resource_error(e)

        body = json.dumps([item.to_dict() for item in resource]).encode("utf-8")
        return ResourceResponse(
            status=constants.STATUS_OK,
            body=body,
            headers={"Content-Type": ["application/json"]},
        )

    def _resource_error(self, error: DatasourceError) -> ResourceResponse:
        self.logger.error(f"Resource call failed: {error}")
        return ResourceResponse(
            status=constants.STATUS_INTERNAL_ERROR,
            body=str(error).encode("utf-8"),
        )

    def check_health(self) -> HealthResult:
        """Report whether the datasource is configured and reachable."""
        return self.health_probe.check()

    def dispose(self) -> None:
        """Release the HTTP session."""
        self.api_client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.dispose()
