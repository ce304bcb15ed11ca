"""
Host-facing request and response models.

Contains the query envelope received from the host, the query editor's
selection, and the responses returned for queries, resource calls and
health checks.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..core import constants
from ..exceptions import DecodeError
from .series import OutputSeries


@dataclass(frozen=True)
class TimeRange:
    """Absolute time range of a query."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class DataQuery:
    """One query from the host, identified by its ref id."""

    ref_id: str
    json: Union[str, bytes, Dict[str, Any], None]
    time_range: TimeRange


@dataclass(frozen=True)
class QueryModel:
    """Selection data from the query editor."""

    thing_id: str

    @classmethod
    def parse(cls, payload: Union[str, bytes, Dict[str, Any], None]) -> "QueryModel":
        """
        Parse the free-form query payload.

        Raises:
            DecodeError: If the payload is not a JSON object or thingId is not a string
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise DecodeError(str(e)) from e
        if not isinstance(payload, dict):
            raise DecodeError(f"expected a JSON object, got {type(payload).__name__}")
        thing_id = payload.get("thingId") or ""
        if not isinstance(thing_id, str):
            raise DecodeError(f"thingId must be a string, got {type(thing_id).__name__}")
        return cls(thing_id=thing_id)


@dataclass
class DataResponse:
    """Result of one query: series on success, an error message otherwise."""

    series: List[OutputSeries] = field(default_factory=list)
    error: Optional[str] = None
    status: int = constants.STATUS_OK

    @classmethod
    def failure(cls, message: str, status: int = constants.STATUS_BAD_REQUEST) -> "DataResponse":
        return cls(error=message, status=status)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ResourceResponse:
    """Response to a resource call."""

    status: int
    body: bytes
    headers: Dict[str, List[str]] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.body)


class HealthStatus(Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class HealthResult:
    """Outcome of a health check."""

    status: HealthStatus
    message: str

    @property
    def healthy(self) -> bool:
        return self.status is HealthStatus.OK
