"""
Data models for the HMAC sensor datasource.

Contains DTOs for settings, the remote resource hierarchy, output series,
and the host-facing request/response envelopes.
"""

from .settings import PluginSettings, SecretSettings
from .datastream import DataStream, UnitOfMeasurement
from .thing import GeoPoint, Thing, ThingWithDataStreams
from .observation import Observation, ObservationsByDatastream, decode_observations
from .series import OutputSeries
from .query import (
    DataQuery,
    DataResponse,
    HealthResult,
    HealthStatus,
    QueryModel,
    ResourceResponse,
    TimeRange,
)

__all__ = [
    "PluginSettings",
    "SecretSettings",
    "DataStream",
    "UnitOfMeasurement",
    "GeoPoint",
    "Thing",
    "ThingWithDataStreams",
    "Observation",
    "ObservationsByDatastream",
    "decode_observations",
    "OutputSeries",
    "DataQuery",
    "DataResponse",
    "HealthResult",
    "HealthStatus",
    "QueryModel",
    "ResourceResponse",
    "TimeRange",
]
