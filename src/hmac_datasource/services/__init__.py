"""
Business logic services for the HMAC sensor datasource.

Services orchestrate API operations and provide higher-level functionality.
"""

from .query import QueryPipeline, build_series
from .resources import ResourceAggregator
from .health import HealthProbe

__all__ = [
    "QueryPipeline",
    "build_series",
    "ResourceAggregator",
    "HealthProbe",
]
