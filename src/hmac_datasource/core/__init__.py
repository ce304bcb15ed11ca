"""
Core utilities for the HMAC sensor datasource.

Provides configuration management, logging, dates and cancellation.
"""

from .config import Config
from .logger import setup_logger, LoggerContext
from . import constants
from .date_utils import DateUtils
from .cancellation import CancellationToken

__all__ = [
    "Config",
    "setup_logger",
    "LoggerContext",
    "constants",
    "DateUtils",
    "CancellationToken",
]
