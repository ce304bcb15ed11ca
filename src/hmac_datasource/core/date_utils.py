"""
Date and timezone utilities.

Centralizes the timestamp format shared by request signing, the Date header
and the observation query bounds, and the conversion of epoch milliseconds
to timezone-aware datetimes.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz

from . import constants

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.UTC)


class DateUtils:
    """Utilities for date and timezone handling."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def to_utc(dt: datetime) -> datetime:
        """
        Convert datetime to UTC.

        Args:
            dt: Datetime object (can be naive or aware)

        Returns:
            Datetime in UTC (timezone-aware)
        """
        if dt.tzinfo is None:
            # Assume UTC if no timezone
            return pytz.UTC.localize(dt)
        return dt.astimezone(pytz.UTC)

    @staticmethod
    def now_utc() -> datetime:
        """Current time as an aware UTC datetime."""
        return datetime.now(pytz.UTC)

    @staticmethod
    def format_iso(dt: datetime) -> str:
        """
        Format a datetime as YYYY-MM-DDTHH:mm:ss.sssZ.

        Sub-millisecond precision is truncated, never rounded. The remote
        server recomputes the signature from this exact string.

        Args:
            dt: Datetime object (naive values are taken as UTC)

        Returns:
            ISO string, e.g. '2025-05-25T13:24:56.789Z'
        """
        utc = DateUtils.to_utc(dt)
        millis = utc.microsecond // 1000
        return (
            f"{utc.strftime(constants.ISO_FORMAT)}.{millis:03d}"
            f"{constants.ISO_MILLIS_SUFFIX}"
        )

    @staticmethod
    def parse_iso(value: str) -> datetime:
        """
        Parse an ISO-8601 timestamp into an aware UTC datetime.

        Accepts the 'Z' suffix as well as explicit offsets. Naive input is
        taken as UTC.

        Args:
            value: ISO timestamp string

        Returns:
            Datetime in UTC

        Raises:
            ValueError: If the string is not a valid timestamp
        """
        if not value:
            raise ValueError("Empty timestamp")
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid timestamp: {value}")
        return DateUtils.to_utc(parsed)

    @staticmethod
    def from_epoch_millis(millis: int) -> datetime:
        """
        Convert epoch milliseconds to an aware UTC datetime.

        Uses integer arithmetic so large values keep millisecond precision.

        Raises:
            ValueError: If the instant is outside the range datetime can hold
        """
        try:
            return EPOCH + timedelta(milliseconds=millis)
        except OverflowError:
            raise ValueError(f"Epoch milliseconds out of range: {millis}") from None

    @staticmethod
    def to_epoch_millis(dt: datetime) -> int:
        """Convert a datetime to epoch milliseconds (naive values are UTC)."""
        delta = DateUtils.to_utc(dt) - EPOCH
        return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000

    def get_trailing_range(
        self,
        hours: float,
        reference_time: Optional[datetime] = None
    ) -> Tuple[datetime, datetime]:
        """
        Get the range ending at the reference time and starting `hours` before it.

        Args:
            hours: Length of the range in hours
            reference_time: End of the range (defaults to now in UTC)

        Returns:
            Tuple of (start_datetime, end_datetime), both aware UTC
        """
        if hours <= 0:
            raise ValueError(f"Range length must be positive, got {hours}")
        end = self.to_utc(reference_time) if reference_time else self.now_utc()
        start = end - timedelta(hours=hours)
        self.logger.debug(
            f"Trailing range of {hours}h: {self.format_iso(start)} to {self.format_iso(end)}"
        )
        return start, end
