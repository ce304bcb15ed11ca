"""
Cancellation and deadline handling for queries.

A token is shared between the caller and the code doing network I/O. The
caller may cancel it from another thread; the worker checks it before and
after each request.
"""

import threading
import time
from typing import Optional

from ..exceptions import QueryCancelled


class CancellationToken:
    """
    Cancellation flag with an optional deadline.

    cancel() does not interrupt a request already in flight; it takes effect
    when that request returns. Only the deadline bounds an in-flight request,
    through the request timeout.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize token.

        Args:
            timeout: Seconds from now after which the token counts as cancelled.
                     None means no deadline.
        """
        self._event = threading.Event()
        self.deadline: Optional[float] = None
        if timeout is not None:
            self.deadline = time.monotonic() + timeout

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self, operation: str = "query") -> None:
        if self._event.is_set():
            raise QueryCancelled(f"{operation} cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise QueryCancelled(f"{operation} deadline exceeded")

    def bound_timeout(self, timeout: float) -> float:
        """Limit a request timeout to the time left before the deadline."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        # urllib3 rejects timeouts <= 0
        return max(min(timeout, remaining), 0.001)
