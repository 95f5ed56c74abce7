"""Deadline and cancellation handle threaded through AI calls."""

from __future__ import annotations

import threading
import time
from typing import Optional


class CallContext:
    """Cooperative cancellation signal with an optional absolute deadline.

    The deadline is a :func:`time.monotonic` timestamp. Providers derive their
    socket timeout from :meth:`remaining`, and the retry loop sleeps through
    :meth:`wait` so that :meth:`cancel` interrupts a backoff immediately.
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, timeout: float) -> "CallContext":
        return cls(deadline=time.monotonic() + timeout)

    def child(self, timeout: float) -> "CallContext":
        """Return a context with a deadline that shares this one's cancellation."""
        child = CallContext(deadline=time.monotonic() + timeout)
        child._cancelled = self._cancelled
        return child

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, delay: float) -> bool:
        """Sleep up to ``delay`` seconds; return True if the context finished meanwhile."""
        remaining = self.remaining()
        if remaining is not None and remaining < delay:
            self._cancelled.wait(remaining)
            return True
        return self._cancelled.wait(delay) or self.expired


__all__ = ["CallContext"]
