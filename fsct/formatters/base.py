"""Formatter contract shared by every report shape."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from ..models import Finding, Summary

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class Formatter(ABC):
    """Render findings and their summary into one report document.

    ``clock`` supplies the report timestamp; tests pass a fixed one so
    output is byte-stable.
    """

    name = ""
    extension = ""

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()

    def timestamp(self) -> str:
        """RFC 3339 timestamp for the report envelope."""
        return self.now().isoformat()

    @abstractmethod
    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        """Return the rendered report."""


__all__ = ["Clock", "Formatter", "utc_now"]
