"""
Single source of "now" for every lock component.

Components take an explicit clock argument; tests pass a ManualClock instead
of patching global state.
"""
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Returns timezone-aware UTC datetimes."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    """Wall clock truncated to milliseconds."""

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        return current.replace(microsecond=current.microsecond // 1000 * 1000)


class ManualClock(Clock):
    """Clock that only moves when told to. Safe to share between threads."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or SystemClock().now()
        self._mutex = threading.Lock()

    def now(self) -> datetime:
        with self._mutex:
            return self._now

    def set(self, value: datetime) -> None:
        with self._mutex:
            self._now = value

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward by delta and return the new time."""
        with self._mutex:
            self._now = self._now + delta
            return self._now


default_clock = SystemClock()


def resolve_clock(clock: Optional[Clock]) -> Clock:
    return clock if clock is not None else default_clock
