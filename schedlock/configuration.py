"""
LockConfiguration: what to lock and for how long.

Built once per task invocation from "now" plus configured durations and
never mutated afterwards.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from schedlock.clock import Clock, resolve_clock
from schedlock.constants import DEFAULT_LOCK_AT_LEAST_FOR
from schedlock.exceptions import InvalidLockConfigurationError


@dataclass(frozen=True)
class LockConfiguration:
    """
    name: unique key of the guarded task.
    lock_at_most_until: after this instant the lock is considered abandoned
        (the holder most likely died) and may be reclaimed.
    lock_at_least_until: release never frees the lock before this instant,
        even when the task finishes earlier.
    created_at: the "now" both instants were computed from.
    """

    name: str
    lock_at_most_until: datetime
    lock_at_least_until: datetime
    created_at: datetime = field(compare=False)

    def __post_init__(self):
        if not self.name:
            raise InvalidLockConfigurationError("lock name can not be empty")
        if self.lock_at_least_until > self.lock_at_most_until:
            raise InvalidLockConfigurationError(
                f"lockAtLeastFor is longer than lockAtMostFor for lock "
                f"'{self.name}'."
            )
        if self.lock_at_least_until < self.created_at:
            raise InvalidLockConfigurationError(
                f"lockAtLeastFor is negative for lock '{self.name}'."
            )

    @classmethod
    def from_durations(
        cls,
        name: str,
        lock_at_most_for: timedelta,
        lock_at_least_for: timedelta = DEFAULT_LOCK_AT_LEAST_FOR,
        clock: Optional[Clock] = None,
        now: Optional[datetime] = None,
    ) -> "LockConfiguration":
        """Compute absolute instants from now (or the given clock)."""
        if lock_at_most_for <= timedelta(0):
            raise InvalidLockConfigurationError(
                f"lockAtMostFor must be positive for lock '{name}'."
            )
        if lock_at_least_for < timedelta(0):
            raise InvalidLockConfigurationError(
                f"lockAtLeastFor is negative for lock '{name}'."
            )
        if now is None:
            now = resolve_clock(clock).now()
        return cls(
            name=name,
            lock_at_most_until=now + lock_at_most_for,
            lock_at_least_until=now + lock_at_least_for,
            created_at=now,
        )

    @property
    def lock_at_most_for(self) -> timedelta:
        return self.lock_at_most_until - self.created_at

    @property
    def lock_at_least_for(self) -> timedelta:
        return self.lock_at_least_until - self.created_at

    def unlock_time(self, now: datetime) -> datetime:
        """Either now or lock_at_least_until, whichever is later."""
        if self.lock_at_least_until > now:
            return self.lock_at_least_until
        return now
