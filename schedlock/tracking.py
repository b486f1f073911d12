"""
Tracking wrapper: remembers every lock acquired through it until released.

Used for operational introspection and to release everything still held
when a worker shuts down.
"""
import logging
import threading
from datetime import timedelta
from typing import Callable, List, Optional

from schedlock.configuration import LockConfiguration
from schedlock.lock import SimpleLock
from schedlock.provider import LockProvider

logger = logging.getLogger(__name__)


class TrackingLockProviderWrapper(LockProvider):
    def __init__(self, wrapped: LockProvider):
        self.wrapped = wrapped
        self._active_locks = set()
        self._mutex = threading.Lock()

    def lock(
        self, lock_configuration: LockConfiguration
    ) -> Optional[SimpleLock]:
        lock = self.wrapped.lock(lock_configuration)
        if lock is None:
            return None
        tracked = TrackedLock(lock, lock_configuration, self._forget)
        with self._mutex:
            self._active_locks.add(tracked)
        return tracked

    def get_active_locks(self) -> List[SimpleLock]:
        """Snapshot of the locks acquired and not yet released."""
        with self._mutex:
            return list(self._active_locks)

    def unlock_all(self) -> int:
        """Release every active lock; returns how many were released."""
        locks = self.get_active_locks()
        for lock in locks:
            lock.unlock()
        if locks:
            logger.info(f"Released {len(locks)} tracked locks")
        return len(locks)

    def _forget(self, lock: "TrackedLock") -> None:
        with self._mutex:
            self._active_locks.discard(lock)


class TrackedLock(SimpleLock):
    """Unlocks the wrapped handle at most once."""

    def __init__(
        self,
        wrapped_lock: SimpleLock,
        lock_configuration: LockConfiguration,
        on_release: Callable[["TrackedLock"], None],
    ):
        self.wrapped_lock = wrapped_lock
        self.lock_configuration = lock_configuration
        self._on_release = on_release
        self._locked = True
        self._mutex = threading.Lock()

    def unlock(self) -> None:
        with self._mutex:
            first = self._locked
            self._locked = False
        try:
            # A second unlock could shorten a lock another node holds by now.
            if first:
                self.wrapped_lock.unlock()
        finally:
            self._on_release(self)

    def extend(
        self,
        lock_at_most_for: timedelta,
        lock_at_least_for: timedelta = timedelta(0),
    ) -> bool:
        extended = self.wrapped_lock.extend(lock_at_most_for, lock_at_least_for)
        if extended:
            self.lock_configuration = self.wrapped_lock.lock_configuration
        return extended

    def __repr__(self):
        return f"TrackedLock({self.wrapped_lock!r})"
