"""
Keep-alive wrapper for tasks that may outlive lock_at_most_for.

Every acquired lock gets a background thread that extends it every
lock_at_most_for / 2. If an extension fails the refresh stops quietly and the
task keeps running without exclusivity for the rest of its runtime.
"""
import logging
import threading
from datetime import timedelta
from typing import Optional

from schedlock.clock import Clock, resolve_clock
from schedlock.configuration import LockConfiguration
from schedlock.constants import DEFAULT_KEEP_ALIVE_MINIMAL_LOCK_AT_MOST_FOR
from schedlock.exceptions import InvalidLockConfigurationError
from schedlock.lock import AbstractSimpleLock, SimpleLock
from schedlock.provider import ExtensibleLockProvider, LockProvider

logger = logging.getLogger(__name__)


class KeepAliveLockProvider(LockProvider):
    def __init__(
        self,
        wrapped: ExtensibleLockProvider,
        minimal_lock_at_most_for: timedelta = (
            DEFAULT_KEEP_ALIVE_MINIMAL_LOCK_AT_MOST_FOR
        ),
        clock: Optional[Clock] = None,
    ):
        if not isinstance(wrapped, ExtensibleLockProvider):
            raise TypeError(
                "KeepAliveLockProvider needs an ExtensibleLockProvider, got "
                f"{type(wrapped).__name__}"
            )
        self.wrapped = wrapped
        self.minimal_lock_at_most_for = minimal_lock_at_most_for
        self.clock = resolve_clock(clock)

    def lock(
        self, lock_configuration: LockConfiguration
    ) -> Optional[SimpleLock]:
        if lock_configuration.lock_at_most_for < self.minimal_lock_at_most_for:
            raise InvalidLockConfigurationError(
                "Can not use KeepAliveLockProvider with lockAtMostFor shorter "
                f"than {self.minimal_lock_at_most_for}"
            )
        lock = self.wrapped.lock(lock_configuration)
        if lock is None:
            return None
        return KeepAliveLock(lock_configuration, lock, self.clock)


class KeepAliveLock(AbstractSimpleLock):
    def __init__(
        self,
        lock_configuration: LockConfiguration,
        lock: SimpleLock,
        clock: Optional[Clock] = None,
    ):
        super().__init__(lock_configuration, clock)
        self._lock = lock
        self._mutex = threading.Lock()
        self._stopped = threading.Event()
        self._lock_at_most_for = lock_configuration.lock_at_most_for
        self._extension_period = self._lock_at_most_for / 2
        self._remaining_lock_at_least_for = lock_configuration.lock_at_least_for
        self._current_lock_at_most_until = lock_configuration.lock_at_most_until
        self._thread = threading.Thread(
            target=self._run,
            name=f"schedlock-keep-alive-{lock_configuration.name}",
            daemon=True,
        )
        self._thread.start()

    @property
    def active(self) -> bool:
        return not self._stopped.is_set()

    def _run(self) -> None:
        period = self._extension_period.total_seconds()
        while not self._stopped.wait(period):
            self._extend_for_next_period()

    def _extend_for_next_period(self) -> None:
        with self._mutex:
            if self._stopped.is_set():
                return
            now = self._clock.now()
            if self._current_lock_at_most_until < now:
                # Refresh fell behind the lease; someone else may own it now.
                logger.warning(
                    f"Lock expired before it could be extended "
                    f"lock_name={self.name}"
                )
                self._stopped.set()
                return
            self._remaining_lock_at_least_for = max(
                self._remaining_lock_at_least_for - self._extension_period,
                timedelta(0),
            )
            try:
                extended = self._lock.extend(
                    self._lock_at_most_for, self._remaining_lock_at_least_for
                )
            except Exception as exc:
                logger.warning(
                    f"Failed to extend lock lock_name={self.name}: {exc}"
                )
                extended = False
            if not extended:
                logger.warning(f"Can't extend lock lock_name={self.name}")
                self._stopped.set()
                return
            self._current_lock_at_most_until = now + self._lock_at_most_for
            logger.debug(
                f"Lock extended lock_name={self.name} "
                f"for={self._lock_at_most_for}"
            )

    def _do_unlock(self) -> None:
        with self._mutex:
            self._stopped.set()
            self._lock.unlock()

    def _do_extend(self, new_configuration: LockConfiguration) -> bool:
        raise NotImplementedError(
            "Manual extension of a keep-alive lock is not supported"
        )
