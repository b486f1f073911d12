"""
Acquired-lock handles.

A handle is owned by whoever received it from LockProvider.lock() and is
not meant to be released concurrently from several threads.
"""
import logging
import threading
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional

from schedlock.clock import Clock, resolve_clock
from schedlock.configuration import LockConfiguration
from schedlock.exceptions import LockNotValidError

logger = logging.getLogger(__name__)


class SimpleLock(ABC):
    """Handle of a held lock."""

    lock_configuration: LockConfiguration

    @property
    def name(self) -> str:
        return self.lock_configuration.name

    @abstractmethod
    def unlock(self) -> None:
        """Release the lock. Calling it again is a no-op."""

    @abstractmethod
    def extend(
        self,
        lock_at_most_for: timedelta,
        lock_at_least_for: timedelta = timedelta(0),
    ) -> bool:
        """
        Push the lease to now + lock_at_most_for and the minimum hold time to
        now + lock_at_least_for. Returns False if the lock could not be
        extended (most likely it already expired and was reclaimed).

        Raises LockNotValidError after unlock() and NotImplementedError when
        the provider does not support extension.
        """


class AbstractSimpleLock(SimpleLock):
    """
    Tracks validity so unlock() is idempotent and extend() after unlock is
    rejected. Subclasses implement _do_unlock and, optionally, _do_extend.
    """

    def __init__(
        self,
        lock_configuration: LockConfiguration,
        clock: Optional[Clock] = None,
    ):
        self.lock_configuration = lock_configuration
        self._clock = resolve_clock(clock)
        self._valid = True
        self._state_mutex = threading.Lock()

    @property
    def is_valid(self) -> bool:
        return self._valid

    def unlock(self) -> None:
        with self._state_mutex:
            if not self._valid:
                logger.debug(
                    f"Lock already unlocked lock_name={self.name}, ignoring"
                )
                return
            self._valid = False
        self._do_unlock()

    def extend(
        self,
        lock_at_most_for: timedelta,
        lock_at_least_for: timedelta = timedelta(0),
    ) -> bool:
        if not self._valid:
            raise LockNotValidError(self.name)
        new_configuration = LockConfiguration.from_durations(
            self.name,
            lock_at_most_for,
            lock_at_least_for,
            clock=self._clock,
        )
        extended = self._do_extend(new_configuration)
        if extended:
            self.lock_configuration = new_configuration
        return extended

    @abstractmethod
    def _do_unlock(self) -> None:
        ...

    def _do_extend(self, new_configuration: LockConfiguration) -> bool:
        raise NotImplementedError(
            f"{type(self).__name__} does not support lock extension"
        )

    def __repr__(self):
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"lock_at_most_until={self.lock_configuration.lock_at_most_until}"
            f", valid={self._valid})"
        )
