"""
Lock providers and the storage-agnostic acquisition protocol.

acquire:
    insert the record (fast path, first ever acquisition), else
    update it if its lease has expired (reclaim after a crashed holder),
    else the lock is held elsewhere.
release:
    set lock_until to max(now, lock_at_least_until).
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from schedlock.clock import Clock, resolve_clock
from schedlock.configuration import LockConfiguration
from schedlock.exceptions import LockUsageError
from schedlock.lock import AbstractSimpleLock, SimpleLock
from schedlock.record import LockRecord
from schedlock.registry import LockRecordRegistry
from schedlock.storage import StorageAccessor
from schedlock.utils import get_hostname

logger = logging.getLogger(__name__)


class LockProvider(ABC):

    @abstractmethod
    def lock(
        self, lock_configuration: LockConfiguration
    ) -> Optional[SimpleLock]:
        """
        Try to acquire the lock without waiting. Returns the handle, or None
        if the lock is held elsewhere or storage could not be reached.
        """


class ExtensibleLockProvider(LockProvider):
    """Provider whose handles support SimpleLock.extend()."""


class StorageBasedLockProvider(ExtensibleLockProvider):
    """Implements the lock protocol on top of a StorageAccessor."""

    def __init__(
        self,
        storage_accessor: StorageAccessor,
        clock: Optional[Clock] = None,
        locked_by: Optional[str] = None,
        lock_record_registry: Optional[LockRecordRegistry] = None,
    ):
        self.storage_accessor = storage_accessor
        self.clock = resolve_clock(clock)
        self.locked_by = locked_by or get_hostname()
        self.lock_record_registry = (
            lock_record_registry or LockRecordRegistry()
        )

    def clear_cache(self) -> None:
        """Forget which lock records are known to exist."""
        self.lock_record_registry.clear()

    def lock(
        self, lock_configuration: LockConfiguration
    ) -> Optional[SimpleLock]:
        name = lock_configuration.name
        now = self.clock.now()
        record = LockRecord(
            name=name,
            locked_at=now,
            lock_until=lock_configuration.lock_at_most_until,
            locked_by=self.locked_by,
        )
        try:
            obtained = self._do_lock(record, now)
        except LockUsageError:
            raise
        except Exception as exc:
            logger.warning(f"Failed to acquire lock lock_name={name}: {exc}")
            return None
        if not obtained:
            logger.debug(f"Lock already held lock_name={name}")
            return None
        logger.debug(
            f"Acquired lock lock_name={name} "
            f"lock_until={record.lock_until.isoformat()}"
        )
        return StorageLock(
            lock_configuration, record, self.storage_accessor, self.clock
        )

    def _do_lock(self, record: LockRecord, now: datetime) -> bool:
        name = record.name
        try_to_create = not self.lock_record_registry.lock_record_recently_created(
            name
        )
        if try_to_create:
            if self.storage_accessor.insert_record(record):
                self.lock_record_registry.add_lock_record(name)
                return True
            # Record exists; go straight to the update next time.
            self.lock_record_registry.add_lock_record(name)
        try:
            updated = self.storage_accessor.update_record(record, now)
        except Exception:
            # Storage that is not ready yet answers the insert with False and
            # fails the update; insert again on the next attempt.
            if try_to_create:
                self.lock_record_registry.remove_lock_record(name)
            raise
        if updated or try_to_create:
            return updated
        # Known record not updated: held elsewhere, or the row was deleted
        # behind our back. Insert again so a deleted row is recreated.
        return self.storage_accessor.insert_record(record)


class StorageLock(AbstractSimpleLock):
    """Handle returned by StorageBasedLockProvider."""

    def __init__(
        self,
        lock_configuration: LockConfiguration,
        record: LockRecord,
        storage_accessor: StorageAccessor,
        clock: Optional[Clock] = None,
    ):
        super().__init__(lock_configuration, clock)
        self.record = record
        self.storage_accessor = storage_accessor

    def _do_unlock(self) -> None:
        unlock_time = self.lock_configuration.unlock_time(self._clock.now())
        try:
            self.storage_accessor.unlock(self.record, unlock_time)
        except Exception as exc:
            # The lease still expires on its own at lock_until.
            logger.warning(
                f"Failed to release lock lock_name={self.name}: {exc}"
            )
            return
        logger.debug(
            f"Released lock lock_name={self.name} "
            f"lock_until={unlock_time.isoformat()}"
        )

    def _do_extend(self, new_configuration: LockConfiguration) -> bool:
        extended_record = LockRecord(
            name=self.record.name,
            locked_at=self.record.locked_at,
            lock_until=new_configuration.lock_at_most_until,
            locked_by=self.record.locked_by,
        )
        if not self.storage_accessor.extend(
            extended_record, new_configuration.created_at
        ):
            logger.debug(f"Can not extend lock lock_name={self.name}")
            return False
        self.record = extended_record
        return True
