"""
Storage capability contract.

Every backend adapter implements these primitives against its native API;
StorageBasedLockProvider turns them into lock semantics. Adapters are free
to store the record as a row, document or key blob as long as name,
locked_at, lock_until and locked_by round-trip.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from schedlock.record import LockRecord


class StorageAccessor(ABC):

    @abstractmethod
    def insert_record(self, record: LockRecord) -> bool:
        """
        Create the record for record.name if none exists.

        Must be atomic with respect to concurrent inserts of the same name
        from other nodes: a race yields exactly one True. Returns False on
        duplicate key.
        """

    @abstractmethod
    def update_record(self, record: LockRecord, now: datetime) -> bool:
        """
        Overwrite locked_at, lock_until and locked_by of record.name only if
        the stored lock_until <= now. Returns whether the update applied.

        The check and the write must be one atomic step (conditional update
        or optimistic concurrency token); read-then-write is not enough.
        """

    @abstractmethod
    def unlock(self, record: LockRecord, lock_until: datetime) -> None:
        """
        Set lock_until of the record acquired as `record`.

        Called only after a successful insert or update by the same caller.
        Backends that can should scope the write to the acquisition
        (matching locked_by and locked_at) so that a late release never
        shortens a lock another node has reclaimed in the meantime.
        """

    def extend(self, record: LockRecord, now: datetime) -> bool:
        """
        Move lock_until of a still-held record to record.lock_until.

        Applies only while the caller owns the record and its lease has not
        run out at now. Optional: lock extension is not supported unless
        overridden.
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not support lock extension"
        )

    def find_record(self, name: str) -> Optional[LockRecord]:
        """Return the stored record for name, or None. Optional."""
        raise NotImplementedError(
            f"{type(self).__name__} does not support reading lock records"
        )
