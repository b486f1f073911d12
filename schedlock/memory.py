"""
In-process storage adapter.

Gives single-process deployments and tests a backend with the same
atomicity guarantees as a real one. Every operation runs under one mutex.
"""
import threading
from datetime import datetime
from typing import Dict, List, Optional

from schedlock.record import LockRecord
from schedlock.storage import StorageAccessor


class InMemoryStorageAccessor(StorageAccessor):
    def __init__(self):
        self._records: Dict[str, LockRecord] = {}
        self._mutex = threading.Lock()

    def insert_record(self, record: LockRecord) -> bool:
        with self._mutex:
            if record.name in self._records:
                return False
            self._records[record.name] = record
            return True

    def update_record(self, record: LockRecord, now: datetime) -> bool:
        with self._mutex:
            current = self._records.get(record.name)
            if current is None or current.lock_until > now:
                return False
            self._records[record.name] = record
            return True

    def unlock(self, record: LockRecord, lock_until: datetime) -> None:
        with self._mutex:
            current = self._records.get(record.name)
            if current is None or not current.is_owned_by(record):
                return
            self._records[record.name] = LockRecord(
                name=current.name,
                locked_at=current.locked_at,
                lock_until=lock_until,
                locked_by=current.locked_by,
            )

    def extend(self, record: LockRecord, now: datetime) -> bool:
        with self._mutex:
            current = self._records.get(record.name)
            if (
                current is None
                or not current.is_owned_by(record)
                or current.lock_until <= now
            ):
                return False
            self._records[record.name] = LockRecord(
                name=current.name,
                locked_at=current.locked_at,
                lock_until=record.lock_until,
                locked_by=current.locked_by,
            )
            return True

    def find_record(self, name: str) -> Optional[LockRecord]:
        with self._mutex:
            return self._records.get(name)

    def get_records(self) -> List[LockRecord]:
        with self._mutex:
            return list(self._records.values())

    def clear(self) -> None:
        with self._mutex:
            self._records.clear()
