"""
Django ORM storage accessor.

insert: INSERT inside a savepoint; the primary key rejects duplicates.
update: one conditional UPDATE ... WHERE name = ? AND lock_until <= now,
    so check and write are atomic in the database.
unlock/extend: scoped to the acquisition (locked_by and locked_at), so a late
    release never touches a lock another node has reclaimed.

Database failures other than a duplicate key are raised as StorageError.
Timestamps are passed naive (in the current time zone) when USE_TZ is off.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.db import (
    DEFAULT_DB_ALIAS,
    DatabaseError,
    IntegrityError,
    transaction,
)
from django.utils import timezone

from schedlock.adapters.django.models import LockRecord as LockRecordModel
from schedlock.exceptions import InvalidLockConfigurationError, StorageError
from schedlock.record import LockRecord
from schedlock.storage import StorageAccessor

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation, name):
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as exc:
        raise StorageError(
            f"Lock storage {operation} failed lock_name={name}: {exc}"
        ) from exc


def _db_datetime(value: datetime) -> datetime:
    if settings.USE_TZ or timezone.is_naive(value):
        return value
    return timezone.make_naive(value)


class DjangoStorageAccessor(StorageAccessor):
    def __init__(self, using: Optional[str] = None):
        self.using = using or DEFAULT_DB_ALIAS
        self.max_name_length = LockRecordModel._meta.get_field(
            "name"
        ).max_length

    def _objects(self):
        return LockRecordModel.objects.using(self.using)

    def _check_name(self, name: str) -> None:
        if len(name) > self.max_name_length:
            raise InvalidLockConfigurationError(
                f"Lock name longer than {self.max_name_length} characters "
                f"lock_name={name}"
            )

    def _owned(self, record: LockRecord):
        return self._objects().filter(
            name=record.name,
            locked_by=record.locked_by,
            locked_at=_db_datetime(record.locked_at),
        )

    def insert_record(self, record: LockRecord) -> bool:
        self._check_name(record.name)
        try:
            with _storage_errors("insert", record.name):
                with transaction.atomic(using=self.using):
                    self._objects().create(
                        name=record.name,
                        lock_until=_db_datetime(record.lock_until),
                        locked_at=_db_datetime(record.locked_at),
                        locked_by=record.locked_by,
                    )
        except IntegrityError:
            logger.debug(f"Lock record already exists lock_name={record.name}")
            return False
        logger.info(f"Created lock record lock_name={record.name}")
        return True

    def update_record(self, record: LockRecord, now: datetime) -> bool:
        self._check_name(record.name)
        with _storage_errors("update", record.name):
            updated = self._objects().filter(
                name=record.name,
                lock_until__lte=_db_datetime(now),
            ).update(
                lock_until=_db_datetime(record.lock_until),
                locked_at=_db_datetime(record.locked_at),
                locked_by=record.locked_by,
            )
        return updated > 0

    def unlock(self, record: LockRecord, lock_until: datetime) -> None:
        with _storage_errors("unlock", record.name):
            updated = self._owned(record).update(
                lock_until=_db_datetime(lock_until)
            )
        if not updated:
            logger.info(
                f"Lock record no longer owned, unlock skipped "
                f"lock_name={record.name}"
            )

    def extend(self, record: LockRecord, now: datetime) -> bool:
        with _storage_errors("extend", record.name):
            updated = self._owned(record).filter(
                lock_until__gt=_db_datetime(now),
            ).update(lock_until=_db_datetime(record.lock_until))
        return updated > 0

    def find_record(self, name: str) -> Optional[LockRecord]:
        with _storage_errors("read", name):
            row = self._objects().filter(name=name).first()
        return row.to_record() if row is not None else None
