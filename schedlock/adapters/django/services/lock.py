"""
Lock services for Django projects: settings-driven decorator and lock
introspection.
Public API: import from schedlock.adapters.django.
"""
import logging
from datetime import timedelta
from typing import List, Optional

from django.utils import timezone

from schedlock.adapters.django import conf
from schedlock.adapters.django.models import LockRecord as LockRecordModel
from schedlock.decorators import scheduler_lock as _scheduler_lock
from schedlock.record import LockRecord

logger = logging.getLogger(__name__)


def scheduler_lock(
    name: str,
    lock_at_most_for: Optional[timedelta] = None,
    lock_at_least_for: Optional[timedelta] = None,
    lock_param: Optional[str] = None,
):
    """
    Run the decorated function under lock `name` using the executor built
    from settings. Durations left as None fall back to
    SCHEDLOCK_DEFAULT_LOCK_AT_MOST_FOR / SCHEDLOCK_DEFAULT_LOCK_AT_LEAST_FOR,
    read on each call.

    Usage (stack under Celery's decorator):
        @shared_task(name="reports.daily")
        @scheduler_lock("reports.daily", lock_at_most_for=timedelta(minutes=5))
        def daily_report():
            ...
    """
    return _scheduler_lock(
        name,
        executor=conf.get_lock_executor,
        lock_at_most_for=(
            lock_at_most_for
            if lock_at_most_for is not None
            else conf.get_default_lock_at_most_for
        ),
        lock_at_least_for=(
            lock_at_least_for
            if lock_at_least_for is not None
            else conf.get_default_lock_at_least_for
        ),
        lock_param=lock_param,
        max_name_length=LockRecordModel._meta.get_field("name").max_length,
    )


def _get_row(name: str) -> Optional[LockRecordModel]:
    return (
        LockRecordModel.objects.using(conf.get_database())
        .filter(name=name)
        .first()
    )


def is_locked(name: str) -> bool:
    """Return True if lock `name` is held by anyone right now."""
    row = _get_row(name)
    return row is not None and row.is_locked


def get_lock_holder(name: str) -> Optional[str]:
    """Return locked_by of the current holder, or None when free."""
    row = _get_row(name)
    if row is None or not row.is_locked:
        return None
    return row.locked_by


def list_active_locks() -> List[LockRecord]:
    """Return records of all locks whose lock_until is still in the future."""
    rows = LockRecordModel.objects.using(conf.get_database()).filter(
        lock_until__gt=timezone.now()
    )
    return [row.to_record() for row in rows]


def unlock_tracked_locks() -> int:
    """
    Release every lock this process acquired and still holds. Returns how
    many were released.
    """
    return conf.get_lock_provider().unlock_all()
