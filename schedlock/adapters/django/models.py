"""
Lock record table for the Django adapter.
"""
from django.db import models
from django.utils import timezone

from schedlock.record import LockRecord as LockRecordValue


def _aware(value):
    # Naive values come back when USE_TZ is off.
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


class LockRecord(models.Model):
    """
    One row per lock name. Rows are created on first acquisition and then
    only updated; an expired lock_until means the lock is free.
    """

    name = models.CharField(
        max_length=64,
        primary_key=True,
        help_text="Lock name (unique key of the guarded task)",
    )
    lock_until = models.DateTimeField(
        db_index=True,
        help_text="The lock is free once this instant has passed",
    )
    locked_at = models.DateTimeField(
        help_text="When the current or last holder acquired the lock",
    )
    locked_by = models.CharField(
        max_length=255,
        help_text="Holder identifier, informational only (e.g. hostname)",
    )

    class Meta:
        db_table = "schedlock"
        verbose_name = "Lock Record"
        verbose_name_plural = "Lock Records"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} (until {self.lock_until}) - {self.locked_by}"

    @property
    def is_locked(self):
        return self.lock_until > timezone.now()

    def to_record(self) -> LockRecordValue:
        return LockRecordValue(
            name=self.name,
            locked_at=_aware(self.locked_at),
            lock_until=_aware(self.lock_until),
            locked_by=self.locked_by,
        )
