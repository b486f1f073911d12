"""
Services: ORM storage accessor and lock helpers.
Import from here or from schedlock.adapters.django.

- Storage: DjangoStorageAccessor
- Lock: scheduler_lock, is_locked, get_lock_holder, list_active_locks,
  unlock_tracked_locks
"""
from schedlock.adapters.django.services.lock import (
    get_lock_holder,
    is_locked,
    list_active_locks,
    scheduler_lock,
    unlock_tracked_locks,
)
from schedlock.adapters.django.services.storage import DjangoStorageAccessor

__all__ = [
    "DjangoStorageAccessor",
    "scheduler_lock",
    "is_locked",
    "get_lock_holder",
    "list_active_locks",
    "unlock_tracked_locks",
]
