"""
Global config for the schedlock Django adapter, read from Django settings.

Durations may be given as seconds (int/float) or timedelta.

NOTE: build_lock_provider() imports the storage accessor lazily: services
imports conf, so a top-level import would be circular. get_lock_provider()
caches the result for the whole process.
"""
import threading
from datetime import timedelta

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS

from schedlock.constants import (
    DEFAULT_KEEP_ALIVE_MINIMAL_LOCK_AT_MOST_FOR,
    DEFAULT_LOCK_AT_LEAST_FOR,
    DEFAULT_LOCK_AT_MOST_FOR,
)
from schedlock.executor import DefaultLockingTaskExecutor
from schedlock.keepalive import KeepAliveLockProvider
from schedlock.provider import StorageBasedLockProvider
from schedlock.tracking import TrackingLockProviderWrapper
from schedlock.utils import get_hostname

DEFAULT_KEEP_ALIVE = False
DEFAULT_UNLOCK_ON_WORKER_SHUTDOWN = True

_provider_mutex = threading.Lock()
_lock_provider = None
_lock_executor = None


def _to_timedelta(value, default):
    if value is None:
        return default
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return timedelta(seconds=value)
    raise ValueError(f"Expected seconds or timedelta, got {value!r}")


def get_default_lock_at_most_for():
    """Return default lockAtMostFor (SCHEDLOCK_DEFAULT_LOCK_AT_MOST_FOR)."""
    return _to_timedelta(
        getattr(settings, "SCHEDLOCK_DEFAULT_LOCK_AT_MOST_FOR", None),
        DEFAULT_LOCK_AT_MOST_FOR,
    )


def get_default_lock_at_least_for():
    """Return default lockAtLeastFor (SCHEDLOCK_DEFAULT_LOCK_AT_LEAST_FOR)."""
    return _to_timedelta(
        getattr(settings, "SCHEDLOCK_DEFAULT_LOCK_AT_LEAST_FOR", None),
        DEFAULT_LOCK_AT_LEAST_FOR,
    )


def get_locked_by():
    """Return the holder identifier written to lock records (hostname)."""
    return getattr(settings, "SCHEDLOCK_LOCKED_BY", None) or get_hostname()


def get_database():
    """Return the database alias holding the lock table."""
    return getattr(settings, "SCHEDLOCK_DATABASE", DEFAULT_DB_ALIAS)


def get_keep_alive_enabled():
    """Return whether acquired locks are extended in the background."""
    return getattr(settings, "SCHEDLOCK_KEEP_ALIVE", DEFAULT_KEEP_ALIVE)


def get_keep_alive_minimal_lock_at_most_for():
    """Return the shortest lockAtMostFor accepted with keep-alive on."""
    return _to_timedelta(
        getattr(
            settings, "SCHEDLOCK_KEEP_ALIVE_MINIMAL_LOCK_AT_MOST_FOR", None
        ),
        DEFAULT_KEEP_ALIVE_MINIMAL_LOCK_AT_MOST_FOR,
    )


def get_unlock_on_worker_shutdown():
    """Return whether tracked locks are released on Celery worker shutdown."""
    return getattr(
        settings,
        "SCHEDLOCK_UNLOCK_ON_WORKER_SHUTDOWN",
        DEFAULT_UNLOCK_ON_WORKER_SHUTDOWN,
    )


def build_lock_provider():
    """
    Build Tracking(KeepAlive?(StorageBased(DjangoStorageAccessor))) from
    settings. The tracking wrapper is outermost so shutdown sees every lock.
    """
    from schedlock.adapters.django.services.storage import (
        DjangoStorageAccessor,
    )

    provider = StorageBasedLockProvider(
        DjangoStorageAccessor(using=get_database()),
        locked_by=get_locked_by(),
    )
    if get_keep_alive_enabled():
        provider = KeepAliveLockProvider(
            provider,
            minimal_lock_at_most_for=(
                get_keep_alive_minimal_lock_at_most_for()
            ),
        )
    return TrackingLockProviderWrapper(provider)


def get_lock_provider():
    """Return the cached process-wide lock provider."""
    global _lock_provider
    with _provider_mutex:
        if _lock_provider is None:
            _lock_provider = build_lock_provider()
        return _lock_provider


def get_lock_executor():
    """Return the cached executor bound to get_lock_provider()."""
    global _lock_executor
    provider = get_lock_provider()
    with _provider_mutex:
        stale = (
            _lock_executor is None
            or _lock_executor.lock_provider is not provider
        )
        if stale:
            _lock_executor = DefaultLockingTaskExecutor(provider)
        return _lock_executor


def reset_lock_provider():
    """Drop the cached provider and executor (settings changed, tests)."""
    global _lock_provider, _lock_executor
    with _provider_mutex:
        _lock_provider = None
        _lock_executor = None
