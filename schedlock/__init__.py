# Core lock lifecycle: storage-agnostic, no framework imports.
# The Django adapter lives in schedlock.adapters.django.

from schedlock.assertion import (
    assert_locked,
    extend_active_lock,
    make_all_asserts_pass,
)
from schedlock.clock import Clock, ManualClock, SystemClock
from schedlock.configuration import LockConfiguration
from schedlock.constants import LockState
from schedlock.decorators import scheduler_lock
from schedlock.exceptions import (
    InvalidLockConfigurationError,
    LockCanNotBeExtendedError,
    LockNotValidError,
    LockUsageError,
    NoActiveLockError,
    NotLockedError,
    SchedLockError,
    StorageError,
)
from schedlock.executor import (
    DefaultLockingTaskExecutor,
    TaskResult,
    TaskRunner,
)
from schedlock.keepalive import KeepAliveLockProvider
from schedlock.lock import AbstractSimpleLock, SimpleLock
from schedlock.memory import InMemoryStorageAccessor
from schedlock.provider import (
    ExtensibleLockProvider,
    LockProvider,
    StorageBasedLockProvider,
)
from schedlock.record import LockRecord
from schedlock.storage import StorageAccessor
from schedlock.tracking import TrackingLockProviderWrapper

__all__ = [
    "AbstractSimpleLock",
    "Clock",
    "DefaultLockingTaskExecutor",
    "ExtensibleLockProvider",
    "InMemoryStorageAccessor",
    "InvalidLockConfigurationError",
    "KeepAliveLockProvider",
    "LockCanNotBeExtendedError",
    "LockConfiguration",
    "LockNotValidError",
    "LockProvider",
    "LockRecord",
    "LockState",
    "LockUsageError",
    "ManualClock",
    "NoActiveLockError",
    "NotLockedError",
    "SchedLockError",
    "SimpleLock",
    "StorageAccessor",
    "StorageBasedLockProvider",
    "StorageError",
    "SystemClock",
    "TaskResult",
    "TaskRunner",
    "TrackingLockProviderWrapper",
    "assert_locked",
    "extend_active_lock",
    "make_all_asserts_pass",
    "scheduler_lock",
]
