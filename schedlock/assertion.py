"""
Per-thread registry of the locks the current thread is executing under.

Lets a task body check that it runs under a lock, or extend that lock,
without the handle being passed down the call chain. A stack rather than a
single slot handles nested locks; the innermost lock is on top.
"""
import threading
from datetime import timedelta
from typing import List, Optional, Tuple

from schedlock.exceptions import (
    LockCanNotBeExtendedError,
    NoActiveLockError,
    NotLockedError,
)
from schedlock.lock import SimpleLock

TEST_LOCK_NAME = "schedlock.assertion.test-lock"

_local = threading.local()


def _active_locks() -> List[Tuple[str, Optional[SimpleLock]]]:
    stack = getattr(_local, "active_locks", None)
    if stack is None:
        stack = []
        _local.active_locks = stack
    return stack


def start_lock(name: str, lock: Optional[SimpleLock] = None) -> None:
    _active_locks().append((name, lock))


def end_lock(name: Optional[str] = None) -> Optional[SimpleLock]:
    """
    Remove the innermost entry for `name` (the top entry when name is None)
    and return its lock.
    """
    stack = _active_locks()
    lock = None
    for index in range(len(stack) - 1, -1, -1):
        if name is None or stack[index][0] == name:
            lock = stack.pop(index)[1]
            break
    if not stack:
        del _local.active_locks
    return lock


def already_locked_by(name: str) -> bool:
    """True if the current thread already executes under lock `name`."""
    stack = getattr(_local, "active_locks", None)
    return bool(stack) and any(entry[0] == name for entry in stack)


def assert_locked() -> None:
    """Raise NotLockedError unless called from within a lock scope."""
    stack = getattr(_local, "active_locks", None)
    if not stack:
        raise NotLockedError()


def make_all_asserts_pass(pass_all: bool) -> None:
    """
    Test helper: while enabled, assert_locked() passes in the current
    thread. Do not use in production code.
    """
    if pass_all:
        start_lock(TEST_LOCK_NAME)
    elif already_locked_by(TEST_LOCK_NAME):
        end_lock(TEST_LOCK_NAME)


def extend_active_lock(
    lock_at_most_for: timedelta,
    lock_at_least_for: timedelta = timedelta(0),
) -> None:
    """
    Extend the innermost lock held by the current thread.

    Thread-local, so it does not follow work handed to other threads.
    """
    stack = getattr(_local, "active_locks", None)
    lock = stack[-1][1] if stack else None
    if lock is None:
        raise NoActiveLockError()
    if not lock.extend(lock_at_most_for, lock_at_least_for):
        raise LockCanNotBeExtendedError()
