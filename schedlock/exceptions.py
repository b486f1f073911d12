"""
Exception hierarchy.

Acquisition failures are not exceptions: providers return None. The classes
below cover programming-contract violations and adapter-level storage faults.
"""


class SchedLockError(Exception):
    """Base class for all schedlock errors."""


class LockUsageError(SchedLockError):
    """The lock API was used in a way its contract does not allow."""


class InvalidLockConfigurationError(LockUsageError, ValueError):
    """LockConfiguration arguments violate its invariants."""


class LockNotValidError(LockUsageError):
    """A lock handle was used after it has been unlocked."""

    def __init__(self, name):
        super().__init__(
            f"Lock {name} is not valid, it has already been unlocked"
        )
        self.name = name


class NotLockedError(LockUsageError):
    """assert_locked() was called outside of a lock scope."""

    def __init__(self):
        super().__init__("The task is not locked.")


class LockExtensionError(SchedLockError):
    """Base class for extend_active_lock failures."""


class NoActiveLockError(LockExtensionError, LockUsageError):
    def __init__(self):
        super().__init__(
            "No active lock in current thread, please make sure that you "
            "execute extend_active_lock in locked context."
        )


class LockCanNotBeExtendedError(LockExtensionError):
    def __init__(self):
        super().__init__(
            "Lock can not be extended, most likely it already expired."
        )


class StorageError(SchedLockError):
    """Raised by storage adapters when the backend can not be reached."""
