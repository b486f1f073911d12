"""
Constants for lock lifecycle and task execution.
"""
from datetime import timedelta

DEFAULT_LOCK_AT_MOST_FOR = timedelta(seconds=60)
DEFAULT_LOCK_AT_LEAST_FOR = timedelta(0)
DEFAULT_KEEP_ALIVE_MINIMAL_LOCK_AT_MOST_FOR = timedelta(seconds=30)
DEFAULT_REGISTRY_MAX_SIZE = 10000

UNKNOWN_HOSTNAME = "unknown"


class LockState:
    """Per-invocation states of the locking task executor."""

    IDLE = "IDLE"
    ACQUIRING = "ACQUIRING"
    RUNNING = "RUNNING"
    RELEASING = "RELEASING"
    NOT_ACQUIRED = "NOT_ACQUIRED"

