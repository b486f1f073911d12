"""
Task execution wrapper.

IDLE -> ACQUIRING -> RUNNING -> RELEASING -> IDLE, or
IDLE -> ACQUIRING -> NOT_ACQUIRED -> IDLE.

A task whose lock is held elsewhere is shed, not queued: the executor returns
immediately without running it.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

from schedlock import assertion
from schedlock.configuration import LockConfiguration
from schedlock.constants import LockState
from schedlock.provider import LockProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskResult(Generic[T]):
    """Outcome of one execute() call."""

    def __init__(self, executed: bool, result: Optional[T] = None):
        self.executed = executed
        self.result = result

    @property
    def was_executed(self) -> bool:
        return self.executed

    @classmethod
    def of(cls, result: Optional[T]) -> "TaskResult[T]":
        return cls(True, result)

    @classmethod
    def not_executed(cls) -> "TaskResult[Any]":
        return cls(False, None)

    def __repr__(self):
        return f"TaskResult(executed={self.executed}, result={self.result!r})"


class TaskRunner(ABC):
    """
    What scheduler and framework integrations call. They translate their own
    metadata into a LockConfiguration and a zero-argument callable first.
    """

    @abstractmethod
    def execute(
        self,
        task: Callable[[], T],
        lock_configuration: LockConfiguration,
    ) -> TaskResult[T]:
        ...


class DefaultLockingTaskExecutor(TaskRunner):
    """Runs a task at most once per successful lock acquisition."""

    def __init__(self, lock_provider: LockProvider):
        if lock_provider is None:
            raise ValueError("lock_provider is required")
        self.lock_provider = lock_provider

    def execute(
        self,
        task: Callable[[], T],
        lock_configuration: LockConfiguration,
    ) -> TaskResult[T]:
        name = lock_configuration.name
        if assertion.already_locked_by(name):
            logger.debug(
                f"Not executing {name}, it is already locked by the "
                f"current thread"
            )
            return TaskResult.not_executed()

        logger.debug(f"Acquiring {name}. state={LockState.ACQUIRING}")
        lock = self.lock_provider.lock(lock_configuration)
        if lock is None:
            logger.debug(
                f"Not executing {name}. It's locked. "
                f"state={LockState.NOT_ACQUIRED}"
            )
            return TaskResult.not_executed()

        logger.debug(f"Locked {name}. state={LockState.RUNNING}")
        assertion.start_lock(name, lock)
        try:
            return TaskResult.of(task())
        finally:
            logger.debug(f"Releasing {name}. state={LockState.RELEASING}")
            assertion.end_lock(name)
            lock.unlock()
            logger.debug(f"Unlocked {name}. state={LockState.IDLE}")

    def execute_with_lock(
        self,
        task: Callable[[], T],
        lock_configuration: LockConfiguration,
    ) -> TaskResult[T]:
        return self.execute(task, lock_configuration)
