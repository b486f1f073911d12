"""
scheduler_lock decorator: run a scheduled function under a named lock.

Stack it under the scheduler's own decorator, e.g.

    @shared_task(name="billing.collect")
    @scheduler_lock("billing.collect", executor=executor,
                    lock_at_most_for=timedelta(minutes=10))
    def collect():
        ...
"""
import functools
import hashlib
import logging
from datetime import timedelta
from typing import Callable, Optional, Union

from schedlock.clock import Clock
from schedlock.configuration import LockConfiguration
from schedlock.constants import (
    DEFAULT_LOCK_AT_LEAST_FOR,
    DEFAULT_LOCK_AT_MOST_FOR,
)
from schedlock.exceptions import InvalidLockConfigurationError
from schedlock.executor import TaskRunner

logger = logging.getLogger(__name__)

# Matches the name column of the lock table (VARCHAR(64)).
MAX_LOCK_NAME_LENGTH = 64
HASH_LENGTH = 16

ExecutorSource = Union[TaskRunner, Callable[[], TaskRunner]]
DurationSource = Union[timedelta, Callable[[], timedelta]]


def _extract_lock_param_value(func, args, kwargs, lock_param):
    if lock_param in kwargs:
        return kwargs[lock_param]
    code = getattr(func, "__code__", None)
    if code is None:
        return None
    arg_names = code.co_varnames[: code.co_argcount]
    if lock_param in arg_names:
        index = arg_names.index(lock_param)
        if index < len(args):
            return args[index]
    return None


def _build_task_lock_name(lock_name, param_value, max_length=None):
    if param_value is None:
        return lock_name
    param_str = str(param_value)
    full_name = f"{lock_name}_{param_str}"
    if max_length is None or len(full_name) <= max_length:
        return full_name
    h = hashlib.md5(param_str.encode("utf-8")).hexdigest()[:HASH_LENGTH]
    return f"{lock_name}_{h}"


def _check_name_length(name, lock_param, max_length):
    if max_length is None:
        return
    # With lock_param the name may grow by "_" plus a hash.
    longest = len(name) + (HASH_LENGTH + 1 if lock_param else 0)
    if longest > max_length:
        raise InvalidLockConfigurationError(
            f"Lock name '{name}' can exceed {max_length} characters"
        )


def _resolve(value):
    if callable(value) and not isinstance(value, (timedelta, TaskRunner)):
        return value()
    return value


def scheduler_lock(
    name: str,
    executor: ExecutorSource,
    lock_at_most_for: DurationSource = DEFAULT_LOCK_AT_MOST_FOR,
    lock_at_least_for: DurationSource = DEFAULT_LOCK_AT_LEAST_FOR,
    lock_param: Optional[str] = None,
    clock: Optional[Clock] = None,
    max_name_length: Optional[int] = MAX_LOCK_NAME_LENGTH,
):
    """
    Decorator running the wrapped function through `executor` under lock
    `name`. A fresh LockConfiguration is computed on every call.

    Returns the function's return value, or None when the lock was held
    elsewhere and the call was skipped. Exceptions from the function
    propagate after the lock has been released.

    executor and the durations may be given as zero-argument callables that
    are resolved on each call, so settings can be read lazily.
    lock_param names an argument whose value is appended to the lock name,
    giving one lock per distinct value. When name plus value would exceed
    max_name_length the value is replaced by a hash. A name that can not fit
    raises InvalidLockConfigurationError at decoration time; pass
    max_name_length=None for storage without a length limit.
    """
    _check_name_length(name, lock_param, max_name_length)

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            task_lock_name = name
            if lock_param:
                pv = _extract_lock_param_value(func, args, kwargs, lock_param)
                if pv is not None:
                    task_lock_name = _build_task_lock_name(
                        name, pv, max_name_length
                    )
                else:
                    logger.warning(
                        f"Could not extract lock_param={lock_param}, "
                        f"using lock_name={name}"
                    )
            lock_configuration = LockConfiguration.from_durations(
                task_lock_name,
                _resolve(lock_at_most_for),
                _resolve(lock_at_least_for),
                clock=clock,
            )
            result = _resolve(executor).execute(
                lambda: func(*args, **kwargs), lock_configuration
            )
            if not result.executed:
                logger.info(
                    f"Skipped {func.__name__}, lock held "
                    f"lock_name={task_lock_name}"
                )
            return result.result

        return wrapper

    return decorator
