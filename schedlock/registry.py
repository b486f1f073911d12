"""
Registry of lock records this process recently created.

Lets the provider skip the insert round-trip for names whose record is
known to exist. Size-bounded LRU so high churn of distinct names can not
grow it without limit.
"""
import threading
from collections import OrderedDict

from schedlock.constants import DEFAULT_REGISTRY_MAX_SIZE


class LockRecordRegistry:
    def __init__(self, max_size: int = DEFAULT_REGISTRY_MAX_SIZE):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._records: "OrderedDict[str, bool]" = OrderedDict()
        self._mutex = threading.Lock()

    def add_lock_record(self, lock_name: str) -> None:
        with self._mutex:
            self._records[lock_name] = True
            self._records.move_to_end(lock_name)
            while len(self._records) > self.max_size:
                self._records.popitem(last=False)

    def lock_record_recently_created(self, lock_name: str) -> bool:
        with self._mutex:
            if lock_name not in self._records:
                return False
            self._records.move_to_end(lock_name)
            return True

    def remove_lock_record(self, lock_name: str) -> None:
        with self._mutex:
            self._records.pop(lock_name, None)

    def size(self) -> int:
        with self._mutex:
            return len(self._records)

    def clear(self) -> None:
        with self._mutex:
            self._records.clear()
