"""
Storage representation of a lock.

One record per lock name. Its absence is equivalent to "unlocked"; once
created it is only ever overwritten, never deleted by the lock protocol.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from schedlock.utils import parse_iso_string, to_iso_string

FIELD_NAME = "name"
FIELD_LOCK_UNTIL = "lock_until"
FIELD_LOCKED_AT = "locked_at"
FIELD_LOCKED_BY = "locked_by"


@dataclass(frozen=True)
class LockRecord:
    name: str
    locked_at: datetime
    lock_until: datetime
    locked_by: str

    def is_locked(self, now: datetime) -> bool:
        """The lease [locked_at, lock_until) is still running at now."""
        return now < self.lock_until

    def is_owned_by(self, other: "LockRecord") -> bool:
        """True if other describes the same acquisition as this record."""
        return (
            self.name == other.name
            and self.locked_by == other.locked_by
            and self.locked_at == other.locked_at
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_NAME: self.name,
            FIELD_LOCK_UNTIL: to_iso_string(self.lock_until),
            FIELD_LOCKED_AT: to_iso_string(self.locked_at),
            FIELD_LOCKED_BY: self.locked_by,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LockRecord":
        lock_until = data[FIELD_LOCK_UNTIL]
        locked_at = data[FIELD_LOCKED_AT]
        return cls(
            name=data[FIELD_NAME],
            locked_at=(
                parse_iso_string(locked_at)
                if isinstance(locked_at, str)
                else locked_at
            ),
            lock_until=(
                parse_iso_string(lock_until)
                if isinstance(lock_until, str)
                else lock_until
            ),
            locked_by=data[FIELD_LOCKED_BY],
        )
