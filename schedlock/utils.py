"""Hostname and timestamp helpers shared by the record model and adapters."""
import re
import socket
from datetime import datetime, timezone
from functools import lru_cache

from schedlock.constants import UNKNOWN_HOSTNAME

_FRACTION_RE = re.compile(r"\.(\d+)")


@lru_cache(maxsize=1)
def get_hostname() -> str:
    """Return this host's name, used as the default locked_by value."""
    try:
        return socket.gethostname() or UNKNOWN_HOSTNAME
    except OSError:
        return UNKNOWN_HOSTNAME


def to_iso_string(value: datetime) -> str:
    """
    Format as ISO-8601 UTC with exactly three fractional digits, e.g.
    2018-12-07T12:30:37.810Z. Fixed width keeps the strings naturally
    sortable so that backends storing text can compare them with <=.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso_string(value: str) -> datetime:
    """
    Parse an extended-format ISO-8601 timestamp (YYYY-MM-DDTHH:MM:SS with
    any number of fractional digits and a Z or +HH:MM suffix, or none for
    UTC) into an aware UTC datetime.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits.
    text = _FRACTION_RE.sub(
        lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1
    )
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
