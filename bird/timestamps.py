"""Timezone-aware UTC timestamp utilities.

Cache bookkeeping (`cached_at`, `ttl`) is always a timezone-aware UTC
datetime so comparisons never mix naive and aware values.
"""

from datetime import datetime, timezone
from typing import Any, Optional


def now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def from_epoch(seconds: float) -> datetime:
    """Convert a POSIX timestamp (e.g. st_mtime) to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def to_iso(value: Any) -> Optional[str]:
    """ISO 8601 form of a datetime; None for anything else."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return None
