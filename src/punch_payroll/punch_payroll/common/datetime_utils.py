from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MS_PER_HOUR = 3_600_000

Instant = Union[datetime, int]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def load_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Resolve an IANA zone name; empty means the system local zone."""
    if not name:
        return None
    return ZoneInfo(name)


def epoch_millis(value: datetime) -> int:
    """Milliseconds since the epoch. Naive values are read as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def to_local_wall_time(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert an aware instant to naive wall time in ``tz``.

    Naive values are already local and are returned unchanged. Wall time decides
    the calendar day only; durations are measured with ``hours_between``.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def hours_between(start: Instant, end: Instant) -> float:
    """Signed elapsed hours from start to end.

    Accepts datetimes or epoch milliseconds. Aware datetimes are compared as real
    instants, so a repeated or skipped DST hour does not distort the result.
    """
    return (_as_millis(end) - _as_millis(start)) / _MS_PER_HOUR


def _as_millis(value: Instant) -> int:
    if isinstance(value, datetime):
        return epoch_millis(value)
    return int(value)
