from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import CLOCK_TIME_FORMAT, DATE_FORMAT
from ..core.exceptions import InputError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_clock_time(value: datetime | time) -> str:
    """Render a wall-clock time the way stored records keep it, e.g. ``06:00 PM``."""
    return value.strftime(CLOCK_TIME_FORMAT)


def parse_clock_time(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), CLOCK_TIME_FORMAT).time()
    except (AttributeError, ValueError):
        raise InputError(f"Invalid clock time: {value!r}")


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting the ``Z`` suffix browsers emit."""
    v = (value or "").strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(v)
    except ValueError:
        raise InputError(f"Invalid timestamp: {value!r}")


def _local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def seconds_between(start: datetime, end: datetime) -> float:
    """Elapsed seconds from ``start`` to ``end``.

    When only one side carries a zone, it is converted to local wall time
    first, matching the naive local times the system clock returns.
    """
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = _local_naive(start)
        end = _local_naive(end)
    return (end - start).total_seconds()
