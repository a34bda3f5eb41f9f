"""
Local-calendar / UTC conversions for a fixed client offset.

The offset follows the browser ``Date.getTimezoneOffset()`` convention:
``utc = local + offset`` (so UTC+02:00 is ``-120``). A single offset is
applied to the whole processed range; there is no DST handling.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, timezone

_ONE_DAY = timedelta(days=1)
_EPSILON = timedelta(microseconds=1)
# larger values are not a time-zone offset
_MAX_OFFSET_MINUTES = 24 * 60


def parse_offset_minutes(value: object) -> int:
    """Return the offset in minutes, falling back to 0 for anything unusable."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(parsed) or abs(parsed) > _MAX_OFFSET_MINUTES:
        return 0
    return int(parsed)


def ensure_utc(dt: datetime) -> datetime:
    """Normalise a potentially-naive timestamp to UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_local(instant: datetime, offset_minutes: int) -> datetime:
    """Naive local wall-clock reading of a UTC instant."""
    shifted = ensure_utc(instant) - timedelta(minutes=offset_minutes)
    return shifted.replace(tzinfo=None)


def local_date(instant: datetime, offset_minutes: int) -> date:
    return to_local(instant, offset_minutes).date()


def local_to_utc(wallclock: datetime, offset_minutes: int) -> datetime:
    """Aware UTC instant for a naive local wall-clock reading."""
    return (wallclock.replace(tzinfo=None) + timedelta(minutes=offset_minutes)).replace(
        tzinfo=timezone.utc
    )


def utc_bounds_for_local_date(day: date, offset_minutes: int) -> tuple[datetime, datetime]:
    """Inclusive UTC instants covering the whole local day."""
    start = local_to_utc(datetime.combine(day, time.min), offset_minutes)
    return start, start + _ONE_DAY - _EPSILON


def utc_window(start_day: date, end_day: date, offset_minutes: int) -> tuple[datetime, datetime]:
    """Inclusive UTC window covering every local day from start_day to end_day."""
    return (
        utc_bounds_for_local_date(start_day, offset_minutes)[0],
        utc_bounds_for_local_date(end_day, offset_minutes)[1],
    )


def parse_date(value: date | datetime | str) -> date:
    """Parse a calendar date; ISO datetimes are truncated to their date part.

    Raises ValueError for anything that is not a valid date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")
    return date.fromisoformat(value.strip()[:10])


def parse_hhmm(s: str) -> time:
    hh, mm = s.strip().split(":")[:2]
    return time(int(hh), int(mm))


def normalize_hhmm(value: object) -> str:
    """Canonical ``HH:MM`` form of a time string; ValueError for anything else."""
    if not isinstance(value, str):
        raise ValueError(f"Invalid time: {value!r}")
    return parse_hhmm(value).strftime("%H:%M")


def local_time_to_utc(day: date, hhmm: str, offset_minutes: int) -> datetime:
    """UTC instant of a local ``HH:MM`` reading on a local date."""
    return local_to_utc(datetime.combine(day, parse_hhmm(hhmm)), offset_minutes)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += _ONE_DAY
