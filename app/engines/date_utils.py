"""
Date-range helpers shared by every engine.
All values are calendar dates; time-of-day is never used.
"""

from calendar import isleap
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Any
import math


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a boundary value into a date.

    Accepts date/datetime objects and ISO strings ("2025-04-01", or a
    longer timestamp whose first 10 characters are the date).
    Returns None for missing or unparsable input instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def inclusive_days(start: date, end: date) -> int:
    """Number of days in [start, end]; zero or negative when end < start"""
    return (end - start).days + 1


def total_days(start: date, end: date) -> int:
    """Inclusive length of a schedule, never below 1"""
    return max(1, inclusive_days(start, end))


def elapsed_days(start: date, end: date, today: date) -> int:
    """Days from start through min(today, end), clamped to [0, total]"""
    total = total_days(start, end)
    elapsed = inclusive_days(start, min(today, end))
    return min(max(0, elapsed), total)


def remaining_days(start: date, end: date, today: date) -> int:
    return max(0, total_days(start, end) - elapsed_days(start, end, today))


def is_within(day: date, start: date, end: date) -> bool:
    """Inclusive interval containment"""
    return start <= day <= end


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def sunday_index(day: date) -> int:
    """Weekday index with Sunday=0 ... Saturday=6"""
    return day.isoweekday() % 7


def is_weekend(day: date) -> bool:
    return sunday_index(day) in (0, 6)


def days_in_year(year: int) -> int:
    return 366 if isleap(year) else 365


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (not banker's rounding)"""
    return int(math.floor(value + 0.5))
