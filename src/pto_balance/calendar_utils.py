"""
Pure date math used by the holiday catalog, the accrual scheduler and the
timeline.

All values are naive calendar dates (datetime.date); there is no time of
day anywhere in the engine. Weekday numbers follow Python's convention
(Monday=0 ... Sunday=6).
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import List, Tuple, Union

MONDAY = 0
THURSDAY = 3
SATURDAY = 5
SUNDAY = 6

GRID_CELLS = 42

DateLike = Union[date, str]


def parse_iso_date(value: DateLike) -> date:
    """
    Parse an ISO calendar date ("2026-03-02").

    datetime values are truncated to their date, date values pass through.
    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO date string, got {type(value).__name__}")
    # Accept "2026-03-02T12:00:00" style values saved by older clients.
    return date.fromisoformat(value.strip()[:10])


def to_iso(day: date) -> str:
    return day.isoformat()


def is_weekend(day: date) -> bool:
    return day.weekday() >= SATURDAY


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date:
    """Return the n-th (1-based) occurrence of `weekday` in the month."""
    if n < 1:
        raise ValueError("n must be >= 1")
    first_day = date(year, month, 1)
    offset = (weekday - first_day.weekday()) % 7
    result = first_day + timedelta(days=offset, weeks=n - 1)
    if result.month != month:
        raise ValueError(f"Month {year}-{month:02d} has no occurrence #{n} of weekday {weekday}")
    return result


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    """Return the last occurrence of `weekday` in the month."""
    last_day = month_end(date(year, month, 1))
    return last_day - timedelta(days=(last_day.weekday() - weekday) % 7)


def observe_on_friday(day: date) -> date:
    """
    Shift a fixed-date holiday off the weekend.

    Both Saturday and Sunday are observed on the preceding Friday.
    """
    if day.weekday() == SATURDAY:
        return day - timedelta(days=1)
    if day.weekday() == SUNDAY:
        return day - timedelta(days=2)
    return day


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def add_months(day: date, months: int) -> date:
    """
    Move `day` by a number of calendar months.

    The day of month is clamped to the length of the target month
    (Jan 31 + 1 month -> Feb 28/29).
    """
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def days_between(start: date, end: date) -> int:
    return (end - start).days


def month_grid(year: int, month: int) -> List[Tuple[date, bool]]:
    """
    Build a Sunday-first 6x7 calendar grid for a month.

    Returns 42 (date, is_current_month) pairs: padding days from the
    previous month, every day of the month, then days of the next month.
    """
    first_day = date(year, month, 1)
    # Sunday-first: Sunday pads 0 cells, Monday 1, ... Saturday 6.
    padding = (first_day.weekday() + 1) % 7
    grid_start = first_day - timedelta(days=padding)
    cells: List[Tuple[date, bool]] = []
    for offset in range(GRID_CELLS):
        day = grid_start + timedelta(days=offset)
        cells.append((day, day.month == month and day.year == year))
    return cells
