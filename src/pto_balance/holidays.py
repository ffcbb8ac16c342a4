"""
Holiday catalog.

Builds the observed company holidays for a span of years:
- Fixed dates (Jan 1, Jul 4, Dec 25), moved to the preceding Friday when
  they fall on a weekend
- Floating dates (MLK Jr Day, Memorial Day, Labor Day, Thanksgiving),
  which are defined on a weekday and never need shifting

Holidays are mandatory PTO days: they count as usage and can not be
toggled by the user.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Mapping
from datetime import MAXYEAR, date
from functools import lru_cache
from typing import Iterable, Iterator, List, Optional, Tuple

from .calendar_utils import (
    MONDAY,
    THURSDAY,
    last_weekday_of_month,
    nth_weekday_of_month,
    observe_on_friday,
)
from .errors import DateOutOfCatalogRange
from .schema import PTOConfig

DEFAULT_YEARS_BEFORE = 1
DEFAULT_YEARS_AFTER = 5


def _holidays_in_year(year: int) -> List[Tuple[date, str]]:
    return [
        (observe_on_friday(date(year, 1, 1)), "New Year's Day"),
        (nth_weekday_of_month(year, 1, MONDAY, 3), "MLK Jr Day"),
        (last_weekday_of_month(year, 5, MONDAY), "Memorial Day"),
        (observe_on_friday(date(year, 7, 4)), "Independence Day"),
        (nth_weekday_of_month(year, 9, MONDAY, 1), "Labor Day"),
        (nth_weekday_of_month(year, 11, THURSDAY, 4), "Thanksgiving"),
        (observe_on_friday(date(year, 12, 25)), "Christmas Day"),
    ]


class HolidayCatalog(Mapping):
    """
    Read-only, date-sorted mapping of observed holiday -> name.

    A catalog knows the years it was built for. Lookups outside that span
    are treated as "not a holiday" by name_for()/is_holiday(); require()
    is the strict variant that raises DateOutOfCatalogRange.
    """

    def __init__(self, entries: Iterable[Tuple[date, str]], years: Iterable[int] = ()) -> None:
        self._names = dict(sorted(entries))
        self._dates = list(self._names)
        years = sorted(set(years))
        self.first_year: Optional[int] = years[0] if years else None
        self.last_year: Optional[int] = years[-1] if years else None

    def __getitem__(self, day: date) -> str:
        return self._names[day]

    def __iter__(self) -> Iterator[date]:
        return iter(self._dates)

    def __len__(self) -> int:
        return len(self._dates)

    def __repr__(self) -> str:
        return f"HolidayCatalog({self.first_year}-{self.last_year}, {len(self)} holidays)"

    def covers(self, day: date) -> bool:
        if self.first_year is None or self.last_year is None:
            return False
        return self.first_year <= day.year <= self.last_year

    def require(self, day: date) -> Optional[str]:
        """Holiday name for a date inside the span, else DateOutOfCatalogRange."""
        if not self.covers(day):
            raise DateOutOfCatalogRange(day, self.first_year, self.last_year)
        return self._names.get(day)

    def name_for(self, day: date) -> Optional[str]:
        try:
            return self.require(day)
        except DateOutOfCatalogRange:
            return None

    def is_holiday(self, day: date) -> bool:
        return self.name_for(day) is not None

    def between(self, start: date, end: date) -> List[date]:
        """Holiday dates in [start, end], ascending."""
        lo = bisect_left(self._dates, start)
        hi = bisect_right(self._dates, end)
        return self._dates[lo:hi]


@lru_cache(maxsize=32)
def _build(first_year: int, last_year: int) -> HolidayCatalog:
    years = range(first_year, last_year + 1)
    entries: List[Tuple[date, str]] = []
    # Jan 1 of the following year can be observed on Dec 30/31 of last_year.
    for year in range(first_year, min(last_year + 1, MAXYEAR) + 1):
        entries.extend(
            (day, name)
            for day, name in _holidays_in_year(year)
            if first_year <= day.year <= last_year
        )
    return HolidayCatalog(entries, years)


def holidays_for(years: Iterable[int]) -> HolidayCatalog:
    """
    Return the holiday catalog for a contiguous range of years.

    Pure and memoised: the same range always returns an equal (in fact the
    same) catalog. An empty range yields an empty catalog.
    """
    years = list(years)
    if not years:
        return HolidayCatalog([])
    return _build(min(years), max(years))


def catalog_for_config(
    config: PTOConfig,
    years_before: int = DEFAULT_YEARS_BEFORE,
    years_after: int = DEFAULT_YEARS_AFTER,
) -> HolidayCatalog:
    """
    Catalog covering the as-of year minus years_before through plus
    years_after.

    With the defaults this is as-of year -1 .. +5, which contains the
    12-month holiday look-ahead and either timeline window.
    """
    anchor = config.as_of_date.year
    return holidays_for(range(anchor - years_before, anchor + years_after + 1))
