"""
Planning helpers used by the CLI and the HTTP API.

Wraps the engine for the things a front end does with it:
- cleaning and toggling the user's selected days
- per-day flags for a month calendar
- the "days planned" summary
- a memoised projection keyed on (config, selection, window)
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
import logging
from typing import FrozenSet, Iterable, List, Optional

from .accrual import is_accrual_date
from .balance_model import PTOLedger, balance_at, would_exceed_balance
from .calendar_utils import DateLike, is_weekend, month_grid, parse_iso_date
from .holidays import (
    DEFAULT_YEARS_AFTER,
    DEFAULT_YEARS_BEFORE,
    HolidayCatalog,
    catalog_for_config,
)
from .schema import CalendarDay, PlanSummary, PlannedDay, PTOConfig, ProjectionResult
from .timeline import normalize_window_months, project

logger = logging.getLogger(__name__)


def normalize_selected_dates(
    raw: Iterable[DateLike],
    catalog: Optional[HolidayCatalog] = None,
) -> List[date]:
    """
    Parse and clean a saved/posted selection.

    Unparseable values, weekends and holidays are dropped with a warning.
    The result is unique and ascending.
    """
    days = set()
    for value in raw:
        try:
            day = parse_iso_date(value)
        except ValueError:
            logger.warning("Ignoring malformed selected date %r", value)
            continue
        if is_weekend(day):
            logger.warning("Ignoring weekend selection %s", day)
            continue
        if catalog is not None and catalog.is_holiday(day):
            logger.warning("Ignoring selection on holiday %s", day)
            continue
        days.add(day)
    return sorted(days)


def toggle_date(selected: Iterable[date], day: date, catalog: HolidayCatalog) -> List[date]:
    """
    Add or remove a day from the selection.

    Holidays are mandatory and weekends are never selectable; toggling
    either returns the selection unchanged.
    """
    days = set(selected)
    if catalog.is_holiday(day) or is_weekend(day):
        return sorted(days)
    if day in days:
        days.remove(day)
    else:
        days.add(day)
    return sorted(days)


def day_flags(
    ledger: PTOLedger,
    day: date,
    today: Optional[date] = None,
    is_current_month: bool = True,
) -> CalendarDay:
    today = today or date.today()
    holiday_name = ledger.catalog.name_for(day)
    selected = day in ledger.selected
    return CalendarDay(
        date=day,
        is_current_month=is_current_month,
        is_holiday=holiday_name is not None,
        holiday_name=holiday_name,
        is_accrual_date=is_accrual_date(ledger.config, day),
        is_selected=selected,
        # Only days that could still be picked get the warning.
        would_exceed_balance=(
            not selected and holiday_name is None and would_exceed_balance(ledger, day)
        ),
        is_weekend=is_weekend(day),
        is_past=day < today,
    )


def calendar_month(
    ledger: PTOLedger,
    year: int,
    month: int,
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """The 42-cell Sunday-first grid for a month, with flags for each day."""
    return [
        day_flags(ledger, day, today=today, is_current_month=in_month)
        for day, in_month in month_grid(year, month)
    ]


def planned_days(ledger: PTOLedger) -> List[PlannedDay]:
    return [PlannedDay(day, balance_at(ledger, day)) for day in sorted(ledger.selected)]


def plan_summary(ledger: PTOLedger) -> PlanSummary:
    return PlanSummary(tuple(planned_days(ledger)))


@lru_cache(maxsize=64)
def _project_cached(
    config: PTOConfig,
    selected: FrozenSet[date],
    window_months: int,
    years_before: int,
    years_after: int,
) -> ProjectionResult:
    catalog = catalog_for_config(config, years_before, years_after)
    return project(config, selected, window_months, catalog)


def project_cached(
    config: PTOConfig,
    selected: Iterable[date],
    window_months: int = 6,
    years_before: int = DEFAULT_YEARS_BEFORE,
    years_after: int = DEFAULT_YEARS_AFTER,
) -> ProjectionResult:
    """
    project() memoised on its inputs; results are immutable.

    years_before/years_after set the holiday catalog span and are part of
    the cache key.
    """
    return _project_cached(
        config,
        frozenset(selected),
        normalize_window_months(window_months),
        years_before,
        years_after,
    )
