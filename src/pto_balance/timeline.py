"""
Timeline projection: background segments, balance curve and markers.

The window runs from the first day of the as-of month to the last day of
the N-th month (N is 6 or 12). Positions are percentages of the window
measured in days, so the first day sits at 0 and the last day at 100.

Daily balances are computed in one vectorised pass with numpy from the
same formula balance_model.balance_at uses, so the chart always agrees
with point queries.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .accrual import accrual_dates
from .balance_model import PTOLedger, build_ledger
from .calendar_utils import (
    SATURDAY,
    SUNDAY,
    add_months,
    days_between,
    month_end,
    month_start,
)
from .holidays import HolidayCatalog
from .schema import (
    FULL_WEEK_HOURS,
    HOURS_PER_DAY,
    WINDOW_MONTH_CHOICES,
    BalancePoint,
    MonthMarker,
    PTOConfig,
    ProjectionResult,
    Segment,
    ThresholdMarker,
)

logger = logging.getLogger(__name__)

WORK = "work"
PTO = "pto"


def normalize_window_months(window_months: object, default: int = 6) -> int:
    try:
        months = int(window_months)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        months = -1
    if months not in WINDOW_MONTH_CHOICES:
        logger.warning("Unsupported timeline window %r, using %d months", window_months, default)
        return default
    return months


def timeline_range(config: PTOConfig, window_months: int) -> Tuple[date, date]:
    """First day of the as-of month through the last day of the final month."""
    start = month_start(config.as_of_date)
    end = month_end(add_months(start, window_months - 1))
    return start, end


def _position(day: date, start: date, total_days: int) -> float:
    return days_between(start, day) / total_days * 100


def _as_datetime64(days: Iterable[date]) -> np.ndarray:
    return np.array(list(days), dtype="datetime64[D]")


def daily_balances(ledger: PTOLedger, start: date, end: date) -> np.ndarray:
    """
    End-of-day balances for every day from start - 1 through end.

    Index 0 is the day before start, so balances[i + 1] is day start + i
    and balances[i] is the balance going into it.
    """
    config = ledger.config
    days = np.arange(
        np.datetime64(start - timedelta(days=1), "D"),
        np.datetime64(end + timedelta(days=1), "D"),
    )
    accruals = _as_datetime64(accrual_dates(config, config.as_of_date, end))
    usage = _as_datetime64(ledger.pto_dates)

    accrued = np.searchsorted(accruals, days, side="right")
    used = np.searchsorted(usage, days, side="right")

    balances = config.starting_balance + accrued * config.accrual_amount - used * HOURS_PER_DAY
    balances[days < np.datetime64(config.as_of_date, "D")] = config.starting_balance
    return balances


def is_bridged_weekend(ledger: PTOLedger, day: date) -> bool:
    """A Saturday or Sunday whose Friday and Monday are both PTO."""
    weekday = day.weekday()
    if weekday == SATURDAY:
        friday, monday = day - timedelta(days=1), day + timedelta(days=2)
    elif weekday == SUNDAY:
        friday, monday = day - timedelta(days=2), day + timedelta(days=1)
    else:
        return False
    return ledger.is_pto(friday) and ledger.is_pto(monday)


def classify_day(ledger: PTOLedger, day: date) -> str:
    if day.weekday() >= SATURDAY:
        return PTO if is_bridged_weekend(ledger, day) else WORK
    return PTO if ledger.is_pto(day) else WORK


def build_segments(
    ledger: PTOLedger,
    start: date,
    end: date,
    balances: Optional[np.ndarray] = None,
) -> Tuple[List[Segment], List[ThresholdMarker]]:
    """
    Walk the window once, merging runs of equal classification.

    A run is keyed by (type, high_balance); high_balance only matters on
    work days and is False for PTO. Threshold markers are the working
    weekdays where the balance goes from below 40 to 40 or more.
    """
    if balances is None:
        balances = daily_balances(ledger, start, end)
    total_days = days_between(start, end)

    segments: List[Segment] = []
    thresholds: List[ThresholdMarker] = []
    run_key: Optional[Tuple[str, bool]] = None
    run_start = 0

    for i in range(total_days + 1):
        day = start + timedelta(days=i)
        before, after = float(balances[i]), float(balances[i + 1])
        kind = classify_day(ledger, day)
        high = kind == WORK and after >= FULL_WEEK_HOURS
        key = (kind, high)

        if kind == WORK and day.weekday() < SATURDAY and before < FULL_WEEK_HOURS <= after:
            thresholds.append(ThresholdMarker(day, _position(day, start, total_days)))

        if key != run_key:
            if run_key is not None:
                segments.append(_segment(run_key, run_start, i, total_days))
            run_key, run_start = key, i

    # The last day sits at 100%, so a run that starts on it has no width.
    if run_key is not None and run_start < total_days:
        segments.append(_segment(run_key, run_start, total_days, total_days))
    return segments, thresholds


def _segment(key: Tuple[str, bool], first: int, stop: int, total_days: int) -> Segment:
    kind, high = key
    return Segment(
        type=kind,
        high_balance=high,
        left=first / total_days * 100,
        width=(stop - first) / total_days * 100,
    )


def build_balance_points(
    ledger: PTOLedger,
    start: date,
    end: date,
    balances: Optional[np.ndarray] = None,
) -> List[BalancePoint]:
    """
    One point per event date in the window, plus the window end.

    Events are the window start, every accrual and every usage date.
    Balances are rounded to cents of an hour.
    """
    if balances is None:
        balances = daily_balances(ledger, start, end)
    total_days = days_between(start, end)
    config = ledger.config

    events = {start}
    events.update(accrual_dates(config, config.as_of_date, end))
    events.update(d for d in ledger.pto_dates if start <= d <= end)

    points: List[BalancePoint] = []
    for day in sorted(events):
        offset = days_between(start, day)
        points.append(
            BalancePoint(
                date=day,
                balance=round(float(balances[offset + 1]), 2),
                position=_position(day, start, total_days),
            )
        )
    if points[-1].date != end:
        points.append(BalancePoint(end, round(float(balances[-1]), 2), 100.0))
    return points


def build_month_markers(start: date, window_months: int) -> List[MonthMarker]:
    end = month_end(add_months(start, window_months - 1))
    total_days = days_between(start, end)
    markers: List[MonthMarker] = []
    for m in range(window_months):
        first = add_months(start, m)
        markers.append(
            MonthMarker(
                position=_position(first, start, total_days),
                label=calendar.month_abbr[first.month],
            )
        )
    return markers


def project(
    config: PTOConfig,
    selected: Iterable[date] = (),
    window_months: int = 6,
    catalog: Optional[HolidayCatalog] = None,
) -> ProjectionResult:
    """
    Full re-derivation of the timeline for one configuration.

    Raises UnsupportedCadence for a cadence with no scheduler; every
    other input problem is expected to be coerced before this point.
    """
    window_months = normalize_window_months(window_months)
    ledger = build_ledger(config, selected, catalog)
    start, end = timeline_range(config, window_months)
    logger.debug(
        "Projecting %s..%s with %d usage dates", start, end, len(ledger.pto_dates)
    )

    balances = daily_balances(ledger, start, end)
    segments, thresholds = build_segments(ledger, start, end, balances)
    points = build_balance_points(ledger, start, end, balances)

    return ProjectionResult(
        window_start=start,
        window_end=end,
        window_months=window_months,
        segments=tuple(segments),
        balance_points=tuple(points),
        max_balance=round(float(balances[1:].max()), 2),
        threshold_dates=tuple(thresholds),
        month_markers=tuple(build_month_markers(start, window_months)),
    )
