"""
Data schemas for the PTO balance system.

Defines:
- PTOConfig: the user's balance/accrual configuration
- BalancePoint, Segment, ThresholdMarker, MonthMarker: chart geometry
- ProjectionResult: everything a renderer needs for one timeline
- CalendarDay, PlannedDay, PlanSummary: calendar widget / planning views

Every record has a to_dict() returning plain JSON-serialisable data
(dates as ISO strings) so nothing engine-internal leaks into a saved
snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .calendar_utils import parse_iso_date, to_iso
from .errors import InvalidConfiguration, UnsupportedCadence

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 8.0
FULL_WEEK_HOURS = 40.0
MIN_CHART_BALANCE = -16.0

BIWEEKLY = "biweekly"
SUPPORTED_CADENCES = (BIWEEKLY,)
WINDOW_MONTH_CHOICES = (6, 12)

DEFAULT_STARTING_BALANCE = 23.51
DEFAULT_AS_OF_DATE = date(2026, 1, 9)
DEFAULT_ACCRUAL_AMOUNT = 11.08
DEFAULT_FIRST_ACCRUAL_DATE = date(2026, 1, 23)


def _coerce_hours(raw: Mapping[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    try:
        hours = float(value)
        if math.isnan(hours) or math.isinf(hours) or hours < 0:
            raise InvalidConfiguration(key, value, "must be a finite number >= 0")
    except (TypeError, ValueError) as e:
        logger.warning("Using 0.0 for %s: %s", key, e)
        return 0.0
    return hours


def _coerce_date(raw: Mapping[str, Any], key: str, default: date) -> date:
    value = raw.get(key)
    if value in (None, ""):
        return default
    try:
        return parse_iso_date(value)
    except ValueError as e:
        logger.warning(
            "Using %s for %s: %s", default.isoformat(), key,
            InvalidConfiguration(key, value, str(e)),
        )
        return default


@dataclass(frozen=True)
class PTOConfig:
    """
    The balance configuration.

    starting_balance is the authoritative balance exactly on as_of_date;
    nothing before as_of_date is modelled. Hours are floats >= 0.
    Frozen so it can key a memoised projection.
    """

    starting_balance: float = DEFAULT_STARTING_BALANCE
    as_of_date: date = DEFAULT_AS_OF_DATE
    accrual_amount: float = DEFAULT_ACCRUAL_AMOUNT
    accrual_cadence: str = BIWEEKLY
    first_accrual_date: date = DEFAULT_FIRST_ACCRUAL_DATE

    def validate(self) -> "PTOConfig":
        """Raise UnsupportedCadence unless the cadence has a scheduler."""
        if self.accrual_cadence not in SUPPORTED_CADENCES:
            raise UnsupportedCadence(self.accrual_cadence)
        return self

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "PTOConfig":
        """
        Build a config from saved/posted data.

        Keys match the saved snapshot (startingPTO, startDate,
        accrualAmount, accrualCadence, firstAccrualDate). Bad hour values
        become 0.0 and bad dates fall back to the defaults; the cadence is
        kept as given so validate() can refuse it.
        """
        raw = raw or {}
        cadence = raw.get("accrualCadence") or BIWEEKLY
        return cls(
            starting_balance=_coerce_hours(raw, "startingPTO", DEFAULT_STARTING_BALANCE),
            as_of_date=_coerce_date(raw, "startDate", DEFAULT_AS_OF_DATE),
            accrual_amount=_coerce_hours(raw, "accrualAmount", DEFAULT_ACCRUAL_AMOUNT),
            accrual_cadence=str(cadence).strip().lower(),
            first_accrual_date=_coerce_date(
                raw, "firstAccrualDate", DEFAULT_FIRST_ACCRUAL_DATE
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startingPTO": self.starting_balance,
            "startDate": to_iso(self.as_of_date),
            "accrualAmount": self.accrual_amount,
            "accrualCadence": self.accrual_cadence,
            "firstAccrualDate": to_iso(self.first_accrual_date),
        }


@dataclass(frozen=True)
class BalancePoint:
    """One vertex of the balance curve; position is 0-100 across the window."""

    date: date
    balance: float
    position: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": to_iso(self.date), "balance": self.balance, "position": self.position}


@dataclass(frozen=True)
class Segment:
    """
    A run of days with the same classification.

    type is "work" or "pto"; high_balance is always False for pto.
    left/width are exact percentages of the window; renderers apply any
    minimum visual width themselves.
    """

    type: str
    high_balance: bool
    left: float
    width: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "highBalance": self.high_balance,
            "left": self.left,
            "width": self.width,
        }


@dataclass(frozen=True)
class ThresholdMarker:
    """A working weekday on which the balance first reaches a full week."""

    date: date
    position: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": to_iso(self.date), "position": self.position}


@dataclass(frozen=True)
class MonthMarker:
    position: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position, "label": self.label}


@dataclass(frozen=True)
class ProjectionResult:
    """Output of project(): the full timeline for one configuration."""

    window_start: date
    window_end: date
    window_months: int
    segments: Tuple[Segment, ...]
    balance_points: Tuple[BalancePoint, ...]
    max_balance: float
    threshold_dates: Tuple[ThresholdMarker, ...]
    month_markers: Tuple[MonthMarker, ...]
    min_balance: float = MIN_CHART_BALANCE

    @property
    def has_negative_balance(self) -> bool:
        return any(point.balance < 0 for point in self.balance_points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "windowStart": to_iso(self.window_start),
            "windowEnd": to_iso(self.window_end),
            "windowMonths": self.window_months,
            "segments": [s.to_dict() for s in self.segments],
            "balancePoints": [p.to_dict() for p in self.balance_points],
            "maxBalance": self.max_balance,
            "minBalance": self.min_balance,
            "yAxisLabels": y_axis_labels(self.max_balance),
            "thresholdDates": [t.to_dict() for t in self.threshold_dates],
            "monthMarkers": [m.to_dict() for m in self.month_markers],
            "hasNegativeBalance": self.has_negative_balance,
        }


@dataclass(frozen=True)
class CalendarDay:
    """Per-day flags for the calendar widget."""

    date: date
    is_current_month: bool
    is_holiday: bool
    holiday_name: Optional[str]
    is_accrual_date: bool
    is_selected: bool
    would_exceed_balance: bool
    is_weekend: bool
    is_past: bool

    @property
    def selectable(self) -> bool:
        return (
            self.is_current_month
            and not self.is_weekend
            and not self.is_past
            and not self.is_holiday
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "date": to_iso(self.date),
            "isCurrentMonth": self.is_current_month,
            "isHoliday": self.is_holiday,
            "isAccrualDate": self.is_accrual_date,
            "isSelected": self.is_selected,
            "wouldExceedBalance": self.would_exceed_balance,
            "isWeekend": self.is_weekend,
            "isPast": self.is_past,
            "selectable": self.selectable,
        }
        if self.holiday_name is not None:
            out["holidayName"] = self.holiday_name
        return out


@dataclass(frozen=True)
class PlannedDay:
    date: date
    balance_after: float

    @property
    def is_negative(self) -> bool:
        return self.balance_after < 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": to_iso(self.date),
            "balanceAfter": self.balance_after,
            "isNegative": self.is_negative,
        }


@dataclass(frozen=True)
class PlanSummary:
    """The "days planned" panel: selected days, hours, balance after each."""

    days: Tuple[PlannedDay, ...] = field(default_factory=tuple)

    @property
    def day_count(self) -> int:
        return len(self.days)

    @property
    def hours(self) -> float:
        return self.day_count * HOURS_PER_DAY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dayCount": self.day_count,
            "hours": self.hours,
            "days": [d.to_dict() for d in self.days],
        }


def y_axis_labels(max_balance: float) -> List[int]:
    """Tick values for the balance axis: 0 up to max_balance + 10 hours."""
    step = 40 if max_balance > 80 else 20
    labels: List[int] = []
    value = 0
    while value <= max_balance + 10:
        labels.append(value)
        value += step
    return labels
