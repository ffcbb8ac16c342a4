"""
Pure math for the PTO balance.

No I/O. Just:
- Merging selected days and holidays into one set of usage dates
- Balance on any date
- The "would taking this day overdraw me" warning

Balance model:

    balance(d) = starting_balance
               + accrual_amount * #accruals in [as_of_date, d]
               - 8 * #distinct usage dates <= d

and balance(d) = starting_balance for any d before as_of_date.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import date, timedelta
from typing import FrozenSet, Iterable, Optional, Tuple

from .accrual import accrual_dates, is_accrual_date
from .calendar_utils import add_months
from .holidays import HolidayCatalog, catalog_for_config
from .schema import HOURS_PER_DAY, PTOConfig

HOLIDAY_LOOKAHEAD_MONTHS = 12


def all_pto_dates(
    config: PTOConfig,
    selected: Iterable[date],
    catalog: HolidayCatalog,
) -> Tuple[date, ...]:
    """
    Selected days plus every holiday from as_of_date to 12 months later.

    The holiday look-ahead is always 12 months, whatever timeline window
    is being shown. Duplicates collapse; the result is ascending.
    """
    start = config.as_of_date
    end = add_months(start, HOLIDAY_LOOKAHEAD_MONTHS)
    days = set(selected)
    days.update(catalog.between(start, end))
    return tuple(sorted(days))


@dataclass(frozen=True)
class PTOLedger:
    """
    Everything the balance queries need, resolved once.

    Build with build_ledger(); all fields are immutable so two ledgers
    built from the same inputs answer every query identically.
    """

    config: PTOConfig
    selected: FrozenSet[date]
    catalog: HolidayCatalog
    pto_dates: Tuple[date, ...]

    def is_pto(self, day: date) -> bool:
        i = bisect_left(self.pto_dates, day)
        return i < len(self.pto_dates) and self.pto_dates[i] == day

    def usage_through(self, day: date) -> int:
        """Number of distinct usage dates on or before day."""
        return bisect_right(self.pto_dates, day)


def build_ledger(
    config: PTOConfig,
    selected: Iterable[date] = (),
    catalog: Optional[HolidayCatalog] = None,
) -> PTOLedger:
    config.validate()
    if catalog is None:
        catalog = catalog_for_config(config)
    selected = frozenset(selected)
    return PTOLedger(
        config=config,
        selected=selected,
        catalog=catalog,
        pto_dates=all_pto_dates(config, selected, catalog),
    )


def balance_at(ledger: PTOLedger, day: date) -> float:
    """
    Balance at the end of `day`.

    Dates before as_of_date return the starting balance unchanged; the
    engine never projects backwards.
    """
    config = ledger.config
    if day < config.as_of_date:
        return config.starting_balance

    accrued = len(accrual_dates(config, config.as_of_date, day)) * config.accrual_amount
    used = ledger.usage_through(day) * HOURS_PER_DAY
    return config.starting_balance + accrued - used


def would_exceed_balance(ledger: PTOLedger, day: date) -> bool:
    """
    Whether taking `day` off leaves less than one workday of PTO.

    Starts from the balance at the end of the previous day and adds the
    accrual landing on `day` (if any). A day that is already counted as
    usage (selected or holiday) also gets its 8 hours added. True when
    the result is below 8, so a balance of exactly 8 is still enough.
    """
    balance = balance_at(ledger, day - timedelta(days=1))
    if is_accrual_date(ledger.config, day):
        balance += ledger.config.accrual_amount
    if ledger.is_pto(day):
        balance += HOURS_PER_DAY
    return balance < HOURS_PER_DAY
