"""
Accrual schedule.

Accrual events fall every 14 days starting at first_accrual_date. Only
the biweekly cadence exists; PTOConfig.validate() refuses anything else.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List

from .schema import BIWEEKLY, PTOConfig

CADENCE_DAYS = {BIWEEKLY: 14}


def _step_days(config: PTOConfig) -> int:
    config.validate()
    return CADENCE_DAYS[config.accrual_cadence]


def accrual_dates(config: PTOConfig, range_start: date, range_end: date) -> List[date]:
    """
    Accrual dates in [range_start, range_end] inclusive, ascending.

    Every returned date is first_accrual_date + k * 14 days for k >= 0.
    """
    step = _step_days(config)
    first = config.first_accrual_date
    if range_end < first or range_end < range_start:
        return []

    # Jump straight to the first event on or after range_start.
    k = 0
    if range_start > first:
        k = -(-(range_start - first).days // step)
    current = first + timedelta(days=k * step)

    dates: List[date] = []
    while current <= range_end:
        dates.append(current)
        current += timedelta(days=step)
    return dates


def is_accrual_date(config: PTOConfig, day: date) -> bool:
    """True when day is on the cadence and on or after the as-of date."""
    if day < config.as_of_date or day < config.first_accrual_date:
        return False
    return (day - config.first_accrual_date).days % _step_days(config) == 0
