from datetime import date

import pytest

from pto_balance.accrual import accrual_dates, is_accrual_date
from pto_balance.errors import UnsupportedCadence
from pto_balance.schema import PTOConfig

CONFIG = PTOConfig(
    starting_balance=23.51,
    as_of_date=date(2026, 1, 9),
    accrual_amount=11.08,
    first_accrual_date=date(2026, 1, 23),
)


def test_accrual_dates_step_fourteen_days_from_first_accrual():
    assert accrual_dates(CONFIG, date(2026, 1, 9), date(2026, 3, 6)) == [
        date(2026, 1, 23),
        date(2026, 2, 6),
        date(2026, 2, 20),
        date(2026, 3, 6),
    ]


def test_accrual_dates_range_start_between_events():
    assert accrual_dates(CONFIG, date(2026, 2, 7), date(2026, 3, 19)) == [
        date(2026, 2, 20),
        date(2026, 3, 6),
    ]


def test_accrual_dates_before_first_accrual_is_empty():
    assert accrual_dates(CONFIG, date(2026, 1, 1), date(2026, 1, 22)) == []
    assert accrual_dates(CONFIG, date(2026, 3, 1), date(2026, 2, 1)) == []


def test_accrual_dates_never_precede_first_accrual():
    dates = accrual_dates(CONFIG, date(2025, 1, 1), date(2027, 1, 1))
    assert dates[0] == date(2026, 1, 23)
    assert all((b - a).days == 14 for a, b in zip(dates, dates[1:]))


def test_is_accrual_date():
    assert is_accrual_date(CONFIG, date(2026, 1, 23))
    assert is_accrual_date(CONFIG, date(2026, 2, 20))
    assert not is_accrual_date(CONFIG, date(2026, 1, 30))
    assert not is_accrual_date(CONFIG, date(2026, 1, 9))


def test_accrual_on_cadence_but_before_as_of_does_not_count():
    config = PTOConfig(as_of_date=date(2026, 2, 1), first_accrual_date=date(2026, 1, 23))
    assert not is_accrual_date(config, date(2026, 1, 23))
    assert is_accrual_date(config, date(2026, 2, 6))


def test_unsupported_cadence():
    config = PTOConfig(accrual_cadence="monthly")
    with pytest.raises(UnsupportedCadence):
        accrual_dates(config, date(2026, 1, 1), date(2026, 12, 31))
