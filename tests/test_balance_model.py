from datetime import date, timedelta

import pytest

from pto_balance.balance_model import (
    all_pto_dates,
    balance_at,
    build_ledger,
    would_exceed_balance,
)
from pto_balance.errors import UnsupportedCadence
from pto_balance.holidays import HolidayCatalog, holidays_for
from pto_balance.schema import PTOConfig

CONFIG = PTOConfig(
    starting_balance=23.51,
    as_of_date=date(2026, 1, 9),
    accrual_amount=11.08,
    first_accrual_date=date(2026, 1, 23),
)
NO_HOLIDAYS = HolidayCatalog([])


def test_balance_on_as_of_date_is_the_starting_balance():
    for config in (CONFIG, PTOConfig(starting_balance=0.0), PTOConfig(starting_balance=120.5)):
        ledger = build_ledger(config)
        assert balance_at(ledger, config.as_of_date) == config.starting_balance


def test_balance_before_as_of_is_never_projected_backwards():
    ledger = build_ledger(CONFIG, [date(2026, 1, 5)])
    assert balance_at(ledger, date(2025, 6, 1)) == 23.51
    assert balance_at(ledger, date(2026, 1, 8)) == 23.51


def test_scenario_without_holidays():
    ledger = build_ledger(CONFIG, [], NO_HOLIDAYS)
    assert balance_at(ledger, date(2026, 1, 22)) == pytest.approx(23.51)
    assert balance_at(ledger, date(2026, 1, 23)) == pytest.approx(34.59)


def test_mlk_day_counts_as_usage():
    ledger = build_ledger(CONFIG)
    assert balance_at(ledger, date(2026, 1, 18)) == pytest.approx(23.51)
    assert balance_at(ledger, date(2026, 1, 19)) == pytest.approx(15.51)
    assert balance_at(ledger, date(2026, 1, 22)) == pytest.approx(15.51)
    assert balance_at(ledger, date(2026, 1, 23)) == pytest.approx(26.59)


def test_selecting_a_day_costs_exactly_eight_hours():
    without = build_ledger(CONFIG)
    with_day = build_ledger(CONFIG, [date(2026, 1, 20)])
    for day in (date(2026, 1, 20), date(2026, 2, 1), date(2026, 6, 30)):
        assert balance_at(without, day) - balance_at(with_day, day) == pytest.approx(8.0)
    assert balance_at(with_day, date(2026, 1, 19)) == balance_at(without, date(2026, 1, 19))


def test_duplicate_and_holiday_selections_collapse():
    catalog = holidays_for([2026, 2027])
    selected = [date(2026, 1, 20), date(2026, 1, 20), date(2026, 1, 19)]
    dates = all_pto_dates(CONFIG, selected, catalog)
    assert dates.count(date(2026, 1, 19)) == 1
    assert dates.count(date(2026, 1, 20)) == 1
    ledger = build_ledger(CONFIG, selected, catalog)
    assert balance_at(ledger, date(2026, 1, 20)) == pytest.approx(23.51 - 16)


def test_holidays_look_ahead_twelve_months_from_as_of():
    catalog = holidays_for(range(2025, 2029))
    dates = all_pto_dates(CONFIG, [], catalog)
    assert date(2026, 1, 1) not in dates  # before as-of
    assert date(2026, 1, 19) in dates
    assert date(2027, 1, 1) in dates  # New Year's 2027, inside the window
    assert date(2027, 1, 18) not in dates  # MLK 2027, beyond 12 months
    assert list(dates) == sorted(dates)


def test_balance_moves_only_on_event_days():
    ledger = build_ledger(CONFIG, [date(2026, 3, 3)])
    day = date(2026, 1, 9)
    previous = balance_at(ledger, day)
    while day < date(2026, 6, 30):
        day += timedelta(days=1)
        current = balance_at(ledger, day)
        delta = current - previous
        if day in (date(2026, 1, 19), date(2026, 3, 3), date(2026, 5, 25)):
            assert delta == pytest.approx(-8.0)
        elif (day - CONFIG.first_accrual_date).days % 14 == 0:
            assert delta == pytest.approx(11.08)
        else:
            assert delta == 0
        previous = current


def test_balance_queries_are_deterministic():
    ledger = build_ledger(CONFIG, [date(2026, 2, 2), date(2026, 2, 3)])
    first = [balance_at(ledger, date(2026, 2, d)) for d in range(1, 28)]
    second = [balance_at(ledger, date(2026, 2, d)) for d in range(1, 28)]
    assert first == second
    assert would_exceed_balance(ledger, date(2026, 2, 4)) == would_exceed_balance(
        ledger, date(2026, 2, 4)
    )


LOW = PTOConfig(
    starting_balance=8.0,
    as_of_date=date(2026, 3, 2),
    accrual_amount=4.0,
    first_accrual_date=date(2026, 3, 13),
)


def test_would_exceed_boundary_at_exactly_eight_hours():
    ledger = build_ledger(LOW, [], NO_HOLIDAYS)
    assert not would_exceed_balance(ledger, date(2026, 3, 3))


def test_would_exceed_below_eight_hours():
    config = PTOConfig(
        starting_balance=7.99,
        as_of_date=LOW.as_of_date,
        accrual_amount=LOW.accrual_amount,
        first_accrual_date=LOW.first_accrual_date,
    )
    ledger = build_ledger(config, [], NO_HOLIDAYS)
    assert would_exceed_balance(ledger, date(2026, 3, 3))


def test_would_exceed_counts_accrual_on_the_day():
    config = PTOConfig(
        starting_balance=5.0,
        as_of_date=LOW.as_of_date,
        accrual_amount=LOW.accrual_amount,
        first_accrual_date=LOW.first_accrual_date,
    )
    ledger = build_ledger(config, [], NO_HOLIDAYS)
    assert would_exceed_balance(ledger, date(2026, 3, 12))
    assert not would_exceed_balance(ledger, date(2026, 3, 13))


def test_would_exceed_adds_back_a_day_already_counted():
    config = PTOConfig(
        starting_balance=0.0,
        as_of_date=LOW.as_of_date,
        accrual_amount=0.0,
        first_accrual_date=LOW.first_accrual_date,
    )
    unselected = build_ledger(config, [], NO_HOLIDAYS)
    selected = build_ledger(config, [date(2026, 3, 3)], NO_HOLIDAYS)
    assert would_exceed_balance(unselected, date(2026, 3, 3))
    assert not would_exceed_balance(selected, date(2026, 3, 3))


def test_negative_balance_is_reported_not_prevented():
    days = [date(2026, 1, d) for d in (12, 13, 14, 15, 16)]
    ledger = build_ledger(CONFIG, days)
    assert balance_at(ledger, date(2026, 1, 16)) == pytest.approx(23.51 - 40)


def test_build_ledger_refuses_unsupported_cadence():
    with pytest.raises(UnsupportedCadence):
        build_ledger(PTOConfig(accrual_cadence="weekly"))
