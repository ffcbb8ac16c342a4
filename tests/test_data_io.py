from datetime import date
import json

import pytest

from pto_balance.config import Config
from pto_balance.data_io import (
    PlanState,
    load_state,
    save_state,
    save_state_to_azure_blob,
    sync_state_to_azure_blob,
)
from pto_balance.schema import PTOConfig


def test_save_and_load_state(tmp_path):
    path = tmp_path / "nested" / "state.json"
    state = PlanState(
        config=PTOConfig(starting_balance=40.0),
        selected_dates=[date(2026, 3, 3), date(2026, 3, 2)],
        timeline_months=12,
    )
    save_state(state, path)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["selectedDates"] == ["2026-03-02", "2026-03-03"]
    assert raw["timelineMonths"] == 12
    assert raw["config"]["startingPTO"] == 40.0

    loaded = load_state(path)
    assert loaded == PlanState(
        config=PTOConfig(starting_balance=40.0),
        selected_dates=[date(2026, 3, 2), date(2026, 3, 3)],
        timeline_months=12,
    )


def test_load_missing_state_returns_none(tmp_path):
    assert load_state(tmp_path / "missing.json") is None


@pytest.mark.parametrize("text", ["{not json", "[1, 2, 3]"])
def test_load_corrupt_state_returns_none(tmp_path, text):
    path = tmp_path / "state.json"
    path.write_text(text, encoding="utf-8")
    assert load_state(path) is None


def test_from_dict_coerces_saved_state():
    state = PlanState.from_dict(
        {
            "config": {"startingPTO": "oops", "startDate": "2026-01-09"},
            "selectedDates": ["2026-03-02", "2026-03-14", "2026-01-19", "bad"],
            "timelineMonths": 9,
        }
    )
    assert state.config.starting_balance == 0.0
    assert state.selected_dates == [date(2026, 3, 2)]
    assert state.timeline_months == 6


def test_from_dict_ignores_non_list_selection():
    state = PlanState.from_dict({"selectedDates": "2026-03-02"})
    assert state.selected_dates == []


def test_azure_helpers_require_configuration(tmp_path):
    with pytest.raises((ImportError, ValueError)):
        save_state_to_azure_blob(PlanState(), config=Config(azure_blob_connection_string=None))


def test_sync_without_local_state_does_nothing(tmp_path):
    assert sync_state_to_azure_blob(tmp_path / "missing.json") is False
