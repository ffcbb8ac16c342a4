import json

import pytest

from app import cli


def run(capsys, state_path, *argv):
    cli.main(["--state-path", str(state_path), *argv])
    return capsys.readouterr().out


def test_toggle_and_plan(capsys, tmp_path):
    state_path = tmp_path / "state.json"
    out = run(capsys, state_path, "toggle", "2026-03-03")
    assert "Added 2026-03-03" in out
    assert json.loads(state_path.read_text())["selectedDates"] == ["2026-03-03"]

    out = run(capsys, state_path, "plan")
    assert "1 days (8 hours)" in out
    assert "2026-03-03" in out

    out = run(capsys, state_path, "toggle", "2026-03-03")
    assert "Removed 2026-03-03" in out
    assert json.loads(state_path.read_text())["selectedDates"] == []


def test_toggle_holiday_does_not_save(capsys, tmp_path):
    state_path = tmp_path / "state.json"
    out = run(capsys, state_path, "toggle", "2026-01-19")
    assert "MLK Jr Day" in out
    assert not state_path.exists()


def test_balance(capsys, tmp_path):
    out = run(capsys, tmp_path / "state.json", "balance", "--date", "2026-01-23")
    assert "2026-01-23: 26.59 hrs" in out


def test_timeline_json(capsys, tmp_path):
    out = run(capsys, tmp_path / "state.json", "timeline", "--months", "12", "--json")
    data = json.loads(out)
    assert data["windowMonths"] == 12
    assert data["windowEnd"] == "2026-12-31"


def test_calendar_text(capsys, tmp_path):
    out = run(capsys, tmp_path / "state.json", "calendar", "2026", "1")
    assert "Sun  Mon" in out
    assert "2026-01-19: MLK Jr Day" in out


def test_set_config_rejects_unknown_cadence(capsys, tmp_path):
    with pytest.raises(SystemExit):
        run(capsys, tmp_path / "state.json", "set-config", "--cadence", "monthly")


def test_set_config_updates_saved_plan(capsys, tmp_path):
    state_path = tmp_path / "state.json"
    run(capsys, state_path, "set-config", "--starting-pto", "40", "--months", "12")
    saved = json.loads(state_path.read_text())
    assert saved["config"]["startingPTO"] == 40.0
    assert saved["config"]["startDate"] == "2026-01-09"
    assert saved["timelineMonths"] == 12


def test_holidays_listing(capsys, tmp_path):
    out = run(capsys, tmp_path / "state.json", "holidays", "--year", "2026")
    assert "2026-07-03  Fri  Independence Day" in out
