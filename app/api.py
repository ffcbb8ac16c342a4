"""
FastAPI app for the PTO balance system.

Endpoints:
- POST /projection   timeline segments, balance curve and markers
- POST /balance      balance on one day
- POST /calendar     per-day flags for a month grid
- POST /plan         days planned and balance after each
- POST /toggle       select / unselect one day
- GET  /holidays     observed holidays for a year
- GET  /state, PUT /state   the saved plan

Every POST carries the plan itself (config + selected days), so the
engine never depends on server-side state.
"""

from __future__ import annotations

import datetime as dt
from datetime import MAXYEAR, MINYEAR
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Make src/ importable ----------------------------------------------------

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from pto_balance.balance_model import PTOLedger, balance_at, build_ledger, would_exceed_balance
from pto_balance.calendar_utils import to_iso
from pto_balance.config import configure_logging, get_config
from pto_balance.data_io import PlanState, load_state, save_state
from pto_balance.errors import UnsupportedCadence
from pto_balance.holidays import HolidayCatalog, catalog_for_config, holidays_for
from pto_balance.planner import (
    calendar_month,
    normalize_selected_dates,
    plan_summary,
    project_cached,
    toggle_date,
)
from pto_balance.schema import PTOConfig

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="PTO Balance API")


# --- Request / Response schemas ----------------------------------------------


class ConfigPayload(BaseModel):
    """
    The balance configuration, as saved by the front end.

    Values are accepted loosely: a non-numeric or negative hour value is
    treated as 0 and a malformed date falls back to the default, so a
    half-typed settings form still gets a projection.
    """

    startingPTO: Any = None
    startDate: Any = None
    accrualAmount: Any = None
    accrualCadence: Any = None
    firstAccrualDate: Any = None


class PlanPayload(BaseModel):
    config: ConfigPayload = Field(default_factory=ConfigPayload)
    selectedDates: List[str] = Field(default_factory=list)
    timelineMonths: int = 6


class DayPayload(PlanPayload):
    date: dt.date


class CalendarPayload(PlanPayload):
    # The 6x7 grid pads into the neighbouring months.
    year: int = Field(ge=MINYEAR + 1, le=MAXYEAR - 1)
    month: int = Field(ge=1, le=12)
    today: Optional[dt.date] = None


class BalanceResponse(BaseModel):
    date: str
    balance: float
    wouldExceedBalance: bool


class ToggleResponse(BaseModel):
    selectedDates: List[str]
    changed: bool


# --- Helpers -----------------------------------------------------------------


def _catalog(config: PTOConfig) -> HolidayCatalog:
    cfg = get_config()
    return catalog_for_config(config, cfg.holiday_years_before, cfg.holiday_years_after)


def _config(payload: PlanPayload) -> PTOConfig:
    config = PTOConfig.from_dict(payload.config.model_dump(exclude_none=True))
    try:
        return config.validate()
    except UnsupportedCadence as e:
        raise HTTPException(status_code=422, detail=str(e))


def _ledger(payload: PlanPayload) -> PTOLedger:
    config = _config(payload)
    catalog = _catalog(config)
    selected = normalize_selected_dates(payload.selectedDates, catalog)
    return build_ledger(config, selected, catalog)


# --- Endpoints ---------------------------------------------------------------


@app.post("/projection")
def projection(payload: PlanPayload) -> Dict[str, Any]:
    """
    Timeline for the chart.

    Body example:
    {
      "config": {"startingPTO": 23.51, "startDate": "2026-01-09",
                 "accrualAmount": 11.08, "accrualCadence": "biweekly",
                 "firstAccrualDate": "2026-01-23"},
      "selectedDates": ["2026-03-02", "2026-03-03"],
      "timelineMonths": 6
    }
    """
    config = _config(payload)
    cfg = get_config()
    selected = normalize_selected_dates(payload.selectedDates, _catalog(config))
    result = project_cached(
        config,
        selected,
        payload.timelineMonths,
        cfg.holiday_years_before,
        cfg.holiday_years_after,
    )
    return result.to_dict()


@app.post("/balance", response_model=BalanceResponse)
def balance(payload: DayPayload) -> BalanceResponse:
    ledger = _ledger(payload)
    return BalanceResponse(
        date=to_iso(payload.date),
        balance=balance_at(ledger, payload.date),
        wouldExceedBalance=would_exceed_balance(ledger, payload.date),
    )


@app.post("/calendar")
def calendar(payload: CalendarPayload) -> List[Dict[str, Any]]:
    ledger = _ledger(payload)
    days = calendar_month(ledger, payload.year, payload.month, today=payload.today)
    return [d.to_dict() for d in days]


@app.post("/plan")
def plan(payload: PlanPayload) -> Dict[str, Any]:
    return plan_summary(_ledger(payload)).to_dict()


@app.post("/toggle", response_model=ToggleResponse)
def toggle(payload: DayPayload) -> ToggleResponse:
    """
    Holidays and weekends can not be toggled; the selection comes back
    unchanged with changed=false.
    """
    config = _config(payload)
    catalog = _catalog(config)
    before = normalize_selected_dates(payload.selectedDates, catalog)
    after = toggle_date(before, payload.date, catalog)
    return ToggleResponse(
        selectedDates=[to_iso(d) for d in after],
        changed=after != before,
    )


@app.get("/holidays")
def holidays(
    year: Optional[int] = Query(None, ge=MINYEAR, le=MAXYEAR),
) -> List[Dict[str, str]]:
    year = year or dt.date.today().year
    return [
        {"date": to_iso(day), "name": name}
        for day, name in holidays_for([year]).items()
    ]


@app.get("/state")
def get_state() -> Dict[str, Any]:
    """The saved plan, or the defaults when nothing has been saved yet."""
    state = load_state() or PlanState()
    return state.to_dict()


@app.put("/state")
def put_state(payload: PlanPayload) -> Dict[str, Any]:
    _config(payload)
    state = PlanState.from_dict(payload.model_dump(exclude_none=True))
    path = save_state(state)
    logger.info("Saved plan to %s", path)
    return state.to_dict()


# Convenience for local dev:
# uvicorn app.api:app --reload
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.api:app", host="0.0.0.0", port=8000, reload=True)
