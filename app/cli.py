"""
CLI for the PTO balance system.

Usage examples:

    # Balance on a given day (default: today)
    python -m app.cli balance --date 2026-03-02

    # Pick / unpick a day off (holidays and weekends are ignored)
    python -m app.cli toggle 2026-03-02

    # Timeline summary, or the full projection as JSON
    python -m app.cli timeline --months 12
    python -m app.cli timeline --json

    # Month calendar with accrual / holiday / overdraft flags
    python -m app.cli calendar 2026 3

    # Days planned, holidays, configuration, Azure sync
    python -m app.cli plan
    python -m app.cli holidays --year 2027
    python -m app.cli set-config --starting-pto 40 --start-date 2026-02-06
    python -m app.cli push
"""

from __future__ import annotations

import argparse
from datetime import date
import json
import sys
from pathlib import Path

# --- Make src/ importable ----------------------------------------------------

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from pto_balance.balance_model import balance_at, build_ledger
from pto_balance.calendar_utils import parse_iso_date
from pto_balance.config import configure_logging, get_config
from pto_balance.data_io import PlanState, load_state, save_state, sync_state_to_azure_blob
from pto_balance.errors import UnsupportedCadence
from pto_balance.holidays import HolidayCatalog, catalog_for_config, holidays_for
from pto_balance.planner import calendar_month, plan_summary, toggle_date
from pto_balance.schema import PTOConfig
from pto_balance.timeline import project


# --- Helpers -----------------------------------------------------------------


def _load(args: argparse.Namespace) -> PlanState:
    return load_state(args.state_path) or PlanState()


def _catalog(config: PTOConfig) -> HolidayCatalog:
    cfg = get_config()
    return catalog_for_config(config, cfg.holiday_years_before, cfg.holiday_years_after)


def _date_arg(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date (YYYY-MM-DD): {value!r}")


# --- Commands ----------------------------------------------------------------


def cmd_balance(args: argparse.Namespace) -> None:
    """
    Print the projected balance on one day.
    """
    state = _load(args)
    ledger = build_ledger(state.config, state.selected_dates, _catalog(state.config))
    day = args.date or date.today()
    print(f"[balance] {day.isoformat()}: {balance_at(ledger, day):.2f} hrs")


def cmd_toggle(args: argparse.Namespace) -> None:
    """
    Add or remove a selected day off and save the plan.
    """
    state = _load(args)
    catalog = _catalog(state.config)
    name = catalog.name_for(args.date)
    if name is not None:
        print(f"[toggle] {args.date.isoformat()} is {name}; holidays are always taken.")
        return
    if args.date.weekday() >= 5:
        print(f"[toggle] {args.date.isoformat()} is a weekend day; nothing to do.")
        return

    was_selected = args.date in state.selected_dates
    state.selected_dates = toggle_date(state.selected_dates, args.date, catalog)
    path = save_state(state, args.state_path)
    action = "Removed" if was_selected else "Added"
    print(f"[toggle] {action} {args.date.isoformat()} ({len(state.selected_dates)} days selected)")
    print(f"[toggle] Saved plan to {path}")


def cmd_timeline(args: argparse.Namespace) -> None:
    """
    Print the projected timeline (or the raw projection as JSON).
    """
    state = _load(args)
    months = args.months or state.timeline_months
    result = project(state.config, state.selected_dates, months, _catalog(state.config))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    print(
        f"[timeline] {result.window_start.isoformat()} .. {result.window_end.isoformat()} "
        f"({result.window_months} months)"
    )
    print(f"[timeline] Max balance: {result.max_balance:.2f} hrs")
    for segment in result.segments:
        label = segment.type
        if segment.type == "work":
            label += " (40h+)" if segment.high_balance else " (<40h)"
        print(f"  {segment.left:6.2f}% +{segment.width:6.2f}%  {label}")
    for marker in result.threshold_dates:
        print(f"[timeline] Full week affordable from {marker.date.isoformat()}")
    if result.has_negative_balance:
        print("[timeline] Warning: planned PTO drives the balance negative.")


def cmd_calendar(args: argparse.Namespace) -> None:
    """
    Print a month grid. Markers: H holiday, * selected, + accrual, ! would overdraw.
    """
    state = _load(args)
    ledger = build_ledger(state.config, state.selected_dates, _catalog(state.config))
    days = calendar_month(ledger, args.year, args.month)

    if args.json:
        print(json.dumps([d.to_dict() for d in days], indent=2))
        return

    print(f"[calendar] {args.year}-{args.month:02d}")
    print("  Sun  Mon  Tue  Wed  Thu  Fri  Sat")
    for week in range(6):
        cells = []
        for day in days[week * 7:(week + 1) * 7]:
            if not day.is_current_month:
                cells.append("     ")
                continue
            mark = " "
            if day.is_holiday:
                mark = "H"
            elif day.is_selected:
                mark = "*"
            elif day.would_exceed_balance and day.selectable:
                mark = "!"
            elif day.is_accrual_date:
                mark = "+"
            cells.append(f"  {day.date.day:2d}{mark}")
        print("".join(cells))
    for day in days:
        if day.is_current_month and day.holiday_name:
            print(f"[calendar] {day.date.isoformat()}: {day.holiday_name}")


def cmd_plan(args: argparse.Namespace) -> None:
    """
    Print the days planned and the balance after each.
    """
    state = _load(args)
    ledger = build_ledger(state.config, state.selected_dates, _catalog(state.config))
    summary = plan_summary(ledger)
    print(f"[plan] {summary.day_count} days ({summary.hours:g} hours) + holidays")
    if not summary.days:
        print("[plan] No additional PTO days selected. Holidays are already accounted for.")
    for planned in summary.days:
        flag = "  NEGATIVE" if planned.is_negative else ""
        print(f"  {planned.date.isoformat()}  {planned.balance_after:8.2f} hrs{flag}")


def cmd_holidays(args: argparse.Namespace) -> None:
    """
    List observed holidays for one year.
    """
    year = args.year or date.today().year
    catalog = holidays_for([year])
    for day, name in catalog.items():
        print(f"  {day.isoformat()}  {day.strftime('%a')}  {name}")


def cmd_set_config(args: argparse.Namespace) -> None:
    """
    Update the saved configuration. Unspecified fields are kept.
    """
    state = _load(args)
    raw = state.config.to_dict()
    updates = {
        "startingPTO": args.starting_pto,
        "startDate": args.start_date,
        "accrualAmount": args.accrual_amount,
        "accrualCadence": args.cadence,
        "firstAccrualDate": args.first_accrual_date,
    }
    raw.update({k: v for k, v in updates.items() if v is not None})
    config = PTOConfig.from_dict(raw)
    try:
        config.validate()
    except UnsupportedCadence as e:
        raise SystemExit(f"[set-config] {e}")

    state.config = config
    if args.months:
        state.timeline_months = args.months
    path = save_state(state, args.state_path)
    print("[set-config] Configuration:")
    print(json.dumps(config.to_dict(), indent=2))
    print(f"[set-config] Saved plan to {path}")


def cmd_push(args: argparse.Namespace) -> None:
    """
    Upload the local plan to Azure Blob Storage.
    """
    try:
        pushed = sync_state_to_azure_blob(args.state_path)
    except (ImportError, ValueError) as e:
        raise SystemExit(f"[push] {e}")
    if not pushed:
        raise SystemExit(f"[push] No saved plan at {args.state_path}")
    print("[push] Done.")


# --- Main --------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    cfg = get_config()
    parser = argparse.ArgumentParser(
        description="PTO Balance CLI – project your PTO balance and plan days off."
    )
    parser.add_argument(
        "--state-path",
        default=str(cfg.state_path),
        help=f"Saved plan JSON (default: {cfg.state_path}).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # balance
    bal_p = subparsers.add_parser("balance", help="Projected balance on a day.")
    bal_p.add_argument("--date", type=_date_arg, help="Day to check (default: today).")
    bal_p.set_defaults(func=cmd_balance)

    # toggle
    tog_p = subparsers.add_parser("toggle", help="Select or unselect a day off.")
    tog_p.add_argument("date", type=_date_arg, help="Day to toggle (YYYY-MM-DD).")
    tog_p.set_defaults(func=cmd_toggle)

    # timeline
    tl_p = subparsers.add_parser("timeline", help="Segments and balance over the window.")
    tl_p.add_argument("--months", type=int, choices=(6, 12), help="Window size.")
    tl_p.add_argument("--json", action="store_true", help="Print the raw projection.")
    tl_p.set_defaults(func=cmd_timeline)

    # calendar
    cal_p = subparsers.add_parser("calendar", help="Month calendar with day flags.")
    cal_p.add_argument("year", type=int)
    cal_p.add_argument("month", type=int, choices=range(1, 13))
    cal_p.add_argument("--json", action="store_true", help="Print per-day flags as JSON.")
    cal_p.set_defaults(func=cmd_calendar)

    # plan
    plan_p = subparsers.add_parser("plan", help="Days planned and balance after each.")
    plan_p.set_defaults(func=cmd_plan)

    # holidays
    hol_p = subparsers.add_parser("holidays", help="Observed holidays for a year.")
    hol_p.add_argument("--year", type=int, help="Year (default: current year).")
    hol_p.set_defaults(func=cmd_holidays)

    # set-config
    set_p = subparsers.add_parser("set-config", help="Update the saved configuration.")
    set_p.add_argument("--starting-pto", help="Balance in hours on the as-of date.")
    set_p.add_argument("--start-date", help="As-of date (YYYY-MM-DD).")
    set_p.add_argument("--accrual-amount", help="Hours added per accrual.")
    set_p.add_argument("--cadence", help="Accrual cadence (only 'biweekly').")
    set_p.add_argument("--first-accrual-date", help="First accrual date (YYYY-MM-DD).")
    set_p.add_argument("--months", type=int, choices=(6, 12), help="Default window size.")
    set_p.set_defaults(func=cmd_set_config)

    # push
    push_p = subparsers.add_parser("push", help="Upload the plan to Azure Blob Storage.")
    push_p.set_defaults(func=cmd_push)

    return parser


def main(argv: list[str] | None = None) -> None:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except UnsupportedCadence as e:
        raise SystemExit(f"[{args.command}] {e}. Fix it with `set-config --cadence biweekly`.")


if __name__ == "__main__":
    main()
