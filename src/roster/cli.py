from __future__ import annotations

import argparse
import json
from datetime import date
from typing import Any, Dict, List

from roster.io.csv_loader import load_patterns, load_shifts, load_staff, save_shifts
from roster.matching.optimizer import optimize_assignments
from roster.matching.skills import apply_assignments, auto_match_all_shifts, summarize_auto_match
from roster.models.config import RosterConfig, load_config
from roster.models.shift import Shift
from roster.models.skills import ShiftSkillRequirement
from roster.patterns.expander import count_by_date, generate_bulk_shifts_from_patterns, to_roster_shifts
from roster.patterns.store import PatternStore
from roster.utils.logging_setup import setup_logging


def _build_cfg(args: argparse.Namespace) -> RosterConfig:
    cfg = load_config(args.config) if args.config else RosterConfig()
    if args.weeks is not None:
        cfg.weeks_to_generate = max(0, int(args.weeks))
    if args.room:
        cfg.default_room_id = args.room
    if args.optimize:
        cfg.use_optimizer = True
    return cfg


def _requirements_for(shifts: List[Shift], store: PatternStore) -> List[ShiftSkillRequirement]:
    """Open shifts become requirements carrying their pattern's qualifications."""
    requirements = []
    for shift in shifts:
        if not shift.is_open_shift:
            continue
        pattern = store.get(shift.pattern_id) if shift.pattern_id else None
        quals = pattern.shift_template.required_qualifications if pattern else []
        requirements.append(ShiftSkillRequirement.from_shift(shift, required_qualifications=quals))
    return requirements


def run(args: argparse.Namespace, cfg: RosterConfig | None = None) -> Dict[str, Any]:
    cfg = cfg or _build_cfg(args)
    store = PatternStore(load_patterns(args.patterns))
    existing = load_shifts(args.shifts) if args.shifts else []
    start = date.fromisoformat(args.start) if args.start else date.today()

    result = generate_bulk_shifts_from_patterns(
        store.active(), start, cfg.weeks_to_generate, existing, cfg.default_room_id
    )
    shifts = to_roster_shifts(result.shifts, cfg.default_room_id)

    summary: Dict[str, Any] = {
        "window_start": start.isoformat(),
        "weeks": cfg.weeks_to_generate,
        "generated": result.total,
        "patterns": {s.pattern_name or s.pattern_id: s.count for s in result.summary},
        "per_day": {d.isoformat(): n for d, n in count_by_date(result.shifts).items()},
    }

    if args.staff and args.auto_assign:
        staff = load_staff(args.staff)
        requirements = _requirements_for(shifts, store)
        busy = existing + [s for s in shifts if not s.is_open_shift]
        if cfg.use_optimizer:
            opt = optimize_assignments(
                staff, requirements,
                existing_shifts=busy,
                threshold=cfg.auto_assign_threshold,
                mandatory_cap=cfg.mandatory_score_cap,
                time_limit_seconds=cfg.optimizer_time_limit_seconds,
            )
            assignments = opt.assignments
            summary["optimizer_status"] = opt.status.value
        else:
            assignments = auto_match_all_shifts(
                staff, requirements,
                existing_shifts=busy,
                threshold=cfg.auto_assign_threshold,
                mandatory_cap=cfg.mandatory_score_cap,
            )
        shifts = apply_assignments(shifts, assignments)
        summary["auto_assign"] = summarize_auto_match(requirements, assignments)

    if args.output:
        save_shifts(shifts, args.output)
        summary["output"] = str(args.output)

    return summary


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Roster core CLI: expand recurring patterns and auto-assign staff")
    p.add_argument("--patterns", required=True, help="Path to the recurring patterns CSV")
    p.add_argument("--start", default=None, help="First day of the window, YYYY-MM-DD (default: today)")
    p.add_argument("--weeks", type=int, default=None, help="Window length in weeks (default: from config, 4)")
    p.add_argument("--shifts", default=None, help="Existing roster shifts CSV, used for de-duplication")
    p.add_argument("--staff", default=None, help="Staff CSV for auto-assignment")
    p.add_argument("--auto-assign", dest="auto_assign", action="store_true", help="Auto-assign staff to open shifts")
    p.add_argument("--optimize", action="store_true", help="Use the CP-SAT optimizer instead of greedy matching")
    p.add_argument("--room", default=None, help="Room id stamped on generated shifts")
    p.add_argument("--config", default=None, help="JSON configuration file")
    p.add_argument("--output", default=None, help="Write resulting shifts to this CSV")
    p.add_argument("--log-file", dest="log_file", default=None, help="Rotating log file (default: log_file from config, else none)")
    p.add_argument("-v", "--verbose", action="count", default=0)
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output (summary)")
    args = p.parse_args(argv)

    cfg = _build_cfg(args)
    console_level = {0: "WARNING", 1: "INFO"}.get(args.verbose, "DEBUG")
    setup_logging(level=cfg.log_level, log_file=args.log_file or cfg.log_file or None, console_level=console_level)

    summary = run(args, cfg)

    if args.json_out:
        print(json.dumps({"summary": summary}, ensure_ascii=False, indent=2))
    else:
        print("Summary:")
        print(f" - window: {summary['window_start']} + {summary['weeks']} weeks")
        print(f" - generated: {summary['generated']} shifts")
        for name, count in summary["patterns"].items():
            print(f"   · {name}: {count}")
        if "auto_assign" in summary:
            aa = summary["auto_assign"]
            print(f" - auto-assigned: {aa['assigned']} of {aa['total']}")
            if aa["unassigned"]:
                print(f"   could not auto-assign {aa['unassigned']} shifts")
        if "output" in summary:
            print(f" - written: {summary['output']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
