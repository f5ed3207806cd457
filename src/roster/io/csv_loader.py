"""CSV loading and saving for patterns, staff and roster shifts."""
from pathlib import Path
from typing import Iterable, List, Union

import pandas as pd

from roster.models.pattern import RecurringShiftPattern, ShiftTemplate
from roster.models.shift import Shift, ShiftStatus
from roster.models.skills import SkillMatchResult
from roster.models.staff import Qualification, StaffMember
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.io.csv_loader")

PATTERN_COLUMNS = [
    "id", "name", "description", "recurrence", "start_date", "end_date",
    "days_of_week", "week_interval", "month_day", "start_time", "end_time",
    "role_id", "role_name", "centre_id", "required_qualifications",
    "break_minutes", "assigned_staff_id", "assigned_staff_name", "is_active",
]

SHIFT_COLUMNS = [
    "id", "date", "start_time", "end_time", "staff_id", "centre_id", "room_id",
    "break_minutes", "status", "is_open_shift", "pattern_id", "notes",
]

LIST_SEPARATOR = ";"


def _safe_int(value, default: int = 0) -> int:
    """Safely convert value to int."""
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def _safe_bool(value, default: bool = False) -> bool:
    """Safely convert value to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        if not value.strip():
            return default
        return value.strip().lower() in ("1", "true", "yes", "y")
    return default


def _split_list(value) -> List[str]:
    """Split a "a;b;c" cell into stripped, non-empty items."""
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def _read(source: Union[str, Path, pd.DataFrame], required: Iterable[str], what: str) -> pd.DataFrame:
    if isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        df = pd.read_csv(source, dtype=str)

    df = df.fillna("")

    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"{what} CSV must have columns: {', '.join(missing)}")
    return df


def load_patterns(source: Union[str, Path, pd.DataFrame]) -> List[RecurringShiftPattern]:
    """
    Load recurring patterns from CSV file or DataFrame.

    ``days_of_week`` and ``required_qualifications`` are semicolon-separated
    (days as 0=Sunday ... 6=Saturday). Rows without a name are skipped.

    Args:
        source: Path to CSV file or pandas DataFrame

    Returns:
        List of RecurringShiftPattern objects
    """
    df = _read(source, ["name", "start_date", "days_of_week"], "Patterns")

    patterns = []
    for idx, row in df.iterrows():
        name = str(row["name"]).strip()
        if not name:
            continue

        days = [_safe_int(d, -1) for d in _split_list(row["days_of_week"])]
        month_day = _safe_int(row.get("month_day"), 0)

        template = ShiftTemplate(
            start_time=str(row.get("start_time", "")).strip() or "09:00",
            end_time=str(row.get("end_time", "")).strip() or "17:00",
            role_id=str(row.get("role_id", "")).strip(),
            role_name=str(row.get("role_name", "")).strip(),
            centre_id=str(row.get("centre_id", "")).strip(),
            required_qualifications=[q.lower() for q in _split_list(row.get("required_qualifications", ""))],
            break_minutes=_safe_int(row.get("break_minutes"), 30),
        )

        pattern = RecurringShiftPattern(
            id=str(row.get("id", "")).strip() or f"pattern-{idx + 1}",
            name=name,
            description=str(row.get("description", "")).strip(),
            recurrence=str(row.get("recurrence", "")).strip() or "weekly",
            start_date=str(row["start_date"]).strip(),
            end_date=str(row.get("end_date", "")).strip() or None,
            days_of_week=set(days),
            week_interval=max(1, _safe_int(row.get("week_interval"), 2)),
            month_day=month_day if 1 <= month_day <= 31 else None,
            shift_template=template,
            assigned_staff_id=str(row.get("assigned_staff_id", "")).strip() or None,
            assigned_staff_name=str(row.get("assigned_staff_name", "")).strip() or None,
            is_active=_safe_bool(row.get("is_active", ""), True),
        )
        patterns.append(pattern)

    logger.info(f"Loaded {len(patterns)} patterns")
    return patterns


def save_patterns(patterns: List[RecurringShiftPattern], path: Union[str, Path]) -> None:
    """
    Save patterns to CSV file.

    Args:
        patterns: List of RecurringShiftPattern objects
        path: Output path
    """
    rows = []
    for p in patterns:
        t = p.shift_template
        rows.append({
            "id": p.id,
            "name": p.name,
            "description": p.description,
            "recurrence": p.recurrence.value,
            "start_date": p.start_date.isoformat(),
            "end_date": p.end_date.isoformat() if p.end_date else "",
            "days_of_week": LIST_SEPARATOR.join(str(d) for d in sorted(p.days_of_week)),
            "week_interval": p.week_interval,
            "month_day": p.month_day or "",
            "start_time": t.start_time,
            "end_time": t.end_time,
            "role_id": t.role_id,
            "role_name": t.role_name,
            "centre_id": t.centre_id,
            "required_qualifications": LIST_SEPARATOR.join(t.required_qualifications),
            "break_minutes": t.break_minutes,
            "assigned_staff_id": p.assigned_staff_id or "",
            "assigned_staff_name": p.assigned_staff_name or "",
            "is_active": int(p.is_active),
        })

    df = pd.DataFrame(rows, columns=PATTERN_COLUMNS)
    df.to_csv(path, index=False)


def load_staff(source: Union[str, Path, pd.DataFrame]) -> List[StaffMember]:
    """
    Load staff from CSV file or DataFrame.

    Expected columns: id, name, role, qualifications (semicolon-separated
    qualification types such as ``diploma_ece;first_aid``).
    """
    df = _read(source, ["id", "name"], "Staff")

    staff = []
    for _, row in df.iterrows():
        staff_id = str(row["id"]).strip()
        name = str(row["name"]).strip()
        if not staff_id or not name:
            continue
        staff.append(StaffMember(
            id=staff_id,
            name=name,
            role=str(row.get("role", "")).strip() or "educator",
            qualifications=[Qualification(type=q) for q in _split_list(row.get("qualifications", ""))],
        ))

    logger.info(f"Loaded {len(staff)} staff members")
    return staff


def load_shifts(source: Union[str, Path, pd.DataFrame]) -> List[Shift]:
    """Load roster shifts from CSV file or DataFrame."""
    df = _read(source, ["id", "date", "start_time", "end_time"], "Shifts")

    shifts = []
    for _, row in df.iterrows():
        shift_id = str(row["id"]).strip()
        if not shift_id:
            continue
        if not str(row["date"]).strip():
            logger.warning(f"Shift {shift_id}: no date, skipping row")
            continue
        status =str(row.get("status", "")).strip().lower()
        staff_id = str(row.get("staff_id", "")).strip() or None
        shifts.append(Shift(
            id=shift_id,
            date=str(row["date"]).strip(),
            start_time=str(row["start_time"]).strip(),
            end_time=str(row["end_time"]).strip(),
            staff_id=staff_id,
            centre_id=str(row.get("centre_id", "")).strip(),
            room_id=str(row.get("room_id", "")).strip(),
            break_minutes=_safe_int(row.get("break_minutes"), 0),
            status=status if status in {s.value for s in ShiftStatus} else ShiftStatus.DRAFT,
            is_open_shift=_safe_bool(row.get("is_open_shift", ""), staff_id is None),
            pattern_id=str(row.get("pattern_id", "")).strip() or None,
            notes=str(row.get("notes", "")).strip(),
        ))

    logger.info(f"Loaded {len(shifts)} shifts")
    return shifts


def save_shifts(shifts: List[Shift], path: Union[str, Path]) -> None:
    """Save roster shifts to CSV file."""
    df = shifts_to_dataframe(shifts)
    if "is_open_shift" in df.columns:
        df["is_open_shift"] = df["is_open_shift"].astype(int)
    df.to_csv(path, index=False)


def shifts_to_dataframe(shifts: List[Shift]) -> pd.DataFrame:
    """Convert a shift list to DataFrame for display or export."""
    if not shifts:
        return pd.DataFrame(columns=SHIFT_COLUMNS)
    return pd.DataFrame([s.to_dict() for s in shifts], columns=SHIFT_COLUMNS)


def match_results_to_dataframe(results: List[SkillMatchResult]) -> pd.DataFrame:
    """
    Flatten ranked match results into one row per (candidate, skill).

    Candidates with no preferred skills still get one row with empty skill
    columns, so every ranked candidate appears in the table.
    """
    rows = []
    for rank, result in enumerate(results, start=1):
        base = {
            "rank": rank,
            "staff_id": result.staff_id,
            "staff_name": result.staff_name,
            "match_score": result.match_score,
            "meets_mandatory": result.meets_mandatory,
            "recommendation": result.recommendation,
        }
        if not result.skill_breakdown:
            rows.append({**base, "skill_name": "", "staff_level": None,
                         "required_level": None, "weight": None, "contribution": None})
            continue
        for b in result.skill_breakdown:
            rows.append({
                **base,
                "skill_name": b.skill_name,
                "staff_level": b.staff_level,
                "required_level": b.required_level,
                "weight": b.weight,
                "contribution": b.contribution,
            })
    return pd.DataFrame(rows)
