"""
Recurrence Expansion
====================
Turns recurring shift patterns into concrete dated shifts.

Rules:
    - Every calendar day in [window_start, window_start + weeks) is considered
    - The day's weekday (0=Sunday) must be in the pattern's days_of_week
    - Days outside the pattern's own start/end dates are skipped
    - Fortnightly: the week offset from pattern.start_date must be a multiple
      of week_interval, so moving the window never changes which weeks are on
    - Monthly: day of month must equal month_day, or fall in the first week
      when no month_day is set
    - A day already holding a shift with the same start time is skipped,
      which makes re-running an expansion idempotent

Expansion is pure and never raises on malformed patterns.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from roster.models.pattern import GeneratedShift, RecurrenceKind, RecurringShiftPattern
from roster.models.shift import Shift, ShiftStatus, day_of_week, time_to_minutes
from roster.utils.logging_setup import StepLogger, get_logger, log_function_call

logger = get_logger("roster.patterns.expander")
slog = StepLogger("roster.patterns.expander")


@dataclass
class PatternGenerationSummary:
    """Per-pattern count shown to the user before committing."""
    pattern_id: str
    pattern_name: str
    count: int


@dataclass
class BulkGenerationResult:
    """Output of a bulk generation run."""
    shifts: List[GeneratedShift] = field(default_factory=list)
    summary: List[PatternGenerationSummary] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.shifts)

    @property
    def contributing_patterns(self) -> int:
        """Number of patterns that produced at least one shift."""
        return sum(1 for s in self.summary if s.count > 0)


def _slot_time(start_time: str) -> Union[int, str]:
    """Start time as minutes past midnight, so "7:00" and "07:00" collide."""
    try:
        return time_to_minutes(start_time)
    except ValueError:
        return str(start_time).strip()


def _occupied_slots(existing_shifts: Iterable) -> Set[Tuple[date, Union[int, str]]]:
    """(date, start time) pairs already materialized on the roster."""
    return {(s.date, _slot_time(s.start_time)) for s in existing_shifts}


def _recurs_on(pattern: RecurringShiftPattern, day: date) -> bool:
    if day_of_week(day) not in pattern.days_of_week:
        return False
    if day < pattern.start_date:
        return False
    if pattern.end_date and day > pattern.end_date:
        return False

    if pattern.recurrence == RecurrenceKind.FORTNIGHTLY:
        week_offset = (day - pattern.start_date).days // 7
        return week_offset % pattern.week_interval == 0

    if pattern.recurrence == RecurrenceKind.MONTHLY:
        if pattern.month_day:
            return day.day == pattern.month_day
        return day.day <= 7

    return True


@log_function_call
def expand(
    pattern: RecurringShiftPattern,
    window_start: date,
    weeks_to_generate: int,
    existing_shifts: Iterable = (),
) -> List[GeneratedShift]:
    """
    Expand one pattern over a window of whole weeks.

    Args:
        pattern: Pattern to expand
        window_start: First day of the window
        weeks_to_generate: Window length in weeks
        existing_shifts: Shifts already on the roster (anything with
            ``date`` and ``start_time``), used to skip collisions

    Returns:
        Generated shifts in date order
    """
    if pattern.start_date is None:
        logger.warning(f"Pattern {pattern.id}: no start_date, nothing to expand")
        return []
    if not pattern.days_of_week or weeks_to_generate <= 0:
        logger.debug(f"Pattern {pattern.id}: nothing to expand (days={sorted(pattern.days_of_week)}, weeks={weeks_to_generate})")
        return []
    if pattern.recurrence == RecurrenceKind.FORTNIGHTLY and (pattern.week_interval or 0) < 1:
        logger.warning(f"Pattern {pattern.id}: invalid week_interval={pattern.week_interval}")
        return []

    occupied = _occupied_slots(existing_shifts)
    template = pattern.shift_template
    slot = _slot_time(template.start_time)
    generated: List[GeneratedShift] = []

    for offset in range(weeks_to_generate * 7):
        day = window_start + timedelta(days=offset)
        if not _recurs_on(pattern, day):
            continue
        if (day, slot) in occupied:
            logger.debug(f"Pattern {pattern.id}: {day} {template.start_time} already rostered, skipping")
            continue

        generated.append(GeneratedShift(
            date=day,
            start_time=template.start_time,
            end_time=template.end_time,
            pattern_id=pattern.id,
            centre_id=template.centre_id,
            staff_id=pattern.assigned_staff_id,
            break_minutes=template.break_minutes,
            role_id=template.role_id,
        ))

    logger.debug(f"Pattern {pattern.id}: {len(generated)} occurrences from {window_start} over {weeks_to_generate} weeks")
    return generated


def generate_bulk_shifts_from_patterns(
    patterns: Iterable[RecurringShiftPattern],
    window_start: date,
    weeks_to_generate: int,
    existing_shifts: Iterable = (),
    default_room_id: Optional[str] = None,
) -> BulkGenerationResult:
    """
    Expand every active pattern and collect a per-pattern summary.

    Each pattern is deduplicated against ``existing_shifts`` only, so two
    patterns rostering different people at the same time both generate.

    Args:
        patterns: Candidate patterns; inactive ones are ignored
        window_start: First day of the window
        weeks_to_generate: Window length in weeks
        existing_shifts: Shifts already on the roster
        default_room_id: Room stamped on every generated shift

    Returns:
        BulkGenerationResult with concatenated shifts and counts
    """
    existing = list(existing_shifts)
    active = [p for p in patterns if p.is_active]
    slog.phase("Bulk generation")
    slog.step(f"{len(active)} active patterns, {weeks_to_generate} weeks from {window_start}")

    result = BulkGenerationResult()
    for pattern in active:
        shifts = expand(pattern, window_start, weeks_to_generate, existing)
        if default_room_id:
            for s in shifts:
                s.room_id = default_room_id
        result.shifts.extend(shifts)
        result.summary.append(PatternGenerationSummary(
            pattern_id=pattern.id,
            pattern_name=pattern.name,
            count=len(shifts),
        ))
        slog.detail(pattern.name or pattern.id, len(shifts))

    slog.step(f"Generated {result.total} shifts from {result.contributing_patterns} patterns")
    return result


def to_roster_shifts(
    generated: Iterable[GeneratedShift],
    default_room_id: str = "",
) -> List[Shift]:
    """
    Convert generated occurrences into draft roster shifts.

    Ids are derived from pattern, date and start time so the same
    occurrence always maps to the same shift id.
    """
    shifts = []
    for g in generated:
        shifts.append(Shift(
            id=f"{g.pattern_id}-{g.date.isoformat()}-{g.start_time.replace(':', '')}",
            date=g.date,
            start_time=g.start_time,
            end_time=g.end_time,
            staff_id=g.staff_id,
            centre_id=g.centre_id,
            room_id=g.room_id or default_room_id,
            break_minutes=g.break_minutes,
            status=ShiftStatus.DRAFT,
            is_open_shift=g.is_open_shift,
            pattern_id=g.pattern_id,
        ))
    return shifts


def count_by_date(shifts: Iterable[GeneratedShift]) -> Dict[date, int]:
    """Number of generated shifts per day, for previews."""
    counts: Dict[date, int] = {}
    for s in shifts:
        counts[s.date] = counts.get(s.date, 0) + 1
    return dict(sorted(counts.items()))
