"""
Skill Matching
==============
Scores staff against a shift's skill requirements, ranks candidates and
greedily auto-assigns staff across a batch of shifts.

Scoring per preferred skill (levels 1-5):
    staff >= required : min(100, 70 + (staff - required) * 10)
    0 < staff < req   : (staff / required) * 50
    staff == 0        : 0

The match score is the weight-averaged contribution (50 when no weighted
skills are requested). A candidate failing a mandatory qualification or
mandatory skill is capped at 40, below the auto-assign threshold.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Union

from roster.models.rules import (
    AUTO_ASSIGN_THRESHOLD,
    EXCEED_LEVEL_BONUS,
    FIRST_AID_FLOOR,
    FIRST_AID_SKILL,
    MANDATORY_SCORE_CAP,
    MEETS_LEVEL_BASE,
    NEUTRAL_SCORE,
    PARTIAL_CREDIT_MAX,
    QUALIFICATION_SKILLS,
    ROLE_COMPETENCIES,
)
from roster.models.shift import Shift, windows_overlap
from roster.models.skills import (
    Assignment,
    ShiftSkillRequirement,
    SkillBreakdown,
    SkillMatchResult,
    SkillWeight,
)
from roster.models.staff import StaffMember
from roster.utils.logging_setup import StepLogger, get_logger, log_check, log_function_call

logger = get_logger("roster.matching.skills")
slog = StepLogger("roster.matching.skills")

SkillWeights = Union[Sequence[SkillWeight], Mapping[str, float], None]


def _round_half_up(value: float) -> int:
    # Scores are non-negative; round() would round half to even
    return int(value + 0.5)


def _weight_overrides(skill_weights: SkillWeights) -> Dict[str, float]:
    if not skill_weights:
        return {}
    if isinstance(skill_weights, Mapping):
        return dict(skill_weights)
    return {sw.skill_name: sw.weight for sw in skill_weights}


def get_staff_skill_levels(staff: StaffMember) -> Dict[str, int]:
    """
    Derive a staff member's skill levels.

    Qualifications grant skills at fixed levels (highest wins on overlap),
    roles add base competencies, and everyone gets basic First Aid.
    """
    levels: Dict[str, int] = {}

    for qual in staff.qualifications:
        for skill_name, level in QUALIFICATION_SKILLS.get(qual.type, []):
            levels[skill_name] = max(levels.get(skill_name, 0), level)

    for skill_name, level, overrides in ROLE_COMPETENCIES.get(staff.role, []):
        if overrides:
            levels[skill_name] = level
        else:
            levels[skill_name] = max(levels.get(skill_name, 0), level)

    if not levels.get(FIRST_AID_SKILL):
        levels[FIRST_AID_SKILL] = FIRST_AID_FLOOR

    return levels


def skill_contribution(staff_level: int, required_level: int) -> float:
    """Contribution (0-100) of one skill before weighting."""
    if staff_level >= required_level:
        return min(100, MEETS_LEVEL_BASE + (staff_level - required_level) * EXCEED_LEVEL_BONUS)
    if staff_level > 0:
        return (staff_level / required_level) * PARTIAL_CREDIT_MAX
    return 0


def calculate_match_score(
    staff: StaffMember,
    requirement: ShiftSkillRequirement,
    skill_weights: SkillWeights = None,
    mandatory_cap: int = MANDATORY_SCORE_CAP,
) -> SkillMatchResult:
    """
    Score one candidate against one shift requirement.

    Args:
        staff: Candidate
        requirement: Shift requirement
        skill_weights: Optional per-skill weight overrides; a missing or
            zero override falls back to the requirement's own weight
        mandatory_cap: Ceiling applied when a mandatory check fails

    Returns:
        SkillMatchResult with a per-skill breakdown
    """
    staff_skills = get_staff_skill_levels(staff)
    overrides = _weight_overrides(skill_weights)

    held = staff.qualification_types
    missing_quals = [q for q in requirement.required_qualifications if q not in held]
    meets_mandatory = not missing_quals
    if missing_quals:
        log_check(logger, f"{staff.id} qualifications for {requirement.shift_id}", False,
                  f"missing {missing_quals}", failure_level=logging.DEBUG)

    breakdown: List[SkillBreakdown] = []
    total_weight = 0.0
    weighted_sum = 0.0

    for req in requirement.preferred_skills:
        staff_level = staff_skills.get(req.skill_name, 0)
        weight = overrides.get(req.skill_name) or req.weight

        if req.is_mandatory and staff_level < req.minimum_level:
            meets_mandatory = False
            log_check(logger, f"{staff.id} mandatory {req.skill_name}", False,
                      f"level {staff_level} < {req.minimum_level}", failure_level=logging.DEBUG)

        contribution = skill_contribution(staff_level, req.minimum_level)
        total_weight += weight
        weighted_sum += contribution * weight

        breakdown.append(SkillBreakdown(
            skill_name=req.skill_name,
            staff_level=staff_level,
            required_level=req.minimum_level,
            weight=weight,
            contribution=_round_half_up(contribution),
        ))

    score = _round_half_up(weighted_sum / total_weight) if total_weight > 0 else NEUTRAL_SCORE
    if not meets_mandatory:
        score = min(score, mandatory_cap)

    return SkillMatchResult(
        staff_id=staff.id,
        staff_name=staff.name,
        match_score=score,
        meets_mandatory=meets_mandatory,
        skill_breakdown=breakdown,
    )


def _is_booked(staff_id: str, requirement: ShiftSkillRequirement, existing_shifts: Iterable[Shift]) -> bool:
    for shift in existing_shifts:
        if (
            shift.staff_id == staff_id
            and shift.date == requirement.date
            and windows_overlap(shift.start_time, shift.end_time, requirement.start_time, requirement.end_time)
        ):
            return True
    return False


def rank_staff_for_shift(
    staff: Iterable[StaffMember],
    requirement: ShiftSkillRequirement,
    skill_weights: SkillWeights = None,
    existing_shifts: Iterable[Shift] = (),
    mandatory_cap: int = MANDATORY_SCORE_CAP,
) -> List[SkillMatchResult]:
    """
    Rank available candidates for a shift.

    Staff already rostered on an overlapping window that day are excluded.
    Candidates meeting mandatory requirements always come first, then
    higher scores; ties keep input order.
    """
    existing = list(existing_shifts)
    available = [s for s in staff if not _is_booked(s.id, requirement, existing)]

    results = [calculate_match_score(s, requirement, skill_weights, mandatory_cap) for s in available]
    results.sort(key=lambda r: (not r.meets_mandatory, -r.match_score))
    return results


@log_function_call
def auto_match_all_shifts(
    staff: Sequence[StaffMember],
    requirements: Iterable[ShiftSkillRequirement],
    skill_weights: SkillWeights = None,
    existing_shifts: Iterable[Shift] = (),
    threshold: int = AUTO_ASSIGN_THRESHOLD,
    mandatory_cap: int = MANDATORY_SCORE_CAP,
) -> List[Assignment]:
    """
    Greedily assign staff to shifts in input order.

    A staff member assigned during this run is not offered again on the
    same day. A shift is only assigned when its best candidate meets all
    mandatory requirements and scores at least ``threshold``; otherwise it
    stays open. No backtracking.

    Returns:
        Assignments for the shifts that could be staffed
    """
    existing = list(existing_shifts)
    assigned_per_day: Dict[object, Set[str]] = defaultdict(set)
    assignments: List[Assignment] = []
    requirements = list(requirements)

    slog.phase("Auto-match")
    slog.step(f"{len(requirements)} shifts, {len(staff)} staff, threshold={threshold}")

    for req in requirements:
        taken = assigned_per_day[req.date]
        pool = [s for s in staff if s.id not in taken]
        ranked = rank_staff_for_shift(pool, req, skill_weights, existing, mandatory_cap)

        top = next((r for r in ranked if r.meets_mandatory and r.match_score >= threshold), None)
        if top is None:
            slog.check(f"staff {req.shift_id}", False, f"{len(ranked)} candidates, none qualified")
            continue

        assignments.append(Assignment(shift_id=req.shift_id, staff_id=top.staff_id, match_score=top.match_score))
        taken.add(top.staff_id)
        slog.detail(req.shift_id, f"{top.staff_id} ({top.match_score})")

    slog.step(f"Assigned {len(assignments)} of {len(requirements)} shifts")
    return assignments


def summarize_auto_match(
    requirements: Iterable[ShiftSkillRequirement],
    assignments: Iterable[Assignment],
) -> Dict[str, object]:
    """Counts for a "could not auto-assign N of M shifts" message."""
    requirement_ids = [r.shift_id for r in requirements]
    assigned_ids = {a.shift_id for a in assignments}
    unassigned = [sid for sid in requirement_ids if sid not in assigned_ids]
    return {
        "total": len(requirement_ids),
        "assigned": len(requirement_ids) - len(unassigned),
        "unassigned": len(unassigned),
        "unassigned_shift_ids": unassigned,
    }


def apply_assignments(shifts: Iterable[Shift], assignments: Iterable[Assignment]) -> List[Shift]:
    """
    Return a new shift list with assignments applied.

    Input shifts are not modified, so the result can be committed to
    history as a single entry.
    """
    by_shift = {a.shift_id: a.staff_id for a in assignments}
    result = []
    for shift in shifts:
        staff_id = by_shift.get(shift.id)
        if staff_id is None:
            result.append(Shift.from_dict(shift.to_dict()))
            continue
        updated = Shift.from_dict(shift.to_dict())
        updated.staff_id = staff_id
        updated.is_open_shift = False
        result.append(updated)
    return result
