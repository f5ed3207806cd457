"""
Assignment Optimizer (OR-Tools CP-SAT)
======================================
Global alternative to the greedy auto-match.

Uses the same eligibility rules as ``auto_match_all_shifts``:
- a candidate must meet all mandatory requirements and score >= threshold
- staff already rostered on an overlapping window that day are excluded
- each shift gets at most one staff member
- each staff member gets at most one shift per day

Objective: maximize the total match score of the assignments made.
Variables: x[shift][staff] = 1 if the staff member takes the shift.
"""
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

from ortools.sat.python import cp_model

from roster.matching.skills import SkillWeights, auto_match_all_shifts, rank_staff_for_shift
from roster.models.rules import AUTO_ASSIGN_THRESHOLD, MANDATORY_SCORE_CAP
from roster.models.shift import Shift
from roster.models.skills import Assignment, ShiftSkillRequirement
from roster.models.staff import StaffMember
from roster.utils.logging_setup import StepLogger, get_logger

logger = get_logger("roster.matching.optimizer")
slog = StepLogger("roster.matching.optimizer")


class OptimizerStatus(Enum):
    """Status of an optimizer run."""
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    EMPTY = "empty"          # No eligible (shift, staff) pair
    FALLBACK = "fallback"    # Solver failed, greedy result returned


@dataclass
class OptimizationResult:
    """Assignments plus solver metadata."""
    assignments: List[Assignment]
    status: OptimizerStatus
    solve_time_seconds: float = 0.0
    total_score: int = 0
    stats: Dict = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status in (OptimizerStatus.OPTIMAL, OptimizerStatus.FEASIBLE, OptimizerStatus.EMPTY)


def optimize_assignments(
    staff: Sequence[StaffMember],
    requirements: Iterable[ShiftSkillRequirement],
    skill_weights: SkillWeights = None,
    existing_shifts: Iterable[Shift] = (),
    threshold: int = AUTO_ASSIGN_THRESHOLD,
    mandatory_cap: int = MANDATORY_SCORE_CAP,
    time_limit_seconds: float = 10.0,
    num_workers: int = 1,
) -> OptimizationResult:
    """
    Assign staff to shifts maximizing the summed match score.

    Args:
        staff: Candidate pool
        requirements: Shifts to staff
        skill_weights: Optional per-skill weight overrides
        existing_shifts: Roster shifts used for overlap exclusion
        threshold: Minimum score for an assignment
        mandatory_cap: Score ceiling for mandatory failures
        time_limit_seconds: CP-SAT time limit
        num_workers: CP-SAT search workers

    Returns:
        OptimizationResult; assignments follow requirement input order
    """
    start_time = time.time()
    requirements = list(requirements)
    existing = list(existing_shifts)

    slog.phase("Building assignment model")
    eligible: Dict[Tuple[int, str], int] = {}
    for r_idx, req in enumerate(requirements):
        for result in rank_staff_for_shift(staff, req, skill_weights, existing, mandatory_cap):
            if result.meets_mandatory and result.match_score >= threshold:
                eligible[(r_idx, result.staff_id)] = result.match_score
    slog.detail("eligible pairs", len(eligible))

    if not eligible:
        logger.info("No eligible shift/staff pairs, nothing to assign")
        return OptimizationResult(assignments=[], status=OptimizerStatus.EMPTY,
                                  solve_time_seconds=time.time() - start_time)

    model = cp_model.CpModel()
    x = {key: model.NewBoolVar(f"x_{key[0]}_{key[1]}") for key in eligible}

    slog.step("Hard: one staff per shift")
    for r_idx in range(len(requirements)):
        shift_vars = [var for (ri, _), var in x.items() if ri == r_idx]
        if len(shift_vars) > 1:
            model.Add(sum(shift_vars) <= 1)

    slog.step("Hard: one shift per staff per day")
    per_staff_day: Dict[Tuple[str, object], List] = {}
    for (r_idx, staff_id), var in x.items():
        per_staff_day.setdefault((staff_id, requirements[r_idx].date), []).append(var)
    for day_vars in per_staff_day.values():
        if len(day_vars) > 1:
            model.Add(sum(day_vars) <= 1)

    model.Maximize(sum(score * x[key] for key, score in eligible.items()))

    slog.phase("Solving")
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = time_limit_seconds
    solver.parameters.num_search_workers = num_workers
    solver.parameters.log_search_progress = False

    status = solver.Solve(model)
    solve_time = time.time() - start_time

    status_name = {
        cp_model.OPTIMAL: "optimal",
        cp_model.FEASIBLE: "feasible",
        cp_model.INFEASIBLE: "infeasible",
        cp_model.MODEL_INVALID: "invalid",
        cp_model.UNKNOWN: "unknown",
    }.get(status, "unknown")
    logger.info(f"Solve complete: status={status_name}, time={solve_time:.2f}s")

    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        logger.warning(f"Optimizer returned {status_name}, falling back to greedy assignment")
        greedy = auto_match_all_shifts(staff, requirements, skill_weights, existing, threshold, mandatory_cap)
        return OptimizationResult(
            assignments=greedy,
            status=OptimizerStatus.FALLBACK,
            solve_time_seconds=solve_time,
            total_score=sum(a.match_score for a in greedy),
            stats={"solver_status": status_name},
        )

    slog.phase("Extracting solution")
    chosen = {r_idx: staff_id for (r_idx, staff_id), var in x.items() if solver.Value(var)}
    assignments = [
        Assignment(
            shift_id=requirements[r_idx].shift_id,
            staff_id=chosen[r_idx],
            match_score=eligible[(r_idx, chosen[r_idx])],
        )
        for r_idx in sorted(chosen)
    ]
    total = sum(a.match_score for a in assignments)
    slog.step(f"Assigned {len(assignments)} of {len(requirements)} shifts, total score {total}")

    return OptimizationResult(
        assignments=assignments,
        status=OptimizerStatus.OPTIMAL if status == cp_model.OPTIMAL else OptimizerStatus.FEASIBLE,
        solve_time_seconds=solve_time,
        total_score=total,
        stats={"eligible_pairs": len(eligible), "objective": solver.ObjectiveValue()},
    )
