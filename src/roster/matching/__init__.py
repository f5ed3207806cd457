# roster/matching - Skill-based ranking and staff auto-assignment
from .optimizer import OptimizationResult, OptimizerStatus, optimize_assignments
from .skills import (
    apply_assignments,
    auto_match_all_shifts,
    calculate_match_score,
    get_staff_skill_levels,
    rank_staff_for_shift,
    skill_contribution,
    summarize_auto_match,
)

__all__ = [
    "get_staff_skill_levels",
    "skill_contribution",
    "calculate_match_score",
    "rank_staff_for_shift",
    "auto_match_all_shifts",
    "summarize_auto_match",
    "apply_assignments",
    "optimize_assignments",
    "OptimizationResult",
    "OptimizerStatus",
]
