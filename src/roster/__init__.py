"""Roster core: recurring shift patterns, skill-based matching and undo/redo history."""
from roster.history import HistoryManager, roster_history
from roster.matching import auto_match_all_shifts, calculate_match_score, rank_staff_for_shift
from roster.models import RecurringShiftPattern, RosterConfig, Shift, StaffMember
from roster.patterns import PatternStore, expand, generate_bulk_shifts_from_patterns

__version__ = "0.1.0"

__all__ = [
    "PatternStore",
    "expand",
    "generate_bulk_shifts_from_patterns",
    "calculate_match_score",
    "rank_staff_for_shift",
    "auto_match_all_shifts",
    "HistoryManager",
    "roster_history",
    "RecurringShiftPattern",
    "Shift",
    "StaffMember",
    "RosterConfig",
]
