# roster/models - Data models for the roster core
from .config import RosterConfig, load_config
from .pattern import GeneratedShift, RecurrenceKind, RecurringShiftPattern, ShiftTemplate
from .shift import Shift, ShiftStatus, day_of_week, shifts_from_data, shifts_to_data, time_to_minutes
from .skills import (
    Assignment,
    ShiftSkillRequirement,
    SkillBreakdown,
    SkillMatchResult,
    SkillRequirement,
    SkillWeight,
)
from .staff import Qualification, StaffMember

__all__ = [
    "RosterConfig", "load_config",
    "RecurringShiftPattern", "RecurrenceKind", "ShiftTemplate", "GeneratedShift",
    "Shift", "ShiftStatus", "day_of_week", "time_to_minutes", "shifts_to_data", "shifts_from_data",
    "StaffMember", "Qualification",
    "ShiftSkillRequirement", "SkillRequirement", "SkillWeight",
    "SkillMatchResult", "SkillBreakdown", "Assignment",
]
