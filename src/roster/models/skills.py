"""Skill requirement and match result models."""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .rules import MAX_SKILL_LEVEL, MIN_SKILL_LEVEL, NOT_RECOMMENDED, RECOMMENDATION_BANDS
from .shift import Shift, parse_date


@dataclass
class SkillRequirement:
    """A weighted preferred skill on a shift."""
    skill_name: str
    minimum_level: int = 1   # 1-5
    weight: float = 50.0     # 0-100
    is_mandatory: bool = False

    def __post_init__(self):
        self.minimum_level = min(MAX_SKILL_LEVEL, max(MIN_SKILL_LEVEL, int(self.minimum_level)))

    def to_dict(self) -> dict:
        return {
            "skill_name": self.skill_name,
            "minimum_level": self.minimum_level,
            "weight": self.weight,
            "is_mandatory": self.is_mandatory,
        }


@dataclass
class SkillWeight:
    """Caller-supplied weight override for a skill."""
    skill_name: str
    weight: float


@dataclass
class ShiftSkillRequirement:
    """Everything the matcher needs to know about one shift."""
    shift_id: str
    date: date
    start_time: str
    end_time: str
    room_id: str = ""
    room_name: str = ""
    required_qualifications: List[str] = field(default_factory=list)
    preferred_skills: List[SkillRequirement] = field(default_factory=list)

    def __post_init__(self):
        self.date = parse_date(self.date)

    @classmethod
    def from_shift(
        cls,
        shift: Shift,
        required_qualifications: Optional[List[str]] = None,
        preferred_skills: Optional[List[SkillRequirement]] = None,
        room_name: str = "",
    ) -> "ShiftSkillRequirement":
        """Build a requirement for an existing roster shift."""
        return cls(
            shift_id=shift.id,
            date=shift.date,
            start_time=shift.start_time,
            end_time=shift.end_time,
            room_id=shift.room_id,
            room_name=room_name,
            required_qualifications=list(required_qualifications or []),
            preferred_skills=list(preferred_skills or []),
        )


@dataclass
class SkillBreakdown:
    """Per-skill explanation of a match score."""
    skill_name: str
    staff_level: int
    required_level: int
    weight: float
    contribution: int


@dataclass
class SkillMatchResult:
    """Score of one candidate against one shift requirement."""
    staff_id: str
    staff_name: str
    match_score: int
    meets_mandatory: bool
    skill_breakdown: List[SkillBreakdown] = field(default_factory=list)

    @property
    def recommendation(self) -> str:
        if not self.meets_mandatory:
            return NOT_RECOMMENDED
        for lower_bound, label in RECOMMENDATION_BANDS:
            if self.match_score >= lower_bound:
                return label
        return NOT_RECOMMENDED

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "match_score": self.match_score,
            "meets_mandatory": self.meets_mandatory,
            "recommendation": self.recommendation,
            "skill_breakdown": [
                {
                    "skill_name": b.skill_name,
                    "staff_level": b.staff_level,
                    "required_level": b.required_level,
                    "weight": b.weight,
                    "contribution": b.contribution,
                }
                for b in self.skill_breakdown
            ],
        }


@dataclass
class Assignment:
    """An automatic staff-to-shift assignment."""
    shift_id: str
    staff_id: str
    match_score: int

    def __repr__(self):
        return f"Assignment({self.shift_id} ← {self.staff_id}, score={self.match_score})"
