"""Recurring shift pattern definitions and generated occurrences."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Set

from .rules import DAY_LABELS, WEEKDAY_NUMBERS, WEEKEND_NUMBERS
from .shift import parse_date


class RecurrenceKind(str, Enum):
    """How often a pattern repeats."""
    DAILY = "daily"
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"


@dataclass
class ShiftTemplate:
    """Shift details stamped onto every occurrence of a pattern."""
    start_time: str = "09:00"
    end_time: str = "17:00"
    role_id: str = ""
    role_name: str = ""
    centre_id: str = ""
    required_qualifications: List[str] = field(default_factory=list)
    break_minutes: int = 30

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "role_id": self.role_id,
            "role_name": self.role_name,
            "centre_id": self.centre_id,
            "required_qualifications": list(self.required_qualifications),
            "break_minutes": self.break_minutes,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ShiftTemplate":
        return cls(
            start_time=str(d.get("start_time", "09:00")),
            end_time=str(d.get("end_time", "17:00")),
            role_id=str(d.get("role_id", "") or ""),
            role_name=str(d.get("role_name", "") or ""),
            centre_id=str(d.get("centre_id", "") or ""),
            required_qualifications=list(d.get("required_qualifications") or []),
            break_minutes=int(d.get("break_minutes", 30) or 0),
        )


@dataclass
class RecurringShiftPattern:
    """A repeating shift definition owned by a scheduler user."""

    id: str
    name: str
    start_date: date
    recurrence: RecurrenceKind = RecurrenceKind.WEEKLY
    days_of_week: Set[int] = field(default_factory=set)  # 0=Sunday ... 6=Saturday
    shift_template: ShiftTemplate = field(default_factory=ShiftTemplate)
    end_date: Optional[date] = None
    week_interval: int = 2  # Fortnightly anchor, counted from start_date
    month_day: Optional[int] = None  # Monthly: fixed day of month
    description: str = ""
    assigned_staff_id: Optional[str] = None
    assigned_staff_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    created_by: str = ""

    def __post_init__(self):
        self.name = str(self.name).strip()
        self.start_date = parse_date(self.start_date)
        self.end_date = parse_date(self.end_date)
        if isinstance(self.recurrence, str):
            self.recurrence = RecurrenceKind(self.recurrence.strip().lower())
        self.days_of_week = {int(d) for d in (self.days_of_week or ()) if 0 <= int(d) <= 6}
        if not self.assigned_staff_id:
            self.assigned_staff_id = None

    @property
    def days_label(self) -> str:
        """Short human label for the selected days."""
        days = sorted(self.days_of_week)
        if not days:
            return "No days"
        if len(days) == 7:
            return "Every day"
        if days == WEEKDAY_NUMBERS:
            return "Weekdays"
        if days == WEEKEND_NUMBERS:
            return "Weekends"
        return ", ".join(DAY_LABELS[d] for d in days)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "recurrence": self.recurrence.value,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "days_of_week": sorted(self.days_of_week),
            "week_interval": self.week_interval,
            "month_day": self.month_day,
            "shift_template": self.shift_template.to_dict(),
            "assigned_staff_id": self.assigned_staff_id,
            "assigned_staff_name": self.assigned_staff_name,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RecurringShiftPattern":
        """Create from dictionary."""
        created_at = d.get("created_at")
        return cls(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            description=str(d.get("description", "") or ""),
            recurrence=d.get("recurrence") or RecurrenceKind.WEEKLY,
            start_date=d.get("start_date"),
            end_date=d.get("end_date"),
            days_of_week=set(d.get("days_of_week") or ()),
            week_interval=int(d.get("week_interval") or 2),
            month_day=int(d["month_day"]) if d.get("month_day") else None,
            shift_template=ShiftTemplate.from_dict(d.get("shift_template") or {}),
            assigned_staff_id=d.get("assigned_staff_id") or None,
            assigned_staff_name=d.get("assigned_staff_name") or None,
            is_active=bool(d.get("is_active", True)),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            created_by=str(d.get("created_by", "") or ""),
        )


@dataclass
class GeneratedShift:
    """One concrete occurrence produced by expanding a pattern."""
    date: date
    start_time: str
    end_time: str
    pattern_id: str
    centre_id: str = ""
    room_id: Optional[str] = None
    staff_id: Optional[str] = None
    break_minutes: int = 0
    role_id: str = ""
    status: str = "pending"

    @property
    def is_open_shift(self) -> bool:
        """Unassigned occurrences are offered as open shifts."""
        return not self.staff_id

    def __repr__(self):
        who = self.staff_id or "OPEN"
        return f"GeneratedShift({self.date} {self.start_time}-{self.end_time} {who} <{self.pattern_id}>)"
