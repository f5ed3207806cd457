"""Roster shift record and date/time helpers."""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Union


class ShiftStatus(str, Enum):
    """Lifecycle of a roster shift."""
    DRAFT = "draft"
    PUBLISHED = "published"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hours, _, minutes = str(value).strip().partition(":")
    return int(hours) * 60 + int(minutes or 0)


def windows_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """True if two same-day time windows intersect (touching ends do not)."""
    s1, e1 = time_to_minutes(a_start), time_to_minutes(a_end)
    s2, e2 = time_to_minutes(b_start), time_to_minutes(b_end)
    return s1 < e2 and s2 < e1


def day_of_week(d: date) -> int:
    """Day number with 0=Sunday ... 6=Saturday."""
    return (d.weekday() + 1) % 7


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse an ISO date string, passing dates and None through."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


@dataclass
class Shift:
    """A single roster shift as held by the roster store."""
    id: str
    date: date
    start_time: str
    end_time: str
    staff_id: Optional[str] = None
    centre_id: str = ""
    room_id: str = ""
    break_minutes: int = 0
    status: ShiftStatus = ShiftStatus.DRAFT
    is_open_shift: bool = False
    pattern_id: Optional[str] = None
    notes: str = ""

    def __post_init__(self):
        self.date = parse_date(self.date)
        if self.date is None:
            raise ValueError(f"Shift {self.id!r} has no date")
        if isinstance(self.status, str):
            self.status = ShiftStatus(self.status)
        if not self.staff_id:
            self.staff_id = None
            self.is_open_shift = True

    @property
    def duration_minutes(self) -> int:
        """Rostered length, wrapping past midnight."""
        return (time_to_minutes(self.end_time) - time_to_minutes(self.start_time)) % (24 * 60)

    def overlaps(self, start_time: str, end_time: str) -> bool:
        """True if this shift intersects the given window on the same day."""
        return windows_overlap(self.start_time, self.end_time, start_time, end_time)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "staff_id": self.staff_id,
            "centre_id": self.centre_id,
            "room_id": self.room_id,
            "break_minutes": self.break_minutes,
            "status": self.status.value,
            "is_open_shift": self.is_open_shift,
            "pattern_id": self.pattern_id,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Shift":
        """Create from dictionary."""
        return cls(
            id=str(d.get("id", "")),
            date=d.get("date"),
            start_time=str(d.get("start_time", "")),
            end_time=str(d.get("end_time", "")),
            staff_id=d.get("staff_id") or None,
            centre_id=str(d.get("centre_id", "") or ""),
            room_id=str(d.get("room_id", "") or ""),
            break_minutes=int(d.get("break_minutes", 0) or 0),
            status=d.get("status") or ShiftStatus.DRAFT,
            is_open_shift=bool(d.get("is_open_shift", False)),
            pattern_id=d.get("pattern_id") or None,
            notes=str(d.get("notes", "") or ""),
        )


def shifts_to_data(shifts: List[Shift]) -> List[dict]:
    """Serialize a shift collection to JSON-ready data."""
    return [s.to_dict() for s in shifts]


def shifts_from_data(data: List[dict]) -> List[Shift]:
    """Rebuild a shift collection from serialized data."""
    return [Shift.from_dict(d) for d in data]
