"""Staff member model."""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Set

from .shift import parse_date


@dataclass
class Qualification:
    """A qualification held by a staff member."""
    type: str
    name: str = ""
    expiry_date: Optional[date] = None

    def __post_init__(self):
        self.type = str(self.type).strip().lower()
        self.expiry_date = parse_date(self.expiry_date)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
        }


@dataclass
class StaffMember:
    """A candidate for shift assignment."""

    id: str
    name: str
    role: str = "educator"
    qualifications: List[Qualification] = field(default_factory=list)

    def __post_init__(self):
        self.name = str(self.name).strip()
        self.role = str(self.role).strip().lower()
        self.qualifications = [
            q if isinstance(q, Qualification) else Qualification(type=q)
            for q in self.qualifications
        ]

    @property
    def qualification_types(self) -> Set[str]:
        """Qualification types held, used for mandatory checks."""
        return {q.type for q in self.qualifications}

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "qualifications": [q.to_dict() for q in self.qualifications],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "StaffMember":
        """Create from dictionary. Qualifications may be dicts or plain type strings."""
        quals = []
        for q in d.get("qualifications") or []:
            if isinstance(q, dict):
                quals.append(Qualification(
                    type=q.get("type", ""),
                    name=q.get("name", ""),
                    expiry_date=q.get("expiry_date"),
                ))
            else:
                quals.append(Qualification(type=q))
        return cls(
            id=str(d.get("id", "")),
            name=d.get("name", ""),
            role=d.get("role") or "educator",
            qualifications=quals,
        )
