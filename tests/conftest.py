"""Pytest configuration and fixtures."""
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from roster.models.pattern import RecurringShiftPattern, ShiftTemplate
from roster.models.shift import Shift
from roster.models.skills import ShiftSkillRequirement, SkillRequirement
from roster.models.staff import StaffMember

# 2024-01-01 is a Monday
MONDAY = date(2024, 1, 1)


class FakeClock:
    """Manually advanced clock for history and autosave tests."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mwf_pattern():
    """Mon/Wed/Fri weekly pattern assigned to S1."""
    return RecurringShiftPattern(
        id="p-mwf",
        name="Morning Mon/Wed/Fri",
        start_date=MONDAY,
        days_of_week={1, 3, 5},
        shift_template=ShiftTemplate(start_time="07:00", end_time="15:00", centre_id="c1", break_minutes=30),
        assigned_staff_id="S1",
        assigned_staff_name="Sam",
    )


@pytest.fixture
def sample_staff():
    """A small, varied staff pool."""
    return [
        StaffMember(id="S1", name="Alice", role="lead_educator",
                    qualifications=["diploma_ece", "first_aid", "working_with_children"]),
        StaffMember(id="S2", name="Bob", role="educator",
                    qualifications=["certificate_iii", "first_aid"]),
        StaffMember(id="S3", name="Charlie", role="educator",
                    qualifications=["certificate_iii"]),
        StaffMember(id="S4", name="Diana", role="cook",
                    qualifications=["food_safety", "first_aid"]),
    ]


@pytest.fixture
def toddler_requirement():
    """Weekday shift needing first aid and preferring child development skills."""
    return ShiftSkillRequirement(
        shift_id="sh-1",
        date=MONDAY,
        start_time="07:00",
        end_time="15:00",
        room_id="toddlers",
        room_name="Toddlers",
        required_qualifications=["first_aid"],
        preferred_skills=[
            SkillRequirement("Child Development", minimum_level=3, weight=60),
            SkillRequirement("Behaviour Management", minimum_level=2, weight=40),
        ],
    )


@pytest.fixture
def sample_shifts():
    return [
        Shift(id="a", date=MONDAY, start_time="07:00", end_time="15:00", staff_id="S1"),
        Shift(id="b", date=MONDAY, start_time="09:00", end_time="17:00"),
        Shift(id="c", date=MONDAY + timedelta(days=1), start_time="07:00", end_time="15:00", staff_id="S2"),
    ]


@pytest.fixture
def reset_roster_logging():
    """Drop handlers installed by setup_logging once the test is done."""
    yield
    logger = logging.getLogger("roster")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
