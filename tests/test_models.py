"""Tests for data models."""
from datetime import date, datetime

import pytest

from roster.models.config import RosterConfig
from roster.models.pattern import GeneratedShift, RecurrenceKind, RecurringShiftPattern, ShiftTemplate
from roster.models.shift import Shift, ShiftStatus, day_of_week, shifts_from_data, shifts_to_data, time_to_minutes, windows_overlap
from roster.models.skills import ShiftSkillRequirement, SkillMatchResult
from roster.models.staff import Qualification, StaffMember


class TestTimeHelpers:
    """Tests for date/time helpers."""

    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("07:30") == 450
        assert time_to_minutes("23:59") == 1439

    def test_day_of_week_starts_on_sunday(self):
        """Day numbers use 0=Sunday ... 6=Saturday."""
        assert day_of_week(date(2024, 1, 7)) == 0   # Sunday
        assert day_of_week(date(2024, 1, 1)) == 1   # Monday
        assert day_of_week(date(2024, 1, 6)) == 6   # Saturday

    def test_windows_overlap(self):
        assert windows_overlap("09:00", "17:00", "12:00", "13:00") is True
        assert windows_overlap("09:00", "12:00", "11:59", "15:00") is True

    def test_touching_windows_do_not_overlap(self):
        assert windows_overlap("07:00", "12:00", "12:00", "18:00") is False


class TestShift:
    """Tests for the roster Shift record."""

    def test_empty_staff_means_open_shift(self):
        shift = Shift(id="x", date="2024-01-01", start_time="07:00", end_time="15:00", staff_id="")
        assert shift.staff_id is None
        assert shift.is_open_shift is True
        assert shift.date == date(2024, 1, 1)

    def test_status_parsed_from_string(self):
        shift = Shift(id="x", date=date(2024, 1, 1), start_time="07:00", end_time="15:00",
                      staff_id="S1", status="published")
        assert shift.status == ShiftStatus.PUBLISHED

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_date_rejected(self, value):
        with pytest.raises(ValueError, match="no date"):
            Shift(id="x", date=value, start_time="07:00", end_time="15:00")

    def test_from_dict_without_date_rejected(self):
        with pytest.raises(ValueError):
            shifts_from_data([{"id": "x"}])

    def test_duration_wraps_midnight(self):
        night = Shift(id="n", date=date(2024, 1, 1), start_time="22:00", end_time="06:00", staff_id="S1")
        assert night.duration_minutes == 8 * 60

    def test_dict_roundtrip(self, sample_shifts):
        """Shift collections survive serialization for autosave."""
        restored = shifts_from_data(shifts_to_data(sample_shifts))
        assert restored == sample_shifts


class TestRecurringShiftPattern:
    """Tests for pattern normalization and labels."""

    def test_out_of_range_days_dropped(self):
        p = RecurringShiftPattern(id="p", name=" Early ", start_date="2024-01-01", days_of_week={-1, 1, 3, 7})
        assert p.days_of_week == {1, 3}
        assert p.name == "Early"

    def test_recurrence_from_string(self):
        p = RecurringShiftPattern(id="p", name="x", start_date=date(2024, 1, 1), recurrence="Fortnightly")
        assert p.recurrence == RecurrenceKind.FORTNIGHTLY

    @pytest.mark.parametrize("days,label", [
        (set(), "No days"),
        ({0, 1, 2, 3, 4, 5, 6}, "Every day"),
        ({1, 2, 3, 4, 5}, "Weekdays"),
        ({0, 6}, "Weekends"),
        ({1, 3, 5}, "Mon, Wed, Fri"),
    ])
    def test_days_label(self, days, label):
        p = RecurringShiftPattern(id="p", name="x", start_date=date(2024, 1, 1), days_of_week=days)
        assert p.days_label == label

    def test_to_dict_from_dict(self, mwf_pattern):
        mwf_pattern.created_at = datetime(2024, 1, 1, 8, 30)
        d = mwf_pattern.to_dict()
        assert d["days_of_week"] == [1, 3, 5]
        assert d["recurrence"] == "weekly"

        restored = RecurringShiftPattern.from_dict(d)
        assert restored == mwf_pattern

    def test_template_defaults(self):
        t = ShiftTemplate()
        assert t.break_minutes == 30
        assert t.required_qualifications == []


class TestGeneratedShift:
    """Tests for generated occurrences."""

    def test_open_without_staff(self):
        g = GeneratedShift(date=date(2024, 1, 1), start_time="07:00", end_time="15:00", pattern_id="p")
        assert g.is_open_shift is True
        assert g.status == "pending"
        assert "OPEN" in repr(g)


class TestStaffMember:
    """Tests for staff and qualifications."""

    def test_plain_string_qualifications(self):
        s = StaffMember(id="S1", name="Alice", qualifications=["First_Aid", Qualification("diploma_ece")])
        assert s.qualification_types == {"first_aid", "diploma_ece"}

    def test_from_dict(self):
        s = StaffMember.from_dict({
            "id": "S9",
            "name": "Zoe",
            "role": "Lead_Educator",
            "qualifications": [{"type": "first_aid", "expiry_date": "2025-06-30"}, "food_safety"],
        })
        assert s.role == "lead_educator"
        assert s.qualifications[0].expiry_date == date(2025, 6, 30)
        assert s.qualification_types == {"first_aid", "food_safety"}


class TestShiftSkillRequirement:
    """Tests for requirement construction."""

    def test_from_shift(self, sample_shifts):
        req = ShiftSkillRequirement.from_shift(sample_shifts[1], required_qualifications=["first_aid"])
        assert req.shift_id == "b"
        assert req.start_time == "09:00"
        assert req.required_qualifications == ["first_aid"]
        assert req.preferred_skills == []


class TestSkillMatchResult:
    """Tests for recommendation bands."""

    @pytest.mark.parametrize("score,meets,label", [
        (95, True, "excellent"),
        (85, True, "excellent"),
        (70, True, "good"),
        (50, True, "acceptable"),
        (49, True, "not_recommended"),
        (95, False, "not_recommended"),
    ])
    def test_recommendation(self, score, meets, label):
        r = SkillMatchResult(staff_id="S1", staff_name="A", match_score=score, meets_mandatory=meets)
        assert r.recommendation == label


class TestRosterConfig:
    """Tests for RosterConfig dataclass."""

    def test_defaults(self):
        cfg = RosterConfig()
        assert cfg.weeks_to_generate == 4
        assert cfg.auto_assign_threshold == 50
        assert cfg.mandatory_score_cap == 40
        assert cfg.max_history == 50
        assert cfg.use_optimizer is False

    def test_clamping(self):
        cfg = RosterConfig(max_history=0, weeks_to_generate=-3, autosave_interval_seconds=-1)
        assert cfg.max_history == 1
        assert cfg.weeks_to_generate == 0
        assert cfg.autosave_interval_seconds == 0.0

    def test_from_dict_ignores_unknown_keys(self):
        cfg = RosterConfig.from_dict({"max_history": 10, "colour": "blue"})
        assert cfg.max_history == 10
        assert not hasattr(cfg, "colour")

    def test_to_dict(self):
        assert RosterConfig().to_dict()["autosave_key"] == "roster-autosave"
