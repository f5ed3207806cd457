"""Tests for I/O functionality."""
from datetime import date

import pandas as pd
import pytest

from roster.io.csv_loader import (
    load_patterns,
    load_shifts,
    load_staff,
    match_results_to_dataframe,
    save_patterns,
    save_shifts,
    shifts_to_dataframe,
)
from roster.matching.skills import rank_staff_for_shift
from roster.models.pattern import RecurrenceKind
from roster.models.shift import ShiftStatus
from roster.patterns.expander import generate_bulk_shifts_from_patterns


class TestPatternCSV:
    """Tests for pattern loading and saving."""

    def test_load_from_dataframe(self):
        df = pd.DataFrame({
            "id": ["p1", ""],
            "name": ["Early", "Late"],
            "start_date": ["2024-01-01", "2024-01-01"],
            "days_of_week": ["1;3;5", "0;6"],
            "recurrence": ["weekly", "Fortnightly"],
            "start_time": ["07:00", "14:00"],
            "end_time": ["15:00", "22:00"],
            "required_qualifications": ["First_Aid; diploma_ece", ""],
            "assigned_staff_id": ["S1", ""],
        })
        patterns = load_patterns(df)

        assert len(patterns) == 2
        early, late = patterns
        assert early.id == "p1"
        assert early.days_of_week == {1, 3, 5}
        assert early.shift_template.required_qualifications == ["first_aid", "diploma_ece"]
        assert early.shift_template.break_minutes == 30
        assert early.assigned_staff_id == "S1"
        assert early.is_active is True
        assert late.id == "pattern-2"
        assert late.recurrence == RecurrenceKind.FORTNIGHTLY
        assert late.assigned_staff_id is None

    def test_missing_columns_raise(self):
        df = pd.DataFrame({"name": ["Early"]})
        with pytest.raises(ValueError, match="start_date"):
            load_patterns(df)

    def test_rows_without_name_skipped(self):
        df = pd.DataFrame({
            "name": ["", "Early"],
            "start_date": ["2024-01-01", "2024-01-01"],
            "days_of_week": ["1", "2"],
        })
        patterns = load_patterns(df)
        assert [p.name for p in patterns] == ["Early"]

    def test_blank_start_date_expands_to_nothing(self):
        df = pd.DataFrame([{"name": "x", "start_date": "", "days_of_week": "1;3"}])
        patterns = load_patterns(df)
        assert patterns[0].start_date is None

        result = generate_bulk_shifts_from_patterns(patterns, date(2024, 1, 1), 2)
        assert result.total == 0
        assert result.summary[0].count == 0

    def test_save_and_reload(self, mwf_pattern, tmp_path):
        path = tmp_path / "patterns.csv"
        mwf_pattern.end_date = date(2024, 6, 30)
        save_patterns([mwf_pattern], path)

        loaded = load_patterns(path)[0]
        assert loaded.id == mwf_pattern.id
        assert loaded.days_of_week == {1, 3, 5}
        assert loaded.start_date == mwf_pattern.start_date
        assert loaded.end_date == date(2024, 6, 30)
        assert loaded.shift_template.start_time == "07:00"
        assert loaded.shift_template.break_minutes == 30
        assert loaded.assigned_staff_id == "S1"

    def test_inactive_flag(self, tmp_path):
        path = tmp_path / "p.csv"
        path.write_text("name,start_date,days_of_week,is_active\nOld,2024-01-01,1,0\n")
        assert load_patterns(path)[0].is_active is False


class TestStaffCSV:
    """Tests for staff loading."""

    def test_load(self, tmp_path):
        path = tmp_path / "staff.csv"
        path.write_text(
            "id,name,role,qualifications\n"
            "S1,Alice,lead_educator,diploma_ece;first_aid\n"
            "S2,Bob,,\n"
            ",Nobody,educator,\n"
        )
        staff = load_staff(path)

        assert [s.id for s in staff] == ["S1", "S2"]
        assert staff[0].qualification_types == {"diploma_ece", "first_aid"}
        assert staff[1].role == "educator"
        assert staff[1].qualifications == []

    def test_missing_id_column(self):
        with pytest.raises(ValueError, match="id"):
            load_staff(pd.DataFrame({"name": ["Alice"]}))


class TestShiftCSV:
    """Tests for roster shift loading and saving."""

    def test_save_and_reload(self, sample_shifts, tmp_path):
        path = tmp_path / "shifts.csv"
        save_shifts(sample_shifts, path)
        loaded = load_shifts(path)
        assert loaded == sample_shifts

    def test_unknown_status_defaults_to_draft(self):
        df = pd.DataFrame({
            "id": ["x"], "date": ["2024-01-01"], "start_time": ["07:00"],
            "end_time": ["15:00"], "status": ["archived"], "staff_id": ["S1"],
        })
        shift = load_shifts(df)[0]
        assert shift.status == ShiftStatus.DRAFT
        assert shift.is_open_shift is False

    def test_rows_without_date_skipped(self):
        df = pd.DataFrame({
            "id": ["x", "y"], "date": ["", "2024-01-02"],
            "start_time": ["07:00", "07:00"], "end_time": ["15:00", "15:00"],
        })
        assert [s.id for s in load_shifts(df)] == ["y"]

    def test_dataframe(self, sample_shifts):
        df = shifts_to_dataframe(sample_shifts)
        assert len(df) == 3
        assert list(df["id"]) == ["a", "b", "c"]

    def test_empty_dataframe_has_columns(self):
        df = shifts_to_dataframe([])
        assert df.empty
        assert "start_time" in df.columns


class TestMatchResultsTable:
    """Tests for the explainability table."""

    def test_one_row_per_candidate_skill(self, sample_staff, toddler_requirement):
        ranked = rank_staff_for_shift(sample_staff, toddler_requirement)
        df = match_results_to_dataframe(ranked)

        assert len(df) == 2 * len(sample_staff)
        assert list(df["rank"].unique()) == [1, 2, 3, 4]
        top = df[df["rank"] == 1]
        assert set(top["skill_name"]) == {"Child Development", "Behaviour Management"}
        assert top["recommendation"].iloc[0] == "good"

    def test_candidates_without_skills(self, sample_staff):
        from roster.models.skills import ShiftSkillRequirement

        req = ShiftSkillRequirement(shift_id="x", date=date(2024, 1, 1), start_time="07:00", end_time="15:00")
        df = match_results_to_dataframe(rank_staff_for_shift(sample_staff, req))
        assert len(df) == len(sample_staff)
        assert (df["match_score"] == 50).all()
