"""Tests for the command-line entry point."""
import json

import pytest

from roster.cli import main
from roster.io.csv_loader import load_shifts

pytestmark = pytest.mark.usefixtures("reset_roster_logging")


@pytest.fixture
def patterns_csv(tmp_path):
    path = tmp_path / "patterns.csv"
    path.write_text(
        "id,name,start_date,days_of_week,start_time,end_time,assigned_staff_id,required_qualifications\n"
        "p-mwf,Morning,2024-01-01,1;3;5,07:00,15:00,S1,\n"
        "p-late,Late,2024-01-01,2;4,13:00,19:00,,first_aid\n"
    )
    return path


@pytest.fixture
def staff_csv(tmp_path):
    path = tmp_path / "staff.csv"
    path.write_text(
        "id,name,role,qualifications\n"
        "S1,Alice,lead_educator,diploma_ece;first_aid\n"
        "S2,Bob,educator,certificate_iii\n"
    )
    return path


class TestCLI:
    """Tests for main()."""

    def test_json_summary(self, patterns_csv, capsys):
        code = main(["--patterns", str(patterns_csv), "--start", "2024-01-01", "--weeks", "2", "--json"])
        assert code == 0

        summary = json.loads(capsys.readouterr().out)["summary"]
        assert summary["generated"] == 10
        assert summary["patterns"] == {"Morning": 6, "Late": 4}
        assert summary["per_day"]["2024-01-01"] == 1
        assert "auto_assign" not in summary

    def test_auto_assign_and_output(self, patterns_csv, staff_csv, tmp_path, capsys):
        out = tmp_path / "roster.csv"
        code = main([
            "--patterns", str(patterns_csv), "--staff", str(staff_csv), "--auto-assign",
            "--start", "2024-01-01", "--weeks", "1", "--output", str(out), "--json",
        ])
        assert code == 0

        summary = json.loads(capsys.readouterr().out)["summary"]
        # Two open Late shifts (Tue/Thu); only Alice holds first aid
        assert summary["auto_assign"] == {"total": 2, "assigned": 2, "unassigned": 0, "unassigned_shift_ids": []}

        shifts = load_shifts(out)
        assert len(shifts) == 5
        late = [s for s in shifts if s.pattern_id == "p-late"]
        assert {s.staff_id for s in late} == {"S1"}
        assert all(s.room_id == "room-1" for s in shifts)

    def test_existing_shifts_deduplicated(self, patterns_csv, tmp_path, capsys):
        first = tmp_path / "first.csv"
        main(["--patterns", str(patterns_csv), "--start", "2024-01-01", "--weeks", "1", "--output", str(first)])
        capsys.readouterr()

        main(["--patterns", str(patterns_csv), "--start", "2024-01-01", "--weeks", "1",
              "--shifts", str(first), "--json"])
        summary = json.loads(capsys.readouterr().out)["summary"]
        assert summary["generated"] == 0

    def test_optimizer(self, patterns_csv, staff_csv, capsys):
        main([
            "--patterns", str(patterns_csv), "--staff", str(staff_csv), "--auto-assign", "--optimize",
            "--start", "2024-01-01", "--weeks", "1", "--json",
        ])
        summary = json.loads(capsys.readouterr().out)["summary"]
        assert summary["optimizer_status"] == "optimal"
        assert summary["auto_assign"]["assigned"] == 2

    def test_text_output(self, patterns_csv, capsys):
        main(["--patterns", str(patterns_csv), "--start", "2024-01-01", "--weeks", "1"])
        out = capsys.readouterr().out
        assert "Summary:" in out
        assert "generated: 5 shifts" in out

    def test_config_file(self, patterns_csv, tmp_path, capsys):
        cfg = tmp_path / "config.json"
        cfg.write_text(json.dumps({"weeks_to_generate": 3, "default_room_id": "babies"}))
        out = tmp_path / "roster.csv"

        main(["--patterns", str(patterns_csv), "--start", "2024-01-01", "--config", str(cfg),
              "--output", str(out), "--json"])
        summary = json.loads(capsys.readouterr().out)["summary"]
        assert summary["weeks"] == 3
        assert summary["generated"] == 15
        assert {s.room_id for s in load_shifts(out)} == {"babies"}
