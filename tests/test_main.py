"""Tests for the command line interface."""

import json

from syllabus_calendar.config import Settings
from syllabus_calendar.main import main
from syllabus_calendar.services import ServiceContainer


def run(argv, settings=None):
    return main(argv, container=ServiceContainer(settings=settings or Settings()))


def test_text_syllabus_to_json(tmp_path, sample_syllabus):
    """Test a .txt syllabus is parsed and written as JSON."""
    source = tmp_path / "torts.txt"
    source.write_text(sample_syllabus, encoding="utf-8")
    out_dir = tmp_path / "out"

    assert run([str(source), "--output-dir", str(out_dir), "--course-name", "Torts"]) == 0

    payload = json.loads((out_dir / "torts_events.json").read_text(encoding="utf-8"))
    assert payload["success"] is True
    assert payload["method"] == "regex"
    assert payload["data"]["courseName"] == "Torts"
    assert len(payload["data"]["events"]) == 5
    assert not (out_dir / "torts.ics").exists()


def test_ics_output(tmp_path, sample_syllabus):
    """Test --ics writes a calendar file next to the JSON."""
    source = tmp_path / "torts.txt"
    source.write_text(sample_syllabus, encoding="utf-8")

    assert run([str(source), "--output-dir", str(tmp_path), "--ics"]) == 0

    ics = (tmp_path / "torts.ics").read_bytes()
    assert ics.startswith(b"BEGIN:VCALENDAR")
    assert ics.count(b"BEGIN:VEVENT") == 5


def test_term_start_dates_week_references(tmp_path):
    """Test --term-start anchors 'Week N' lines."""
    source = tmp_path / "weeks.txt"
    source.write_text("Week 2: Read Chapter 3\n", encoding="utf-8")

    assert run([str(source), "--output-dir", str(tmp_path), "--term-start", "2025-01-06"]) == 0

    payload = json.loads((tmp_path / "weeks_events.json").read_text(encoding="utf-8"))
    assert payload["data"]["events"][0]["date"] == "2025-01-13"


def test_missing_file(tmp_path, capsys):
    """Test a missing input file exits with status 1."""
    assert run([str(tmp_path / "nope.pdf")]) == 1
    assert "file not found" in capsys.readouterr().out


def test_unsupported_suffix(tmp_path):
    """Test only PDF and text files are accepted."""
    source = tmp_path / "syllabus.docx"
    source.write_bytes(b"PK")
    assert run([str(source)]) == 1


def test_unreadable_pdf(tmp_path, capsys):
    """Test a corrupt PDF exits with status 1."""
    source = tmp_path / "broken.pdf"
    source.write_bytes(b"not really a pdf")
    assert run([str(source), "--output-dir", str(tmp_path)]) == 1
    assert "Error:" in capsys.readouterr().out


def test_no_events_is_still_success(tmp_path):
    """Test an undated syllabus writes an empty event list."""
    source = tmp_path / "policies.txt"
    source.write_text("Grading policy: participation counts.\n", encoding="utf-8")

    assert run([str(source), "--output-dir", str(tmp_path)]) == 0
    payload = json.loads((tmp_path / "policies_events.json").read_text(encoding="utf-8"))
    assert payload["data"]["events"] == []
