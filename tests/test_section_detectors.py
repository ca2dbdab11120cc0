"""Unit tests for schedule section detection."""

import re

from syllabus_calendar.section_detectors import (
    DEFAULT_DETECTORS, SectionDetector, extract_schedule_section
)


WEEKLY_TEXT = (
    "Course policies: be on time, no laptops.\n"
    "Week 1: Introduction to legal writing. Read pages 1-20 of the textbook.\n"
    "Week 2: Case briefing. Read Palsgraf and prepare a one page brief.\n"
    "Week 3: Memo structure. First memo draft due Friday.\n"
)


def test_weekly_detector_finds_schedule():
    """Test that 'Week N' blocks are cut out of the surrounding text."""
    section = extract_schedule_section(WEEKLY_TEXT)

    assert section is not None
    assert section.startswith("Week 1:")
    assert "Week 3: Memo structure" in section
    assert "Course policies" not in section


def test_short_matches_do_not_count():
    """Test that a detector below its minimum length does not fire."""
    assert extract_schedule_section("Week 1: Intro\nWeek 2: Cases") is None


def test_assignment_detectors_run_after_weekly():
    """Test that assignment-schedule headings are used when no weekly schedule exists."""
    text = (
        "General information about the course.\n"
        "Writing Assignment Due: closed memo on negligence, five pages, submit online.\n"
    )
    section = extract_schedule_section(text)

    assert section is not None
    assert section.startswith("Writing Assignment Due")
    assert "General information" not in section


def test_no_schedule_returns_none():
    """Test plain text with no schedule headings."""
    assert extract_schedule_section("Grading: 40% memo, 60% final brief.") is None


def test_detector_order_is_respected():
    """Test the first detector to fire wins."""
    custom = [
        SectionDetector(name="memo", pattern=re.compile(r"Week 2.*?(?=Week \d+|\Z)", re.DOTALL),
                        min_length=10),
    ] + DEFAULT_DETECTORS
    section = extract_schedule_section(WEEKLY_TEXT, custom)
    assert section.startswith("Week 2:")
    assert "Week 1" not in section


def test_default_detector_order():
    """Test weekly detectors precede assignment detectors."""
    names = [d.name for d in DEFAULT_DETECTORS]
    assert names.index("weekly") < names.index("writing-assignment")
    assert all(d.min_length == 100 for d in DEFAULT_DETECTORS[:4])
    assert all(d.min_length == 50 for d in DEFAULT_DETECTORS[4:])
