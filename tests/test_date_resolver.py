"""Unit tests for date resolution."""

import pytest
from datetime import date

from syllabus_calendar.date_resolver import (
    DateResolver, format_date, is_future_date, is_reasonable_academic_date
)
from syllabus_calendar.models import Confidence


@pytest.mark.parametrize("candidate", [
    "03/15/2024",
    "3/15/2024",
    "03/15/24",
    "2024-03-15",
    "03-15-2024",
    "March 15, 2024",
    "March 15 2024",
    "Mar 15, 2024",
    "Mar 15 2024",
    "15 March 2024",
    "15 Mar 2024",
])
def test_explicit_formats_resolve_with_high_confidence(candidate):
    """Test every explicit template resolves to the same day."""
    result = DateResolver().resolve(candidate, date(2025, 1, 6))
    assert result.date == date(2024, 3, 15)
    assert result.confidence == Confidence.HIGH
    assert result.original_text == candidate


def test_yearless_format_uses_reference_year():
    """Test month-day text takes the reference date's year."""
    result = DateResolver().resolve("March 15", date(2025, 1, 6))
    assert result.date == date(2025, 3, 15)
    assert result.confidence == Confidence.HIGH


@pytest.mark.parametrize("candidate,expected", [
    ("Week 1", date(2025, 1, 6)),
    ("week 3", date(2025, 1, 20)),
    ("Session 2", date(2025, 1, 13)),
    ("Class 10", date(2025, 3, 10)),
])
def test_relative_references(candidate, expected, reference_date):
    """Test 'week N' style text is reference + (N - 1) weeks."""
    result = DateResolver().resolve(candidate, reference_date)
    assert result.date == expected
    assert result.confidence == Confidence.MEDIUM
    assert result.parsed_format == "relative"


def test_native_fallback(reference_date):
    """Test free-form text falls through to dateparser."""
    result = DateResolver().resolve("tomorrow", reference_date)
    assert result.date == date(2025, 1, 7)
    assert result.confidence == Confidence.MEDIUM
    assert result.parsed_format == "native"


@pytest.mark.parametrize("candidate", ["", "   ", "xyzzy"])
def test_unresolvable_text(candidate, reference_date):
    """Test unparseable text yields no date at low confidence."""
    result = DateResolver().resolve(candidate, reference_date)
    assert result.date is None
    assert result.confidence == Confidence.LOW


def test_extract_all_orders_by_confidence_then_date(reference_date):
    """Test extract_all sorts high-confidence dates first, then by date."""
    text = (
        "Week 3 reading\n"
        "Midterm on March 20, 2024\n"
        "Homework #2 due 03/10/2024\n"
    )
    results = DateResolver().extract_all(text, reference_date)

    assert [r.original_text for r in results] == ["03/10/2024", "March 20, 2024", "Week 3"]
    assert [r.date for r in results] == [date(2024, 3, 10), date(2024, 3, 20), date(2025, 1, 20)]


def test_extract_all_only_returns_dates_found_in_text(sample_syllabus, reference_date):
    """Test every result has a date and its text occurs in the source."""
    results = DateResolver().extract_all(sample_syllabus, reference_date)
    assert results
    for result in results:
        assert result.date is not None
        assert result.original_text.lower() in sample_syllabus.lower()


def test_extract_all_dedupes_case_insensitively(reference_date):
    """Test repeated matches are resolved once."""
    results = DateResolver().extract_all("Week 2 intro\nweek 2 review", reference_date)
    assert len(results) == 1
    assert results[0].original_text == "Week 2"


def test_extract_all_empty_text():
    """Test that empty text has no dates."""
    assert DateResolver().extract_all("") == []


def test_format_date():
    """Test date display formatting."""
    assert format_date(date(2024, 3, 5)) == "March 05, 2024"
    assert format_date(date(2024, 3, 5), "%Y/%m/%d") == "2024/03/05"


def test_is_future_date():
    """Test future date check against a reference."""
    reference = date(2024, 3, 1)
    assert is_future_date(date(2024, 3, 2), reference)
    assert not is_future_date(date(2024, 3, 1), reference)


def test_is_reasonable_academic_date():
    """Test academic window of one year back and two years ahead."""
    reference = date(2024, 1, 1)
    assert is_reasonable_academic_date(date(2023, 6, 1), reference)
    assert is_reasonable_academic_date(date(2025, 12, 1), reference)
    assert not is_reasonable_academic_date(date(2022, 1, 1), reference)
    assert not is_reasonable_academic_date(date(2099, 12, 31), reference)
