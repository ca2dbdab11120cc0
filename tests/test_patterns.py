"""Unit tests for line classification."""

import pytest

from syllabus_calendar.models import EventType, Priority
from syllabus_calendar.patterns import PatternClassifier


@pytest.mark.parametrize("line,expected_type,expected_priority", [
    ("Homework #2 due 03/10/2024", EventType.ASSIGNMENT, Priority.HIGH),
    ("Problem Set 4 posted", EventType.ASSIGNMENT, Priority.HIGH),
    ("Memo 1 to the senior partner", EventType.ASSIGNMENT, Priority.HIGH),
    ("Midterm in class", EventType.EXAM, Priority.URGENT),
    ("Quiz 3 on torts", EventType.EXAM, Priority.URGENT),
    ("Final exam, room 101", EventType.EXAM, Priority.URGENT),
    ("Read Chapter 4", EventType.READING, Priority.MEDIUM),
    ("Case 12: Palsgraf", EventType.READING, Priority.MEDIUM),
    ("Submit reflection online", EventType.DEADLINE, Priority.HIGH),
    ("Registration deadline", EventType.DEADLINE, Priority.HIGH),
    ("Guest lecture", EventType.OTHER, Priority.MEDIUM),
])
def test_classify(line, expected_type, expected_priority):
    """Test each keyword family maps to its type and default priority."""
    assert PatternClassifier().classify(line) == (expected_type, expected_priority)


def test_assignment_wins_over_exam_language():
    """Test that a line naming an assignment and an exam is an assignment."""
    event_type, _ = PatternClassifier().classify("Project 2 due before the final exam")
    assert event_type == EventType.ASSIGNMENT


def test_exam_wins_over_deadline_language():
    """Test family order between exam and deadline keywords."""
    event_type, _ = PatternClassifier().classify("Submit questions before the midterm")
    assert event_type == EventType.EXAM


def test_keywords_need_word_boundaries():
    """Test that keywords inside other words do not match."""
    assert PatternClassifier().classify("Showcase 5 highlights")[0] == EventType.OTHER
