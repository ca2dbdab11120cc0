"""
Data models for the syllabus to calendar converter.

This module defines the data structures passed between the parsing pipeline,
the calendar sync adapter and the HTTP layer. All models are plain Python
dataclasses; the enums subclass ``str`` so their values serialize directly
into JSON.

These models represent:
- Calendar events inferred from a syllabus
- The aggregate result of parsing one syllabus
- Intermediate date matches produced by the date resolver
- Result envelopes returned by each parsing strategy
- Outcomes of pushing events to a remote calendar
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .event_utils import generate_event_id


class EventType(str, Enum):
    """Kind of academic obligation an event represents."""
    ASSIGNMENT = "assignment"
    EXAM = "exam"
    READING = "reading"
    CLASS = "class"
    DEADLINE = "deadline"
    OTHER = "other"


class Priority(str, Enum):
    """User-facing urgency of an event."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Confidence(str, Enum):
    """Qualitative certainty of a date match.

    Tiers are ordered (high > medium > low) through ``rank``. They are used
    for sorting and counting only, never averaged.
    """
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {Confidence.HIGH: 3, Confidence.MEDIUM: 2, Confidence.LOW: 1}


class ParsingMethod(str, Enum):
    """Which extraction strategy produced a result."""
    LLM = "llm"
    REGEX = "regex"
    FALLBACK = "fallback"


@dataclass
class CalendarEvent:
    """An academic event inferred from a syllabus.

    The ``date`` field is always a real calendar date. Items the parser could
    not date are given the far-future placeholder date instead of ``None`` so
    that event lists can always be sorted by date.
    """
    id: str                     # slug of the title plus ISO date, e.g. "homework-2-due-2024-03-10"
    title: str                  # Short label shown in the calendar
    date: date                  # Day the event falls on (never None)
    type: EventType = EventType.OTHER
    priority: Priority = Priority.MEDIUM
    description: Optional[str] = None  # Source line or model-supplied details
    time: Optional[str] = None  # Free-text time of day, e.g. "2:00 PM"
    course: Optional[str] = None  # Course the event belongs to, when known
    completed: bool = False     # User-facing state; the parser always creates events as not completed


@dataclass
class ParsedSyllabus:
    """Aggregate result of one syllabus parse."""
    course_name: str
    events: List[CalendarEvent]  # Ascending by date
    raw_text: str
    parsed_at: datetime
    course_code: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None


@dataclass(frozen=True)
class DateParseResult:
    """A candidate date found in syllabus text."""
    date: Optional[date]        # None when the text could not be resolved
    confidence: Confidence
    original_text: str          # Exact substring that was matched
    parsed_format: Optional[str] = None  # strptime template, "relative" or "native"


@dataclass(frozen=True)
class ParseRequest:
    """Uniform input handed to every parsing strategy."""
    text: str
    course_name: Optional[str] = None
    course_code: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None
    reference_date: Optional[date] = None  # Week 1 start used for "Week N" references


@dataclass(frozen=True)
class ParsingResult:
    """Result envelope returned by a parsing strategy and by the orchestrator.

    ``confidence`` is an additive heuristic score from 0 to 100, not a
    calibrated probability.
    """
    success: bool
    confidence: int
    method: ParsingMethod
    data: Optional[ParsedSyllabus] = None
    error: Optional[str] = None
    raw_response: Optional[str] = None  # Model output kept for diagnostics


# The model-assisted path returns the same envelope
LLMParsingResult = ParsingResult


@dataclass
class SyncResult:
    """Outcome of pushing a batch of events to a remote calendar."""
    success: bool
    synced_events: int = 0
    failed_events: int = 0
    errors: List[str] = field(default_factory=list)
    calendar_id: Optional[str] = None


# Serialization helpers for JSON conversion

def serialize_date(d: date) -> str:
    """Convert date to ISO format string."""
    return d.isoformat()


def deserialize_date(s: str) -> date:
    """Convert an ISO date or datetime string to a date.

    Browsers send dates as full ISO timestamps ("2024-03-10T00:00:00.000Z"),
    so only the leading calendar date is used.
    """
    return date.fromisoformat(s.strip()[:10])


def serialize_datetime(dt: datetime) -> str:
    """Convert datetime to ISO format string."""
    return dt.isoformat()


def event_to_dict(event: CalendarEvent) -> Dict[str, Any]:
    """Serialize a CalendarEvent to the API's JSON shape."""
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "date": serialize_date(event.date),
        "time": event.time,
        "type": event.type.value,
        "course": event.course,
        "priority": event.priority.value,
        "completed": event.completed,
    }


def event_from_dict(data: Dict[str, Any]) -> CalendarEvent:
    """Build a CalendarEvent from the API's JSON shape.

    Raises:
        ValueError: If the title or date is missing or malformed, or the
            type/priority is not a known value, or the time is not text
    """
    title = data.get("title")
    raw_date = data.get("date")
    raw_time = data.get("time")
    if not title or not isinstance(title, str):
        raise ValueError("Event title is required")
    if not raw_date or not isinstance(raw_date, str):
        raise ValueError(f"Event '{title}' has no date")
    if raw_time is not None and not isinstance(raw_time, str):
        raise ValueError(f"Event '{title}' has a non-text time")

    event_date = deserialize_date(raw_date)
    return CalendarEvent(
        id=data.get("id") or generate_event_id(title, event_date),
        title=title,
        date=event_date,
        type=EventType(data.get("type") or EventType.OTHER.value),
        priority=Priority(data.get("priority") or Priority.MEDIUM.value),
        description=data.get("description"),
        time=raw_time,
        course=data.get("course"),
        completed=bool(data.get("completed", False)),
    )


def syllabus_to_dict(syllabus: ParsedSyllabus) -> Dict[str, Any]:
    """Serialize a ParsedSyllabus to the API's JSON shape."""
    return {
        "courseName": syllabus.course_name,
        "courseCode": syllabus.course_code,
        "semester": syllabus.semester,
        "year": syllabus.year,
        "events": [event_to_dict(e) for e in syllabus.events],
        "rawText": syllabus.raw_text,
        "parsedAt": serialize_datetime(syllabus.parsed_at),
    }


def result_to_dict(result: ParsingResult, include_raw_response: bool = False) -> Dict[str, Any]:
    """Serialize a ParsingResult to the API's JSON shape."""
    payload: Dict[str, Any] = {
        "success": result.success,
        "confidence": result.confidence,
        "method": result.method.value,
    }
    if result.data is not None:
        payload["data"] = syllabus_to_dict(result.data)
    if result.error:
        payload["error"] = result.error
    if include_raw_response and result.raw_response is not None:
        payload["rawResponse"] = result.raw_response
    return payload


def sync_result_to_dict(result: SyncResult) -> Dict[str, Any]:
    """Serialize a SyncResult to the API's JSON shape."""
    return {
        "success": result.success,
        "syncedEvents": result.synced_events,
        "failedEvents": result.failed_events,
        "errors": list(result.errors),
        "calendarId": result.calendar_id,
    }
