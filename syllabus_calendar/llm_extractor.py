"""
Model-assisted syllabus extraction.

Sends the schedule part of a syllabus to an OpenAI chat model, asks for
assignments, exams and undated activities as JSON, validates the reply and
converts it to calendar events. Anything the model gets wrong at the field
level is repaired; anything wrong at the response level turns into a failed
result so the caller can fall back to deterministic extraction.
"""

import json
import logging
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

import openai

from .config import Settings, get_settings
from .errors import ConfigurationError, ModelResponseError, ModelUnavailableError
from .event_utils import PLACEHOLDER_DATE, EventIdAllocator, normalize_text
from .models import (
    CalendarEvent, EventType, ParsedSyllabus, ParseRequest, ParsingMethod,
    ParsingResult, Priority
)
from .prompts import SYSTEM_PROMPT, build_extraction_prompt
from .section_detectors import DEFAULT_DETECTORS, SectionDetector, extract_schedule_section

logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 15000
DEFAULT_CONFIDENCE = 85
REQUIRED_FIELDS = ("assignments", "exams", "activities")

ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# Activities about running the course rather than doing coursework
ADMIN_PATTERNS = [
    re.compile(r'office\s+hours?', re.IGNORECASE),
    re.compile(r'\be-?mail\b', re.IGNORECASE),
    re.compile(r'\bclass\s+(?:time|meets|meeting)', re.IGNORECASE),
    re.compile(r'\bconferences?\b', re.IGNORECASE),
    re.compile(r'\blawbandit\b', re.IGNORECASE),
    re.compile(r'\babsences?\b', re.IGNORECASE),
    re.compile(r'\battendance\b', re.IGNORECASE),
]

_PRIORITY_MAP = {p.value: p for p in Priority}


def create_openai_client(settings: Settings) -> openai.OpenAI:
    """Build an OpenAI client from settings.

    Raises:
        ConfigurationError: If no API key is configured
    """
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY is not set")
    return openai.OpenAI(api_key=settings.openai_api_key, timeout=settings.llm_timeout)


def map_priority(value: Any) -> Priority:
    """Map a model-supplied priority string to Priority (default medium)."""
    if not isinstance(value, str):
        return Priority.MEDIUM
    return _PRIORITY_MAP.get(value.strip().lower(), Priority.MEDIUM)


def is_valid_iso_date(value: Any) -> bool:
    """Check for a strict ``YYYY-MM-DD`` string naming a real day."""
    if not isinstance(value, str) or not ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_administrative(title: str) -> bool:
    """Check whether an activity title is course administration."""
    return any(p.search(title) for p in ADMIN_PATTERNS)


def _title_of(entry: Any) -> str:
    if not isinstance(entry, dict):
        return ''
    title = entry.get('title')
    return title.strip() if isinstance(title, str) else ''


def _coerce_year(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class LLMExtractor:
    """Extracts calendar events with an OpenAI chat model."""

    name = "llm"

    def __init__(self, settings: Optional[Settings] = None,
                 client: Optional[Any] = None,
                 client_factory: Optional[Callable[[], Any]] = None,
                 detectors: Sequence[SectionDetector] = DEFAULT_DETECTORS):
        """Initialize the extractor.

        Args:
            settings: Model settings (defaults to the process settings)
            client: Ready OpenAI client; built lazily when omitted
            client_factory: Callable returning a client, used when ``client`` is None
            detectors: Schedule section detectors in priority order
        """
        self.settings = settings or get_settings()
        self.client = client
        self.client_factory = client_factory
        self.detectors = list(detectors)

    def attempt(self, request: ParseRequest) -> ParsingResult:
        """Run model extraction as a parsing strategy."""
        return self.extract_with_model(
            request.text,
            course_name=request.course_name,
            course_code=request.course_code,
            semester=request.semester,
            year=request.year,
            reference_date=request.reference_date,
        )

    def _get_client(self):
        if self.client is not None:
            return self.client
        factory = self.client_factory or (lambda: create_openai_client(self.settings))
        try:
            client = factory()
        except Exception as e:
            logger.error("Failed to initialize OpenAI client: %s", e)
            raise ModelUnavailableError(f"OpenAI client not available: {e}") from e
        if client is None:
            raise ModelUnavailableError("OpenAI client not available")
        self.client = client
        return client

    def _unavailable_reason(self) -> Optional[str]:
        if not self.settings.enable_llm_parsing:
            return "LLM parsing is disabled"
        if not self.settings.openai_api_key:
            return "OpenAI API key not configured"
        return None

    def extract_with_model(self, text: str,
                           course_name: Optional[str] = None,
                           course_code: Optional[str] = None,
                           semester: Optional[str] = None,
                           year: Optional[int] = None,
                           reference_date: Optional[date] = None) -> ParsingResult:
        """Parse a syllabus with the language model.

        Args:
            text: Raw syllabus text
            course_name: Caller-supplied course name (wins over the model's)
            course_code: Caller-supplied course code (wins over the model's)
            semester: Caller-supplied semester (wins over the model's)
            year: Caller-supplied year (wins over the model's)
            reference_date: Term start, passed to the model when known

        Returns:
            ParsingResult with method "llm" on success, otherwise a
            "fallback" failure. The raw model output is attached whenever
            the model was called.
        """
        reason = self._unavailable_reason()
        if reason:
            logger.info("Skipping model extraction: %s", reason)
            return self._failure(reason)

        try:
            client = self._get_client()
        except ModelUnavailableError as e:
            return self._failure(str(e))

        raw_response = None
        try:
            prompt_text = self.preprocess_text(text)
            prompt = build_extraction_prompt(
                prompt_text, course_name, course_code, semester, year, term_start=reference_date
            )
            raw_response = self.call_model(client, prompt)
            self._log_response(raw_response)

            data = self.parse_response(raw_response)
            events = self.convert_to_events(data)
        except ModelResponseError as e:
            logger.warning("Model response rejected: %s", e)
            return self._failure(str(e), e.raw_response or raw_response)
        except openai.APIError as e:
            logger.warning("Model call failed: %s", e)
            return self._failure(f"LLM request failed: {e}", raw_response)
        except Exception as e:
            logger.exception("LLM parsing error")
            return self._failure(str(e) or "Unknown LLM parsing error", raw_response)

        course_info = data.get('course_info') if isinstance(data.get('course_info'), dict) else {}
        syllabus = ParsedSyllabus(
            course_name=course_name or course_info.get('course_name') or "Unknown Course",
            course_code=course_code or course_info.get('course_code') or "UNKNOWN",
            semester=semester or course_info.get('semester') or "Unknown",
            year=year or _coerce_year(course_info.get('year')) or date.today().year,
            events=events,
            raw_text=text,
            parsed_at=datetime.now(),
        )

        confidence = self._confidence(data)
        logger.info("Model extraction produced %d events (confidence %d)", len(events), confidence)
        return ParsingResult(
            success=True,
            data=syllabus,
            confidence=confidence,
            method=ParsingMethod.LLM,
            raw_response=raw_response,
        )

    def preprocess_text(self, text: str) -> str:
        """Cut the schedule section out of the text and bound its size."""
        section = extract_schedule_section(text, self.detectors)
        source = section if section is not None else text
        return normalize_text(source)[:MAX_PROMPT_CHARS].strip()

    def call_model(self, client, prompt: str) -> str:
        """Send the prompt and return the reply text ('' when empty)."""
        response = client.chat.completions.create(
            model=self.settings.llm_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self.settings.llm_max_tokens,
            temperature=self.settings.llm_temperature,
            response_format={"type": "json_object"},
            timeout=self.settings.llm_timeout,
        )
        if not response.choices:
            return ''
        return response.choices[0].message.content or ''

    def _log_response(self, raw: str):
        logger.debug("LLM response length: %d", len(raw))
        logger.debug("LLM response preview: %s", raw[:200])
        logger.debug("LLM response ends with: %s", raw[-100:])

    def parse_response(self, raw: str) -> Dict[str, Any]:
        """Validate a model reply and repair bad dates.

        Assignments and exams whose date is not a real ``YYYY-MM-DD`` day are
        moved to the activities list with their title and details intact.
        Entries without a title are dropped.

        Args:
            raw: Reply text from the model

        Returns:
            Dict with ``assignments``, ``exams``, ``activities``,
            ``course_info`` and ``confidence_score``

        Raises:
            ModelResponseError: If the reply is empty, truncated, not JSON,
                or lacks one of the three lists
        """
        if not raw or not raw.strip():
            raise ModelResponseError("No content in LLM response", raw)

        stripped = raw.strip()
        if not stripped.endswith('}'):
            raise ModelResponseError("LLM response appears to be truncated", raw)

        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            logger.debug("Response that failed to parse: %s", stripped[:500])
            raise ModelResponseError(f"Invalid JSON response from LLM: {e.msg}", raw) from e

        if not isinstance(parsed, dict):
            raise ModelResponseError("LLM response is not a JSON object", raw)

        missing = [name for name in REQUIRED_FIELDS if not isinstance(parsed.get(name), list)]
        if missing:
            logger.warning("LLM response keys: %s", sorted(parsed))
            raise ModelResponseError(
                f"Missing required fields in LLM response: {', '.join(missing)}", raw
            )

        activities = self._titled(parsed['activities'], 'activity')
        assignments = self._dated(parsed['assignments'], 'due_date', 'assignment', activities)
        exams = self._dated(parsed['exams'], 'date', 'exam', activities)

        return {
            'assignments': assignments,
            'exams': exams,
            'activities': activities,
            'course_info': parsed.get('course_info'),
            'confidence_score': parsed.get('confidence_score'),
        }

    def _titled(self, entries: List[Any], kind: str) -> List[Dict[str, Any]]:
        kept = []
        for entry in entries:
            if not _title_of(entry):
                logger.warning("Dropping %s without a title: %r", kind, entry)
                continue
            kept.append(entry)
        return kept

    def _dated(self, entries: List[Any], date_field: str, kind: str,
               activities: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        kept = []
        for entry in self._titled(entries, kind):
            value = entry.get(date_field)
            if is_valid_iso_date(value):
                kept.append(entry)
                continue

            logger.warning("Invalid date for %s \"%s\": %r; moved to activities",
                           kind, _title_of(entry), value)
            details = entry.get('details') if isinstance(entry.get('details'), str) else None
            if value:
                note = f"Date: {value}"
                details = f"{details} ({note})" if details else note
            activities.append({
                'title': _title_of(entry),
                'details': details,
                'type': kind,
                'priority': entry.get('priority'),
                'original_date': value,
            })
        return kept

    def convert_to_events(self, data: Dict[str, Any]) -> List[CalendarEvent]:
        """Turn a validated reply into calendar events, ascending by date.

        Activities are placed on the far-future placeholder date;
        administrative activities are dropped.
        """
        allocator = EventIdAllocator()
        events = []

        for assignment in data.get('assignments', []):
            self._add_event(events, allocator, assignment,
                            date.fromisoformat(assignment['due_date']), EventType.ASSIGNMENT)

        for exam in data.get('exams', []):
            self._add_event(events, allocator, exam,
                            date.fromisoformat(exam['date']), EventType.EXAM,
                            time=exam.get('time'))

        for activity in data.get('activities', []):
            title = _title_of(activity)
            if is_administrative(title):
                logger.debug("Dropping administrative activity: %s", title)
                continue
            hint = activity.get('type')
            event_type = EventType.READING if isinstance(hint, str) and hint.lower() == 'reading' else EventType.OTHER
            self._add_event(events, allocator, activity, PLACEHOLDER_DATE, event_type)

        events.sort(key=lambda e: e.date)
        return events

    def _add_event(self, events: List[CalendarEvent], allocator: EventIdAllocator,
                   entry: Dict[str, Any], event_date: date, event_type: EventType,
                   time: Any = None):
        title = _title_of(entry)
        details = entry.get('details') if isinstance(entry.get('details'), str) else None
        time = time if isinstance(time, str) and time.strip() else None

        event_id = allocator.allocate(title, event_date, (event_type, details, time))
        if event_id is None:
            logger.debug("Dropping duplicate %s \"%s\"", event_type.value, title)
            return

        events.append(CalendarEvent(
            id=event_id,
            title=title,
            description=details,
            date=event_date,
            time=time,
            type=event_type,
            priority=map_priority(entry.get('priority')),
            completed=False,
        ))

    def _confidence(self, data: Dict[str, Any]) -> int:
        score = data.get('confidence_score')
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return DEFAULT_CONFIDENCE
        return int(max(0, min(100, score)))

    def _failure(self, error: str, raw_response: Optional[str] = None) -> ParsingResult:
        return ParsingResult(
            success=False,
            error=error,
            confidence=0,
            method=ParsingMethod.FALLBACK,
            raw_response=raw_response,
        )

    def get_status(self) -> Dict[str, Any]:
        """Report whether model extraction can run, for the status endpoint."""
        reason = self._unavailable_reason()
        if reason is None:
            try:
                self._get_client()
            except ModelUnavailableError as e:
                reason = str(e)

        return {
            "available": reason is None,
            "model": self.settings.llm_model,
            "error": reason,
        }
