"""
Deterministic syllabus extraction.

Finds every date in the syllabus text, pairs each date with the lines that
mention it, and turns those lines into calendar events. Used when the
model-assisted path is disabled or fails.
"""

import logging
import re
from datetime import date, datetime
from typing import Dict, List, Optional

from .date_resolver import DateResolver
from .event_utils import EventIdAllocator, clean_event_title, normalize_text
from .models import (
    CalendarEvent, Confidence, DateParseResult, ParsedSyllabus, ParseRequest,
    ParsingMethod, ParsingResult
)
from .patterns import PatternClassifier

logger = logging.getLogger(__name__)

SHORT_TEXT_THRESHOLD = 500


class RegexExtractor:
    """Extracts calendar events with date and keyword patterns."""

    name = "regex"

    COURSE_NAME_PATTERN = re.compile(r'(?:course\s+name|title)\s*:\s*([^\n]+)', re.IGNORECASE)
    COURSE_CODE_PATTERN = re.compile(
        r'(?:course\s+code|course\s+number|number)\s*:\s*([A-Za-z]{2,5}\s*-?\s*\d{2,4}[A-Za-z]?)',
        re.IGNORECASE,
    )
    SEMESTER_PATTERN = re.compile(r'(?:semester|term)\s*:\s*([^\n]+)', re.IGNORECASE)
    YEAR_PATTERN = re.compile(r'(?:academic\s+year|year)\s*:\s*(\d{4})', re.IGNORECASE)

    def __init__(self, date_resolver: Optional[DateResolver] = None,
                 classifier: Optional[PatternClassifier] = None):
        self.date_resolver = date_resolver or DateResolver()
        self.classifier = classifier or PatternClassifier()

    def attempt(self, request: ParseRequest) -> ParsingResult:
        """Run the deterministic extraction as a parsing strategy."""
        return self.parse(
            request.text,
            course_name=request.course_name,
            course_code=request.course_code,
            semester=request.semester,
            year=request.year,
            reference_date=request.reference_date,
        )

    def parse(self, text: str,
              course_name: Optional[str] = None,
              course_code: Optional[str] = None,
              semester: Optional[str] = None,
              year: Optional[int] = None,
              reference_date: Optional[date] = None) -> ParsingResult:
        """Parse a syllabus into a result envelope.

        Args:
            text: Raw syllabus text
            course_name: Caller-supplied course name (wins over extracted)
            course_code: Caller-supplied course code (wins over extracted)
            semester: Caller-supplied semester (wins over extracted)
            year: Caller-supplied year (wins over extracted)
            reference_date: Week 1 start for relative references (defaults to today)

        Returns:
            ParsingResult with method "regex", or a "fallback" failure if
            extraction raised
        """
        reference = reference_date or date.today()
        try:
            clean_text = normalize_text(text)
            course_info = self.extract_course_info(
                clean_text, course_name, course_code, semester, year, reference
            )
            date_results = self.date_resolver.extract_all(clean_text, reference)
            events = self._extract_events(clean_text, date_results)
            confidence = self.calculate_confidence(events, date_results, clean_text)

            logger.info(
                "Regex extraction found %d dates and %d events (confidence %d)",
                len(date_results), len(events), confidence,
            )

            syllabus = ParsedSyllabus(
                course_name=course_info["course_name"],
                course_code=course_info["course_code"],
                semester=course_info["semester"],
                year=course_info["year"],
                events=events,
                raw_text=text,
                parsed_at=datetime.now(),
            )
            return ParsingResult(
                success=True,
                data=syllabus,
                confidence=confidence,
                method=ParsingMethod.REGEX,
            )
        except Exception as e:
            logger.exception("Regex extraction failed")
            return ParsingResult(
                success=False,
                error=str(e) or "Unknown regex parsing error",
                confidence=0,
                method=ParsingMethod.FALLBACK,
            )

    def extract(self, text: str, reference_date: Optional[date] = None) -> List[CalendarEvent]:
        """Extract calendar events from raw syllabus text.

        Args:
            text: Raw syllabus text
            reference_date: Week 1 start for relative references (defaults to today)

        Returns:
            Deduplicated events, ascending by date
        """
        reference = reference_date or date.today()
        clean_text = normalize_text(text)
        date_results = self.date_resolver.extract_all(clean_text, reference)
        return self._extract_events(clean_text, date_results)

    def _extract_events(self, text: str, date_results: List[DateParseResult]) -> List[CalendarEvent]:
        """Build events from every line that mentions a resolved date."""
        lines = [line.strip() for line in text.split('\n') if line.strip()]
        allocator = EventIdAllocator()
        events = []

        for date_result in date_results:
            if date_result.date is None:
                continue
            needle = re.compile(r'(?<!\w)' + re.escape(date_result.original_text) + r'(?!\w)',
                                re.IGNORECASE)

            for line in lines:
                if not needle.search(line):
                    continue
                event = self._parse_event_from_line(line, date_result, allocator)
                if event is not None:
                    events.append(event)

        events.sort(key=lambda e: e.date)
        return events

    def _parse_event_from_line(self, line: str, date_result: DateParseResult,
                               allocator: EventIdAllocator) -> Optional[CalendarEvent]:
        """Turn one line into an event, or None if it repeats an earlier one."""
        event_type, priority = self.classifier.classify(line)
        title = clean_event_title(line, date_result.original_text)

        event_id = allocator.allocate(title, date_result.date, (line, event_type))
        if event_id is None:
            return None

        return CalendarEvent(
            id=event_id,
            title=title,
            description=line,
            date=date_result.date,
            type=event_type,
            priority=priority,
            completed=False,
        )

    def calculate_confidence(self, events: List[CalendarEvent],
                             date_results: List[DateParseResult],
                             text: str) -> int:
        """Score how much the extraction can be trusted, from 0 to 100.

        This is an additive heuristic: points for resolved dates, emitted
        events, high-confidence dates and distinct event types, minus a
        penalty for very short text.
        """
        score = 0

        valid_dates = sum(1 for d in date_results if d.date is not None)
        score += min(valid_dates * 10, 30)

        score += min(len(events) * 5, 25)

        high_confidence = sum(1 for d in date_results if d.confidence == Confidence.HIGH)
        score += min(high_confidence * 5, 20)

        score += len({e.type for e in events}) * 5

        if len(text) < SHORT_TEXT_THRESHOLD:
            score -= 20

        return max(0, min(100, score))

    def extract_course_info(self, text: str,
                            course_name: Optional[str] = None,
                            course_code: Optional[str] = None,
                            semester: Optional[str] = None,
                            year: Optional[int] = None,
                            reference_date: Optional[date] = None) -> Dict[str, object]:
        """Fill in course metadata, preferring caller-supplied values.

        Labels such as "Course Name:", "Course Code:", "Semester:" and
        "Year:" are searched for only when the caller left a field empty.
        """
        reference = reference_date or date.today()

        if not course_name:
            match = self.COURSE_NAME_PATTERN.search(text)
            course_name = match.group(1).strip() if match else None
        if not course_code:
            match = self.COURSE_CODE_PATTERN.search(text)
            course_code = re.sub(r'\s+', ' ', match.group(1)).strip().upper() if match else None
        if not semester:
            match = self.SEMESTER_PATTERN.search(text)
            semester = match.group(1).strip() if match else None
        if not year:
            match = self.YEAR_PATTERN.search(text)
            year = int(match.group(1)) if match else reference.year

        return {
            "course_name": course_name or "Unknown Course",
            "course_code": course_code or "UNKNOWN",
            "semester": semester or "Unknown",
            "year": year,
        }
