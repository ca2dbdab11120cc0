"""
Date resolution for syllabus text.

Turns date-like substrings ("03/15/2024", "March 15, 2024", "Week 3") into
calendar dates and finds every date occurrence in a block of text.
"""

import re
from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional

import dateparser

from .event_utils import MONTH_NAMES
from .models import Confidence, DateParseResult

# Explicit templates, tried in order. The first one that parses wins.
DATE_FORMATS = [
    '%m/%d/%Y',       # 03/15/2024, 3/15/2024
    '%m/%d/%y',       # 03/15/24
    '%Y-%m-%d',       # 2024-03-15
    '%m-%d-%Y',       # 03-15-2024
    '%B %d, %Y',      # March 15, 2024
    '%B %d %Y',       # March 15 2024
    '%b %d, %Y',      # Mar 15, 2024
    '%b %d %Y',       # Mar 15 2024
    '%d %B %Y',       # 15 March 2024
    '%d %b %Y',       # 15 Mar 2024
]

# Templates without a year take the reference date's year
YEARLESS_FORMATS = [
    '%B %d',          # March 15
    '%b %d',          # Mar 15
    '%m/%d',          # 03/15
]

# "Week 3", "Day 5", "Class 12", "Session 4"
RELATIVE_PATTERNS = [
    re.compile(r'\bweek\s+(\d+)\b', re.IGNORECASE),
    re.compile(r'\bday\s+(\d+)\b', re.IGNORECASE),
    re.compile(r'\bclass\s+(\d+)\b', re.IGNORECASE),
    re.compile(r'\bsession\s+(\d+)\b', re.IGNORECASE),
]

# Families used to find date occurrences in running text
EXTRACTION_PATTERNS = [
    re.compile(r'\b\d{1,2}/\d{1,2}/\d{2,4}\b'),
    re.compile(rf'\b(?:{MONTH_NAMES})\s+\d{{1,2}},?\s+\d{{4}}\b', re.IGNORECASE),
    re.compile(rf'\b\d{{1,2}}\s+(?:{MONTH_NAMES})\s+\d{{4}}\b', re.IGNORECASE),
    re.compile(r'\b\d{4}-\d{1,2}-\d{1,2}\b'),
    re.compile(r'\b(?:week|day|class|session)\s+\d+\b', re.IGNORECASE),
]


class DateResolver:
    """Resolves date-like strings against a reference date.

    The reference date stands in for the start of the academic term: "Week N"
    is interpreted as ``reference + (N - 1)`` weeks.
    """

    def resolve(self, candidate: str, reference: Optional[date] = None) -> DateParseResult:
        """Parse one date-like string.

        Strategies are tried in order and the first success wins:
        1. explicit templates (confidence high)
        2. relative "week/day/class/session N" patterns (confidence medium)
        3. dateparser's general-purpose parse (confidence medium)

        Args:
            candidate: Text to parse
            reference: Reference date (defaults to today)

        Returns:
            DateParseResult; ``date`` is None when nothing matched
        """
        reference = reference or date.today()
        clean = re.sub(r'\s+', ' ', candidate.strip())

        if clean:
            parsed = self._parse_explicit(clean, reference)
            if parsed is not None:
                parsed_date, fmt = parsed
                return DateParseResult(
                    date=parsed_date,
                    confidence=Confidence.HIGH,
                    original_text=candidate,
                    parsed_format=fmt,
                )

            relative = self._parse_relative(clean, reference)
            if relative is not None:
                return DateParseResult(
                    date=relative,
                    confidence=Confidence.MEDIUM,
                    original_text=candidate,
                    parsed_format='relative',
                )

            native = self._parse_native(clean, reference)
            if native is not None:
                return DateParseResult(
                    date=native,
                    confidence=Confidence.MEDIUM,
                    original_text=candidate,
                    parsed_format='native',
                )

        return DateParseResult(date=None, confidence=Confidence.LOW, original_text=candidate)

    def _parse_explicit(self, text: str, reference: date):
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date(), fmt
            except ValueError:
                continue

        # Appending the year keeps Feb 29 valid in leap years
        for fmt in YEARLESS_FORMATS:
            try:
                parsed = datetime.strptime(f"{text} {reference.year}", f"{fmt} %Y")
                return parsed.date(), fmt
            except ValueError:
                continue

        return None

    def _parse_relative(self, text: str, reference: date) -> Optional[date]:
        for pattern in RELATIVE_PATTERNS:
            match = pattern.search(text)
            if match:
                number = int(match.group(1))
                return reference + timedelta(weeks=number - 1)
        return None

    def _parse_native(self, text: str, reference: date) -> Optional[date]:
        try:
            parsed = dateparser.parse(
                text,
                languages=['en'],
                settings={'RELATIVE_BASE': datetime.combine(reference, datetime.min.time())},
            )
        except (ValueError, OverflowError):
            return None
        return parsed.date() if parsed else None

    def iter_matches(self, text: str) -> Iterator[str]:
        """Yield each distinct date-like substring of ``text``.

        Matches are compared case-insensitively; only the first spelling of
        a repeated match is yielded.
        """
        seen = set()
        for pattern in EXTRACTION_PATTERNS:
            for match in pattern.finditer(text):
                matched = match.group(0)
                key = matched.lower()
                if key in seen:
                    continue
                seen.add(key)
                yield matched

    def extract_all(self, text: str, reference: Optional[date] = None) -> List[DateParseResult]:
        """Find and resolve every date occurrence in a block of text.

        Args:
            text: Text to scan
            reference: Reference date (defaults to today)

        Returns:
            Resolved dates only, highest confidence first, then earliest date
        """
        reference = reference or date.today()
        results = []
        for matched in self.iter_matches(text):
            result = self.resolve(matched, reference)
            if result.date is not None:
                results.append(result)

        results.sort(key=lambda r: (-r.confidence.rank, r.date))
        return results


def format_date(d: date, format_string: str = '%B %d, %Y') -> str:
    """Format a date for display."""
    return d.strftime(format_string)


def is_future_date(d: date, reference: Optional[date] = None) -> bool:
    """Check whether a date falls after the reference date."""
    return d > (reference or date.today())


def is_reasonable_academic_date(d: date, reference: Optional[date] = None) -> bool:
    """Check whether a date lies within one year before and two years after the reference."""
    reference = reference or date.today()
    return reference - timedelta(days=365) <= d <= reference + timedelta(days=730)
