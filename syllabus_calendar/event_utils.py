"""
Helpers shared by both extraction paths.

Title cleanup, text normalization and event identity live here so the
model-assisted and deterministic extractors produce ids the same way.
"""

import re
from datetime import date, time
from typing import Dict, Hashable, List, Optional

# Undated items are placed on this day so they sort after everything else
PLACEHOLDER_DATE = date(2099, 12, 31)

MONTH_NAMES = (
    "January|February|March|April|May|June|July|August|"
    "September|October|November|December"
)

# Date substrings removed from titles
_TITLE_DATE_PATTERNS = [
    re.compile(r'\b\d{1,2}/\d{1,2}/\d{2,4}\b'),
    re.compile(rf'\b(?:{MONTH_NAMES})\s+\d{{1,2}},?\s+\d{{4}}\b', re.IGNORECASE),
    re.compile(rf'\b\d{{1,2}}\s+(?:{MONTH_NAMES})\s+\d{{4}}\b', re.IGNORECASE),
    re.compile(r'\b\d{4}-\d{1,2}-\d{1,2}\b'),
]

_TITLE_PREFIX = re.compile(
    r'^(?:assignment|homework|hw|exam|test|quiz|reading|due|deadline)\s*:\s*',
    re.IGNORECASE,
)

_PAGE_NUMBER_LINE = re.compile(r'^\s*\d+\s*$', re.MULTILINE)
_PAGE_X_OF_Y = re.compile(r'Page\s+\d+\s+of\s+\d+', re.IGNORECASE)

_TIME_OF_DAY = re.compile(r'\b(\d{1,2})(?::(\d{2}))?\s*([ap])\.?\s*m\.?', re.IGNORECASE)
_TIME_24H = re.compile(r'\b([01]?\d|2[0-3]):([0-5]\d)\b')


def normalize_text(text: str) -> str:
    """Normalize raw syllabus text for line-oriented parsing.

    Line endings are unified, runs of spaces and tabs inside a line are
    collapsed, standalone page numbers and "Page X of Y" markers are dropped
    and runs of blank lines are squeezed to one.
    """
    text = text.replace('\r\n', '\n').replace('\r', '\n').replace('\f', '\n')
    text = _PAGE_X_OF_Y.sub('', text)
    text = _PAGE_NUMBER_LINE.sub('', text)
    text = re.sub(r"[ \t\u00a0]+", " ", text)
    text = re.sub(r' *\n *', '\n', text)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def slugify_title(title: str) -> str:
    """Lowercase a title and reduce it to ``[a-z0-9-]``."""
    slug = re.sub(r'\s+', '-', title.strip().lower())
    slug = re.sub(r'[^a-z0-9-]', '', slug)
    return re.sub(r'-{2,}', '-', slug).strip('-')


def generate_event_id(title: str, event_date: date) -> str:
    """Derive an event id from its title and date."""
    return f"{slugify_title(title)}-{event_date.isoformat()}"


def clean_event_title(line: str, matched_text: Optional[str] = None) -> str:
    """Turn a syllabus line into a short event title.

    Strips a leading label such as "Assignment:" or "Due:", every date
    substring, and the matched date text itself, then tidies the separators
    left behind.

    Args:
        line: Source line containing the event
        matched_text: Exact date text the line was found by

    Returns:
        Cleaned title (falls back to the stripped line if nothing is left)
    """
    title = _TITLE_PREFIX.sub('', line.strip())

    if matched_text:
        title = re.sub(re.escape(matched_text), ' ', title, flags=re.IGNORECASE)
    for pattern in _TITLE_DATE_PATTERNS:
        title = pattern.sub(' ', title)

    title = re.sub(r'\(\s*\)', ' ', title)
    title = re.sub(r'\s+', ' ', title)
    title = title.strip(' \t-–—:;,|')
    return title or line.strip()


def parse_time_of_day(value: Optional[str]) -> Optional[time]:
    """Parse a free-text time such as "2 PM", "9:30 a.m." or "14:00".

    Returns:
        The first time found, or None
    """
    if not isinstance(value, str) or not value:
        return None

    match = _TIME_OF_DAY.search(value)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        if not 1 <= hour <= 12 or minute > 59:
            return None
        if match.group(3).lower() == 'p' and hour != 12:
            hour += 12
        elif match.group(3).lower() == 'a' and hour == 12:
            hour = 0
        return time(hour, minute)

    match = _TIME_24H.search(value)
    if match:
        return time(int(match.group(1)), int(match.group(2)))
    return None


class EventIdAllocator:
    """Hands out event ids that are unique within one parse result.

    Two events with the same cleaned title and date would share a base id.
    An exact repeat (same fingerprint) is reported as a duplicate; a distinct
    event gets a sequence suffix ("-2", "-3", ...) instead of being dropped.
    """

    def __init__(self):
        self._fingerprints: Dict[str, List[Hashable]] = {}

    def allocate(self, title: str, event_date: date, fingerprint: Hashable) -> Optional[str]:
        """Return a fresh id, or None when the event was already seen.

        Args:
            title: Event title the id is derived from
            event_date: Event date
            fingerprint: Value identifying the event's content

        Returns:
            Unique id, or None for an exact duplicate
        """
        base_id = generate_event_id(title, event_date)
        seen = self._fingerprints.setdefault(base_id, [])
        if fingerprint in seen:
            return None
        seen.append(fingerprint)
        if len(seen) == 1:
            return base_id
        return f"{base_id}-{len(seen)}"
