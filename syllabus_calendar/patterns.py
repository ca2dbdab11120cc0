"""
Keyword families that label a syllabus line as an event type.
"""

import re
from typing import List, Pattern, Tuple

from .models import EventType, Priority


def _compile(patterns: List[str]) -> List[Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


class PatternClassifier:
    """Classifies a line of syllabus text.

    Families are tested in a fixed order and the first match wins. Assignment
    language is checked before exam and deadline language, so a line such as
    "Project 2 due before the final exam" is an assignment.
    """

    ASSIGNMENT_PATTERNS = _compile([
        r'\bassignment\s*#?\s*\d+',
        r'\bhomework\s*#?\s*\d+',
        r'\bhw\s*#?\s*\d+',
        r'\bproblem\s*set\s*#?\s*\d+',
        r'\bps\s*#?\s*\d+',
        r'\bpaper\s*#?\s*\d+',
        r'\bessay\s*#?\s*\d+',
        r'\bproject\s*#?\s*\d+',
        r'\bmemo\s*#?\s*\d+',
        r'\bbrief\s*#?\s*\d+',
    ])

    EXAM_PATTERNS = _compile([
        r'\bmidterm\b',
        r'\bfinal(?:\s+exam)?\b',
        r'\bexam\s*#?\s*\d+',
        r'\btest\s*#?\s*\d+',
        r'\bquiz\s*#?\s*\d+',
    ])

    READING_PATTERNS = _compile([
        r'\bread\s+(?:chapter|ch\.?)\s*\d+',
        r'\bchapters?\s+\d+',
        r'\breading\s*#?\s*\d+',
        r'\bcase\s*#?\s*\d+',
        r'\barticle\s*#?\s*\d+',
        r'\btextbook\s*#?\s*\d+',
    ])

    DEADLINE_PATTERNS = _compile([
        r'\bdue\s+(?:by|on|at)\b',
        r'\bdeadline\b',
        r'\bsubmit',
        r'\bturn\s+in\b',
        r'\bhand\s+in\b',
    ])

    def __init__(self):
        self.families: List[Tuple[List[Pattern], EventType, Priority]] = [
            (self.ASSIGNMENT_PATTERNS, EventType.ASSIGNMENT, Priority.HIGH),
            (self.EXAM_PATTERNS, EventType.EXAM, Priority.URGENT),
            (self.READING_PATTERNS, EventType.READING, Priority.MEDIUM),
            (self.DEADLINE_PATTERNS, EventType.DEADLINE, Priority.HIGH),
        ]

    def classify(self, line: str) -> Tuple[EventType, Priority]:
        """Return the event type and default priority for a line."""
        for patterns, event_type, priority in self.families:
            if any(p.search(line) for p in patterns):
                return event_type, priority
        return EventType.OTHER, Priority.MEDIUM
