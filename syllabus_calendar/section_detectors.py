"""
Schedule section detection.

Syllabi bury the dated schedule among policies and contact details. Before
text is sent to the model, a prioritized list of detectors tries to cut out
just the schedule. New heuristics are added by appending a detector.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence

logger = logging.getLogger(__name__)

# Each section runs until the next "Week N" heading or the end of the text
_UNTIL_NEXT_WEEK = r'(?=Week \d+|\Z)'


@dataclass(frozen=True)
class SectionDetector:
    """A named pattern that finds one kind of schedule section.

    The joined matches only count when they are longer than ``min_length``
    characters; a handful of stray hits is not a schedule.
    """
    name: str
    pattern: Pattern
    min_length: int = 100

    def detect(self, text: str) -> Optional[str]:
        """Return the joined matches, or None if they are too short."""
        matches = [m.group(0) for m in self.pattern.finditer(text)]
        if not matches:
            return None
        section = '\n'.join(matches)
        if len(section) <= self.min_length:
            return None
        return section


def _detector(name: str, heading: str, min_length: int) -> SectionDetector:
    return SectionDetector(
        name=name,
        pattern=re.compile(heading + r'.*?' + _UNTIL_NEXT_WEEK, re.DOTALL),
        min_length=min_length,
    )


# Weekly schedules first, then assignment schedules
DEFAULT_DETECTORS: List[SectionDetector] = [
    _detector('weekly', r'Week \d+', 100),
    _detector('weekly-detail', r'Here are the first.*?weeks in more detail:', 100),
    _detector('weekly-assignments', r'Weekly Assignments', 100),
    _detector('assignment-schedule', r'Assignment Schedule', 100),
    _detector('week-date-assignments', r'Week Date Assignments', 50),
    _detector('writing-assignment', r'Writing Assignment Due', 50),
    _detector('appellate-brief', r'APPELLATE BRIEF DUE', 50),
]


def extract_schedule_section(text: str,
                             detectors: Sequence[SectionDetector] = DEFAULT_DETECTORS) -> Optional[str]:
    """Run detectors in order and return the first substantial section.

    Args:
        text: Raw syllabus text
        detectors: Detectors in priority order

    Returns:
        The detected section text, or None if no detector fired
    """
    for detector in detectors:
        section = detector.detect(text)
        if section is not None:
            logger.debug("Schedule section found by '%s' detector (%d chars)",
                         detector.name, len(section))
            return section
    return None
