"""
Parsing orchestrator.

Runs an ordered chain of extraction strategies over a syllabus and returns
the first successful result. The last strategy's result is returned as is,
successful or not.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from .models import ParseRequest, ParsingMethod, ParsingResult

logger = logging.getLogger(__name__)


class SyllabusParser:
    """Strategy chain over syllabus extractors.

    Each strategy exposes ``name`` and ``attempt(request) -> ParsingResult``.
    The default chain is model-assisted extraction followed by deterministic
    extraction.
    """

    def __init__(self, strategies: Optional[Sequence] = None):
        if strategies is None:
            from .llm_extractor import LLMExtractor
            from .regex_extractor import RegexExtractor
            strategies = [LLMExtractor(), RegexExtractor()]
        if not strategies:
            raise ValueError("SyllabusParser needs at least one strategy")
        self.strategies = list(strategies)

    def parse_syllabus(self, text: str,
                       course_name: Optional[str] = None,
                       course_code: Optional[str] = None,
                       semester: Optional[str] = None,
                       year: Optional[int] = None,
                       reference_date: Optional[date] = None) -> ParsingResult:
        """Parse syllabus text into calendar events.

        Args:
            text: Raw syllabus text
            course_name: Optional course name
            course_code: Optional course code
            semester: Optional semester
            year: Optional year
            reference_date: Term start for "Week N" references (defaults to today)

        Returns:
            The first successful strategy result, else the last strategy's
            result. Never raises.
        """
        request = ParseRequest(
            text=text,
            course_name=course_name,
            course_code=course_code,
            semester=semester,
            year=year,
            reference_date=reference_date,
        )

        try:
            result = None
            for index, strategy in enumerate(self.strategies):
                result = strategy.attempt(request)
                if result.success:
                    return result

                name = getattr(strategy, 'name', type(strategy).__name__)
                if index < len(self.strategies) - 1:
                    logger.info("%s parsing failed, falling back: %s", name, result.error)
                else:
                    logger.warning("%s parsing failed: %s", name, result.error)
            return result
        except Exception as e:
            logger.exception("Syllabus parsing error")
            return ParsingResult(
                success=False,
                error=str(e) or "Unknown parsing error",
                confidence=0,
                method=ParsingMethod.FALLBACK,
            )
