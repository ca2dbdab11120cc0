"""
PDF text extraction for uploaded syllabi.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, List, Tuple, Union

import pdfplumber

from .errors import PDFExtractionError
from .event_utils import normalize_text

logger = logging.getLogger(__name__)

SYLLABUS_KEYWORDS = [
    'syllabus',
    'course description',
    'assignments',
    'due date',
    'deadline',
    'exam',
    'midterm',
    'final',
    'reading',
    'schedule',
    'calendar',
    'grading',
    'rubric',
    'course outline',
    'learning objectives',
]


class PDFExtractor:
    """Extracts text from a syllabus PDF."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        """Initialize extractor and read every page.

        Args:
            source: Path to a PDF file, or a binary file object

        Raises:
            PDFExtractionError: If the file is not a readable PDF
        """
        self.source = source
        self.pages_text: List[Tuple[int, str]] = []
        self._load_pdf()

    def _load_pdf(self):
        """Load PDF and extract text page by page."""
        try:
            with pdfplumber.open(self.source) as pdf:
                for page_num, page in enumerate(pdf.pages, start=1):
                    text = page.extract_text()
                    if text:
                        self.pages_text.append((page_num, text))
        except Exception as e:
            raise PDFExtractionError(f"Failed to parse PDF: {e}") from e
        logger.debug("Read %d pages with text", len(self.pages_text))

    @property
    def page_count(self) -> int:
        return len(self.pages_text)

    def extract_text(self) -> str:
        """Return all page text joined by blank lines.

        Raises:
            PDFExtractionError: If no page contains text
        """
        text = "\n\n".join(text for _, text in self.pages_text).strip()
        if not text:
            raise PDFExtractionError("No text could be extracted from the PDF")
        return text


def extract_text_from_bytes(data: bytes) -> str:
    """Extract text from an in-memory PDF.

    Raises:
        PDFExtractionError: If the bytes are not a readable PDF or hold no text
    """
    if not data:
        raise PDFExtractionError("Empty PDF upload")
    return PDFExtractor(io.BytesIO(data)).extract_text()


def clean_pdf_text(text: str) -> str:
    """Remove form feeds, page numbers and excess blank lines."""
    return normalize_text(text)


def is_likely_syllabus(text: str) -> bool:
    """Check whether at least three syllabus keywords appear in the text."""
    lower_text = text.lower()
    matches = sum(1 for keyword in SYLLABUS_KEYWORDS if keyword in lower_text)
    return matches >= 3
