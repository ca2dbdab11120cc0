"""
Main CLI entry point for the syllabus to calendar converter.
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from .errors import PDFExtractionError
from .icalendar_gen import ICalendarGenerator
from .logging_setup import setup_logging
from .models import result_to_dict
from .pdf_extractor import PDFExtractor, clean_pdf_text
from .services import ServiceContainer

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {'.pdf', '.txt'}


def read_syllabus(path: Path) -> str:
    """Read syllabus text from a PDF or plain text file.

    Raises:
        PDFExtractionError: If a PDF holds no readable text
    """
    if path.suffix.lower() == '.pdf':
        return PDFExtractor(path).extract_text()
    return path.read_text(encoding='utf-8')


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a course syllabus (PDF or text) to calendar events"
    )
    parser.add_argument(
        "path",
        type=str,
        help="Path to syllabus PDF or .txt file"
    )
    parser.add_argument("--course-name", help="Course name (overrides the syllabus)")
    parser.add_argument("--course-code", help="Course code (overrides the syllabus)")
    parser.add_argument("--semester", help="Semester, e.g. 'Spring'")
    parser.add_argument("--year", type=int, help="Academic year")
    parser.add_argument(
        "--term-start",
        type=date.fromisoformat,
        help="First day of Week 1 (YYYY-MM-DD), used for 'Week N' references"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=".",
        help="Output directory for JSON and .ics files (default: current directory)"
    )
    parser.add_argument(
        "--ics",
        action="store_true",
        help="Also write an .ics calendar file"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)"
    )
    return parser


def main(argv: Optional[List[str]] = None, container: Optional[ServiceContainer] = None) -> int:
    """Main CLI entry point."""
    args = build_arg_parser().parse_args(argv)
    container = container or ServiceContainer()
    setup_logging(args.log_level or container.settings.log_level)

    path = Path(args.path)
    if not path.exists():
        print(f"Error: file not found: {path}")
        return 1
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        print(f"Error: unsupported file type '{path.suffix}' (expected .pdf or .txt)")
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Reading syllabus: {path}")
    try:
        text = clean_pdf_text(read_syllabus(path))
    except PDFExtractionError as e:
        print(f"Error: {e}")
        return 1

    result = container.parser.parse_syllabus(
        text,
        course_name=args.course_name,
        course_code=args.course_code,
        semester=args.semester,
        year=args.year,
        reference_date=args.term_start,
    )

    if not result.success:
        print(f"Error: could not extract events ({result.error})")
        return 1

    syllabus = result.data
    print(f"Found {len(syllabus.events)} events using {result.method.value} parsing "
          f"(confidence {result.confidence})")

    json_path = output_dir / f"{path.stem}_events.json"
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(result_to_dict(result), f, indent=2)
    print(f"Saved events to: {json_path}")

    if args.ics:
        cal_gen = ICalendarGenerator(timezone_str=container.settings.calendar_timezone)
        ics_path = output_dir / f"{path.stem}.ics"
        cal_gen.export_to_file(cal_gen.generate_calendar(syllabus), str(ics_path))
        print(f"Saved calendar to: {ics_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
