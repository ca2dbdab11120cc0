"""
Prompt text for model-assisted syllabus extraction.
"""

from datetime import date
from typing import Optional

SYSTEM_PROMPT = (
    "You are an expert at parsing academic syllabi and extracting structured "
    "information. Always return valid JSON."
)

RESPONSE_SHAPE = """{
  "assignments": [
    {
      "title": "Assignment Name",
      "due_date": "2025-01-17",
      "details": "Assignment description",
      "priority": "medium"
    }
  ],
  "exams": [
    {
      "title": "Midterm Exam",
      "date": "2025-03-15",
      "time": "2:00 PM",
      "details": "In-class examination",
      "priority": "high"
    }
  ],
  "activities": [
    {
      "title": "Week 1 Monday: Introduction materials",
      "details": "Introduction materials",
      "type": "reading",
      "priority": "medium"
    }
  ],
  "course_info": {
    "course_name": "Extracted or provided course name",
    "course_code": "Extracted or provided course code",
    "semester": "Extracted or provided semester",
    "year": 2025
  },
  "confidence_score": 90
}"""

EXTRACTION_RULES = """EXTRACTION RULES:
1. FIND ALL weekly schedules, assignment schedules, and reading schedules
2. EXTRACT EVERY week's content (Week 1, Week 2, Week 3, etc.)
3. EXTRACT assignments with due dates
4. EXTRACT readings with page numbers and case names
5. EXTRACT exams with dates and start times
6. EXTRACT project deadlines, presentations, quizzes, midterms, finals
7. EXTRACT discussion posts and participation requirements
8. EXTRACT lab sessions and tutorials if they have specific dates
9. IGNORE: course descriptions, policies, contact info, office hours, email
   instructions, class meeting times, attendance and absence policies,
   general materials, grading scales"""

DATE_RULES = """DATE RULES:
- Write every due_date and date as YYYY-MM-DD.
- Convert "Week N" references to calendar dates only when the start of the
  term is stated in the text or given above.
- Never invent a date. An item without a specific date (including "TBD")
  belongs in activities, not in assignments or exams.
- priority is one of: urgent, high, medium, low."""


def format_course_context(course_name: Optional[str] = None,
                          course_code: Optional[str] = None,
                          semester: Optional[str] = None,
                          year: Optional[int] = None,
                          term_start: Optional[date] = None) -> str:
    """Render caller-supplied course metadata, or ''."""
    lines = []
    if course_name:
        context = f"Course: {course_name}"
        if course_code:
            context += f" ({course_code})"
        if semester:
            context += f" - {semester}"
        if year:
            context += f" {year}"
        lines.append(context)
    if term_start:
        lines.append(f"Term starts (Week 1): {term_start.isoformat()}")
    return "\n".join(lines)


def build_extraction_prompt(text: str,
                            course_name: Optional[str] = None,
                            course_code: Optional[str] = None,
                            semester: Optional[str] = None,
                            year: Optional[int] = None,
                            term_start: Optional[date] = None) -> str:
    """Build the user message asking the model for structured events.

    Args:
        text: Preprocessed syllabus text
        course_name: Optional course name supplied by the caller
        course_code: Optional course code supplied by the caller
        semester: Optional semester supplied by the caller
        year: Optional year supplied by the caller
        term_start: Optional start of Week 1

    Returns:
        Prompt text
    """
    context = format_course_context(course_name, course_code, semester, year, term_start)

    return f"""You are an expert at parsing academic syllabi. Extract ALL specific assignments, readings, and exams from the syllabus text below.

CRITICAL: Extract EVERY week's assignments, not just the first week!

{context}

Syllabus Text:
{text}

{EXTRACTION_RULES}

{DATE_RULES}

Return JSON with this structure:
{RESPONSE_SHAPE}

CRITICAL: Extract ALL weeks, not just Week 1. Look for every "Week X:" pattern in the text.
CRITICAL: Only use specific dates if explicitly found in the text. Otherwise, put items in activities section.

JSON Response:"""
