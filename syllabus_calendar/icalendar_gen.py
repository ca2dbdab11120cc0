"""
iCalendar generation module.

Generates standards-compliant .ics files for calendar import.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from icalendar import Calendar, Event
from pytz import timezone

from .config import DEFAULT_TIMEZONE
from .event_utils import PLACEHOLDER_DATE, parse_time_of_day
from .models import CalendarEvent, EventType, ParsedSyllabus, Priority

# RFC 5545 PRIORITY: 1 highest, 9 lowest
ICAL_PRIORITY = {
    Priority.URGENT: 1,
    Priority.HIGH: 3,
    Priority.MEDIUM: 5,
    Priority.LOW: 9,
}

UID_DOMAIN = "syllabus-calendar"


class ICalendarGenerator:
    """Generates iCalendar (.ics) files from parsed syllabus events."""

    def __init__(self, timezone_str: str = DEFAULT_TIMEZONE):
        """Initialize calendar generator.

        Args:
            timezone_str: Timezone for timed events (default: America/New_York)
        """
        self.tz = timezone(timezone_str)

    def generate_calendar(self, syllabus: ParsedSyllabus) -> Calendar:
        """Generate a calendar with one event per dated syllabus event.

        Undated activities (placed on the placeholder date) are left out.

        Args:
            syllabus: Parsed syllabus

        Returns:
            Calendar object ready for export
        """
        return self.generate_from_events(syllabus.events, syllabus.course_name)

    def generate_from_events(self, events: Iterable[CalendarEvent],
                             course_name: Optional[str] = None) -> Calendar:
        """Generate a calendar from a list of events."""
        cal = Calendar()
        cal.add('prodid', '-//Syllabus Calendar//EN')
        cal.add('version', '2.0')
        cal.add('calscale', 'GREGORIAN')
        cal.add('method', 'PUBLISH')
        if course_name:
            cal.add('x-wr-calname', course_name)

        for event in events:
            if event.date == PLACEHOLDER_DATE:
                continue
            cal.add_component(self._create_event(event, course_name))

        return cal

    def _create_event(self, event: CalendarEvent, course_name: Optional[str]) -> Event:
        """Create a VEVENT, all-day unless the event has a parseable time.

        Args:
            event: Syllabus event
            course_name: Course name used when the event has none

        Returns:
            Event object
        """
        vevent = Event()
        vevent.add('uid', f"{event.id}@{UID_DOMAIN}")
        vevent.add('dtstamp', datetime.now(self.tz))
        vevent.add('summary', event.title)

        start_time = parse_time_of_day(event.time)
        if start_time is not None:
            start = self.tz.localize(datetime.combine(event.date, start_time))
            minutes = 60 if event.type in (EventType.ASSIGNMENT, EventType.EXAM) else 30
            vevent.add('dtstart', start)
            vevent.add('dtend', start + timedelta(minutes=minutes))
        else:
            vevent.add('dtstart', event.date)
            vevent.add('dtend', event.date + timedelta(days=1))

        desc_parts = []
        if event.description:
            desc_parts.append(event.description)
        course = event.course or course_name
        if course:
            desc_parts.append(f"Course: {course}")
        desc_parts.append(f"Type: {event.type.value}")
        desc_parts.append(f"Priority: {event.priority.value}")
        vevent.add('description', "\n".join(desc_parts))
        vevent.add('priority', ICAL_PRIORITY.get(event.priority, 5))

        return vevent

    def to_ics_bytes(self, calendar: Calendar) -> bytes:
        """Serialize a calendar to .ics bytes."""
        return calendar.to_ical()

    def export_to_file(self, calendar: Calendar, filepath: str):
        """Export calendar to .ics file.

        Args:
            calendar: Calendar object
            filepath: Path to output file
        """
        with open(filepath, 'wb') as f:
            f.write(calendar.to_ical())
