"""
Push parsed events to Google Calendar.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Any, Dict, Iterable, Optional

import pytz

from .config import DEFAULT_TIMEZONE
from .errors import NotAuthenticatedError
from .event_utils import parse_time_of_day
from .models import CalendarEvent, EventType, SyncResult

logger = logging.getLogger(__name__)

# Google Calendar color ids
COLOR_IDS = {
    EventType.ASSIGNMENT: '5',   # Yellow
    EventType.EXAM: '11',        # Red
    EventType.READING: '10',     # Green
    EventType.CLASS: '6',        # Orange
    EventType.DEADLINE: '11',    # Red
}
DEFAULT_COLOR_ID = '1'           # Blue

HOUR_LONG_TYPES = {EventType.ASSIGNMENT, EventType.EXAM}


def map_to_google_event(event: CalendarEvent, course: Optional[str] = None,
                        timezone: str = DEFAULT_TIMEZONE) -> Dict[str, Any]:
    """Build a Calendar v3 event body for a CalendarEvent.

    Events start at midnight on their date, or at their parsed time of day,
    and last an hour (assignments and exams) or half an hour.

    Args:
        event: Event to map
        course: Course name used when the event has none
        timezone: IANA timezone the start time is local to

    Returns:
        Request body for ``events.insert``
    """
    tz = pytz.timezone(timezone)
    start_time = parse_time_of_day(event.time) or time(0, 0)
    start = tz.localize(datetime.combine(event.date, start_time))
    minutes = 60 if event.type in HOUR_LONG_TYPES else 30
    end = tz.normalize(start + timedelta(minutes=minutes))

    description = event.description or (
        f"Course: {event.course or course or 'N/A'}\n"
        f"Type: {event.type.value}\n"
        f"Priority: {event.priority.value}"
    )

    return {
        'summary': event.title,
        'description': description,
        'start': {'dateTime': start.isoformat(), 'timeZone': timezone},
        'end': {'dateTime': end.isoformat(), 'timeZone': timezone},
        'colorId': COLOR_IDS.get(event.type, DEFAULT_COLOR_ID),
        'reminders': {'useDefault': True},
    }


class CalendarSyncAdapter:
    """Inserts events one by one and reports partial success.

    A failed insert is recorded and the remaining events are still
    attempted. Nothing is retried or rolled back.
    """

    def __init__(self, calendar_service, timezone: Optional[str] = None):
        self.calendar_service = calendar_service
        settings = getattr(calendar_service, 'settings', None)
        self.timezone = timezone or getattr(settings, 'calendar_timezone', DEFAULT_TIMEZONE)

    def sync(self, events: Iterable[CalendarEvent], calendar_id: str = 'primary',
             course: Optional[str] = None) -> SyncResult:
        """Insert events into a calendar in input order.

        Args:
            events: Events to insert
            calendar_id: Target calendar ("primary" for the user's main calendar)
            course: Course name for events without a description

        Returns:
            SyncResult; ``success`` is True only when every insert succeeded

        Raises:
            NotAuthenticatedError: Without valid Google credentials
        """
        if not self.calendar_service.has_valid_credentials():
            raise NotAuthenticatedError("Not authenticated with Google Calendar")

        result = SyncResult(success=True, calendar_id=calendar_id)

        for event in events:
            try:
                payload = map_to_google_event(event, course=course, timezone=self.timezone)
                self.calendar_service.insert_event(calendar_id, payload)
                result.synced_events += 1
            except Exception as e:
                result.failed_events += 1
                result.errors.append(f'Failed to sync "{event.title}": {e}')
                logger.error('Error syncing event "%s": %s', event.title, e)

        result.success = result.failed_events == 0
        logger.info("Synced %d events to %s, %d failed",
                    result.synced_events, calendar_id, result.failed_events)
        return result
