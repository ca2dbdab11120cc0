"""
Service wiring.

Holds the long-lived handles (OpenAI client, Google Calendar client, parser)
and builds each one at most once per process. Tests pass fakes in through
the constructor instead.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from .calendar_sync import CalendarSyncAdapter
from .config import Settings, get_settings
from .google_calendar import GoogleCalendarService
from .icalendar_gen import ICalendarGenerator
from .llm_extractor import LLMExtractor, create_openai_client
from .parser import SyllabusParser
from .regex_extractor import RegexExtractor

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Thread-safe, memoized access to the app's services."""

    def __init__(self, settings: Optional[Settings] = None,
                 llm_client: Any = None,
                 calendar_service: Optional[GoogleCalendarService] = None,
                 parser: Optional[SyllabusParser] = None,
                 calendar_service_builder: Optional[Callable[..., Any]] = None):
        self.settings = settings or get_settings()
        self._lock = threading.Lock()
        self._llm_client = llm_client
        self._calendar_service = calendar_service
        self._parser = parser
        self._calendar_service_builder = calendar_service_builder
        self._llm_extractor: Optional[LLMExtractor] = None

    def llm_client(self):
        """Return the OpenAI client, building it on first use.

        Raises:
            ConfigurationError: If no API key is configured
        """
        with self._lock:
            if self._llm_client is None:
                logger.info("Initializing OpenAI client for model %s", self.settings.llm_model)
                self._llm_client = create_openai_client(self.settings)
            return self._llm_client

    @property
    def calendar_service(self) -> GoogleCalendarService:
        with self._lock:
            if self._calendar_service is None:
                self._calendar_service = GoogleCalendarService(
                    self.settings, service_builder=self._calendar_service_builder
                )
            return self._calendar_service

    @property
    def llm_extractor(self) -> LLMExtractor:
        with self._lock:
            if self._llm_extractor is None:
                self._llm_extractor = LLMExtractor(
                    self.settings, client_factory=self.llm_client
                )
            return self._llm_extractor

    @property
    def parser(self) -> SyllabusParser:
        extractor = self.llm_extractor
        with self._lock:
            if self._parser is None:
                self._parser = SyllabusParser([extractor, RegexExtractor()])
            return self._parser

    def calendar_service_for(self, tokens: Dict[str, Any]) -> GoogleCalendarService:
        """Build a calendar client for one request's tokens.

        The shared ``calendar_service`` is not modified.

        Raises:
            ValueError: If the tokens hold neither an access nor a refresh token
        """
        service = GoogleCalendarService(self.settings, service_builder=self._calendar_service_builder)
        service.set_credentials(tokens)
        return service

    def sync_adapter(self, calendar_service: Optional[GoogleCalendarService] = None) -> CalendarSyncAdapter:
        return CalendarSyncAdapter(calendar_service or self.calendar_service,
                                   self.settings.calendar_timezone)

    def ics_generator(self) -> ICalendarGenerator:
        return ICalendarGenerator(self.settings.calendar_timezone)
