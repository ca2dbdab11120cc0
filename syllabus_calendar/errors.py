"""Exceptions raised by the syllabus calendar pipeline."""

from typing import Optional


class SyllabusCalendarError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SyllabusCalendarError):
    """A required setting (API key, OAuth client) is missing or invalid."""


class PDFExtractionError(SyllabusCalendarError):
    """The uploaded document could not be read or contains no text."""


class ModelUnavailableError(SyllabusCalendarError):
    """The language model is disabled, unconfigured or could not be reached."""


class ModelResponseError(SyllabusCalendarError):
    """The language model returned malformed, incomplete or truncated output."""

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


class NotAuthenticatedError(SyllabusCalendarError):
    """A calendar operation was attempted without valid OAuth credentials."""


class CalendarSyncError(SyllabusCalendarError):
    """A calendar API call failed."""
