"""Shared fixtures and fakes for the test suite."""

import json
from datetime import date
from types import SimpleNamespace

import pytest

from syllabus_calendar.config import Settings
from syllabus_calendar.errors import CalendarSyncError, NotAuthenticatedError


class FakeCompletions:
    """Stands in for ``client.chat.completions``."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Minimal OpenAI client returning a canned reply."""

    def __init__(self, content=None, error=None):
        if isinstance(content, dict):
            content = json.dumps(content)
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeCalendarService:
    """In-memory replacement for GoogleCalendarService."""

    def __init__(self, authenticated=True, fail_titles=()):
        self.settings = Settings()
        self.authenticated = authenticated
        self.fail_titles = set(fail_titles)
        self.inserted = []
        self.tokens = None

    def has_valid_credentials(self):
        return self.authenticated

    def set_credentials(self, tokens):
        self.tokens = tokens
        self.authenticated = True

    def get_authorization_url(self):
        return "https://accounts.google.com/o/oauth2/auth?client_id=fake"

    def exchange_code(self, code):
        self.authenticated = True
        return {"access_token": f"token-for-{code}", "refresh_token": "refresh"}

    def list_calendars(self):
        if not self.authenticated:
            raise NotAuthenticatedError("Not authenticated with Google Calendar")
        return [{"id": "primary", "summary": "Me"}]

    def create_calendar(self, name, description=None):
        if not self.authenticated:
            raise NotAuthenticatedError("Not authenticated with Google Calendar")
        return {"id": "new-calendar", "summary": name, "description": description}

    def insert_event(self, calendar_id, payload):
        if not self.authenticated:
            raise NotAuthenticatedError("Not authenticated with Google Calendar")
        if payload["summary"] in self.fail_titles:
            raise CalendarSyncError(f"Inserting \"{payload['summary']}\" failed: 500")
        self.inserted.append((calendar_id, payload))
        return {"id": f"evt-{len(self.inserted)}"}


@pytest.fixture
def llm_settings():
    """Settings with model parsing switched on."""
    return Settings(enable_llm_parsing=True, openai_api_key="sk-test")


@pytest.fixture
def fake_openai():
    return FakeOpenAI


@pytest.fixture
def fake_calendar():
    return FakeCalendarService


@pytest.fixture
def reference_date():
    """A Monday used as the start of Week 1."""
    return date(2025, 1, 6)


@pytest.fixture
def sample_syllabus():
    return (
        "Course Name: Legal Writing\n"
        "Course Code: LAW 101\n"
        "Semester: Spring\n"
        "Year: 2024\n"
        "\n"
        "Schedule\n"
        "Homework #1 due 02/01/2024\n"
        "Memo 1 due on February 15, 2024\n"
        "Midterm exam 03/05/2024\n"
        "Read Chapter 4 by 03/12/2024\n"
        "Submit reflection 2024-04-20\n"
    )
