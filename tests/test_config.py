"""Unit tests for environment configuration."""

import logging

from syllabus_calendar.config import (
    DEFAULT_LLM_MODEL, DEFAULT_MAX_UPLOAD_BYTES, DEFAULT_TIMEZONE, Settings
)
from syllabus_calendar.logging_setup import LOGGER_NAME, setup_logging


def test_defaults():
    """Test an empty environment yields documented defaults."""
    settings = Settings.from_env({})

    assert settings.enable_llm_parsing is False
    assert settings.openai_api_key is None
    assert settings.llm_model == DEFAULT_LLM_MODEL
    assert settings.llm_max_tokens == 10000
    assert settings.llm_temperature == 0.1
    assert settings.calendar_timezone == DEFAULT_TIMEZONE
    assert settings.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert settings.google_configured is False
    assert settings.log_level == "INFO"


def test_values_from_environment():
    """Test every variable is read and converted."""
    settings = Settings.from_env({
        "ENABLE_LLM_PARSING": "true",
        "OPENAI_API_KEY": "sk-test",
        "LLM_MODEL": "gpt-4o",
        "LLM_MAX_TOKENS": "4000",
        "LLM_TEMPERATURE": "0.3",
        "LLM_TIMEOUT": "15",
        "GOOGLE_CLIENT_ID": "client",
        "GOOGLE_CLIENT_SECRET": "secret",
        "GOOGLE_REDIRECT_URI": "https://example.edu/callback",
        "CALENDAR_TIMEZONE": "America/Chicago",
        "CALENDAR_TIMEOUT": "5",
        "MAX_UPLOAD_BYTES": "1024",
        "LOG_LEVEL": "debug",
    })

    assert settings.enable_llm_parsing is True
    assert settings.openai_api_key == "sk-test"
    assert settings.llm_model == "gpt-4o"
    assert settings.llm_max_tokens == 4000
    assert settings.llm_temperature == 0.3
    assert settings.llm_timeout == 15.0
    assert settings.google_configured is True
    assert settings.google_redirect_uri == "https://example.edu/callback"
    assert settings.calendar_timezone == "America/Chicago"
    assert settings.calendar_timeout == 5.0
    assert settings.max_upload_bytes == 1024
    assert settings.log_level == "DEBUG"


def test_flag_values():
    """Test only recognized truthy strings enable model parsing."""
    for value in ("1", "yes", "ON", " True "):
        assert Settings.from_env({"ENABLE_LLM_PARSING": value}).enable_llm_parsing is True
    for value in ("0", "false", "off", "maybe", ""):
        assert Settings.from_env({"ENABLE_LLM_PARSING": value}).enable_llm_parsing is False


def test_malformed_numbers_fall_back():
    """Test unparseable numbers keep their defaults."""
    settings = Settings.from_env({"LLM_MAX_TOKENS": "lots", "LLM_TEMPERATURE": "warm"})
    assert settings.llm_max_tokens == 10000
    assert settings.llm_temperature == 0.1


def test_blank_values_are_unset():
    """Test whitespace-only variables count as missing."""
    settings = Settings.from_env({"OPENAI_API_KEY": "   ", "GOOGLE_CLIENT_ID": ""})
    assert settings.openai_api_key is None
    assert settings.google_client_id is None


def test_setup_logging_is_idempotent():
    """Test repeated setup adds one handler and updates the level."""
    logger = setup_logging("INFO")
    setup_logging("DEBUG")
    tagged = [h for h in logger.handlers if getattr(h, "_syllabus_calendar", False)]

    assert logger.name == LOGGER_NAME
    assert len(tagged) == 1
    assert logger.level == logging.DEBUG

    setup_logging("not-a-level")
    assert logger.level == logging.INFO
