"""
Configuration loaded from environment variables.

Every parameter the pipeline consumes (feature flag, model settings, OAuth
client, timeouts, upload limits) comes from the environment and falls back to
a documented default when unset or malformed.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}

DEFAULT_LLM_MODEL = "gpt-4o-mini"
DEFAULT_LLM_MAX_TOKENS = 10000
DEFAULT_LLM_TEMPERATURE = 0.1
DEFAULT_LLM_TIMEOUT = 60.0
DEFAULT_REDIRECT_URI = "http://localhost:3000/google-auth-callback"
DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_CALENDAR_TIMEOUT = 30.0
DEFAULT_MAX_UPLOAD_BYTES = 16 * 1024 * 1024  # 16MB


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUE_VALUES


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer for %s=%r, using default %s", name, value, default)
        return default


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Invalid number for %s=%r, using default %s", name, value, default)
        return default


def _get_str(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration."""
    enable_llm_parsing: bool = False
    openai_api_key: Optional[str] = None
    llm_model: str = DEFAULT_LLM_MODEL
    llm_max_tokens: int = DEFAULT_LLM_MAX_TOKENS
    llm_temperature: float = DEFAULT_LLM_TEMPERATURE
    llm_timeout: float = DEFAULT_LLM_TIMEOUT

    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_redirect_uri: str = DEFAULT_REDIRECT_URI
    calendar_timezone: str = DEFAULT_TIMEZONE
    calendar_timeout: float = DEFAULT_CALENDAR_TIMEOUT

    secret_key: str = "dev-secret-key-change-in-production"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Settings with defaults applied for unset or malformed values
        """
        env = os.environ if environ is None else environ
        return cls(
            enable_llm_parsing=_get_bool(env, "ENABLE_LLM_PARSING", False),
            openai_api_key=_get_str(env, "OPENAI_API_KEY"),
            llm_model=_get_str(env, "LLM_MODEL", DEFAULT_LLM_MODEL),
            llm_max_tokens=_get_int(env, "LLM_MAX_TOKENS", DEFAULT_LLM_MAX_TOKENS),
            llm_temperature=_get_float(env, "LLM_TEMPERATURE", DEFAULT_LLM_TEMPERATURE),
            llm_timeout=_get_float(env, "LLM_TIMEOUT", DEFAULT_LLM_TIMEOUT),
            google_client_id=_get_str(env, "GOOGLE_CLIENT_ID"),
            google_client_secret=_get_str(env, "GOOGLE_CLIENT_SECRET"),
            google_redirect_uri=_get_str(env, "GOOGLE_REDIRECT_URI", DEFAULT_REDIRECT_URI),
            calendar_timezone=_get_str(env, "CALENDAR_TIMEZONE", DEFAULT_TIMEZONE),
            calendar_timeout=_get_float(env, "CALENDAR_TIMEOUT", DEFAULT_CALENDAR_TIMEOUT),
            secret_key=_get_str(env, "SECRET_KEY", "dev-secret-key-change-in-production"),
            max_upload_bytes=_get_int(env, "MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            log_level=_get_str(env, "LOG_LEVEL", "INFO").upper(),
        )

    @property
    def google_configured(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read from the environment once."""
    return Settings.from_env()
