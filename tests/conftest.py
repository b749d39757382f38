"""Shared fixtures for event-agent tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

_ENV_VARS = (
    "WP_SITE_URL",
    "WP_API_USER",
    "WP_API_PASSWORD",
    "EXTRACTION_PROVIDER",
    "EXTRACTION_MODEL",
    "GEMINI_API_KEY",
    "ANTHROPIC_API_KEY",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
    "TIMEZONE",
    "LOG_LEVEL",
    "HTTP_TIMEOUT",
    "EVENING_KEYWORDS",
    "HOST",
    "PORT",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all event-agent environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("event_agent.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def monkeypatch_env(clean_env: None, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set the required environment variables to valid defaults.

    Returns the dict of variables so tests can inspect or override values.
    """
    env_vars = {
        "WP_SITE_URL": "https://events.example.org/",
        "WP_API_USER": "publisher",
        "WP_API_PASSWORD": "app-password-123",
        "GEMINI_API_KEY": "test-gemini-key-12345",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root logger after each test to prevent handler leaks."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
