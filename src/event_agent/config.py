"""Configuration loading for event-agent.

Reads settings from environment variables (with .env support via
python-dotenv) once at startup into an immutable :class:`Settings` value
that is handed to each component by construction.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from event_agent.validation import DEFAULT_EVENING_KEYWORDS

_PROVIDERS = ("gemini", "anthropic")


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        wp_site_url: Base URL of the WordPress site hosting the calendar.
        wp_api_user: WordPress user for basic auth.
        wp_api_password: WordPress application password.
        extraction_provider: ``"gemini"`` or ``"anthropic"``.
        gemini_api_key: API key for Google Gemini.
        anthropic_api_key: API key for Anthropic.
        extraction_model: Model override; empty means the provider default.
        twilio_account_sid: Twilio account SID (voice confirmations).
        twilio_auth_token: Twilio auth token.
        twilio_phone_number: Number outbound confirmations are sent from.
        timezone: IANA timezone for the extraction reference date.
        log_level: Logging level (default ``"INFO"``).
        http_timeout: Timeout in seconds for calendar store requests.
        evening_keywords: Words in a title/description that make a missing
            start time default to the evening.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
    """

    wp_site_url: str
    wp_api_user: str
    wp_api_password: str
    extraction_provider: str = "gemini"
    gemini_api_key: str = ""
    anthropic_api_key: str = ""
    extraction_model: str = ""
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_phone_number: str = ""
    timezone: str = "America/New_York"
    log_level: str = "INFO"
    http_timeout: float = 30.0
    evening_keywords: frozenset[str] = DEFAULT_EVENING_KEYWORDS
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def twilio_configured(self) -> bool:
        """Whether outbound SMS via Twilio is possible."""
        return bool(
            self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number
        )

    def __repr__(self) -> str:
        return (
            f"Settings(wp_site_url={self.wp_site_url!r}, "
            f"wp_api_user={self.wp_api_user!r}, wp_api_password='***', "
            f"extraction_provider={self.extraction_provider!r}, "
            f"gemini_api_key='***', anthropic_api_key='***', "
            f"extraction_model={self.extraction_model!r}, "
            f"twilio_account_sid={self.twilio_account_sid!r}, "
            f"twilio_auth_token='***', "
            f"twilio_phone_number={self.twilio_phone_number!r}, "
            f"timezone={self.timezone!r}, log_level={self.log_level!r}, "
            f"http_timeout={self.http_timeout!r}, port={self.port!r})"
        )


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the working
    directory is picked up automatically.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If any required variable is missing, empty or
            whitespace-only (the message names **all** of them), or an
            optional variable holds an invalid value.
    """
    load_dotenv()

    provider = _env("EXTRACTION_PROVIDER").lower() or "gemini"
    if provider not in _PROVIDERS:
        raise ConfigError(
            f"EXTRACTION_PROVIDER must be one of {', '.join(_PROVIDERS)}, got {provider!r}"
        )

    required = {
        "WP_SITE_URL": "wp_site_url",
        "WP_API_USER": "wp_api_user",
        "WP_API_PASSWORD": "wp_api_password",
    }
    if provider == "gemini":
        required["GEMINI_API_KEY"] = "gemini_api_key"
    else:
        required["ANTHROPIC_API_KEY"] = "anthropic_api_key"

    values: dict = {"extraction_provider": provider}
    missing: list[str] = []

    for env_var, field_name in required.items():
        raw = _env(env_var)
        if not raw:
            missing.append(env_var)
        else:
            values[field_name] = raw

    if missing:
        names = ", ".join(missing)
        raise ConfigError(f"Missing required environment variables: {names}")

    values["wp_site_url"] = values["wp_site_url"].rstrip("/")

    optional = {
        "EXTRACTION_MODEL": "extraction_model",
        "TWILIO_ACCOUNT_SID": "twilio_account_sid",
        "TWILIO_AUTH_TOKEN": "twilio_auth_token",
        "TWILIO_PHONE_NUMBER": "twilio_phone_number",
        "LOG_LEVEL": "log_level",
        "HOST": "host",
        "GEMINI_API_KEY": "gemini_api_key",
        "ANTHROPIC_API_KEY": "anthropic_api_key",
    }
    for env_var, field_name in optional.items():
        raw = _env(env_var)
        if raw:
            values[field_name] = raw

    timezone = _env("TIMEZONE")
    if timezone:
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"TIMEZONE is not a known IANA timezone: {timezone!r}") from exc
        values["timezone"] = timezone

    timeout = _env("HTTP_TIMEOUT")
    if timeout:
        try:
            values["http_timeout"] = float(timeout)
        except ValueError as exc:
            raise ConfigError(f"HTTP_TIMEOUT must be a number, got {timeout!r}") from exc
        if values["http_timeout"] <= 0:
            raise ConfigError("HTTP_TIMEOUT must be greater than zero")

    port = _env("PORT")
    if port:
        try:
            values["port"] = int(port)
        except ValueError as exc:
            raise ConfigError(f"PORT must be an integer, got {port!r}") from exc

    keywords = _env("EVENING_KEYWORDS")
    if keywords:
        values["evening_keywords"] = frozenset(
            word.strip().lower() for word in keywords.split(",") if word.strip()
        )

    return Settings(**values)


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()
