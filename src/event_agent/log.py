"""Structured logging setup for event-agent.

All modules log through the root logger with a pipe-separated format and
ISO 8601 timestamps, so webhook handling, LLM extraction and calendar
publishing for one inbound message read as a single trail on stderr.
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Marks the handler installed by setup_logging so repeated calls reuse it.
_HANDLER_ATTR = "_event_agent_log_handler"

# Third-party loggers that log every HTTP request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "twilio.http_client", "google_genai")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for the service.

    Attaches a single :class:`logging.StreamHandler` on *stderr* and sets
    the root level.  Unless *level* is ``DEBUG``, the HTTP client loggers
    of httpx, Twilio and google-genai are raised to ``WARNING`` so request
    lines do not drown the pipeline log.  Uvicorn's own loggers are left
    to propagate into the same handler.

    Calling this function again only updates the levels.

    Args:
        level: A standard logging level name (e.g. ``"DEBUG"``,
            ``"INFO"``, ``"WARNING"``).

    Raises:
        ValueError: If *level* is not a recognised logging level string.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")

    root = logging.getLogger()
    root.setLevel(numeric_level)

    chatty_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)

    existing = [h for h in root.handlers if getattr(h, _HANDLER_ATTR, False)]
    if existing:
        for handler in existing:
            handler.setLevel(numeric_level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger (normally ``__name__`` of the caller)."""
    return logging.getLogger(name)
