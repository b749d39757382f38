"""event-agent: announcement-to-calendar service.

Extracts structured events from free-form announcements received by SMS,
phone call, email or API, validates their dates, and publishes them to a
WordPress events calendar.
"""

from __future__ import annotations

from event_agent.exceptions import (
    EventAgentError,
    ExtractionError,
    ExtractionFormatError,
    ExtractionServiceError,
    InputValidationError,
    PublishError,
)
from event_agent.gate import ClarificationNeeded, check_confidence
from event_agent.models.event import EventRecord, PublishResult
from event_agent.models.message import Channel, RawMessage
from event_agent.normalizer import normalize
from event_agent.validation import validate_event

__version__ = "0.1.0"

__all__ = [
    "Channel",
    "ClarificationNeeded",
    "EventAgentError",
    "EventRecord",
    "ExtractionError",
    "ExtractionFormatError",
    "ExtractionServiceError",
    "InputValidationError",
    "PublishError",
    "PublishResult",
    "RawMessage",
    "check_confidence",
    "normalize",
    "validate_event",
]
