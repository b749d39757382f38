"""Custom exceptions for the event-agent pipeline.

Exception hierarchy::

    EventAgentError
    +-- InputValidationError       (missing required webhook fields)
    +-- ExtractionError            (base for extraction failures)
    |   +-- ExtractionFormatError  (no JSON object / schema mismatch)
    |   +-- ExtractionServiceError (LLM call failed: network, auth, quota)
    +-- PublishError               (calendar store rejected or unreachable)

A low-confidence extraction is a normal outcome, not a fault, and is
modelled by :class:`~event_agent.gate.ClarificationNeeded` instead.
"""

from __future__ import annotations


class EventAgentError(Exception):
    """Base class for all event-agent errors."""


class InputValidationError(EventAgentError):
    """Raised when an inbound payload lacks a required field.

    Attributes:
        fields: Names of the missing or blank fields.
    """

    def __init__(self, fields: list[str]) -> None:
        super().__init__(f"Missing required field(s): {', '.join(fields)}")
        self.fields = fields


class ExtractionError(EventAgentError):
    """Raised for extraction failures of any kind."""


class ExtractionFormatError(ExtractionError):
    """Raised when the LLM response cannot be parsed or validated.

    Covers a response with no JSON object, a JSON object that does not
    decode, and one that does not match the event schema.

    Attributes:
        raw_response: The raw LLM output that failed to parse.
    """

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class ExtractionServiceError(ExtractionError):
    """Raised when the extraction service call itself fails.

    Unlike :class:`ExtractionFormatError`, the service never produced a
    response to parse (API connectivity, authentication, quota).
    """


class PublishError(EventAgentError):
    """Raised when the calendar store rejects an event or is unreachable.

    Only raised inside the publisher; :meth:`WordPressEventsClient.publish`
    converts it into a failed :class:`~event_agent.models.event.PublishResult`.

    Attributes:
        status_code: HTTP status code from the store, or ``None`` if the
            request never got a response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
