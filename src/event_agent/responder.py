"""Channel-appropriate acknowledgments for pipeline outcomes.

Each channel's transport expects something different back:

- **SMS** -- a TwiML reply within the same webhook exchange, always.
- **Voice** -- the transcription callback cannot reply inline, so a
  successful publish is confirmed by a new outbound SMS to the caller;
  anything else is silent.
- **Email** -- nothing is sent; the outcome is only logged.
- **Manual** -- the record and publish result as JSON.

:class:`ChannelResponder` produces a framework-neutral
:class:`ChannelResponse` that the HTTP layer turns into a response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from event_agent.exceptions import InputValidationError
from event_agent.messaging import sms_reply
from event_agent.models.event import EventRecord, PublishResult
from event_agent.models.message import Channel

if TYPE_CHECKING:
    from event_agent.pipeline import PipelineOutcome

logger = logging.getLogger(__name__)

XML_MEDIA_TYPE = "text/xml"
JSON_MEDIA_TYPE = "application/json"

PROCESSING_FAILED_TEXT = "Sorry, there was an error processing your event. Please try again."


class Messenger(Protocol):
    """Sends outbound SMS (see :class:`~event_agent.messaging.TwilioMessenger`)."""

    def send_sms(self, to: str, body: str) -> str | None: ...


@dataclass(frozen=True)
class ChannelResponse:
    """What to send back to the inbound transport.

    Attributes:
        status_code: HTTP status for the webhook response.
        body: TwiML text, a JSON-serialisable dict, or ``None`` for a bare
            status.
        media_type: Content type of *body*, or ``None`` for a bare status.
    """

    status_code: int = 200
    body: str | dict[str, Any] | None = None
    media_type: str | None = None


class ChannelResponder:
    """Render pipeline outcomes for their originating channel.

    Args:
        messenger: Used for voice confirmations.  When ``None`` (Twilio is
            not configured) confirmations are logged instead of sent.
    """

    def __init__(self, messenger: Messenger | None = None) -> None:
        self._messenger = messenger

    def respond(self, outcome: PipelineOutcome) -> ChannelResponse:
        """Acknowledge a completed pipeline run on its channel."""
        channel = outcome.message.channel
        if channel is Channel.SMS:
            return _xml(sms_reply(_sms_text(outcome)))
        if channel is Channel.VOICE:
            return self._respond_voice(outcome)
        if channel is Channel.EMAIL:
            return _respond_email(outcome)
        return _respond_manual(outcome)

    def failure(self, channel: Channel, error: Exception) -> ChannelResponse:
        """Acknowledge a message that could not be processed.

        SMS always gets a reply (status 200).  The other channels get 400
        for an invalid payload and 500 for anything else; the manual API
        also returns the error text.
        """
        if channel is Channel.SMS:
            return _xml(sms_reply(PROCESSING_FAILED_TEXT))

        status = 400 if isinstance(error, InputValidationError) else 500
        if channel is Channel.MANUAL:
            return ChannelResponse(status, {"error": str(error)}, JSON_MEDIA_TYPE)
        return ChannelResponse(status)

    def _respond_voice(self, outcome: PipelineOutcome) -> ChannelResponse:
        message = outcome.message
        result = outcome.publish_result
        if result is None or not result.success:
            logger.info(
                "Voice event from %s not created (%s); no confirmation sent",
                message.sender,
                _describe(outcome),
            )
            return ChannelResponse()

        text = confirmation_text(outcome.record, result, heading="Event created from your call")
        if self._messenger is None:
            logger.warning(
                "Twilio is not configured; confirmation for %s not sent: %s",
                message.sender,
                text,
            )
        else:
            self._messenger.send_sms(message.sender, text)
        return ChannelResponse()


def confirmation_text(
    record: EventRecord,
    result: PublishResult,
    heading: str = "Event created",
) -> str:
    """Build the confirmation sent after a successful publish."""
    text = f"✅ {heading}: {record.title}\n📅 {_when(record)}"
    if record.validation_notes:
        text += f"\n\n⚠️ Note: {record.validation_notes}"
    if result.event_url:
        text += f"\n\n🔗 {result.event_url}"
    return text


def clarification_text(missing: str) -> str:
    return f"I need more information to create this event. Missing: {missing}"


def publish_failure_text(error_message: str | None) -> str:
    return f"❌ Error creating event: {error_message or 'unknown error'}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _sms_text(outcome: PipelineOutcome) -> str:
    if outcome.clarification is not None:
        return clarification_text(outcome.clarification.missing)
    result = outcome.publish_result
    if result is not None and result.success:
        return confirmation_text(outcome.record, result)
    return publish_failure_text(result.error_message if result else None)


def _respond_email(outcome: PipelineOutcome) -> ChannelResponse:
    message = outcome.message
    if outcome.clarification is not None:
        logger.info(
            "Email from %s needs clarification: %s",
            message.sender,
            outcome.clarification.missing,
        )
    else:
        logger.info("Email from %s processed: %s", message.sender, _describe(outcome))
    return ChannelResponse()


def _respond_manual(outcome: PipelineOutcome) -> ChannelResponse:
    body: dict[str, Any] = {
        "eventData": outcome.record.model_dump(mode="json"),
        "result": outcome.publish_result.to_dict() if outcome.publish_result else None,
    }
    if outcome.clarification is not None:
        body["clarification"] = {"missing": outcome.clarification.missing}
    return ChannelResponse(200, body, JSON_MEDIA_TYPE)


def _describe(outcome: PipelineOutcome) -> str:
    if outcome.clarification is not None:
        return f"needs clarification: {outcome.clarification.missing}"
    result = outcome.publish_result
    if result is None:
        return "not published"
    if result.success:
        return f"published as id={result.event_id} ({result.event_url})"
    return f"publish failed: {result.error_message}"


def _when(record: EventRecord) -> str:
    day = record.start_date.isoformat() if record.start_date else "date TBD"
    if record.all_day:
        return f"{day} (all day)"
    if record.start_time is None:
        return day
    return f"{day} at {record.start_time:%H:%M}"


def _xml(document: str) -> ChannelResponse:
    return ChannelResponse(200, document, XML_MEDIA_TYPE)
