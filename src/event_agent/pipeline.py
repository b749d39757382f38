"""Pipeline orchestrator for the announcement-to-calendar workflow.

Wires the stages for one inbound message:

1. **Extract** -- :class:`~event_agent.extraction.EventExtractor` turns
   the message into a validated record.
2. **Gate** -- :func:`~event_agent.gate.check_confidence` stops
   low-confidence records.
3. **Publish** -- the record is sent to the calendar store.

Each run is independent; the pipeline holds no per-request state, so one
instance serves concurrent requests.  Extraction errors propagate to the
caller; publish failures come back inside the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from event_agent.calendar.client import WordPressEventsClient
from event_agent.extraction import EventExtractor, build_backend
from event_agent.gate import ClarificationNeeded, check_confidence
from event_agent.messaging import TwilioMessenger
from event_agent.models.event import EventRecord, PublishResult
from event_agent.models.message import RawMessage
from event_agent.responder import ChannelResponder

if TYPE_CHECKING:
    from event_agent.config import Settings

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """Publishes a validated record; never raises."""

    def publish(self, record: EventRecord) -> PublishResult: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class PipelineOutcome:
    """Result of running one message through the pipeline.

    Exactly one of *publish_result* and *clarification* is set, unless the
    run was a dry run, in which case neither is.

    Attributes:
        message: The inbound message.
        record: The validated event record.
        publish_result: Outcome of publishing, when the gate passed.
        clarification: Why the record was not published, when it did not.
    """

    message: RawMessage
    record: EventRecord
    publish_result: PublishResult | None = None
    clarification: ClarificationNeeded | None = None


class EventPipeline:
    """Extract, gate and publish one event per message.

    Args:
        extractor: The extraction stage.
        publisher: The calendar store publisher.
    """

    def __init__(self, extractor: EventExtractor, publisher: EventPublisher) -> None:
        self._extractor = extractor
        self._publisher = publisher

    def run(self, message: RawMessage, dry_run: bool = False) -> PipelineOutcome:
        """Run the pipeline for *message*.

        Args:
            message: The normalized inbound message.
            dry_run: If ``True``, extract and gate but skip publishing.

        Returns:
            A :class:`PipelineOutcome`.

        Raises:
            ExtractionFormatError: If the extraction reply is unusable.
            ExtractionServiceError: If the extraction service call fails.
        """
        record = self._extractor.extract(message)

        clarification = check_confidence(record)
        if clarification is not None:
            return PipelineOutcome(message=message, record=record, clarification=clarification)

        if dry_run:
            logger.info("Dry run: not publishing '%s'", record.title)
            return PipelineOutcome(message=message, record=record)

        result = self._publisher.publish(record)
        return PipelineOutcome(message=message, record=record, publish_result=result)

    def close(self) -> None:
        """Release the publisher's connections."""
        self._publisher.close()


def build_pipeline(settings: Settings) -> EventPipeline:
    """Build the production pipeline from *settings*."""
    extractor = EventExtractor(
        backend=build_backend(settings),
        timezone=settings.timezone,
        evening_keywords=settings.evening_keywords,
    )
    publisher = WordPressEventsClient(
        site_url=settings.wp_site_url,
        username=settings.wp_api_user,
        password=settings.wp_api_password,
        timeout=settings.http_timeout,
    )
    return EventPipeline(extractor=extractor, publisher=publisher)


def build_responder(settings: Settings) -> ChannelResponder:
    """Build the channel responder, with Twilio when it is configured."""
    if not settings.twilio_configured:
        logger.warning("Twilio credentials not set; voice confirmations will not be sent")
        return ChannelResponder()
    return ChannelResponder(
        messenger=TwilioMessenger(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            from_number=settings.twilio_phone_number,
        )
    )
