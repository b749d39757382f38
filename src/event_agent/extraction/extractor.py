"""Event extraction stage of the pipeline.

:class:`EventExtractor` turns a :class:`~event_agent.models.message.RawMessage`
into a validated :class:`~event_agent.models.event.EventRecord`: it fixes
the reference time in the configured timezone, asks the extraction service
for a candidate, and runs the candidate through
:func:`~event_agent.validation.validate_event`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from zoneinfo import ZoneInfo

from event_agent.extraction.base import Extractor
from event_agent.models.event import EventRecord
from event_agent.models.message import RawMessage
from event_agent.validation import DEFAULT_EVENING_KEYWORDS, validate_event

logger = logging.getLogger(__name__)


class EventExtractor:
    """Extract and validate one event per inbound message.

    Args:
        backend: The extraction service (any :class:`Extractor`).
        timezone: IANA timezone the reference date is taken in.
        evening_keywords: Passed to :func:`validate_event` for the
            default-time heuristic.
        clock: Returns the current time.  Defaults to ``datetime.now`` in
            *timezone*; pass a fixed clock in tests.
    """

    def __init__(
        self,
        backend: Extractor,
        timezone: str = "America/New_York",
        evening_keywords: Iterable[str] = DEFAULT_EVENING_KEYWORDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._backend = backend
        self._zone = ZoneInfo(timezone)
        self._evening_keywords = frozenset(evening_keywords)
        self._clock = clock or (lambda: datetime.now(self._zone))

    def extract(self, message: RawMessage) -> EventRecord:
        """Extract the event announced in *message*.

        Args:
            message: The normalized inbound message.

        Returns:
            The validated :class:`EventRecord`.

        Raises:
            ExtractionFormatError: If the service reply is unusable.
            ExtractionServiceError: If the service call fails.
        """
        reference = self._clock()
        logger.info(
            "Extracting event from %s message (%d chars, reference %s)",
            message.channel.label,
            len(message.text),
            reference.isoformat(),
        )

        candidate = self._backend.extract(message.text, reference, message.channel.label)
        record = validate_event(candidate, reference.date(), self._evening_keywords)

        logger.info(
            "Extracted event: '%s' | %s %s | confidence=%s | notes: %s",
            record.title,
            record.start_date.isoformat() if record.start_date else "no date",
            record.start_time.isoformat() if record.start_time else "no time",
            record.confidence,
            record.validation_notes or "-",
        )
        return record
