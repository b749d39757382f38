"""Confidence gate between extraction and publishing.

The only branch point of the pipeline: a low-confidence record is never
published, and the sender is asked for the missing details instead.
There is no clarification loop; each inbound message is handled once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from event_agent.models.event import EventRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClarificationNeeded:
    """The record cannot be published without more information.

    Attributes:
        missing: What the sender needs to supply, quoted verbatim from the
            record's ``validation_notes``.
    """

    missing: str


def check_confidence(record: EventRecord) -> ClarificationNeeded | None:
    """Return a :class:`ClarificationNeeded` for low confidence, else ``None``."""
    if record.confidence != "low":
        return None

    logger.info("Low-confidence extraction for '%s'; not publishing", record.title or "?")
    return ClarificationNeeded(missing=record.validation_notes or "event details")
