"""Map validated events to The Events Calendar REST API body format.

Converts :class:`~event_agent.models.event.EventRecord` instances into the
``dict`` payload accepted by ``POST /wp-json/tribe/events/v1/events``:

- **start_date / end_date** as ``"YYYY-MM-DD HH:MM:SS"`` local date-times,
- **venue** nested as ``{"venue": <location>}`` (``"TBD"`` when unknown),
- **status** always ``"publish"``.
"""

from __future__ import annotations

import logging
from datetime import date, time

from event_agent.models.event import EventRecord

logger = logging.getLogger(__name__)


def map_to_tribe_event(record: EventRecord) -> dict:
    """Convert a validated record into a create-event request body.

    Args:
        record: A record that has been through
            :func:`~event_agent.validation.validate_event`.

    Returns:
        A ``dict`` ready to be sent as the JSON request body.

    Raises:
        ValueError: If the record has no title or is missing a date or
            time (it was not validated, or validation flagged it).
    """
    if not record.title:
        raise ValueError("Event title is required to publish")
    if None in (record.start_date, record.start_time, record.end_date, record.end_time):
        raise ValueError(f"Event '{record.title}' has no complete start and end")

    body: dict = {
        "title": record.title,
        "description": record.description or "",
        "start_date": _format_datetime(record.start_date, record.start_time),
        "end_date": _format_datetime(record.end_date, record.end_time),
        "all_day": record.all_day,
        "venue": {"venue": record.location or "TBD"},
        "status": "publish",
    }

    logger.debug(
        "Mapped event '%s' (%s -> %s) to calendar store body",
        record.title,
        body["start_date"],
        body["end_date"],
    )
    return body


def _format_datetime(day: date, moment: time) -> str:
    return f"{day.isoformat()} {moment:%H:%M:%S}"
