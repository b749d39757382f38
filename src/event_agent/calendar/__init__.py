"""Calendar store integration for event-agent."""

from __future__ import annotations

from event_agent.calendar.client import EVENTS_PATH, WordPressEventsClient
from event_agent.calendar.event_mapper import map_to_tribe_event

__all__ = [
    "EVENTS_PATH",
    "WordPressEventsClient",
    "map_to_tribe_event",
]
