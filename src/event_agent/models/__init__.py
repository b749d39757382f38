"""Data models for event-agent."""

from __future__ import annotations

from event_agent.models.event import Confidence, EventRecord, PublishResult
from event_agent.models.message import Channel, RawMessage

__all__ = [
    "Channel",
    "Confidence",
    "EventRecord",
    "PublishResult",
    "RawMessage",
]
