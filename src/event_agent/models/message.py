"""Canonical inbound message produced by the input normalizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Channel(str, Enum):
    """Inbound channel an announcement arrived on."""

    SMS = "SMS"
    VOICE = "VOICE"
    EMAIL = "EMAIL"
    MANUAL = "MANUAL"

    @property
    def label(self) -> str:
        """Display label passed to the extractor (``"Voice"``, ``"Email"``...)."""
        return "SMS" if self is Channel.SMS else self.value.capitalize()


@dataclass(frozen=True)
class RawMessage:
    """Free-form announcement text, independent of its transport.

    Attributes:
        text: Message text handed to the extractor.
        channel: The channel the message arrived on.
        sender: Phone number or email address of the sender; empty for
            manual submissions.
    """

    text: str
    channel: Channel
    sender: str = ""
