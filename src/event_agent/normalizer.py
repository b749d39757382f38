"""Normalize channel webhook payloads into :class:`RawMessage` values.

One function per channel reads the provider's field names:

- SMS (Twilio messaging webhook): ``Body``, ``From``.
- Voice (Twilio transcription callback): ``TranscriptionText``, ``From``.
- Email (inbound-parse webhook): ``subject``, ``text`` or ``html``, ``from``.
- Manual (JSON API): ``message``.

Only presence is checked here.  A missing or blank required field raises
:class:`~event_agent.exceptions.InputValidationError`; nothing is guessed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from event_agent.exceptions import InputValidationError
from event_agent.models.message import Channel, RawMessage

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]


def normalize_sms(payload: Payload) -> RawMessage:
    """Normalize a Twilio inbound SMS webhook."""
    _require(payload, "Body", "From")
    message = RawMessage(
        text=str(payload["Body"]).strip(),
        channel=Channel.SMS,
        sender=str(payload["From"]).strip(),
    )
    logger.info("Received SMS from %s: %s", message.sender, message.text)
    return message


def normalize_voice_transcription(payload: Payload) -> RawMessage:
    """Normalize a Twilio recording-transcription callback.

    This is the second half of a call: the first request only played the
    prompt and started the recording.  The caller is correlated by number
    alone.
    """
    _require(payload, "TranscriptionText", "From")
    message = RawMessage(
        text=str(payload["TranscriptionText"]).strip(),
        channel=Channel.VOICE,
        sender=str(payload["From"]).strip(),
    )
    logger.info("Received voice transcription from %s: %s", message.sender, message.text)
    return message


def normalize_email(payload: Payload) -> RawMessage:
    """Normalize an inbound email, preferring the plain-text body over HTML."""
    body = _text(payload, "text") or _text(payload, "html")
    if not body:
        raise InputValidationError(["text"])

    subject = _text(payload, "subject")
    message = RawMessage(
        text=f"Subject: {subject}\n\n{body}",
        channel=Channel.EMAIL,
        sender=_text(payload, "from"),
    )
    logger.info("Received email from %s: %s", message.sender or "unknown sender", subject)
    return message


def normalize_manual(payload: Payload) -> RawMessage:
    """Normalize a direct API submission; the text is used verbatim."""
    text = payload.get("message")
    if not isinstance(text, str) or not text.strip():
        raise InputValidationError(["message"])
    logger.info("Received manual submission: %s", text)
    return RawMessage(text=text, channel=Channel.MANUAL)


_NORMALIZERS: dict[Channel, Callable[[Payload], RawMessage]] = {
    Channel.SMS: normalize_sms,
    Channel.VOICE: normalize_voice_transcription,
    Channel.EMAIL: normalize_email,
    Channel.MANUAL: normalize_manual,
}


def normalize(channel: Channel, payload: Payload) -> RawMessage:
    """Normalize *payload* received on *channel*.

    Raises:
        InputValidationError: If a required field is missing or blank.
    """
    return _NORMALIZERS[channel](payload)


def _text(payload: Payload, key: str) -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ""


def _require(payload: Payload, *keys: str) -> None:
    missing = [key for key in keys if not _text(payload, key)]
    if missing:
        raise InputValidationError(missing)
