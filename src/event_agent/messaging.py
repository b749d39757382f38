"""Twilio messaging: TwiML documents and outbound SMS.

TwiML replies are built with the ``twilio`` helper library so escaping
and attribute naming follow Twilio's own rules.  Outbound SMS (the
confirmation after a phone call) goes through the Twilio REST client.
"""

from __future__ import annotations

import logging

from twilio.base.exceptions import TwilioException
from twilio.rest import Client
from twilio.twiml.messaging_response import MessagingResponse
from twilio.twiml.voice_response import VoiceResponse

logger = logging.getLogger(__name__)

VOICE_PROMPT = (
    "Please describe the event you want to create. "
    "Include the title, date, time, and location."
)
TRANSCRIBE_CALLBACK_PATH = "/api/voice/transcribe"
MAX_RECORDING_SECONDS = 120


def sms_reply(text: str) -> str:
    """Return a TwiML document replying to an inbound SMS with *text*."""
    response = MessagingResponse()
    response.message(text)
    return response.to_xml()


def voice_prompt(callback_path: str = TRANSCRIBE_CALLBACK_PATH) -> str:
    """Return the TwiML that asks the caller to describe the event.

    The recording is transcribed by Twilio and the transcription is posted
    to *callback_path* as a separate request.
    """
    response = VoiceResponse()
    response.say(VOICE_PROMPT)
    response.record(
        max_length=MAX_RECORDING_SECONDS,
        transcribe=True,
        transcribe_callback=callback_path,
    )
    return response.to_xml()


class TwilioMessenger:
    """Send SMS messages from the configured Twilio number.

    Args:
        account_sid: Twilio account SID.
        auth_token: Twilio auth token.
        from_number: Sending phone number.
        client: Optional pre-built ``twilio.rest.Client``.  Pass a mock
            here in tests.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        client: Client | None = None,
    ) -> None:
        self._from_number = from_number
        self._client = client or Client(account_sid, auth_token)

    def send_sms(self, to: str, body: str) -> str | None:
        """Send *body* to *to* and return the message SID.

        Raises:
            TwilioException: If Twilio rejects the message or is
                unreachable.
        """
        try:
            message = self._client.messages.create(body=body, from_=self._from_number, to=to)
        except TwilioException:
            logger.error("Failed to send SMS to %s", to)
            raise
        logger.info("Sent SMS %s to %s", message.sid, to)
        return message.sid
