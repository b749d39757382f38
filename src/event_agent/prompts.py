"""Prompt builders for the event-extraction call.

Constructs the system and user prompts that instruct the extraction
service to turn one free-form event announcement into a single JSON
object with the :class:`~event_agent.models.event.EventRecord` fields.
The prompts are deterministic for a given reference time and message.
"""

from __future__ import annotations

from datetime import datetime


def build_system_prompt(reference: datetime) -> str:
    """Build the system prompt for the extraction call.

    The prompt fixes the output schema, injects the reference date/time
    (with weekday name) for resolving relative references, and states the
    date-validation and default-time rules the service should apply.  The
    same rules are enforced again afterwards by
    :func:`~event_agent.validation.validate_event`, so the service only
    needs to report faithfully what the sender wrote.

    Args:
        reference: The current date and time in the configured timezone.

    Returns:
        The complete system prompt string.
    """
    today = f"{reference:%Y-%m-%d %A}"
    now = f"{reference:%H:%M}"

    return f"""\
You are an assistant that extracts event information from natural language
messages: casual text messages, formal emails, and voice-call transcripts.

## Current Date and Time

Today is {today}, and the local time is {now}.
Use this to resolve relative references such as "tomorrow", "next Tuesday" or
"this Saturday".

## Date Validation

- Check whether the weekday matches the date. For example "Monday, December 9"
  is inconsistent if December 9 is a Tuesday. Report the weekday exactly as the
  sender wrote it in "stated_weekday" and the date as the sender wrote it in
  "start_date"; explain any inconsistency in "validation_notes".
- If the sender did not give a year, assume the current year unless the date
  has already passed, in which case assume next year, and set "year_stated" to
  false.
- If no time is given, leave "start_time" null. It will be defaulted to 19:00
  for evening or social events and 10:00 otherwise.
- Always return dates in ISO format: YYYY-MM-DD.
- Always return times in 24-hour format: HH:mm:ss.

## Output Format

Return ONLY a JSON object with this exact structure:

{{
  "title": "Event name",
  "start_date": "YYYY-MM-DD",
  "start_time": "HH:mm:ss or null",
  "end_date": "YYYY-MM-DD or null",
  "end_time": "HH:mm:ss or null",
  "location": "Event location, or null if not given",
  "description": "Event description",
  "all_day": false,
  "stated_weekday": "Weekday name as written in the message, or null",
  "year_stated": true,
  "validation_notes": "Any corrections made to dates/times",
  "confidence": "high|medium|low"
}}

## Confidence

- "high": title, date and time are all explicit.
- "medium": the event is clear but a detail had to be assumed.
- "low": critical information (what or when) is missing. List what is needed
  in "validation_notes", phrased so it can be read back to the sender.
"""


def build_user_prompt(message_text: str, channel_label: str) -> str:
    """Build the user prompt carrying the announcement.

    Args:
        message_text: The normalized message text.
        channel_label: Display label of the inbound channel (``"SMS"``,
            ``"Voice"``, ``"Email"`` or ``"Manual"``).

    Returns:
        The user prompt string.
    """
    return (
        f"Input Method: {channel_label}\n\n"
        f"Message:\n{message_text}\n\n"
        "Extract event details and return JSON."
    )
