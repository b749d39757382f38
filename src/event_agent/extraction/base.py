"""Extraction service contract and shared LLM response parsing.

Any backend that can turn message text into a candidate
:class:`~event_agent.models.event.EventRecord` satisfies :class:`Extractor`.
:class:`LLMExtractor` implements the contract for chat-style LLMs: it
builds the prompts, delegates the call to :meth:`LLMExtractor._complete`,
and parses the first JSON object out of the reply.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Protocol

from pydantic import ValidationError

from event_agent.exceptions import ExtractionFormatError
from event_agent.models.event import EventRecord
from event_agent.prompts import build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)


class Extractor(Protocol):
    """Anything that extracts a candidate event from free-form text."""

    def extract(self, text: str, reference: datetime, channel_label: str) -> EventRecord:
        """Return the candidate record for *text*.

        Raises:
            ExtractionFormatError: If the service reply has no usable
                event object.
            ExtractionServiceError: If the service call fails.
        """
        ...


class LLMExtractor(ABC):
    """Base class for extractors backed by a hosted LLM.

    Args:
        model: Model identifier passed to the provider SDK.
    """

    def __init__(self, model: str) -> None:
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    def extract(self, text: str, reference: datetime, channel_label: str) -> EventRecord:
        """Build prompts, call the LLM and parse its reply.

        Args:
            text: The normalized message text.
            reference: Current date/time in the configured timezone.
            channel_label: Inbound channel label, passed through for audit.

        Returns:
            The candidate :class:`EventRecord` (not yet validated).

        Raises:
            ExtractionFormatError: If the reply has no JSON object or it
                does not match the event schema.
            ExtractionServiceError: If the API call fails.
        """
        system_prompt = build_system_prompt(reference)
        user_prompt = build_user_prompt(text, channel_label)

        logger.debug("System prompt sent to %s:\n%s", self._model, system_prompt)
        logger.debug("User prompt sent to %s:\n%s", self._model, user_prompt)

        raw_text = self._complete(system_prompt, user_prompt)
        logger.debug("Raw LLM response:\n%s", raw_text)

        return parse_candidate(raw_text)

    @abstractmethod
    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send the prompts and return the raw reply text.

        Raises:
            ExtractionServiceError: On API-level failures (network, auth,
                quota).
        """


def parse_candidate(raw_text: str) -> EventRecord:
    """Parse an LLM reply into a candidate :class:`EventRecord`.

    The reply may wrap the object in prose or a Markdown code fence; the
    first top-level JSON object found is used.

    Args:
        raw_text: The raw reply text.

    Returns:
        The parsed candidate record.

    Raises:
        ExtractionFormatError: If there is no JSON object, it does not
            decode, or it does not conform to the event schema.
    """
    data = find_json_object(raw_text)
    if not data.keys() & EventRecord.model_fields.keys():
        raise ExtractionFormatError(
            "JSON object in LLM response has no event fields", raw_response=raw_text
        )
    try:
        return EventRecord.model_validate(data)
    except ValidationError as exc:
        raise ExtractionFormatError(
            f"Schema validation failed: {exc}", raw_response=raw_text
        ) from exc


def find_json_object(raw_text: str) -> dict[str, Any]:
    """Return the first top-level JSON object embedded in *raw_text*.

    Decoding is attempted from each ``{`` in turn, so braces in leading
    prose are skipped and a trailing remark after the object is ignored.

    Raises:
        ExtractionFormatError: If *raw_text* contains no ``{`` or nothing
            from any ``{`` decodes to a JSON object.
    """
    if not raw_text or "{" not in raw_text:
        raise ExtractionFormatError(
            "No JSON object found in LLM response", raw_response=raw_text or ""
        )

    decoder = json.JSONDecoder()
    position = raw_text.find("{")
    last_error: json.JSONDecodeError | None = None
    while position != -1:
        try:
            value, _ = decoder.raw_decode(raw_text, position)
        except json.JSONDecodeError as exc:
            last_error = exc
        else:
            if isinstance(value, dict):
                return value
        position = raw_text.find("{", position + 1)

    raise ExtractionFormatError(
        f"Invalid JSON in LLM response: {last_error}", raw_response=raw_text
    )
