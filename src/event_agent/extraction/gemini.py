"""Gemini-backed event extraction.

Wraps the Google ``google-genai`` SDK.  Gemini is asked for a JSON reply
(``response_mime_type="application/json"``); the reply is still parsed
with :func:`~event_agent.extraction.base.parse_candidate`, which tolerates
prose around the object.
"""

from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from event_agent.exceptions import ExtractionServiceError
from event_agent.extraction.base import LLMExtractor

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


class GeminiExtractor(LLMExtractor):
    """Extract events via Google Gemini.

    Args:
        api_key: Google Gemini API key.
        model: Model identifier.  Defaults to ``"gemini-2.0-flash"``.
    """

    def __init__(self, api_key: str, model: str = DEFAULT_GEMINI_MODEL) -> None:
        super().__init__(model)
        self._client = genai.Client(api_key=api_key)

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt,
            response_mime_type="application/json",
        )
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.APIError as exc:
            logger.error("Gemini API error: %s", exc)
            raise ExtractionServiceError(f"Gemini API call failed: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("Gemini API unreachable: %s", exc)
            raise ExtractionServiceError(
                f"Gemini API unreachable: {str(exc) or type(exc).__name__}"
            ) from exc

        return response.text or ""
