"""Anthropic Claude-backed event extraction."""

from __future__ import annotations

import logging

import anthropic

from event_agent.exceptions import ExtractionServiceError
from event_agent.extraction.base import LLMExtractor

logger = logging.getLogger(__name__)

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"


class ClaudeExtractor(LLMExtractor):
    """Extract events via the Anthropic Messages API.

    Args:
        api_key: Anthropic API key.
        model: Model identifier.
        max_tokens: Reply token limit; one event object fits well within
            the default.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CLAUDE_MODEL,
        max_tokens: int = 1000,
    ) -> None:
        super().__init__(model)
        self._max_tokens = max_tokens
        self._client = anthropic.Anthropic(api_key=api_key)

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as exc:
            logger.error("Anthropic API error: %s", exc)
            raise ExtractionServiceError(f"Anthropic API call failed: {exc}") from exc

        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
