"""Event extraction backends and the extraction pipeline stage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from event_agent.extraction.base import Extractor, LLMExtractor, find_json_object, parse_candidate
from event_agent.extraction.extractor import EventExtractor

if TYPE_CHECKING:
    from event_agent.config import Settings


def build_backend(settings: Settings) -> LLMExtractor:
    """Build the LLM extractor selected by ``settings.extraction_provider``.

    SDK modules are imported here so only the selected provider's
    package is loaded.
    """
    if settings.extraction_provider == "anthropic":
        from event_agent.extraction.claude import DEFAULT_CLAUDE_MODEL, ClaudeExtractor

        return ClaudeExtractor(
            api_key=settings.anthropic_api_key,
            model=settings.extraction_model or DEFAULT_CLAUDE_MODEL,
        )

    from event_agent.extraction.gemini import DEFAULT_GEMINI_MODEL, GeminiExtractor

    return GeminiExtractor(
        api_key=settings.gemini_api_key,
        model=settings.extraction_model or DEFAULT_GEMINI_MODEL,
    )


__all__ = [
    "EventExtractor",
    "Extractor",
    "LLMExtractor",
    "build_backend",
    "find_json_object",
    "parse_candidate",
]
