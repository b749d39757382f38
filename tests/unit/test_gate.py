"""Unit tests for event_agent.gate."""

from __future__ import annotations

import pytest

from event_agent.gate import ClarificationNeeded, check_confidence
from event_agent.models.event import EventRecord


def _record(confidence: str, notes: str = "") -> EventRecord:
    return EventRecord(
        title="Board meeting",
        start_date="2025-12-08",
        start_time="18:30",
        end_date="2025-12-08",
        end_time="19:30",
        validation_notes=notes,
        confidence=confidence,
    )


class TestCheckConfidence:
    @pytest.mark.parametrize("confidence", ["high", "medium"])
    def test_passes_publishable_records(self, confidence: str) -> None:
        assert check_confidence(_record(confidence)) is None

    def test_low_confidence_quotes_notes(self) -> None:
        result = check_confidence(_record("low", "Event date is missing."))

        assert result == ClarificationNeeded(missing="Event date is missing.")

    def test_low_confidence_without_notes(self) -> None:
        result = check_confidence(_record("low"))

        assert result is not None
        assert result.missing == "event details"
