"""End-to-end tests through the HTTP layer.

The real normalizer, extractor, validator, gate, publisher and responder
are wired together.  Only the edges are simulated: the Gemini client is
mocked and the WordPress store is an ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
from datetime import datetime
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import httpx
from fastapi.testclient import TestClient

from event_agent.calendar.client import WordPressEventsClient
from event_agent.extraction import EventExtractor
from event_agent.extraction.gemini import GeminiExtractor
from event_agent.pipeline import EventPipeline
from event_agent.responder import PROCESSING_FAILED_TEXT, ChannelResponder
from event_agent.server import create_app

# ---------------------------------------------------------------------------
# Frozen reference datetime (a Monday)
# ---------------------------------------------------------------------------

FROZEN_NOW = datetime(2025, 11, 3, 9, 0, tzinfo=ZoneInfo("America/New_York"))

_SITE = "https://events.example.org"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Store:
    """In-memory stand-in for The Events Calendar REST endpoint."""

    def __init__(self, status: int = 201, error: dict | None = None) -> None:
        self.status = status
        self.error = error
        self.bodies: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.status >= 400:
            return httpx.Response(self.status, json=self.error or {})
        body = json.loads(request.content)
        self.bodies.append(body)
        event_id = 100 + len(self.bodies)
        return httpx.Response(
            self.status, json={"id": event_id, "url": f"{_SITE}/event/{event_id}/"}
        )


def _app(llm_reply: str, store: _Store, messenger: MagicMock | None = None) -> TestClient:
    with patch("event_agent.extraction.gemini.genai.Client"):
        backend = GeminiExtractor(api_key="fake-key")
    response = MagicMock()
    response.text = llm_reply
    backend._client.models.generate_content = MagicMock(return_value=response)

    publisher = WordPressEventsClient(
        site_url=_SITE,
        username="publisher",
        password="app-password",
        http_client=httpx.Client(transport=httpx.MockTransport(store)),
    )
    pipeline = EventPipeline(
        extractor=EventExtractor(backend, clock=lambda: FROZEN_NOW),
        publisher=publisher,
    )
    return TestClient(create_app(pipeline=pipeline, responder=ChannelResponder(messenger)))


def _reply(**fields: object) -> str:
    """An LLM reply: prose around the JSON object, as models often do."""
    event = {
        "title": None,
        "start_date": None,
        "start_time": None,
        "end_date": None,
        "end_time": None,
        "location": None,
        "description": "",
        "all_day": False,
        "stated_weekday": None,
        "year_stated": True,
        "validation_notes": "",
        "confidence": "high",
    }
    event.update(fields)
    return f"Here is the event:\n```json\n{json.dumps(event)}\n```"


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestSmsFlow:
    def test_gop_meeting_published_and_confirmed(self) -> None:
        store = _Store()
        client = _app(
            _reply(
                title="GOP meeting",
                start_date="2025-11-11",
                start_time="19:00",
                location="community center",
                stated_weekday="Tuesday",
                year_stated=False,
            ),
            store,
        )

        response = client.post(
            "/api/sms",
            data={
                "Body": "GOP meeting next Tuesday Nov 11 at 7pm at the community center",
                "From": "+15551234567",
            },
        )

        assert response.status_code == 200
        assert store.bodies == [
            {
                "title": "GOP meeting",
                "description": "",
                "start_date": "2025-11-11 19:00:00",
                "end_date": "2025-11-11 20:00:00",
                "all_day": False,
                "venue": {"venue": "community center"},
                "status": "publish",
            }
        ]
        assert "✅ Event created: GOP meeting" in response.text
        assert "📅 2025-11-11 at 19:00" in response.text
        assert "No year given; assumed 2025." in response.text
        assert f"🔗 {_SITE}/event/101/" in response.text

    def test_low_confidence_asks_for_details(self) -> None:
        store = _Store()
        client = _app(_reply(title="Meeting", confidence="medium"), store)

        response = client.post(
            "/api/sms", data={"Body": "meeting sometime soon", "From": "+15551234567"}
        )

        assert store.bodies == []
        assert "I need more information to create this event." in response.text
        assert "Event date is missing." in response.text

    def test_unparseable_llm_reply(self) -> None:
        store = _Store()
        client = _app("I could not find an event in that message.", store)

        response = client.post("/api/sms", data={"Body": "hi", "From": "+15551234567"})

        assert response.status_code == 200
        assert PROCESSING_FAILED_TEXT in response.text
        assert store.bodies == []


class TestManualFlow:
    def test_weekday_mismatch_corrected(self) -> None:
        store = _Store()
        client = _app(
            _reply(
                title="Board meeting",
                start_date="2025-12-09",
                start_time="18:30",
                location="headquarters",
                stated_weekday="monday",
            ),
            store,
        )

        response = client.post(
            "/api/events/create",
            json={"message": "Board meeting on Monday December 9th at 6:30pm at headquarters"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["eventData"]["start_date"] == "2025-12-08"
        assert "not a Monday" in body["eventData"]["validation_notes"]
        assert body["result"]["success"] is True
        assert store.bodies[0]["start_date"] == "2025-12-08 18:30:00"
        assert store.bodies[0]["end_date"] == "2025-12-08 19:30:00"

    def test_store_failure_reported(self) -> None:
        store = _Store(status=500, error={"code": "db_error", "message": "Database unavailable"})
        client = _app(
            _reply(title="Bake sale", start_date="2025-11-15", start_time="10:00"), store
        )

        response = client.post("/api/events/create", json={"message": "Bake sale Nov 15 10am"})

        assert response.status_code == 200
        assert response.json()["result"] == {
            "success": False,
            "event_id": None,
            "event_url": None,
            "error_message": "Database unavailable",
        }


class TestVoiceFlow:
    def test_caller_gets_confirmation_sms(self) -> None:
        store = _Store()
        messenger = MagicMock()
        client = _app(
            _reply(
                title="Volunteer training",
                start_date="2025-11-20",
                all_day=True,
                confidence="medium",
            ),
            store,
            messenger,
        )

        response = client.post(
            "/api/voice/transcribe",
            data={
                "TranscriptionText": "Volunteer training all day November 20th",
                "From": "+15559876543",
            },
        )

        assert response.status_code == 200
        assert store.bodies[0]["all_day"] is True
        assert store.bodies[0]["start_date"] == "2025-11-20 00:00:00"
        assert store.bodies[0]["end_date"] == "2025-11-20 23:59:59"
        to, text = messenger.send_sms.call_args.args
        assert to == "+15559876543"
        assert "Volunteer training" in text
        assert "(all day)" in text
