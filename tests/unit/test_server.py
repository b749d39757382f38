"""Unit tests for the FastAPI webhooks in event_agent.server."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from event_agent.exceptions import ExtractionServiceError
from event_agent.gate import ClarificationNeeded
from event_agent.models.event import EventRecord, PublishResult
from event_agent.models.message import Channel, RawMessage
from event_agent.pipeline import PipelineOutcome
from event_agent.responder import PROCESSING_FAILED_TEXT, ChannelResponder
from event_agent.server import create_app

_URL = "https://events.example.org/event/gop-meeting/"


def _record(**overrides: object) -> EventRecord:
    values: dict = {
        "title": "GOP meeting",
        "start_date": "2025-11-11",
        "start_time": "19:00",
        "end_date": "2025-11-11",
        "end_time": "20:00",
        "location": "Elks Lodge",
        "confidence": "high",
    }
    values.update(overrides)
    return EventRecord.model_validate(values)


def _fake_pipeline(result: PublishResult | None = None, **record_overrides: object) -> MagicMock:
    """A pipeline whose ``run`` echoes the message into a fixed outcome."""
    pipeline = MagicMock()
    record = _record(**record_overrides)

    def run(message: RawMessage, dry_run: bool = False) -> PipelineOutcome:
        if record.confidence == "low":
            return PipelineOutcome(
                message=message,
                record=record,
                clarification=ClarificationNeeded(record.validation_notes),
            )
        return PipelineOutcome(
            message=message,
            record=record,
            publish_result=result or PublishResult(success=True, event_id=9, event_url=_URL),
        )

    pipeline.run.side_effect = run
    return pipeline


def _client(pipeline: MagicMock, messenger: MagicMock | None = None) -> TestClient:
    app = create_app(pipeline=pipeline, responder=ChannelResponder(messenger))
    return TestClient(app)


class TestHealth:
    def test_ok(self) -> None:
        response = _client(_fake_pipeline()).get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "T" in body["timestamp"]


class TestSmsWebhook:
    def test_confirmation_twiml(self) -> None:
        pipeline = _fake_pipeline()
        response = _client(pipeline).post(
            "/api/sms",
            data={"Body": "GOP meeting Nov 11 7pm at Elks Lodge", "From": "+15551234567"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/xml")
        assert "✅ Event created: GOP meeting" in response.text
        assert _URL in response.text
        message = pipeline.run.call_args.args[0]
        assert message == RawMessage(
            text="GOP meeting Nov 11 7pm at Elks Lodge",
            channel=Channel.SMS,
            sender="+15551234567",
        )

    def test_store_failure_acknowledged(self) -> None:
        response = _client(
            _fake_pipeline(PublishResult.failed("HTTP 500 Internal Server Error"))
        ).post("/api/sms", data={"Body": "GOP meeting", "From": "+15551234567"})

        assert response.status_code == 200
        assert "❌ Error creating event: HTTP 500 Internal Server Error" in response.text

    def test_clarification(self) -> None:
        response = _client(
            _fake_pipeline(
                start_date=None, confidence="low", validation_notes="Event date is missing."
            )
        ).post("/api/sms", data={"Body": "meeting soon", "From": "+15551234567"})

        assert "Missing: Event date is missing." in response.text

    def test_missing_body_gets_generic_reply(self) -> None:
        pipeline = _fake_pipeline()
        response = _client(pipeline).post("/api/sms", data={"From": "+15551234567"})

        assert response.status_code == 200
        assert PROCESSING_FAILED_TEXT in response.text
        pipeline.run.assert_not_called()

    def test_extraction_failure_gets_generic_reply(self) -> None:
        pipeline = MagicMock()
        pipeline.run.side_effect = ExtractionServiceError("Gemini API call failed")

        response = _client(pipeline).post(
            "/api/sms", data={"Body": "GOP meeting", "From": "+15551234567"}
        )

        assert response.status_code == 200
        assert PROCESSING_FAILED_TEXT in response.text


class TestVoiceWebhooks:
    def test_call_prompt(self) -> None:
        response = _client(_fake_pipeline()).post("/api/voice")

        assert response.status_code == 200
        assert "<Say>" in response.text
        assert 'transcribeCallback="/api/voice/transcribe"' in response.text

    def test_transcription_sends_confirmation(self) -> None:
        messenger = MagicMock()
        response = _client(_fake_pipeline(), messenger).post(
            "/api/voice/transcribe",
            data={"TranscriptionText": "GOP meeting on November 11", "From": "+15551234567"},
        )

        assert response.status_code == 200
        to, body = messenger.send_sms.call_args.args
        assert to == "+15551234567"
        assert "Event created from your call: GOP meeting" in body

    def test_missing_transcription_is_400(self) -> None:
        messenger = MagicMock()
        response = _client(_fake_pipeline(), messenger).post(
            "/api/voice/transcribe", data={"From": "+15551234567"}
        )

        assert response.status_code == 400
        messenger.send_sms.assert_not_called()


class TestEmailWebhook:
    def test_json_payload(self) -> None:
        pipeline = _fake_pipeline()
        response = _client(pipeline).post(
            "/api/email",
            json={
                "from": "chair@example.org",
                "subject": "GOP meeting",
                "text": "November 11 at 7pm, Elks Lodge",
            },
        )

        assert response.status_code == 200
        message = pipeline.run.call_args.args[0]
        assert message.channel is Channel.EMAIL
        assert message.text == "Subject: GOP meeting\n\nNovember 11 at 7pm, Elks Lodge"
        assert message.sender == "chair@example.org"

    def test_form_payload(self) -> None:
        pipeline = _fake_pipeline()
        response = _client(pipeline).post(
            "/api/email",
            data={"from": "chair@example.org", "subject": "Meeting", "html": "<p>Nov 11</p>"},
        )

        assert response.status_code == 200
        assert pipeline.run.call_args.args[0].text == "Subject: Meeting\n\n<p>Nov 11</p>"

    def test_missing_body_is_400(self) -> None:
        response = _client(_fake_pipeline()).post(
            "/api/email", json={"from": "chair@example.org", "subject": "Meeting"}
        )

        assert response.status_code == 400

    def test_processing_error_is_500(self) -> None:
        pipeline = MagicMock()
        pipeline.run.side_effect = ExtractionServiceError("down")

        response = _client(pipeline).post(
            "/api/email", json={"from": "a@b.c", "subject": "s", "text": "t"}
        )

        assert response.status_code == 500


class TestManualApi:
    def test_returns_event_data_and_result(self) -> None:
        response = _client(_fake_pipeline()).post(
            "/api/events/create", json={"message": "GOP meeting Nov 11 7pm"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["eventData"]["title"] == "GOP meeting"
        assert body["eventData"]["location"] == "Elks Lodge"
        assert body["result"]["success"] is True
        assert body["result"]["event_url"] == _URL

    def test_store_failure_is_200(self) -> None:
        response = _client(_fake_pipeline(PublishResult.failed("Database unavailable"))).post(
            "/api/events/create", json={"message": "GOP meeting"}
        )

        assert response.status_code == 200
        assert response.json()["result"]["error_message"] == "Database unavailable"

    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}, {"message": 5}])
    def test_invalid_message_is_400(self, payload: dict) -> None:
        pipeline = _fake_pipeline()
        response = _client(pipeline).post("/api/events/create", json=payload)

        assert response.status_code == 400
        assert "message" in response.json()["error"]
        pipeline.run.assert_not_called()

    def test_malformed_json_is_400(self) -> None:
        response = _client(_fake_pipeline()).post(
            "/api/events/create",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400

    def test_extraction_error_is_500(self) -> None:
        pipeline = MagicMock()
        pipeline.run.side_effect = ExtractionServiceError("Anthropic API call failed: timeout")

        response = _client(pipeline).post("/api/events/create", json={"message": "GOP meeting"})

        assert response.status_code == 500
        assert response.json() == {"error": "Anthropic API call failed: timeout"}
