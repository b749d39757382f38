"""HTTP webhooks for event-agent (FastAPI).

Endpoints:

- ``POST /api/sms`` -- Twilio SMS webhook; replies with TwiML.
- ``POST /api/voice`` -- Twilio voice webhook; prompts and records.
- ``POST /api/voice/transcribe`` -- Twilio transcription callback.
- ``POST /api/email`` -- inbound email (form or JSON).
- ``POST /api/events/create`` -- manual JSON submission ``{"message"}``.
- ``GET /health`` -- liveness probe.

The pipeline makes blocking calls to the extraction service and the
calendar store, so each message is processed in a worker thread.  No
error escapes a channel handler: failures become the channel's failure
acknowledgment.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from event_agent import __version__
from event_agent.config import Settings, load_settings
from event_agent.messaging import voice_prompt
from event_agent.models.message import Channel
from event_agent.normalizer import normalize
from event_agent.pipeline import EventPipeline, build_pipeline, build_responder
from event_agent.responder import XML_MEDIA_TYPE, ChannelResponder, ChannelResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


@router.post("/api/sms")
async def sms_webhook(request: Request) -> Response:
    payload = dict(await request.form())
    return await _handle(request, Channel.SMS, payload)


@router.post("/api/voice")
async def voice_webhook() -> Response:
    """Answer a call: ask for the event details and record them."""
    return Response(content=voice_prompt(), media_type=XML_MEDIA_TYPE)


@router.post("/api/voice/transcribe")
async def voice_transcription_callback(request: Request) -> Response:
    payload = dict(await request.form())
    return await _handle(request, Channel.VOICE, payload)


@router.post("/api/email")
async def email_webhook(request: Request) -> Response:
    return await _handle(request, Channel.EMAIL, await _read_payload(request))


@router.post("/api/events/create")
async def create_event(request: Request) -> Response:
    return await _handle(request, Channel.MANUAL, await _read_payload(request))


def create_app(
    settings: Settings | None = None,
    *,
    pipeline: EventPipeline | None = None,
    responder: ChannelResponder | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Settings are only loaded when a component has to be built from them,
    so tests can pass a fake *pipeline* and *responder* without any
    environment.

    Args:
        settings: Application settings.  Loaded from the environment when
            needed and not given.
        pipeline: Pre-built pipeline; built from *settings* if ``None``.
        responder: Pre-built responder; built from *settings* if ``None``.

    Returns:
        The configured application.
    """
    if pipeline is None or responder is None:
        settings = settings or load_settings()
        pipeline = pipeline or build_pipeline(settings)
        responder = responder or build_responder(settings)

    app = FastAPI(
        title="event-agent",
        description="Turns event announcements into published calendar events",
        version=__version__,
    )
    app.state.pipeline = pipeline
    app.state.responder = responder
    app.include_router(router)
    return app


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


async def _handle(request: Request, channel: Channel, payload: dict[str, Any]) -> Response:
    pipeline: EventPipeline = request.app.state.pipeline
    responder: ChannelResponder = request.app.state.responder
    reply = await asyncio.to_thread(_process, pipeline, responder, channel, payload)
    return _to_response(reply)


def _process(
    pipeline: EventPipeline,
    responder: ChannelResponder,
    channel: Channel,
    payload: dict[str, Any],
) -> ChannelResponse:
    """Normalize, run and acknowledge one message; never raises."""
    try:
        message = normalize(channel, payload)
        outcome = pipeline.run(message)
        return responder.respond(outcome)
    except Exception as exc:
        logger.exception("%s processing error", channel.label)
        return responder.failure(channel, exc)


async def _read_payload(request: Request) -> dict[str, Any]:
    """Read a JSON or form body; an unreadable body yields an empty payload."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            logger.warning("Request body is not valid JSON")
            return {}
        return data if isinstance(data, dict) else {}
    return dict(await request.form())


def _to_response(reply: ChannelResponse) -> Response:
    if isinstance(reply.body, dict):
        return JSONResponse(content=reply.body, status_code=reply.status_code)
    return Response(
        content=reply.body,
        status_code=reply.status_code,
        media_type=reply.media_type,
    )
