"""Publisher for a WordPress site running The Events Calendar.

:class:`WordPressEventsClient` posts one event per call to the
``tribe/events/v1`` REST endpoint with basic-auth credentials.  Publishing
never raises: every failure (unpublishable record, HTTP error status,
unreachable store) comes back as a failed
:class:`~event_agent.models.event.PublishResult`.  There are no retries.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from event_agent.calendar.event_mapper import map_to_tribe_event
from event_agent.exceptions import PublishError
from event_agent.models.event import EventRecord, PublishResult

logger = logging.getLogger(__name__)

EVENTS_PATH = "/wp-json/tribe/events/v1/events"


class WordPressEventsClient:
    """Create events in The Events Calendar over its REST API.

    Args:
        site_url: Base URL of the WordPress site.
        username: WordPress user for basic auth.
        password: WordPress application password.
        timeout: Request timeout in seconds.
        http_client: Optional pre-built ``httpx.Client``.  If ``None``, one
            is created and owned by this instance.  Pass a client with an
            ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        site_url: str,
        username: str,
        password: str,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._endpoint = f"{site_url.rstrip('/')}{EVENTS_PATH}"
        self._auth = httpx.BasicAuth(username, password)
        self._timeout = timeout
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def publish(self, record: EventRecord) -> PublishResult:
        """Publish *record* and report the outcome.

        Args:
            record: A validated record with confidence above ``"low"``.

        Returns:
            ``PublishResult(success=True, event_id, event_url)`` when the
            store created the event, otherwise ``success=False`` with an
            ``error_message`` taken from the store's error body when it has
            one, else from the transport error.
        """
        try:
            body = map_to_tribe_event(record)
        except ValueError as exc:
            logger.error("Not publishing event: %s", exc)
            return PublishResult.failed(str(exc))

        try:
            data = self._create(body)
        except PublishError as exc:
            logger.error(
                "Calendar store rejected '%s' (status=%s): %s",
                record.title,
                exc.status_code,
                exc,
            )
            return PublishResult.failed(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error publishing '%s'", record.title)
            return PublishResult.failed(f"Unexpected error publishing event: {exc}")

        result = PublishResult(
            success=True,
            event_id=data.get("id"),
            event_url=data.get("url"),
        )
        logger.info(
            "Published event '%s' as id=%s (%s)", record.title, result.event_id, result.event_url
        )
        return result

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> WordPressEventsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _create(self, body: dict) -> dict[str, Any]:
        """POST *body* and return the decoded response.

        Raises:
            PublishError: On transport errors, non-2xx statuses, and
                responses that are not a JSON object.
        """
        try:
            response = self._http.post(
                self._endpoint,
                json=body,
                auth=self._auth,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise PublishError(
                f"Calendar store unreachable: {str(exc) or type(exc).__name__}"
            ) from exc

        if not response.is_success:
            raise PublishError(_error_message(response), status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise PublishError(
                "Calendar store returned a non-JSON response", status_code=response.status_code
            ) from exc

        if not isinstance(data, dict):
            raise PublishError(
                "Calendar store returned an unexpected response", status_code=response.status_code
            )
        return data


def _error_message(response: httpx.Response) -> str:
    """Prefer the ``message`` of a WordPress REST error body."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        return data["message"]
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()
