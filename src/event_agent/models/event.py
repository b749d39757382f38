"""Event record and publish result models.

- :class:`EventRecord` -- the canonical structured event, as returned by
  the extraction service and then repaired by
  :func:`~event_agent.validation.validate_event`.
- :class:`PublishResult` -- outcome of publishing a record to the
  calendar store.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import date, datetime, time
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

Confidence = Literal["high", "medium", "low"]

WEEKDAY_NAMES: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Values LLMs use for "not given" in date/time slots.
_ABSENT_MARKERS = {"", "null", "none", "n/a", "tbd", "unknown"}

_SINGLE_DIGIT_HOUR = re.compile(r"^\d:\d\d")


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in _ABSENT_MARKERS)


class EventRecord(BaseModel):
    """A single event announcement in structured form.

    Dates and times are optional at the schema level because a
    low-confidence extraction may not have them; once
    :func:`~event_agent.validation.validate_event` has run, a record with
    ``confidence`` other than ``"low"`` always has every date/time field.

    Attributes:
        title: Event name.
        start_date: Calendar date the event starts on.
        start_time: Local start time (24h).
        end_date: Calendar date the event ends on.
        end_time: Local end time (24h).
        location: Venue; ``"TBD"`` when unknown.
        description: Free-text description, may be empty.
        all_day: When true, times cover the whole day and are advisory.
        stated_weekday: Weekday name written in the message (lowercase),
            or ``None`` if the sender did not name one.
        year_stated: Whether the sender wrote a year.
        validation_notes: Every automatic correction or missing-info flag,
            as space-separated sentences.
        confidence: The extraction service's certainty.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    start_date: date | None = None
    start_time: time | None = None
    end_date: date | None = None
    end_time: time | None = None
    location: str = "TBD"
    description: str = ""
    all_day: bool = False
    stated_weekday: str | None = None
    year_stated: bool = True
    validation_notes: str = ""
    confidence: Confidence = "low"

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        if _is_absent(value):
            return None
        if isinstance(value, str):
            return value.strip()[:10]
        return value

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _parse_time(cls, value: Any) -> Any:
        if _is_absent(value):
            return None
        if isinstance(value, str):
            value = value.strip()
            if _SINGLE_DIGIT_HOUR.match(value):
                value = f"0{value}"
        return value

    @field_validator("title", "description", "validation_notes", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(str(item).strip() for item in value if str(item).strip())
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("location", mode="before")
    @classmethod
    def _location_or_tbd(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "TBD"
        return value.strip() if isinstance(value, str) else value

    @field_validator("all_day", mode="before")
    @classmethod
    def _all_day_default(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("year_stated", mode="before")
    @classmethod
    def _year_stated_default(cls, value: Any) -> Any:
        return True if value is None else value

    @field_validator("confidence", mode="before")
    @classmethod
    def _normalise_confidence(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("stated_weekday", mode="before")
    @classmethod
    def _normalise_weekday(cls, value: Any) -> str | None:
        """Accept full or abbreviated weekday names; anything else is dropped."""
        if _is_absent(value) or not isinstance(value, str):
            return None
        prefix = value.strip().lower()[:3]
        if len(prefix) < 3:
            return None
        for name in WEEKDAY_NAMES:
            if name.startswith(prefix):
                return name
        return None

    @property
    def starts_at(self) -> datetime | None:
        """Combined start date and time, when both are known."""
        if self.start_date is None or self.start_time is None:
            return None
        return datetime.combine(self.start_date, self.start_time)

    @property
    def ends_at(self) -> datetime | None:
        """Combined end date and time, when both are known."""
        if self.end_date is None or self.end_time is None:
            return None
        return datetime.combine(self.end_date, self.end_time)


@dataclass(frozen=True)
class PublishResult:
    """Outcome of publishing an event to the calendar store.

    Attributes:
        success: Whether the store created the event.
        event_id: Identifier assigned by the store.
        event_url: Public URL of the created event.
        error_message: Why publishing failed.
    """

    success: bool
    event_id: int | str | None = None
    event_url: str | None = None
    error_message: str | None = None

    @classmethod
    def failed(cls, error_message: str) -> PublishResult:
        return cls(success=False, error_message=error_message)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
