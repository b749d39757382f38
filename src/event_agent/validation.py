"""Date consistency validation for extracted events.

:func:`validate_event` is a pure function that repairs what an extraction
service commonly gets wrong or leaves out:

1. a missing year (assume the reference year, or the next one if the date
   has already passed),
2. a weekday that does not match the calendar date ("Monday, December 9"
   when December 9 is a Tuesday),
3. a missing start time (evening or daytime default),
4. a missing or inverted end (one-hour default),
5. all-day events (times cover the whole day).

Every repair appends a human-readable sentence to ``validation_notes``;
notes accumulate and a note already present is never added twice, so
validating an already-validated record returns it unchanged.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from event_agent.models.event import WEEKDAY_NAMES, EventRecord

logger = logging.getLogger(__name__)

DEFAULT_EVENING_KEYWORDS: frozenset[str] = frozenset(
    {
        "evening",
        "night",
        "tonight",
        "dinner",
        "supper",
        "party",
        "gala",
        "banquet",
        "reception",
        "social",
        "mixer",
        "happy hour",
        "concert",
        "fundraiser",
    }
)

_EVENING_START = time(19, 0)
_DAYTIME_START = time(10, 0)
_DEFAULT_DURATION = timedelta(hours=1)
_DAY_START = time(0, 0)
_DAY_END = time(23, 59, 59)


def validate_event(
    record: EventRecord,
    reference_date: date,
    evening_keywords: Iterable[str] = DEFAULT_EVENING_KEYWORDS,
) -> EventRecord:
    """Check and repair the dates and times of an extracted event.

    Year anchoring runs before the weekday comparison because a weekday
    can only be checked against a concrete year.  Records without a start
    date cannot be repaired; they are flagged and forced to low
    confidence so they are never published.

    Args:
        record: The candidate record returned by the extraction service.
        reference_date: "Today" in the configured timezone.
        evening_keywords: Words in the title or description that make a
            missing start time default to 19:00 instead of 10:00.

    Returns:
        A new :class:`EventRecord`; *record* is not modified.
    """
    notes = record.validation_notes
    confidence = record.confidence

    if not record.title:
        notes = _append_note(notes, "Event title is missing.")
        confidence = "low"

    if record.start_date is None:
        notes = _append_note(notes, "Event date is missing.")
        return record.model_copy(update={"validation_notes": notes, "confidence": "low"})

    start_date = record.start_date
    end_date = record.end_date

    if not record.year_stated:
        anchored = _anchor_year(start_date, reference_date)
        end_date = _shift(end_date, anchored - start_date)
        notes = _append_note(notes, f"No year given; assumed {anchored.year}.")
        if anchored.day != start_date.day:
            notes = _append_note(
                notes,
                f"{start_date:%B} {start_date.day} does not exist in {anchored.year}; "
                f"moved to {anchored:%B} {anchored.day}, {anchored.year}.",
            )
        start_date = anchored

    if record.stated_weekday is not None:
        target = WEEKDAY_NAMES.index(record.stated_weekday)
        if start_date.weekday() != target:
            corrected = _resolve_weekday(
                start_date,
                target,
                reference_date,
                year_flexible=not record.year_stated,
            )
            logger.info(
                "Weekday mismatch for '%s': %s is a %s, moved to %s",
                record.title,
                start_date.isoformat(),
                f"{start_date:%A}",
                corrected.isoformat(),
            )
            notes = _append_note(
                notes,
                f"{start_date:%B} {start_date.day}, {start_date.year} is a "
                f"{start_date:%A}, not a {record.stated_weekday.capitalize()}; "
                f"moved to {_long_date(corrected)}.",
            )
            end_date = _shift(end_date, corrected - start_date)
            start_date = corrected

    if record.all_day:
        start_time, end_time = _DAY_START, _DAY_END
        if end_date is None or end_date < start_date:
            end_date = start_date
        if (record.start_time, record.end_time, record.end_date) != (
            start_time,
            end_time,
            end_date,
        ):
            notes = _append_note(notes, "All-day event; times set to cover the whole day.")
    else:
        start_time = record.start_time
        if start_time is None:
            evening = _is_evening(record, evening_keywords)
            start_time = _EVENING_START if evening else _DAYTIME_START
            kind = "evening" if evening else "daytime"
            notes = _append_note(
                notes, f"No start time given; defaulted to {start_time:%H:%M} ({kind} event)."
            )

        start = datetime.combine(start_date, start_time)
        if record.end_time is None:
            if end_date is None or end_date == start_date:
                end = start + _DEFAULT_DURATION
                notes = _append_note(notes, "No end time given; assumed a one-hour event.")
            else:
                end = datetime.combine(end_date, start_time)
                notes = _append_note(
                    notes, "No end time given; assumed it ends at the start time."
                )
        else:
            end = datetime.combine(end_date or start_date, record.end_time)
            if end < start and end_date is None:
                end += timedelta(days=1)
                notes = _append_note(
                    notes, f"End time is past midnight; end date set to {end.date().isoformat()}."
                )

        if end < start:
            end = start + _DEFAULT_DURATION
            notes = _append_note(notes, "End was before start; reset to one hour after start.")

        end_date, end_time = end.date(), end.time()

    return record.model_copy(
        update={
            "start_date": start_date,
            "start_time": start_time,
            "end_date": end_date,
            "end_time": end_time,
            "year_stated": True,
            "validation_notes": notes,
            "confidence": confidence,
        }
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _append_note(notes: str, note: str) -> str:
    if note in notes:
        return notes
    return f"{notes} {note}" if notes else note


def _shift(value: date | None, delta: timedelta) -> date | None:
    return None if value is None else value + delta


def _long_date(value: date) -> str:
    return f"{value:%A, %B} {value.day}, {value.year}"


def _with_year(value: date, year: int) -> date:
    try:
        return value.replace(year=year)
    except ValueError:
        # February 29 outside a leap year.
        return value.replace(year=year, day=28)


def _anchor_year(value: date, reference: date) -> date:
    """Place *value* in the reference year, or the next one if already past."""
    anchored = _with_year(value, reference.year)
    if anchored < reference:
        anchored = _with_year(value, reference.year + 1)
    return anchored


def _resolve_weekday(
    asserted: date,
    target: int,
    reference: date,
    year_flexible: bool,
) -> date:
    """Find the date the sender most likely meant by *target* weekday.

    When the year was assumed rather than written, the same month and day
    in an adjacent year is preferred if it falls on the stated weekday and
    has not passed.  Otherwise the date moves to the nearest occurrence of
    the weekday; the earlier one is used only if it is closer and has not
    passed.
    """
    if year_flexible:
        for year in (asserted.year - 1, asserted.year + 1):
            try:
                option = asserted.replace(year=year)
            except ValueError:
                continue
            if option.weekday() == target and option >= reference:
                return option

    forward = (target - asserted.weekday()) % 7
    backward = 7 - forward
    earlier = asserted - timedelta(days=backward)
    if backward < forward and earlier >= reference:
        return earlier
    return asserted + timedelta(days=forward)


def _is_evening(record: EventRecord, keywords: Iterable[str]) -> bool:
    text = f"{record.title} {record.description}".lower()
    return any(re.search(rf"\b{re.escape(word.lower())}\b", text) for word in keywords)
