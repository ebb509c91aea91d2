"""Service for turning user-entered due dates into task start instants."""

from __future__ import annotations

from datetime import datetime, time, tzinfo

import dateparser

END_OF_DAY = time(23, 59)


def _parse_date(raw: str, now: datetime) -> datetime | None:
    """Parse a raw date string using dateparser, relative to *now*."""
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        pass
    settings = {
        "PREFER_DATES_FROM": "future",
        "RELATIVE_BASE": now.replace(tzinfo=None),
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    return dateparser.parse(raw, settings=settings)


def _parse_clock(raw: str) -> time | None:
    try:
        return time.fromisoformat(raw)
    except ValueError:
        pass
    result = dateparser.parse(raw, settings={"RETURN_AS_TIMEZONE_AWARE": False})
    if result is None:
        return None
    return result.time().replace(second=0, microsecond=0)


def compose_due(
    due_date: str,
    due_time: str | None,
    *,
    now: datetime,
    tz: tzinfo,
) -> datetime:
    """Combine a date and an optional time of day into an aware start instant.

    A date without a time means the end of that day (23:59). Raises
    ``ValueError`` if either part cannot be understood.
    """
    raw_date = due_date.strip()
    if not raw_date:
        raise ValueError("No due date given")
    parsed = _parse_date(raw_date, now)
    if parsed is None:
        raise ValueError(f"Unrecognised due date: {due_date!r}")

    clock = END_OF_DAY
    if due_time and due_time.strip():
        parsed_clock = _parse_clock(due_time.strip())
        if parsed_clock is None:
            raise ValueError(f"Unrecognised due time: {due_time!r}")
        clock = parsed_clock

    return datetime.combine(parsed.date(), clock, tzinfo=tz)
