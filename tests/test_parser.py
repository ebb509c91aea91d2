"""Tests for due-date composition and start resolution."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from dateutil import tz

from planner.domain.instants import ensure_aware, resolve_instant
from planner.domain.models import Task
from planner.services.parser import compose_due

# Fixed reference time: Sunday 2025-06-01 12:00 UTC
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# compose_due
# ---------------------------------------------------------------------------


def test_date_and_time_are_combined():
    due = compose_due("2025-06-05", "14:30", now=NOW, tz=timezone.utc)
    assert due == datetime(2025, 6, 5, 14, 30, tzinfo=timezone.utc)


def test_date_without_time_is_end_of_day():
    due = compose_due("2025-06-05", None, now=NOW, tz=timezone.utc)
    assert due == datetime(2025, 6, 5, 23, 59, tzinfo=timezone.utc)


def test_blank_time_is_end_of_day():
    due = compose_due("2025-06-05", "  ", now=NOW, tz=timezone.utc)
    assert due.hour == 23 and due.minute == 59


def test_composed_due_uses_requested_zone():
    new_york = tz.gettz("America/New_York")
    due = compose_due("2025-06-05", "09:00", now=NOW, tz=new_york)
    assert due.utcoffset() == timedelta(hours=-4)


def test_relative_date_is_resolved_from_now():
    due = compose_due("tomorrow", "08:00", now=NOW, tz=timezone.utc)
    assert due == datetime(2025, 6, 2, 8, 0, tzinfo=timezone.utc)


def test_unrecognised_date_raises():
    with pytest.raises(ValueError, match="No due date"):
        compose_due("   ", None, now=NOW, tz=timezone.utc)


# ---------------------------------------------------------------------------
# resolve_instant / Task.start
# ---------------------------------------------------------------------------


def test_iso_string_with_offset_keeps_offset():
    resolved = resolve_instant("2025-06-05T09:00:00+02:00", timezone.utc)
    assert resolved == datetime(2025, 6, 5, 7, 0, tzinfo=timezone.utc)


def test_naive_values_get_default_zone():
    resolved = resolve_instant("2025-06-05T09:00:00", timezone.utc)
    assert resolved == datetime(2025, 6, 5, 9, 0, tzinfo=timezone.utc)
    naive = ensure_aware(datetime(2025, 6, 5, 9, 0), timezone.utc)
    assert naive.tzinfo is timezone.utc


def test_missing_values_resolve_to_none():
    assert resolve_instant(None, timezone.utc) is None
    assert resolve_instant("", timezone.utc) is None
    assert resolve_instant(12345, timezone.utc) is None


def test_relative_text_is_not_resolved_against_the_clock():
    assert resolve_instant("tomorrow", timezone.utc) is None
    assert Task(title="Essay", start="next friday 9am").start is None


def test_task_start_string_is_resolved():
    task = Task(title="Essay", start="2025-06-05T09:00:00Z")
    assert task.start == datetime(2025, 6, 5, 9, 0, tzinfo=timezone.utc)


def test_task_with_unreadable_start_is_unscheduled():
    task = Task(title="Broken record", start="#####")
    assert task.start is None


def test_task_naive_start_is_made_aware():
    task = Task(title="Reading", start=datetime(2025, 6, 5, 9, 0))
    assert task.start is not None
    assert task.start.utcoffset() == timedelta(0)
