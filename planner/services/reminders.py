"""Service for task urgency and due-soon reminders."""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable
from datetime import datetime

from planner.domain.models import Reminder, Task, Urgency

DEFAULT_REMINDER_MINUTES = 5
DEFAULT_UPCOMING_MINUTES = 60
IMMINENT_MINUTES = 5
# A task this many minutes past due still gets its "due now" reminder.
LATE_GRACE_MINUTES = 1


def _pending(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if not t.completed and t.start is not None]


def _whole_minutes_until(start: datetime, now: datetime) -> int:
    """Minutes from *now* to *start*, truncated toward zero."""
    return int((start - now).total_seconds() / 60)


def classify_urgency(task: Task, now: datetime) -> Urgency | None:
    if task.completed or task.start is None:
        return None
    minutes = _whole_minutes_until(task.start, now)
    if minutes < 0:
        return Urgency.OVERDUE
    if minutes <= IMMINENT_MINUTES:
        return Urgency.IMMINENT
    if minutes <= DEFAULT_UPCOMING_MINUTES:
        return Urgency.SOON
    return None


def overdue_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Incomplete tasks whose start has already passed."""
    return [t for t in _pending(tasks) if t.start < now]


def upcoming_tasks(
    tasks: Iterable[Task],
    now: datetime,
    within_minutes: int = DEFAULT_UPCOMING_MINUTES,
) -> list[Task]:
    """Incomplete tasks starting after *now* but within *within_minutes*."""
    return sorted(
        (
            t
            for t in _pending(tasks)
            if 0 < _whole_minutes_until(t.start, now) <= within_minutes
        ),
        key=lambda t: t.start,
    )


def due_reminders(
    tasks: Iterable[Task],
    now: datetime,
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
    already_notified: Collection[str] = frozenset(),
) -> list[Reminder]:
    """Return a reminder for each task coming due that has not been notified.

    A task is due for a reminder when its start, rounded to the minute, lies
    between ``LATE_GRACE_MINUTES`` in the past and *reminder_minutes* ahead.
    """
    reminders: list[Reminder] = []
    for task in _pending(tasks):
        if task.id in already_notified:
            continue
        minutes = math.floor((task.start - now).total_seconds() / 60 + 0.5)
        if -LATE_GRACE_MINUTES <= minutes <= reminder_minutes:
            reminders.append(Reminder(task=task, minutes_left=max(0, minutes)))
    return reminders
