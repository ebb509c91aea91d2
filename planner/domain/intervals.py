"""Half-open time intervals derived from tasks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from collections.abc import Iterable

from planner.domain.models import Task

DEFAULT_TASK_DURATION = 30  # minutes


@dataclass(frozen=True)
class Interval:
    """A span of time ``[start, end)``."""

    start: datetime
    end: datetime

    @classmethod
    def starting_at(cls, start: datetime, minutes: int) -> Interval:
        return cls(start=start, end=start + timedelta(minutes=minutes))

    def overlaps(self, other: Interval) -> bool:
        # Touching boundaries (end == start) are not an overlap.
        return self.start < other.end and other.start < self.end

    def overlap(self, other: Interval) -> timedelta:
        """Length of the intersection, never negative."""
        shared = min(self.end, other.end) - max(self.start, other.start)
        return max(shared, timedelta(0))


def task_duration(task: Task) -> int:
    return task.duration or DEFAULT_TASK_DURATION


def task_interval(task: Task) -> Interval | None:
    """Return the interval a task occupies, or ``None`` if it is unscheduled."""
    if task.start is None:
        return None
    return Interval.starting_at(task.start, task_duration(task))


def schedulable(
    tasks: Iterable[Task], exclude_id: str | None = None
) -> tuple[tuple[Task, Interval], ...]:
    """Pair every task that can take part in a conflict with its interval.

    Completed tasks, unscheduled tasks and the task named by *exclude_id*
    are dropped. The input is never modified.
    """
    return tuple(
        (task, interval)
        for task in tasks
        if not task.completed
        and task.id != exclude_id
        and (interval := task_interval(task)) is not None
    )


def to_minutes(delta: timedelta) -> int:
    """Round a duration to the nearest whole minute, halves rounding up."""
    return int(math.floor(delta.total_seconds() / 60 + 0.5))
