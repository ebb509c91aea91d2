"""Service for finding the next start time free of conflicts."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from collections.abc import Iterable, Sequence

from planner.domain.intervals import task_interval
from planner.domain.models import Conflict, ScheduleCheck, Task
from planner.services.conflicts import candidate_interval, find_conflicts

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_MINUTES = 5
DEFAULT_MAX_ITERATIONS = 100


def _latest_end(conflicts: Sequence[Conflict]) -> datetime:
    # Every reported conflict has an interval; unscheduled tasks never conflict.
    return max(task_interval(c.task).end for c in conflicts)  # type: ignore[union-attr]


def suggest_slot(
    existing_tasks: Iterable[Task],
    preferred_start: datetime,
    duration: int,
    *,
    exclude_id: str | None = None,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> datetime:
    """Return the first start at or after *preferred_start* with no conflicts.

    Each round jumps past the latest-ending conflicting task plus
    *buffer_minutes*. After *max_iterations* jumps the last candidate is
    returned as-is, which may still conflict.
    """
    if buffer_minutes < 0:
        raise ValueError("buffer_minutes must not be negative")
    if max_iterations < 0:
        raise ValueError("max_iterations must not be negative")
    candidate_interval(preferred_start, duration)

    tasks = tuple(existing_tasks)
    buffer = timedelta(minutes=buffer_minutes)
    candidate = preferred_start

    for attempt in range(max_iterations):
        conflicts = find_conflicts(tasks, candidate, duration, exclude_id)
        if not conflicts:
            return candidate
        candidate = _latest_end(conflicts) + buffer
        logger.debug(
            "Slot attempt %d hit %d conflict(s); advancing to %s",
            attempt + 1,
            len(conflicts),
            candidate.isoformat(),
        )

    logger.warning(
        "No free slot found within %d attempts; returning best effort %s",
        max_iterations,
        candidate.isoformat(),
    )
    return candidate


def check_schedule(
    existing_tasks: Iterable[Task],
    start: datetime,
    duration: int,
    exclude_id: str | None = None,
    *,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> ScheduleCheck:
    """Report conflicts for a candidate and, when there are any, a suggested start."""
    tasks = tuple(existing_tasks)
    conflicts = find_conflicts(tasks, start, duration, exclude_id)
    if not conflicts:
        return ScheduleCheck()

    suggested = suggest_slot(
        tasks,
        start,
        duration,
        exclude_id=exclude_id,
        buffer_minutes=buffer_minutes,
        max_iterations=max_iterations,
    )
    residual = find_conflicts(tasks, suggested, duration, exclude_id)
    return ScheduleCheck(
        conflicts=conflicts,
        suggested_start=suggested,
        suggestion_conflict_free=not residual,
    )
