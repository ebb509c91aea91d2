"""Service for detecting time conflicts between a candidate and existing tasks."""

from __future__ import annotations

from datetime import datetime
from collections.abc import Iterable

from planner.domain.instants import is_aware
from planner.domain.intervals import Interval, schedulable, to_minutes
from planner.domain.models import Conflict, Task


class InvalidCandidateError(ValueError):
    """Raised when a candidate start or duration cannot describe an interval."""


def candidate_interval(start: datetime, duration: int) -> Interval:
    """Validate a candidate and return the interval it would occupy."""
    if not is_aware(start):
        raise InvalidCandidateError("Candidate start must be a timezone-aware datetime")
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise InvalidCandidateError("Candidate duration must be a whole number of minutes")
    if duration <= 0:
        raise InvalidCandidateError(
            f"Candidate duration must be positive, got {duration} minutes"
        )
    return Interval.starting_at(start, duration)


def find_conflicts(
    existing_tasks: Iterable[Task],
    candidate_start: datetime,
    candidate_duration: int,
    exclude_id: str | None = None,
) -> list[Conflict]:
    """Return existing tasks that overlap ``[candidate_start, candidate_start + duration)``.

    Overlap rule: conflict if candidate.start < task.end AND task.start < candidate.end.
    Exact boundary touches are NOT conflicts. Completed and unscheduled tasks
    are ignored, as is the task whose id equals *exclude_id*.
    """
    candidate = candidate_interval(candidate_start, candidate_duration)

    conflicts: list[Conflict] = []
    for task, interval in schedulable(existing_tasks, exclude_id):
        if not candidate.overlaps(interval):
            continue
        minutes = to_minutes(candidate.overlap(interval))
        conflicts.append(Conflict(task=task, overlap_minutes=minutes))
    return conflicts
