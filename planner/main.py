"""FastAPI application — entry point for the task planner service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException

from planner.domain.instants import ensure_aware
from planner.domain.intervals import task_duration
from planner.domain.models import (
    CandidateRequest,
    Conflict,
    ReminderOut,
    ScheduleCheck,
    SuggestionResponse,
    Task,
    TaskCreate,
    TaskUpdate,
)
from planner.repos.memory import NotificationLog, TaskRepository
from planner.services.conflicts import InvalidCandidateError, find_conflicts
from planner.services.parser import compose_due
from planner.services.reminders import due_reminders, overdue_tasks, upcoming_tasks
from planner.services.slots import check_schedule, suggest_slot
from planner.settings import get_settings

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Task Planner Service")

# ── Singletons (created at import time for simplicity) ────────────────
task_repo = TaskRepository()
notification_log = NotificationLog()


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return ensure_aware(now, settings.tzinfo)


def _get_task_or_404(task_id: str) -> Task:
    task = task_repo.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


# ── Routes: tasks ─────────────────────────────────────────────────────


@app.post("/tasks", response_model=Task, status_code=201)
def create_task(payload: TaskCreate) -> Task:
    """Create a task from an explicit start or a due date and optional time."""
    start = payload.start
    if start is None and payload.due_date:
        try:
            start = compose_due(
                payload.due_date,
                payload.due_time,
                now=datetime.now(timezone.utc),
                tz=settings.tzinfo,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    task = Task(
        title=payload.title.strip(),
        start=start,
        duration=payload.duration,
        priority=payload.priority,
        category=payload.category,
        notes=payload.notes,
    )
    task_repo.add(task)
    logger.info("Created task %s (%s)", task.id, task.title)
    return task


@app.get("/tasks", response_model=list[Task])
def list_tasks() -> list[Task]:
    """Return all stored tasks."""
    return task_repo.list_all()


@app.get("/tasks/overdue", response_model=list[Task])
def list_overdue(now: datetime | None = None) -> list[Task]:
    """Return incomplete tasks whose start has passed."""
    return overdue_tasks(task_repo.list_all(), _now(now))


@app.get("/tasks/upcoming", response_model=list[Task])
def list_upcoming(now: datetime | None = None) -> list[Task]:
    """Return incomplete tasks starting within the upcoming window."""
    return upcoming_tasks(
        task_repo.list_all(), _now(now), settings.upcoming_window_minutes
    )


@app.get("/tasks/{task_id}", response_model=Task)
def get_task(task_id: str) -> Task:
    """Return a single task by id."""
    return _get_task_or_404(task_id)


@app.patch("/tasks/{task_id}", response_model=Task)
def update_task(task_id: str, payload: TaskUpdate) -> Task:
    """Apply the fields present in *payload* to a stored task."""
    task = _get_task_or_404(task_id)
    changes = {
        field: value
        for field, value in payload.model_dump(include=payload.model_fields_set).items()
        # Only the schedule fields may be cleared explicitly.
        if value is not None or field in {"start", "duration"}
    }
    updated = Task.model_validate({**task.model_dump(), **changes})
    task_repo.replace(updated)

    if "start" in changes:
        # A moved task deserves a fresh reminder.
        notification_log.forget(task_id)
    return updated


@app.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: str) -> None:
    """Delete a task and drop its reminder record."""
    if not task_repo.delete(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    notification_log.forget(task_id)


@app.get("/tasks/{task_id}/conflicts", response_model=list[Conflict])
def task_conflicts(task_id: str) -> list[Conflict]:
    """Return the other tasks overlapping a stored task's own slot."""
    task = _get_task_or_404(task_id)
    if task.start is None:
        return []
    return find_conflicts(
        task_repo.list_all(), task.start, task_duration(task), exclude_id=task.id
    )


# ── Routes: scheduling ────────────────────────────────────────────────


@app.post("/schedule/check", response_model=ScheduleCheck)
def schedule_check(body: CandidateRequest) -> ScheduleCheck:
    """Report conflicts for a candidate slot and suggest a free one if needed."""
    try:
        return check_schedule(
            task_repo.list_all(),
            ensure_aware(body.start, settings.tzinfo),
            body.duration,
            body.exclude_id,
            buffer_minutes=settings.slot_buffer_minutes,
            max_iterations=settings.slot_max_iterations,
        )
    except InvalidCandidateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/schedule/suggest", response_model=SuggestionResponse)
def schedule_suggest(body: CandidateRequest) -> SuggestionResponse:
    """Return the next start time for the candidate that avoids every task."""
    tasks = task_repo.list_all()
    start = ensure_aware(body.start, settings.tzinfo)
    try:
        suggested = suggest_slot(
            tasks,
            start,
            body.duration,
            exclude_id=body.exclude_id,
            buffer_minutes=settings.slot_buffer_minutes,
            max_iterations=settings.slot_max_iterations,
        )
    except InvalidCandidateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    residual = find_conflicts(tasks, suggested, body.duration, body.exclude_id)
    return SuggestionResponse(suggested_start=suggested, conflict_free=not residual)


# ── Routes: reminders ─────────────────────────────────────────────────


@app.post("/tick")
def tick(now: datetime | None = None) -> dict:
    """Fire reminders for tasks coming due.

    Pass *now* as a query param to control the simulated clock.
    Defaults to ``datetime.now(timezone.utc)`` when omitted.
    """
    current_time = _now(now)
    tasks = task_repo.list_all()
    notification_log.prune({t.id for t in tasks})

    fired: list[ReminderOut] = []
    for reminder in due_reminders(
        tasks,
        current_time,
        settings.reminder_minutes,
        notification_log.notified_ids(),
    ):
        notification_log.mark_sent(reminder.task.id, current_time)
        logger.info(reminder.message)
        fired.append(
            ReminderOut(
                task_id=reminder.task.id,
                title=reminder.task.title,
                minutes_left=reminder.minutes_left,
                message=reminder.message,
            )
        )

    return {
        "time": current_time.isoformat(),
        "reminders": [r.model_dump() for r in fired],
    }
