"""Domain models for the task planner."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from planner.domain.instants import resolve_instant
from planner.settings import get_settings


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Urgency(StrEnum):
    OVERDUE = "overdue"
    IMMINENT = "imminent"
    SOON = "soon"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Task(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    start: datetime | None = None
    duration: int | None = Field(default=30, ge=0)
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    category: str = "General"
    notes: str = ""
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("start", mode="before")
    @classmethod
    def _resolve_start(cls, value: object) -> datetime | None:
        # An unreadable start unschedules the task instead of rejecting it.
        return resolve_instant(value, get_settings().tzinfo)


class Conflict(BaseModel):
    """An existing task overlapping a candidate interval."""

    task: Task
    overlap_minutes: int


class ScheduleCheck(BaseModel):
    conflicts: list[Conflict] = Field(default_factory=list)
    suggested_start: datetime | None = None
    suggestion_conflict_free: bool | None = None

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


class Reminder(BaseModel):
    task: Task
    minutes_left: int

    @property
    def message(self) -> str:
        if self.minutes_left <= 0:
            return f"Task due now: {self.task.title}"
        unit = "minute" if self.minutes_left == 1 else "minutes"
        return f"Task due in {self.minutes_left} {unit}: {self.task.title}"


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    start: datetime | None = None
    due_date: str | None = None
    due_time: str | None = None
    duration: int = Field(default=30, ge=0)
    priority: Priority = Priority.MEDIUM
    category: str = "General"
    notes: str = ""


class TaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    start: datetime | None = None
    duration: int | None = Field(default=None, ge=0)
    completed: bool | None = None
    priority: Priority | None = None
    category: str | None = None
    notes: str | None = None


class CandidateRequest(BaseModel):
    start: datetime
    duration: int
    exclude_id: str | None = None


class SuggestionResponse(BaseModel):
    suggested_start: datetime
    conflict_free: bool


class ReminderOut(BaseModel):
    task_id: str
    title: str
    minutes_left: int
    message: str
