"""In-memory repositories for tasks and reminder bookkeeping."""

from __future__ import annotations

from datetime import datetime

from planner.domain.models import Task


class TaskRepository:
    """Dict-backed store for Task instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Task] = {}

    def add(self, task: Task) -> None:
        self._store[task.id] = task

    def get(self, task_id: str) -> Task | None:
        return self._store.get(task_id)

    def list_all(self) -> list[Task]:
        return list(self._store.values())

    def replace(self, task: Task) -> None:
        self._store[task.id] = task

    def delete(self, task_id: str) -> bool:
        return self._store.pop(task_id, None) is not None


class NotificationLog:
    """Remembers which tasks have already had a due-soon reminder."""

    def __init__(self) -> None:
        self._sent: dict[str, datetime] = {}

    def mark_sent(self, task_id: str, sent_at: datetime) -> None:
        self._sent[task_id] = sent_at

    def notified_ids(self) -> frozenset[str]:
        return frozenset(self._sent)

    def sent_at(self, task_id: str) -> datetime | None:
        return self._sent.get(task_id)

    def forget(self, task_id: str) -> None:
        self._sent.pop(task_id, None)

    def prune(self, live_ids: set[str]) -> None:
        """Drop entries for tasks that no longer exist."""
        for task_id in [tid for tid in self._sent if tid not in live_ids]:
            del self._sent[task_id]
