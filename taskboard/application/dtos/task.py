"""DTOs for board tasks (no dependency on transport)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from taskboard.domain.enums import TaskPriority, TaskStatus


@dataclass(frozen=True)
class TaskCreate:
    """Draft for a new task. Owner and visibility are set by the repository."""

    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    assignee: str | None = None
    position: int = 0


@dataclass(frozen=True)
class TaskResult:
    """Persisted task as returned by the repository."""

    id: str
    user_id: str | None
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None
    assignee: str | None
    position: int
    is_public: bool
    created_at: datetime | None
    updated_at: datetime | None
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
