"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from taskboard.domain.enums import TaskStatus

if TYPE_CHECKING:
    from taskboard.application.dtos.common import PagedResult
    from taskboard.application.dtos.tag import TagCreate, TagResult
    from taskboard.application.dtos.task import TaskCreate, TaskResult
    from taskboard.application.dtos.todo import (
        TodoCreate,
        TodoFilters,
        TodoResult,
        TodoStats,
    )
    from taskboard.application.dtos.user import UserIdentity


class ISessionAccessor(Protocol):
    """Protocol for reading the current session (never raises)."""

    def current_user(self) -> UserIdentity | None:
        """Return the signed-in identity, or None when there is no session."""


class ITaskRepository(Protocol):
    """Protocol for board task persistence (DIP)."""

    async def list_tasks(self) -> list[TaskResult]:
        """Return visible, non-deleted tasks ordered by (status, position)."""

    async def get_by_id(self, task_id: str) -> TaskResult | None:
        """Return one visible, non-deleted task."""

    async def create(self, draft: TaskCreate) -> TaskResult:
        """Create a private task owned by the current session."""

    async def update(self, task_id: str, changes: Mapping[str, Any]) -> TaskResult:
        """Apply partial changes to a task the caller owns."""

    async def set_status(
        self, task_id: str, status: TaskStatus, position: int | None = None
    ) -> TaskResult:
        """Move an owned task to another column."""

    async def soft_delete(self, task_id: str) -> None:
        """Mark an owned task deleted (idempotent)."""

    async def restore(self, task_id: str) -> TaskResult:
        """Clear the deletion marker on an owned task (idempotent)."""

    async def permanently_delete(self, task_id: str) -> None:
        """Remove an owned task row. Irreversible."""


class ITodoRepository(Protocol):
    """Protocol for todo persistence (DIP)."""

    async def list_todos(self, filters: TodoFilters) -> PagedResult[TodoResult]:
        """Return one page of visible todos matching the filters."""

    async def create(self, draft: TodoCreate) -> TodoResult:
        """Create a todo owned by the current session."""

    async def update(self, todo_id: str, changes: Mapping[str, Any]) -> TodoResult:
        """Apply partial changes to a todo the caller owns."""

    async def toggle_completed(self, todo_id: str, completed: bool) -> TodoResult:
        """Set the completed flag on an owned todo."""

    async def delete(self, todo_id: str) -> None:
        """Hard delete an owned todo."""

    async def can_modify(self, todo_id: str) -> bool:
        """Return True iff a session exists and owns the todo (fails closed)."""

    async def stats(self) -> TodoStats:
        """Return completion counts over the caller's own todos."""


class ITagRepository(Protocol):
    """Protocol for the shared tag vocabulary (DIP)."""

    async def list_all(self) -> list[TagResult]:
        """Return all tags ordered by name."""

    async def create_if_missing(self, names: Sequence[str]) -> list[TagResult]:
        """Create tags for names not yet known; return only the created ones."""

    async def create(self, draft: TagCreate) -> TagResult:
        """Create a tag explicitly."""
