"""DTOs for todos, todo list filters, and todo statistics."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from taskboard.core.constants import TODO_DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class TodoCreate:
    """Draft for a new todo.

    is_public and tags are only written when the matching columns exist.
    """

    title: str
    description: str | None = None
    is_public: bool = True
    tags: Sequence[str] = ()


@dataclass(frozen=True)
class TodoFilters:
    """Filters for one page of the todo list.

    completed=None means either state. tag_names match todos carrying any of them.
    """

    search: str | None = None
    completed: bool | None = None
    page: int = 1
    page_size: int = TODO_DEFAULT_PAGE_SIZE
    only_mine: bool = False
    tag_names: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class TodoResult:
    """Persisted todo as returned by the repository."""

    id: str
    user_id: str | None
    title: str
    description: str | None
    completed: bool
    is_public: bool | None
    tags: tuple[str, ...]
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class TodoStats:
    """Completion counts over the caller's own todos."""

    total: int
    completed: int

    @property
    def pending(self) -> int:
        return self.total - self.completed
