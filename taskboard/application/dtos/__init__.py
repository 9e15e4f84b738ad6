"""Data transfer objects passed between repositories and callers (no ORM, no HTTP)."""

from taskboard.application.dtos.common import PagedResult, SchemaCapabilities
from taskboard.application.dtos.tag import TagCreate, TagResult
from taskboard.application.dtos.task import TaskCreate, TaskResult
from taskboard.application.dtos.todo import TodoCreate, TodoFilters, TodoResult, TodoStats
from taskboard.application.dtos.user import AuthSession, UserIdentity

__all__ = [
    "AuthSession",
    "PagedResult",
    "SchemaCapabilities",
    "TagCreate",
    "TagResult",
    "TaskCreate",
    "TaskResult",
    "TodoCreate",
    "TodoFilters",
    "TodoResult",
    "TodoStats",
    "UserIdentity",
]
