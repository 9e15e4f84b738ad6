"""Ports implemented by infrastructure."""

from taskboard.application.interfaces.repositories import (
    ISessionAccessor,
    ITagRepository,
    ITaskRepository,
    ITodoRepository,
)

__all__ = [
    "ISessionAccessor",
    "ITagRepository",
    "ITaskRepository",
    "ITodoRepository",
]
