"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from taskboard.domain.enums import TaskPriority, TaskStatus
from taskboard.domain.exceptions import (
    AuthenticationException,
    AuthRequiredException,
    NotFoundOrForbiddenException,
    RepositoryException,
    TagAlreadyExistsException,
    TaskboardException,
    ValidationException,
)

__all__ = [
    # Enums
    "TaskPriority",
    "TaskStatus",
    # Exceptions
    "AuthenticationException",
    "AuthRequiredException",
    "NotFoundOrForbiddenException",
    "RepositoryException",
    "TagAlreadyExistsException",
    "TaskboardException",
    "ValidationException",
]
