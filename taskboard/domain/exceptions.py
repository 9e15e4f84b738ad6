"""Domain exceptions for the taskboard application.

Defines domain-level exceptions that represent business rule violations
and data-access failures. Presentation layer maps them to HTTP responses
in exception handlers.
"""

from typing import Any


class TaskboardException(Exception):
    """Base exception for all taskboard errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, record_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the API exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TaskboardException):
    """Raised when input validation fails (e.g. empty title or unknown status)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(TaskboardException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthRequiredException(TaskboardException):
    """Raised when a mutation is attempted with no current session.

    Always recoverable by prompting the user to sign in.
    """

    def __init__(self, action: str | None = None) -> None:
        """Initialize with the attempted action.

        Args:
            action: Optional action name (e.g. 'create task').
        """
        message = (
            f"Authentication required to {action}" if action else "Authentication required"
        )
        details = {"action": action} if action else {}
        super().__init__(message, "AUTH_REQUIRED", details)


class NotFoundOrForbiddenException(TaskboardException):
    """Raised when an owner-scoped mutation matched no row.

    The record may not exist or may belong to someone else; the two cases
    are reported identically so existence is not leaked.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of record (e.g. 'task', 'todo').
            resource_id: The ID that matched nothing for this session.
        """
        super().__init__(
            f"{resource_type} not found or not owned by you: {resource_id}",
            "NOT_FOUND_OR_FORBIDDEN",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RepositoryException(TaskboardException):
    """Raised for any transport or database failure (network, constraint, service error).

    Carries the underlying message for display and logging; not further classified.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "REPOSITORY_ERROR", details)


class TagAlreadyExistsException(TaskboardException):
    """Raised when creating a tag whose name already exists."""

    def __init__(self, name: str) -> None:
        """Initialize with the duplicate tag name.

        Args:
            name: The (normalized) tag name that already exists.
        """
        super().__init__(
            f"Tag '{name}' already exists",
            "TAG_ALREADY_EXISTS",
            {"name": name},
        )
