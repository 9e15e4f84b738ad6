"""Shared plumbing for Supabase repositories: execution, session checks, field guards."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from taskboard.application.dtos.user import UserIdentity
from taskboard.domain.exceptions import (
    AuthRequiredException,
    RepositoryException,
    ValidationException,
)
from taskboard.infrastructure.supabase._query import PostgrestError, QueryBuilder, QueryResult
from taskboard.infrastructure.supabase.capabilities import SchemaCapabilityProber
from taskboard.infrastructure.supabase.protocol import DatabaseClient
from taskboard.infrastructure.supabase.session import SessionAccessor

logger = logging.getLogger(__name__)


class SupabaseRepository:
    """Base for repositories that talk to one Supabase table.

    The client, session accessor and prober are injected; pass the same
    prober to every repository of a request so column probes run once.
    """

    table: str = ""

    def __init__(
        self,
        client: DatabaseClient,
        *,
        session: SessionAccessor | None = None,
        prober: SchemaCapabilityProber | None = None,
    ) -> None:
        self._client = client
        self._session = session or SessionAccessor(client.auth)
        self._prober = prober or SchemaCapabilityProber(client)

    def _query(self) -> QueryBuilder:
        return self._client.table(self.table)

    async def _execute(self, query: QueryBuilder, action: str) -> QueryResult:
        """Run a query; database and transport failures become RepositoryException."""
        try:
            return await query.execute()
        except (PostgrestError, httpx.HTTPError) as e:
            raise self._failure(e, action) from e

    @staticmethod
    def _failure(error: Exception, action: str) -> RepositoryException:
        """Log a failed call and wrap it for the caller."""
        if isinstance(error, PostgrestError):
            logger.error("Failed to %s: %s (code=%s)", action, error.message, error.code)
            details = {"code": error.code} if error.code else {}
            return RepositoryException(f"Failed to {action}: {error.message}", details)
        logger.error("Failed to %s: %s", action, error)
        return RepositoryException(f"Failed to {action}: {error}")

    def _require_user(self, action: str) -> UserIdentity:
        user = self._session.current_user()
        if user is None:
            raise AuthRequiredException(action)
        return user

    async def _has(self, column: str) -> bool:
        return await self._prober.has_column(self.table, column)


def clean_changes(
    changes: Mapping[str, Any],
    *,
    allowed: Iterable[str],
    protected: Iterable[str],
) -> dict[str, Any]:
    """Drop protected fields; reject anything not in allowed.

    Raises:
        ValidationException: A field is neither allowed nor protected.
    """
    allowed_set = set(allowed)
    protected_set = set(protected)
    cleaned: dict[str, Any] = {}
    for key, value in changes.items():
        if key in protected_set:
            continue
        if key not in allowed_set:
            raise ValidationException(f"Unknown field: {key}", field=key)
        cleaned[key] = value
    return cleaned


def require_title(value: Any, field: str = "title") -> str:
    """Return the stripped title, or raise ValidationException when blank."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationException("Title is required", field=field)
    return value.strip()


def require_flag(value: Any, field: str) -> bool:
    """Return value when it is a bool; None and other types raise ValidationException."""
    if not isinstance(value, bool):
        raise ValidationException(f"{field} must be true or false", field=field)
    return value
