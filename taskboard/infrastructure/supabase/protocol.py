"""Client protocols so repositories work with the REST client or the in-memory backend."""

from __future__ import annotations

from typing import Protocol

from taskboard.application.dtos.user import AuthSession, UserIdentity
from taskboard.infrastructure.supabase._query import QueryBuilder, QueryResult


class AuthClient(Protocol):
    """Session-holding auth client (GoTrue or in-memory)."""

    @property
    def current_session(self) -> AuthSession | None: ...

    @property
    def access_token(self) -> str | None: ...

    async def sign_up(self, email: str, password: str) -> UserIdentity: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession: ...

    async def set_session(self, access_token: str) -> UserIdentity: ...

    async def sign_out(self) -> None: ...


class DatabaseClient(Protocol):
    """Row access plus auth for one session."""

    auth: AuthClient

    def table(self, name: str) -> QueryBuilder: ...

    async def execute(self, query: QueryBuilder) -> QueryResult: ...

    async def aclose(self) -> None: ...
