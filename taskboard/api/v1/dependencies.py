"""Presentation-layer dependency injection (composition root).

Each request gets its own database client from the factory created in the
lifespan. A bearer token in Authorization is validated with the auth service
and becomes that client's session; without one the request is anonymous.
Repositories of one request share a single capability prober, so optional
column probes run at most once per request.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskboard.application.dtos.user import UserIdentity
from taskboard.core.config import Settings, get_settings
from taskboard.domain.exceptions import AuthRequiredException
from taskboard.infrastructure.supabase import (
    DatabaseClient,
    DatabaseClientFactory,
    SchemaCapabilityProber,
    SessionAccessor,
)
from taskboard.infrastructure.supabase.repositories import (
    SupabaseTagRepository,
    SupabaseTaskRepository,
    SupabaseTodoRepository,
)

_http_bearer = HTTPBearer(auto_error=False)


def get_client_factory(request: Request) -> DatabaseClientFactory:
    """Return the factory created at startup (see taskboard.core.lifespan)."""
    factory = getattr(request.app.state, "client_factory", None)
    if factory is None:
        raise RuntimeError("Database client factory not initialized; is the lifespan running?")
    return factory


async def get_client(
    factory: Annotated[DatabaseClientFactory, Depends(get_client_factory)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> AsyncGenerator[DatabaseClient, None]:
    """Yield a session-scoped client; adopt the bearer token when one is sent.

    An invalid or expired token raises AuthenticationException (401).
    """
    client = factory.create()
    try:
        if credentials:
            await client.auth.set_session(credentials.credentials)
        yield client
    finally:
        await client.aclose()


def get_session_accessor(
    client: Annotated[DatabaseClient, Depends(get_client)],
) -> SessionAccessor:
    return SessionAccessor(client.auth)


def get_current_user(
    session: Annotated[SessionAccessor, Depends(get_session_accessor)],
) -> UserIdentity:
    """Return the signed-in identity; raise AuthRequiredException when anonymous."""
    user = session.current_user()
    if user is None:
        raise AuthRequiredException()
    return user


def get_prober(
    client: Annotated[DatabaseClient, Depends(get_client)],
) -> SchemaCapabilityProber:
    return SchemaCapabilityProber(client)


def get_tag_repo(
    client: Annotated[DatabaseClient, Depends(get_client)],
    session: Annotated[SessionAccessor, Depends(get_session_accessor)],
    prober: Annotated[SchemaCapabilityProber, Depends(get_prober)],
) -> SupabaseTagRepository:
    return SupabaseTagRepository(client, session=session, prober=prober)


def get_task_repo(
    client: Annotated[DatabaseClient, Depends(get_client)],
    session: Annotated[SessionAccessor, Depends(get_session_accessor)],
    prober: Annotated[SchemaCapabilityProber, Depends(get_prober)],
) -> SupabaseTaskRepository:
    return SupabaseTaskRepository(client, session=session, prober=prober)


def get_todo_repo(
    client: Annotated[DatabaseClient, Depends(get_client)],
    session: Annotated[SessionAccessor, Depends(get_session_accessor)],
    prober: Annotated[SchemaCapabilityProber, Depends(get_prober)],
    tags: Annotated[SupabaseTagRepository, Depends(get_tag_repo)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SupabaseTodoRepository:
    return SupabaseTodoRepository(
        client,
        session=session,
        prober=prober,
        tags=tags,
        max_page_size=settings.todo_max_page_size,
    )
