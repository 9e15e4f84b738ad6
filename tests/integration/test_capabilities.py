"""Schema capability prober and session accessor against the in-memory backend."""

from unittest.mock import AsyncMock

import httpx

from taskboard.application.dtos.common import SchemaCapabilities
from taskboard.infrastructure.supabase import (
    InMemoryDatabase,
    InMemorySupabaseClient,
    SchemaCapabilityProber,
    SessionAccessor,
)


async def test_full_schema_capabilities(database: InMemoryDatabase) -> None:
    prober = SchemaCapabilityProber(InMemorySupabaseClient(database))
    assert await prober.capabilities("tasks") == SchemaCapabilities(
        visibility=True, tags=False, soft_delete=True
    )
    assert await prober.capabilities("todos") == SchemaCapabilities(
        visibility=True, tags=True, soft_delete=False
    )


async def test_missing_column_reported_absent(database: InMemoryDatabase) -> None:
    database.drop_column("todos", "tags")
    prober = SchemaCapabilityProber(InMemorySupabaseClient(database))
    assert await prober.has_column("todos", "tags") is False
    assert await prober.has_column("todos", "is_public") is True


async def test_results_memoized_per_prober(database: InMemoryDatabase) -> None:
    client = InMemorySupabaseClient(database)
    prober = SchemaCapabilityProber(client)
    assert await prober.has_column("tasks", "deleted_at") is True

    database.drop_column("tasks", "deleted_at")
    assert await prober.has_column("tasks", "deleted_at") is True
    assert await SchemaCapabilityProber(client).has_column("tasks", "deleted_at") is False

    prober.forget()
    assert await prober.has_column("tasks", "deleted_at") is False


async def test_table_exists(database: InMemoryDatabase) -> None:
    prober = SchemaCapabilityProber(InMemorySupabaseClient(database))
    assert await prober.table_exists("tasks") is True
    assert await prober.table_exists("notes") is False


async def test_transport_error_means_absent(database: InMemoryDatabase) -> None:
    client = InMemorySupabaseClient(database)
    client.execute = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
    prober = SchemaCapabilityProber(client)
    assert await prober.has_column("todos", "tags") is False
    assert await prober.capabilities("todos") == SchemaCapabilities()


async def test_session_accessor_reflects_auth_state(database: InMemoryDatabase) -> None:
    client = InMemorySupabaseClient(database)
    session = SessionAccessor(client.auth)
    assert session.current_user() is None

    user = await client.auth.sign_up("alice@example.com", "password123")
    assert session.current_user() == user

    await client.auth.sign_out()
    assert session.current_user() is None
