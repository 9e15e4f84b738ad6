"""Pytest configuration and fixtures for taskboard.

Everything runs against the in-memory backend (DATABASE_BACKEND=memory), so
no hosted project is needed. Repository fixtures give each user their own
client session over one shared InMemoryDatabase, the way several browsers
share one Supabase project.
"""

import os

# Must be set before taskboard.main builds the module-level app
os.environ["DATABASE_BACKEND"] = "memory"

import random
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient

from taskboard.application.dtos.user import UserIdentity
from taskboard.core.config import get_settings
from taskboard.infrastructure.supabase import (
    DatabaseClientFactory,
    InMemoryDatabase,
    InMemorySupabaseClient,
    SchemaCapabilityProber,
)
from taskboard.infrastructure.supabase.repositories import (
    SupabaseTagRepository,
    SupabaseTaskRepository,
    SupabaseTodoRepository,
)
from taskboard.main import create_app

get_settings.cache_clear()

TEST_PASSWORD = "password123"


@dataclass
class UserSession:
    """One signed-in (or anonymous) client with its repositories."""

    client: InMemorySupabaseClient
    user: UserIdentity | None
    tasks: SupabaseTaskRepository
    todos: SupabaseTodoRepository
    tags: SupabaseTagRepository


async def open_session(database: InMemoryDatabase, email: str | None = None) -> UserSession:
    """Create a client on database; sign up email when given, else stay anonymous."""
    client = InMemorySupabaseClient(database)
    user = await client.auth.sign_up(email, TEST_PASSWORD) if email else None
    prober = SchemaCapabilityProber(client)
    tags = SupabaseTagRepository(client, prober=prober, rng=random.Random(0))
    return UserSession(
        client=client,
        user=user,
        tasks=SupabaseTaskRepository(client, prober=prober),
        todos=SupabaseTodoRepository(client, prober=prober, tags=tags),
        tags=tags,
    )


@pytest.fixture
def database() -> InMemoryDatabase:
    """Fresh in-memory database with the full schema (cheap bcrypt rounds)."""
    return InMemoryDatabase(password_rounds=4)


@pytest.fixture
async def alice(database: InMemoryDatabase) -> UserSession:
    return await open_session(database, "alice@example.com")


@pytest.fixture
async def bob(database: InMemoryDatabase) -> UserSession:
    return await open_session(database, "bob@example.com")


@pytest.fixture
async def anon(database: InMemoryDatabase) -> UserSession:
    return await open_session(database)


@pytest.fixture
async def client(database: InMemoryDatabase) -> AsyncClient:
    """Async HTTP client against a fresh app (ASGI) backed by the database fixture.

    ASGITransport does not run the lifespan, so the client factory is set here.
    """
    app = create_app()
    app.state.client_factory = DatabaseClientFactory(get_settings(), database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def signup_headers(client: AsyncClient, email: str) -> dict[str, str]:
    """Sign up through the API and return Authorization headers for the new user."""
    response = await client.post(
        "/api/v1/auth/signup", json={"email": email, "password": TEST_PASSWORD}
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Headers for a freshly signed-up API user (alice)."""
    return await signup_headers(client, "alice@example.com")
