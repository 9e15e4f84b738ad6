"""Database client factory: builds a Supabase REST or in-memory client per session.

Created once at app startup (see taskboard.core.lifespan) from settings.
Each request or script gets its own session-scoped client from create();
the factory owns the shared connection pool (REST) or the shared data
(memory) and releases it in aclose().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from taskboard.infrastructure.supabase._rest_client import SupabaseRESTClient
from taskboard.infrastructure.supabase.memory import InMemoryDatabase, InMemorySupabaseClient
from taskboard.infrastructure.supabase.protocol import DatabaseClient

if TYPE_CHECKING:
    from taskboard.core.config import Settings

logger = logging.getLogger(__name__)


class DatabaseClientFactory:
    """Factory for session-scoped database clients based on configuration."""

    def __init__(
        self,
        settings: "Settings | None" = None,
        *,
        database: InMemoryDatabase | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Build the shared resources for the configured backend.

        Args:
            settings: Application settings; if None, uses get_settings().
            database: In-memory data to share (memory backend only).
            http_client: Connection pool to share (supabase backend only);
                created here and closed by aclose() when omitted.

        Raises:
            ValueError: Unknown backend.
        """
        from taskboard.core.config import get_settings

        s = settings or get_settings()
        self.backend = s.database_backend.lower()
        self._http: httpx.AsyncClient | None = None
        self._owns_http = False
        self._database: InMemoryDatabase | None = None

        if self.backend == "supabase":
            self._url = s.supabase_url
            self._anon_key = s.supabase_anon_key.get_secret_value()
            if http_client is None:
                http_client = httpx.AsyncClient(timeout=s.request_timeout_seconds)
                self._owns_http = True
            self._http = http_client
        elif self.backend == "memory":
            self._database = database if database is not None else InMemoryDatabase()
        else:
            raise ValueError(
                f"Unknown database backend: {self.backend}. Supported: 'supabase', 'memory'"
            )

    @property
    def database(self) -> InMemoryDatabase | None:
        """Shared in-memory data (memory backend), else None."""
        return self._database

    def create(self) -> DatabaseClient:
        """Return a new client with its own (empty) auth session."""
        if self._database is not None:
            return InMemorySupabaseClient(self._database)
        return SupabaseRESTClient(self._url, self._anon_key, http_client=self._http)

    async def aclose(self) -> None:
        """Close the shared HTTP pool if this factory created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            logger.info("Supabase HTTP client closed")
        self._http = None
