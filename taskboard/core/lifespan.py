"""Application lifespan: startup and shutdown.

Builds the database client factory (shared HTTP pool or in-memory data) on
startup and releases it on shutdown. No business logic here.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from taskboard.core.config import get_settings
from taskboard.infrastructure.supabase.client import DatabaseClientFactory
from taskboard.shared.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    A factory already placed on app.state (e.g. by tests) is left alone.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    owns_factory = getattr(app.state, "client_factory", None) is None
    if owns_factory:
        app.state.client_factory = DatabaseClientFactory(settings)
    logger.info(
        "%s %s started (backend=%s)",
        settings.app_name,
        settings.app_version,
        app.state.client_factory.backend,
    )

    yield

    # ---- Shutdown ----
    if owns_factory and getattr(app.state, "client_factory", None) is not None:
        await app.state.client_factory.aclose()
        app.state.client_factory = None
        logger.info("Database client factory closed")
