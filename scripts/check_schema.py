"""Report which tables and optional columns the configured database has.

Usage:
    uv run python -m scripts.check_schema

Reads SUPABASE_URL / SUPABASE_ANON_KEY (or DATABASE_BACKEND=memory) from .env.
Exit code 1 when a required table is unreachable. Missing optional columns
are reported but not fatal: the repositories degrade around them.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from taskboard.core.config import get_settings
from taskboard.infrastructure.supabase import DatabaseClientFactory, SchemaCapabilityProber
from taskboard.infrastructure.supabase.tables import OPTIONAL_COLUMNS, TABLE_TAGS
from taskboard.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees SUPABASE_* when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def main() -> int:
    """Probe each table and its optional columns; print a summary."""
    _load_env()
    get_settings.cache_clear()
    settings = get_settings()
    setup_logging()

    factory = DatabaseClientFactory(settings)
    client = factory.create()
    try:
        prober = SchemaCapabilityProber(client)
        missing_tables: list[str] = []
        for table in (*OPTIONAL_COLUMNS, TABLE_TAGS):
            if not await prober.table_exists(table):
                missing_tables.append(table)
                print(f"{table}: MISSING")
                continue
            columns = OPTIONAL_COLUMNS.get(table, ())
            present = await asyncio.gather(*(prober.has_column(table, c) for c in columns))
            detail = ", ".join(
                f"{c}={'yes' if ok else 'no'}" for c, ok in zip(columns, present)
            )
            print(f"{table}: ok{' (' + detail + ')' if detail else ''}")
    finally:
        await client.aclose()
        await factory.aclose()

    if missing_tables:
        logger.error("Unreachable tables: %s", ", ".join(missing_tables))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
