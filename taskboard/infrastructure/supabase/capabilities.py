"""Schema capability prober: detect optional columns at runtime.

The hosted schema may be mid-migration, so optional columns (is_public,
tags, deleted_at) are checked with a one-row select before repositories
read or write them. Any failure of the probe means "absent". Results are
memoized for the prober's lifetime (one client session), never persisted,
so a reload picks up schema changes made without a deploy.
"""

from __future__ import annotations

import asyncio
import logging

from taskboard.application.dtos.common import SchemaCapabilities
from taskboard.infrastructure.supabase.protocol import DatabaseClient
from taskboard.infrastructure.supabase.tables import (
    COL_DELETED_AT,
    COL_ID,
    COL_IS_PUBLIC,
    COL_TAGS,
    OPTIONAL_COLUMNS,
)

logger = logging.getLogger(__name__)


class SchemaCapabilityProber:
    """Probes and memoizes column presence per (table, column)."""

    def __init__(self, client: DatabaseClient) -> None:
        self._client = client
        self._memo: dict[tuple[str, str], bool] = {}

    async def has_column(self, table: str, column: str) -> bool:
        """Return True if table.column can be selected. Never raises."""
        key = (table, column)
        if key in self._memo:
            return self._memo[key]
        try:
            await self._client.table(table).select(column).limit(1).execute()
            present = True
        except Exception as e:  # any failure is the "absent" signal
            logger.debug("Column probe %s.%s failed, treating as absent: %s", table, column, e)
            present = False
        self._memo[key] = present
        return present

    async def table_exists(self, table: str) -> bool:
        """Return True if the table answers a one-row select. Never raises."""
        return await self.has_column(table, COL_ID)

    async def capabilities(self, table: str) -> SchemaCapabilities:
        """Probe the table's optional columns concurrently."""
        optional = OPTIONAL_COLUMNS.get(table, ())
        results = await asyncio.gather(*(self.has_column(table, c) for c in optional))
        present = dict(zip(optional, results))
        return SchemaCapabilities(
            visibility=present.get(COL_IS_PUBLIC, False),
            tags=present.get(COL_TAGS, False),
            soft_delete=present.get(COL_DELETED_AT, False),
        )

    def forget(self) -> None:
        """Drop memoized results so the next call re-probes."""
        self._memo.clear()
