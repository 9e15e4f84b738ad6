"""Supabase-backed tag repository (implements ITagRepository).

Tags are a shared vocabulary keyed by unique lowercase name. New tags get a
color from a fixed palette and the default icon.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Any

import httpx

from taskboard.application.dtos.tag import TagCreate, TagResult
from taskboard.application.services.tag_names import normalize_tag_name, normalize_tag_names
from taskboard.core.constants import DEFAULT_TAG_ICON, TAG_COLORS
from taskboard.domain.exceptions import (
    RepositoryException,
    TagAlreadyExistsException,
    ValidationException,
)
from taskboard.infrastructure.supabase._query import PostgrestError
from taskboard.infrastructure.supabase.capabilities import SchemaCapabilityProber
from taskboard.infrastructure.supabase.protocol import DatabaseClient
from taskboard.infrastructure.supabase.repositories._base import SupabaseRepository
from taskboard.infrastructure.supabase.session import SessionAccessor
from taskboard.infrastructure.supabase.tables import (
    COL_COLOR,
    COL_CREATED_AT,
    COL_ICON,
    COL_ID,
    COL_NAME,
    PG_UNIQUE_VIOLATION,
    TABLE_TAGS,
)
from taskboard.shared.utils.datetime import parse_timestamp

logger = logging.getLogger(__name__)


def _to_result(row: dict[str, Any]) -> TagResult:
    return TagResult(
        id=str(row[COL_ID]),
        name=row[COL_NAME],
        color=row.get(COL_COLOR) or TAG_COLORS[0],
        icon=row.get(COL_ICON),
        created_at=parse_timestamp(row.get(COL_CREATED_AT)),
    )


class SupabaseTagRepository(SupabaseRepository):
    """Tag repository over the todo_tags table."""

    table = TABLE_TAGS

    def __init__(
        self,
        client: DatabaseClient,
        *,
        session: SessionAccessor | None = None,
        prober: SchemaCapabilityProber | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(client, session=session, prober=prober)
        self._rng = rng or random.Random()

    def _new_row(self, name: str) -> dict[str, Any]:
        return {
            COL_NAME: name,
            COL_COLOR: self._rng.choice(TAG_COLORS),
            COL_ICON: DEFAULT_TAG_ICON,
        }

    async def list_all(self) -> list[TagResult]:
        """Return all tags ordered by name. Failures surface as RepositoryException."""
        result = await self._execute(self._query().select().order(COL_NAME), "fetch tags")
        return [_to_result(row) for row in result.rows]

    async def _existing_names(self, names: Sequence[str]) -> set[str]:
        result = await self._execute(
            self._query().select(COL_NAME).in_(COL_NAME, names), "fetch tags"
        )
        return {row[COL_NAME] for row in result.rows}

    async def _insert_one(self, row: dict[str, Any]) -> TagResult | None:
        """Insert a single tag; None when another writer created it first."""
        try:
            result = await self._query().insert(row).execute()
        except PostgrestError as e:
            if e.code == PG_UNIQUE_VIOLATION:
                logger.debug("Tag %r created concurrently, skipping", row[COL_NAME])
                return None
            raise self._failure(e, "create tags") from e
        except httpx.HTTPError as e:
            raise self._failure(e, "create tags") from e
        return _to_result(result.rows[0]) if result.rows else None

    async def create_if_missing(self, names: Sequence[str]) -> list[TagResult]:
        """Create tags for names not seen before; return only the ones created here.

        Names are trimmed, lowercased and de-duplicated first, so
        ["work", "Work", " WORK "] creates at most one tag.
        """
        normalized = normalize_tag_names(names)
        if not normalized:
            return []
        known = await self._existing_names(normalized)
        missing = [name for name in normalized if name not in known]
        if not missing:
            return []

        rows = [self._new_row(name) for name in missing]
        try:
            result = await self._query().insert(rows).execute()
        except PostgrestError as e:
            if e.code != PG_UNIQUE_VIOLATION:
                raise self._failure(e, "create tags") from e
            # Lost a race for at least one name: the batch was rejected whole
            created = [tag for tag in [await self._insert_one(r) for r in rows] if tag]
        except httpx.HTTPError as e:
            raise self._failure(e, "create tags") from e
        else:
            created = [_to_result(row) for row in result.rows]

        if created:
            logger.info("Tags created: %s", ", ".join(t.name for t in created))
        return created

    async def create(self, draft: TagCreate) -> TagResult:
        """Create one tag explicitly.

        Raises:
            ValidationException: Blank name.
            TagAlreadyExistsException: A tag with the normalized name exists.
        """
        name = normalize_tag_name(draft.name)
        if not name:
            raise ValidationException("Tag name is required", field="name")
        row = self._new_row(name)
        if draft.color:
            row[COL_COLOR] = draft.color
        if draft.icon:
            row[COL_ICON] = draft.icon
        try:
            result = await self._query().insert(row).execute()
        except PostgrestError as e:
            if e.code == PG_UNIQUE_VIOLATION:
                raise TagAlreadyExistsException(name) from None
            raise self._failure(e, "create tag") from e
        except httpx.HTTPError as e:
            raise self._failure(e, "create tag") from e
        if not result.rows:
            raise RepositoryException("Failed to create tag: no row returned")
        return _to_result(result.rows[0])
