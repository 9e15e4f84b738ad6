"""Supabase-backed todo repository (implements ITodoRepository).

Todos are visible to their owner, to everyone when is_public is true, and to
any signed-in session on schemas without the is_public column. Tag names are
normalized before storage and unknown ones are added to the tag vocabulary
before the todo references them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from taskboard.application.dtos.common import PagedResult
from taskboard.application.dtos.todo import TodoCreate, TodoFilters, TodoResult, TodoStats
from taskboard.application.services.tag_names import normalize_tag_names
from taskboard.core.constants import TODO_MAX_PAGE_SIZE
from taskboard.domain.exceptions import (
    NotFoundOrForbiddenException,
    RepositoryException,
    ValidationException,
)
from taskboard.infrastructure.supabase._query import Filter, QueryBuilder
from taskboard.infrastructure.supabase.capabilities import SchemaCapabilityProber
from taskboard.infrastructure.supabase.protocol import DatabaseClient
from taskboard.infrastructure.supabase.repositories._base import (
    SupabaseRepository,
    clean_changes,
    require_flag,
    require_title,
)
from taskboard.infrastructure.supabase.repositories._visibility import apply_visibility
from taskboard.infrastructure.supabase.repositories.tag_repo import SupabaseTagRepository
from taskboard.infrastructure.supabase.session import SessionAccessor
from taskboard.infrastructure.supabase.tables import (
    COL_COMPLETED,
    COL_CREATED_AT,
    COL_DESCRIPTION,
    COL_ID,
    COL_IS_PUBLIC,
    COL_TAGS,
    COL_TITLE,
    COL_UPDATED_AT,
    COL_USER_ID,
    TABLE_TODOS,
)
from taskboard.shared.utils.datetime import parse_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

_EDITABLE = (COL_TITLE, COL_DESCRIPTION, COL_COMPLETED, COL_IS_PUBLIC, COL_TAGS)
_PROTECTED = (COL_ID, COL_USER_ID, COL_CREATED_AT, COL_UPDATED_AT)


def _like_literal(term: str) -> str:
    """Escape LIKE metacharacters so the term matches as a plain substring."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_result(row: dict[str, Any]) -> TodoResult:
    return TodoResult(
        id=str(row[COL_ID]),
        user_id=row.get(COL_USER_ID),
        title=row.get(COL_TITLE) or "",
        description=row.get(COL_DESCRIPTION),
        completed=bool(row.get(COL_COMPLETED, False)),
        is_public=row.get(COL_IS_PUBLIC),
        tags=tuple(row.get(COL_TAGS) or ()),
        created_at=parse_timestamp(row.get(COL_CREATED_AT)),
        updated_at=parse_timestamp(row.get(COL_UPDATED_AT)),
    )


class SupabaseTodoRepository(SupabaseRepository):
    """Todo repository over the todos table."""

    table = TABLE_TODOS

    def __init__(
        self,
        client: DatabaseClient,
        *,
        session: SessionAccessor | None = None,
        prober: SchemaCapabilityProber | None = None,
        tags: SupabaseTagRepository | None = None,
        max_page_size: int = TODO_MAX_PAGE_SIZE,
    ) -> None:
        super().__init__(client, session=session, prober=prober)
        self._tags = tags or SupabaseTagRepository(
            client, session=self._session, prober=self._prober
        )
        self._max_page_size = max_page_size

    async def list_todos(self, filters: TodoFilters) -> PagedResult[TodoResult]:
        """Return one page of visible todos, newest first.

        Visibility is applied before search, completion and tag filters.
        page_size above the configured maximum is capped. An anonymous
        viewer asking for only_mine gets an empty page.

        Raises:
            ValidationException: page or page_size below 1.
            RepositoryException: Database or transport failure.
        """
        if filters.page < 1:
            raise ValidationException("page must be at least 1", field="page")
        if filters.page_size < 1:
            raise ValidationException("page_size must be at least 1", field="page_size")
        page_size = min(filters.page_size, self._max_page_size)
        empty: PagedResult[TodoResult] = PagedResult(
            items=[], total=0, page=filters.page, page_size=page_size
        )

        viewer = self._session.current_user()
        caps = await self._prober.capabilities(TABLE_TODOS)
        q = self._query().select(count=True)
        if filters.only_mine:
            if viewer is None:
                return empty
            q.eq(COL_USER_ID, viewer.id)
        elif not apply_visibility(q, viewer, caps.visibility):
            return empty

        search = (filters.search or "").strip()
        if search:
            pattern = f"*{_like_literal(search)}*"
            conditions = [
                Filter(COL_TITLE, "ilike", pattern),
                Filter(COL_DESCRIPTION, "ilike", pattern),
            ]
            if caps.tags:
                conditions.append(Filter(COL_TAGS, "cs", [search.lower()]))
            q.any_of(*conditions)
        if filters.completed is not None:
            q.eq(COL_COMPLETED, filters.completed)
        tag_names = normalize_tag_names(filters.tag_names)
        if tag_names and caps.tags:
            q.overlaps(COL_TAGS, tag_names)

        q.order(COL_CREATED_AT, desc=True).order(COL_ID)
        q.range((filters.page - 1) * page_size, page_size)
        result = await self._execute(q, "fetch todos")
        total = result.count if result.count is not None else len(result.rows)
        return PagedResult(
            items=[_to_result(row) for row in result.rows],
            total=total,
            page=filters.page,
            page_size=page_size,
        )

    async def create(self, draft: TodoCreate) -> TodoResult:
        """Create a todo owned by the current session.

        Unknown tag names are created first so the todo never points at a
        missing tag. is_public and tags are written only when their columns exist.
        """
        user = self._require_user("create todo")
        caps = await self._prober.capabilities(TABLE_TODOS)
        row: dict[str, Any] = {
            COL_TITLE: require_title(draft.title),
            COL_DESCRIPTION: draft.description,
            COL_COMPLETED: False,
            COL_USER_ID: user.id,
        }
        if caps.visibility:
            row[COL_IS_PUBLIC] = bool(draft.is_public)
        if caps.tags:
            tag_names = normalize_tag_names(draft.tags)
            if tag_names:
                await self._tags.create_if_missing(tag_names)
            row[COL_TAGS] = tag_names
        result = await self._execute(self._query().insert(row), "create todo")
        if not result.rows:
            raise RepositoryException("Failed to create todo: no row returned")
        todo = _to_result(result.rows[0])
        logger.info("Todo created: %s by %s", todo.id, user.id)
        return todo

    def _owned_row(self, todo_id: str, user_id: str) -> QueryBuilder:
        return self._query().select(COL_ID).eq(COL_ID, todo_id).eq(COL_USER_ID, user_id).limit(1)

    async def _owned_update(self, todo_id: str, values: dict[str, Any], action: str) -> TodoResult:
        user = self._require_user(action)
        values[COL_UPDATED_AT] = utc_now_iso()
        q = self._query().update(values).eq(COL_ID, todo_id).eq(COL_USER_ID, user.id)
        result = await self._execute(q, action)
        if not result.rows:
            raise NotFoundOrForbiddenException("todo", todo_id)
        return _to_result(result.rows[0])

    async def update(self, todo_id: str, changes: Mapping[str, Any]) -> TodoResult:
        """Apply partial changes to an owned todo.

        is_public and tags are ignored when their columns do not exist.
        New tag names are created before the update is written, and only once
        the caller is known to own the todo.
        """
        user = self._require_user("update todo")
        caps = await self._prober.capabilities(TABLE_TODOS)
        protected = list(_PROTECTED)
        if not caps.visibility:
            protected.append(COL_IS_PUBLIC)
        if not caps.tags:
            protected.append(COL_TAGS)
        values = clean_changes(changes, allowed=_EDITABLE, protected=protected)
        if COL_TITLE in values:
            values[COL_TITLE] = require_title(values[COL_TITLE])
        if COL_COMPLETED in values:
            values[COL_COMPLETED] = require_flag(values[COL_COMPLETED], COL_COMPLETED)
        if COL_IS_PUBLIC in values:
            values[COL_IS_PUBLIC] = require_flag(values[COL_IS_PUBLIC], COL_IS_PUBLIC)
        if COL_TAGS in values:
            values[COL_TAGS] = normalize_tag_names(values[COL_TAGS])
            if values[COL_TAGS]:
                owned = await self._execute(self._owned_row(todo_id, user.id), "update todo")
                if not owned.rows:
                    raise NotFoundOrForbiddenException("todo", todo_id)
                await self._tags.create_if_missing(values[COL_TAGS])
        return await self._owned_update(todo_id, values, "update todo")

    async def toggle_completed(self, todo_id: str, completed: bool) -> TodoResult:
        """Set the completed flag on an owned todo."""
        return await self._owned_update(
            todo_id, {COL_COMPLETED: require_flag(completed, COL_COMPLETED)}, "update todo"
        )

    async def delete(self, todo_id: str) -> None:
        """Hard delete an owned todo."""
        user = self._require_user("delete todo")
        q = self._query().delete().eq(COL_ID, todo_id).eq(COL_USER_ID, user.id)
        result = await self._execute(q, "delete todo")
        if not result.rows:
            raise NotFoundOrForbiddenException("todo", todo_id)
        logger.info("Todo deleted: %s by %s", todo_id, user.id)

    async def can_modify(self, todo_id: str) -> bool:
        """True iff a session exists and owns the todo. Any failure answers False."""
        user = self._session.current_user()
        if user is None:
            return False
        try:
            result = await self._execute(
                self._owned_row(todo_id, user.id), "check todo ownership"
            )
        except RepositoryException as e:
            logger.warning("Denying modify on todo %s after failed check: %s", todo_id, e.message)
            return False
        return bool(result.rows)

    async def stats(self) -> TodoStats:
        """Count the caller's own todos and how many are completed."""
        user = self._require_user("view todo stats")

        def mine():
            return self._query().select(COL_ID, count=True).eq(COL_USER_ID, user.id).limit(1)

        total, completed = await asyncio.gather(
            self._execute(mine(), "fetch todo stats"),
            self._execute(mine().eq(COL_COMPLETED, True), "fetch todo stats"),
        )
        return TodoStats(total=total.count or 0, completed=completed.count or 0)
