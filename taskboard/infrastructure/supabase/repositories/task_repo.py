"""Supabase-backed board task repository (implements ITaskRepository).

Soft delete writes only the nullable deleted_at timestamp. Every mutation is
scoped to id AND user_id = current session, so rows owned by someone else,
and legacy rows without an owner, are never touched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from taskboard.application.dtos.task import TaskCreate, TaskResult
from taskboard.domain.enums import TaskPriority, TaskStatus
from taskboard.domain.exceptions import (
    NotFoundOrForbiddenException,
    RepositoryException,
    ValidationException,
)
from taskboard.infrastructure.supabase.repositories._base import (
    SupabaseRepository,
    clean_changes,
    require_flag,
    require_title,
)
from taskboard.infrastructure.supabase.repositories._visibility import apply_visibility
from taskboard.infrastructure.supabase.tables import (
    COL_ASSIGNEE,
    COL_CREATED_AT,
    COL_DELETED_AT,
    COL_DESCRIPTION,
    COL_DUE_DATE,
    COL_ID,
    COL_IS_DELETED,
    COL_IS_PUBLIC,
    COL_POSITION,
    COL_PRIORITY,
    COL_STATUS,
    COL_TITLE,
    COL_UPDATED_AT,
    COL_USER_ID,
    TABLE_TASKS,
)
from taskboard.shared.utils.datetime import parse_date, parse_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

_EDITABLE = (
    COL_TITLE,
    COL_DESCRIPTION,
    COL_STATUS,
    COL_PRIORITY,
    COL_DUE_DATE,
    COL_ASSIGNEE,
    COL_POSITION,
    COL_IS_PUBLIC,
)
_PROTECTED = (COL_ID, COL_USER_ID, COL_CREATED_AT, COL_UPDATED_AT, COL_DELETED_AT, COL_IS_DELETED)


def _status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationException(
            f"Invalid status: {value!r}. Expected one of {TaskStatus.values()}", field="status"
        ) from None


def _priority(value: Any) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError:
        raise ValidationException(
            f"Invalid priority: {value!r}. Expected one of {TaskPriority.values()}",
            field="priority",
        ) from None


def _position(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationException("Position must be an integer", field="position")
    return value


def _due_date(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value)).isoformat()
    except ValueError:
        raise ValidationException(
            f"Invalid due date: {value!r}. Expected YYYY-MM-DD", field="due_date"
        ) from None


def _to_result(row: dict[str, Any]) -> TaskResult:
    return TaskResult(
        id=str(row[COL_ID]),
        user_id=row.get(COL_USER_ID),
        title=row.get(COL_TITLE) or "",
        description=row.get(COL_DESCRIPTION),
        status=TaskStatus(row.get(COL_STATUS) or TaskStatus.TODO.value),
        priority=TaskPriority(row.get(COL_PRIORITY) or TaskPriority.MEDIUM.value),
        due_date=parse_date(row.get(COL_DUE_DATE)),
        assignee=row.get(COL_ASSIGNEE),
        position=row.get(COL_POSITION) or 0,
        is_public=bool(row.get(COL_IS_PUBLIC, False)),
        created_at=parse_timestamp(row.get(COL_CREATED_AT)),
        updated_at=parse_timestamp(row.get(COL_UPDATED_AT)),
        deleted_at=parse_timestamp(row.get(COL_DELETED_AT)),
    )


class SupabaseTaskRepository(SupabaseRepository):
    """Task repository over the tasks table."""

    table = TABLE_TASKS

    async def list_tasks(self) -> list[TaskResult]:
        """Return visible tasks ordered by (status, position).

        Soft-deleted rows are excluded when the deleted_at column exists;
        without it every visible row is returned.
        """
        viewer = self._session.current_user()
        caps = await self._prober.capabilities(TABLE_TASKS)
        q = self._query().select()
        if not apply_visibility(q, viewer, caps.visibility):
            return []
        if caps.soft_delete:
            q.is_(COL_DELETED_AT, None)
        else:
            logger.debug("tasks.deleted_at missing; listing without soft-delete filter")
        q.order(COL_STATUS).order(COL_POSITION)
        result = await self._execute(q, "fetch tasks")
        return [_to_result(row) for row in result.rows]

    async def get_by_id(self, task_id: str) -> TaskResult | None:
        """Return one visible, non-deleted task, or None."""
        viewer = self._session.current_user()
        caps = await self._prober.capabilities(TABLE_TASKS)
        q = self._query().select().eq(COL_ID, task_id)
        if not apply_visibility(q, viewer, caps.visibility):
            return None
        if caps.soft_delete:
            q.is_(COL_DELETED_AT, None)
        result = await self._execute(q.limit(1), "fetch task")
        return _to_result(result.rows[0]) if result.rows else None

    async def create(self, draft: TaskCreate) -> TaskResult:
        """Create a private task owned by the current session."""
        user = self._require_user("create task")
        caps = await self._prober.capabilities(TABLE_TASKS)
        row: dict[str, Any] = {
            COL_TITLE: require_title(draft.title),
            COL_DESCRIPTION: draft.description,
            COL_STATUS: _status(draft.status).value,
            COL_PRIORITY: _priority(draft.priority).value,
            COL_DUE_DATE: _due_date(draft.due_date),
            COL_ASSIGNEE: draft.assignee,
            COL_POSITION: _position(draft.position),
            COL_USER_ID: user.id,
        }
        if caps.visibility:
            row[COL_IS_PUBLIC] = False
        if caps.soft_delete:
            row[COL_DELETED_AT] = None
        result = await self._execute(self._query().insert(row), "create task")
        if not result.rows:
            raise RepositoryException("Failed to create task: no row returned")
        task = _to_result(result.rows[0])
        logger.info("Task created: %s by %s", task.id, user.id)
        return task

    async def _owned_update(
        self, task_id: str, values: dict[str, Any], action: str, *, live_only: bool = True
    ) -> TaskResult:
        user = self._require_user(action)
        values[COL_UPDATED_AT] = utc_now_iso()
        q = self._query().update(values).eq(COL_ID, task_id).eq(COL_USER_ID, user.id)
        if live_only and await self._has(COL_DELETED_AT):
            q.is_(COL_DELETED_AT, None)
        result = await self._execute(q, action)
        if not result.rows:
            raise NotFoundOrForbiddenException("task", task_id)
        return _to_result(result.rows[0])

    async def update(self, task_id: str, changes: Mapping[str, Any]) -> TaskResult:
        """Apply partial changes to an owned, non-deleted task.

        Ownership, id, timestamps and deletion markers cannot be changed here;
        is_public is ignored when the column does not exist.

        Raises:
            AuthRequiredException: No session.
            ValidationException: Unknown field or invalid value.
            NotFoundOrForbiddenException: No owned row with that id.
        """
        self._require_user("update task")
        protected = list(_PROTECTED)
        if not await self._has(COL_IS_PUBLIC):
            protected.append(COL_IS_PUBLIC)
        values = clean_changes(changes, allowed=_EDITABLE, protected=protected)
        if COL_TITLE in values:
            values[COL_TITLE] = require_title(values[COL_TITLE])
        if COL_STATUS in values:
            values[COL_STATUS] = _status(values[COL_STATUS]).value
        if COL_PRIORITY in values:
            values[COL_PRIORITY] = _priority(values[COL_PRIORITY]).value
        if COL_DUE_DATE in values:
            values[COL_DUE_DATE] = _due_date(values[COL_DUE_DATE])
        if COL_POSITION in values:
            values[COL_POSITION] = _position(values[COL_POSITION])
        if COL_IS_PUBLIC in values:
            values[COL_IS_PUBLIC] = require_flag(values[COL_IS_PUBLIC], COL_IS_PUBLIC)
        return await self._owned_update(task_id, values, "update task")

    async def set_status(
        self, task_id: str, status: TaskStatus, position: int | None = None
    ) -> TaskResult:
        """Move an owned task to another column (any status to any status)."""
        values: dict[str, Any] = {COL_STATUS: _status(status).value}
        if position is not None:
            values[COL_POSITION] = _position(position)
        return await self._owned_update(task_id, values, "update task status")

    async def soft_delete(self, task_id: str) -> None:
        """Set deleted_at on an owned task.

        Deleting an already-deleted owned task succeeds and keeps the first
        timestamp.

        Raises:
            RepositoryException: The deleted_at column does not exist.
            NotFoundOrForbiddenException: No owned row with that id.
        """
        user = self._require_user("delete task")
        if not await self._has(COL_DELETED_AT):
            raise RepositoryException(
                "Soft delete is not supported: tasks.deleted_at column is missing"
            )
        now = utc_now_iso()
        q = (
            self._query()
            .update({COL_DELETED_AT: now, COL_UPDATED_AT: now})
            .eq(COL_ID, task_id)
            .eq(COL_USER_ID, user.id)
            .is_(COL_DELETED_AT, None)
        )
        result = await self._execute(q, "delete task")
        if result.rows:
            logger.info("Task soft-deleted: %s by %s", task_id, user.id)
            return
        existing = await self._execute(
            self._query().select(COL_ID).eq(COL_ID, task_id).eq(COL_USER_ID, user.id).limit(1),
            "delete task",
        )
        if not existing.rows:
            raise NotFoundOrForbiddenException("task", task_id)

    async def restore(self, task_id: str) -> TaskResult:
        """Clear deleted_at on an owned task. Restoring a live task is a no-op."""
        if not await self._has(COL_DELETED_AT):
            self._require_user("restore task")
            raise RepositoryException(
                "Restore is not supported: tasks.deleted_at column is missing"
            )
        task = await self._owned_update(
            task_id, {COL_DELETED_AT: None}, "restore task", live_only=False
        )
        logger.info("Task restored: %s", task_id)
        return task

    async def permanently_delete(self, task_id: str) -> None:
        """Remove an owned task row, deleted or not. Irreversible."""
        user = self._require_user("permanently delete task")
        q = self._query().delete().eq(COL_ID, task_id).eq(COL_USER_ID, user.id)
        result = await self._execute(q, "permanently delete task")
        if not result.rows:
            raise NotFoundOrForbiddenException("task", task_id)
        logger.info("Task permanently deleted: %s by %s", task_id, user.id)
