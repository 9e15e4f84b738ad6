"""In-process stand-in for a Supabase project (rows + auth).

Evaluates the same QueryBuilder the REST client encodes, with PostgREST-like
behavior: unknown tables/columns raise PostgrestError (42P01/42703), unique
violations raise 23505, inserts fill ids, timestamps, and column defaults.
Used for local development (DATABASE_BACKEND=memory) and tests. The schema
is configurable so mid-migration databases (missing optional columns) can
be reproduced.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from taskboard.application.dtos.user import AuthSession, UserIdentity
from taskboard.domain.exceptions import AuthenticationException
from taskboard.infrastructure.security.password import (
    DEFAULT_ROUNDS,
    get_password_hash,
    verify_password,
)
from taskboard.infrastructure.supabase._query import (
    AnyOf,
    Filter,
    PostgrestError,
    QueryBuilder,
    QueryResult,
)
from taskboard.infrastructure.supabase.tables import (
    COL_ASSIGNEE,
    COL_COLOR,
    COL_COMPLETED,
    COL_CREATED_AT,
    COL_DELETED_AT,
    COL_DESCRIPTION,
    COL_DUE_DATE,
    COL_ICON,
    COL_ID,
    COL_IS_DELETED,
    COL_IS_PUBLIC,
    COL_NAME,
    COL_POSITION,
    COL_PRIORITY,
    COL_STATUS,
    COL_TAGS,
    COL_TITLE,
    COL_UPDATED_AT,
    COL_USER_ID,
    PG_UNDEFINED_COLUMN,
    PG_UNDEFINED_TABLE,
    PG_UNIQUE_VIOLATION,
    TABLE_TAGS,
    TABLE_TASKS,
    TABLE_TODOS,
)
from taskboard.shared.utils.datetime import utc_now_iso
from taskboard.shared.utils.generators import generate_access_token, generate_cuid

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA: dict[str, tuple[str, ...]] = {
    TABLE_TASKS: (
        COL_ID,
        COL_USER_ID,
        COL_TITLE,
        COL_DESCRIPTION,
        COL_STATUS,
        COL_PRIORITY,
        COL_DUE_DATE,
        COL_ASSIGNEE,
        COL_POSITION,
        COL_IS_PUBLIC,
        COL_CREATED_AT,
        COL_UPDATED_AT,
        COL_DELETED_AT,
        COL_IS_DELETED,
    ),
    TABLE_TODOS: (
        COL_ID,
        COL_USER_ID,
        COL_TITLE,
        COL_DESCRIPTION,
        COL_COMPLETED,
        COL_IS_PUBLIC,
        COL_TAGS,
        COL_CREATED_AT,
        COL_UPDATED_AT,
    ),
    TABLE_TAGS: (COL_ID, COL_NAME, COL_COLOR, COL_ICON, COL_CREATED_AT),
}

_COLUMN_DEFAULTS: dict[str, dict[str, Any]] = {
    TABLE_TASKS: {COL_STATUS: "todo", COL_PRIORITY: "medium", COL_POSITION: 0, COL_IS_PUBLIC: False},
    TABLE_TODOS: {COL_COMPLETED: False, COL_TAGS: []},
    TABLE_TAGS: {COL_COLOR: "#6b7280"},
}

_UNIQUE_COLUMNS: dict[str, tuple[str, ...]] = {TABLE_TAGS: (COL_NAME,)}


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _wire(value: Any) -> Any:
    """Copy a value through JSON, as it would cross the network."""
    return json.loads(json.dumps(value, default=_json_default))


def _like_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            # Backslash makes the next character literal, as in Postgres LIKE
            parts.append(re.escape(next(chars, "\\")))
        elif ch in "*%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def _matches(row: dict[str, Any], f: Filter) -> bool:
    value = row.get(f.column)
    target = _wire(f.value)
    if f.op == "is":
        return value is target
    if value is None:
        # SQL comparison with NULL is never true
        return False
    if f.op == "eq":
        return value == target
    if f.op == "neq":
        return value != target
    if f.op == "gt":
        return value > target
    if f.op == "gte":
        return value >= target
    if f.op == "lt":
        return value < target
    if f.op == "lte":
        return value <= target
    if f.op == "ilike":
        return isinstance(value, str) and bool(_like_regex(str(target)).match(value))
    if f.op == "in":
        return value in target
    if f.op == "ov":
        return isinstance(value, list) and bool(set(value) & set(target))
    if f.op == "cs":
        return isinstance(value, list) and set(target) <= set(value)
    raise ValueError(f"Unsupported filter operator: {f.op!r}")


def _matches_item(row: dict[str, Any], item: Filter | AnyOf) -> bool:
    if isinstance(item, AnyOf):
        return any(_matches(row, f) for f in item.filters)
    return _matches(row, item)


def _sort_key(value: Any) -> tuple[bool, Any]:
    # Postgres default: NULLS LAST ascending, NULLS FIRST descending
    return (value is None, value if value is not None else 0)


def _selected_columns(columns: str) -> list[str] | None:
    names = [c.strip() for c in columns.split(",") if c.strip()]
    return None if not names or "*" in names else names


class InMemoryTable:
    """Rows of one table plus its current column set."""

    def __init__(self, name: str, columns: Iterable[str]) -> None:
        self.name = name
        self.columns: list[str] = list(columns)
        self.rows: list[dict[str, Any]] = []


@dataclass
class _StoredUser:
    identity: UserIdentity
    password_hash: str


class InMemoryDatabase:
    """Shared state behind any number of InMemorySupabaseClient sessions."""

    def __init__(
        self,
        schema: Mapping[str, Iterable[str]] | None = None,
        *,
        password_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        source = DEFAULT_SCHEMA if schema is None else schema
        self.tables: dict[str, InMemoryTable] = {
            name: InMemoryTable(name, columns) for name, columns in source.items()
        }
        self.password_rounds = password_rounds
        self.users: dict[str, _StoredUser] = {}
        self.sessions: dict[str, str] = {}

    # ---- Schema changes (simulate migrations) ----

    def drop_column(self, table: str, column: str) -> None:
        t = self._table(table)
        if column in t.columns:
            t.columns.remove(column)
        for row in t.rows:
            row.pop(column, None)

    def add_column(self, table: str, column: str, default: Any = None) -> None:
        t = self._table(table)
        if column not in t.columns:
            t.columns.append(column)
            for row in t.rows:
                row[column] = copy.deepcopy(default)

    # ---- Query evaluation ----

    def _table(self, name: str) -> InMemoryTable:
        table = self.tables.get(name)
        if table is None:
            raise PostgrestError(
                f'relation "public.{name}" does not exist',
                code=PG_UNDEFINED_TABLE,
                status_code=404,
            )
        return table

    def _check_columns(self, table: InMemoryTable, query: QueryBuilder) -> None:
        referenced: list[str] = []
        if query.method == "GET":
            referenced.extend(_selected_columns(query.columns) or [])
        for item in query.filters:
            if isinstance(item, AnyOf):
                referenced.extend(f.column for f in item.filters)
            else:
                referenced.append(item.column)
        referenced.extend(column for column, _ in query.orders)
        if isinstance(query.payload, dict):
            referenced.extend(query.payload)
        elif query.payload:
            for row in query.payload:
                referenced.extend(row)
        for column in referenced:
            if column not in table.columns:
                raise PostgrestError(
                    f"column {table.name}.{column} does not exist",
                    code=PG_UNDEFINED_COLUMN,
                    status_code=400,
                )

    def _check_unique(
        self,
        table: InMemoryTable,
        candidates: list[dict[str, Any]],
        ignore: set[int] | None = None,
    ) -> None:
        ignore = ignore or set()
        for column in _UNIQUE_COLUMNS.get(table.name, ()):
            if column not in table.columns:
                continue
            seen = {row.get(column) for row in table.rows if id(row) not in ignore}
            for candidate in candidates:
                if column not in candidate:
                    continue
                value = candidate[column]
                if value in seen:
                    raise PostgrestError(
                        f'duplicate key value violates unique constraint "{table.name}_{column}_key"',
                        code=PG_UNIQUE_VIOLATION,
                        details=f"Key ({column})=({value}) already exists.",
                        status_code=409,
                    )
                seen.add(value)

    def _new_row(self, table: InMemoryTable, values: dict[str, Any]) -> dict[str, Any]:
        row: dict[str, Any] = {column: None for column in table.columns}
        for column, default in _COLUMN_DEFAULTS.get(table.name, {}).items():
            if column in table.columns:
                row[column] = copy.deepcopy(default)
        row.update(values)
        now = utc_now_iso()
        if COL_ID in table.columns and not row.get(COL_ID):
            row[COL_ID] = generate_cuid()
        for column in (COL_CREATED_AT, COL_UPDATED_AT):
            if column in table.columns and row.get(column) is None:
                row[column] = now
        return row

    def run(self, query: QueryBuilder) -> QueryResult:
        """Evaluate a built query against the stored rows."""
        table = self._table(query.table)
        self._check_columns(table, query)

        if query.method == "POST":
            new_rows = [self._new_row(table, values) for values in _wire(query.payload or [])]
            self._check_unique(table, new_rows)
            table.rows.extend(new_rows)
            return QueryResult(rows=_wire(new_rows))

        matched = [
            row
            for row in table.rows
            if all(_matches_item(row, item) for item in query.filters)
        ]

        if query.method == "GET":
            for column, desc in reversed(query.orders):
                matched.sort(key=lambda row: _sort_key(row.get(column)), reverse=desc)
            total = len(matched)
            start = query.row_offset or 0
            end = start + query.row_limit if query.row_limit is not None else None
            selected = _selected_columns(query.columns)
            page = [
                {c: row.get(c) for c in selected} if selected else row
                for row in matched[start:end]
            ]
            return QueryResult(rows=_wire(page), count=total if query.count else None)

        if query.method == "PATCH":
            values = _wire(query.payload or {})
            self._check_unique(
                table, [values] * len(matched), ignore={id(row) for row in matched}
            )
            for row in matched:
                row.update(copy.deepcopy(values))
            return QueryResult(rows=_wire(matched))

        if query.method == "DELETE":
            removed = {id(row) for row in matched}
            table.rows = [row for row in table.rows if id(row) not in removed]
            return QueryResult(rows=_wire(matched))

        raise PostgrestError(f"Unsupported method: {query.method}", status_code=405)

    # ---- Users ----

    def user_by_id(self, user_id: str) -> UserIdentity | None:
        for stored in self.users.values():
            if stored.identity.id == user_id:
                return stored.identity
        return None


class InMemoryAuthClient:
    """Session-holding auth client backed by InMemoryDatabase users."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database
        self._session: AuthSession | None = None

    @property
    def current_session(self) -> AuthSession | None:
        return self._session

    @property
    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    def _start_session(self, user: UserIdentity) -> AuthSession:
        token = generate_access_token()
        self._db.sessions[token] = user.id
        self._session = AuthSession(access_token=token, user=user)
        return self._session

    async def sign_up(self, email: str, password: str) -> UserIdentity:
        key = email.strip().lower()
        if key in self._db.users:
            raise AuthenticationException("User already registered")
        if len(password) < 6:
            raise AuthenticationException("Password should be at least 6 characters")
        password_hash = await asyncio.to_thread(
            get_password_hash, password, self._db.password_rounds
        )
        user = UserIdentity(id=generate_cuid(), email=key)
        self._db.users[key] = _StoredUser(user, password_hash)
        self._start_session(user)
        return user

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        stored = self._db.users.get(email.strip().lower())
        if stored is None or not await asyncio.to_thread(
            verify_password, password, stored.password_hash
        ):
            raise AuthenticationException("Invalid login credentials")
        logger.info("User signed in: %s", stored.identity.id)
        return self._start_session(stored.identity)

    async def set_session(self, access_token: str) -> UserIdentity:
        user_id = self._db.sessions.get(access_token)
        user = self._db.user_by_id(user_id) if user_id else None
        if user is None:
            raise AuthenticationException("Invalid or expired session")
        self._session = AuthSession(access_token=access_token, user=user)
        return user

    async def sign_out(self) -> None:
        session = self._session
        self._session = None
        if session is not None:
            self._db.sessions.pop(session.access_token, None)


class InMemorySupabaseClient:
    """Drop-in replacement for SupabaseRESTClient for one session."""

    def __init__(self, database: InMemoryDatabase | None = None) -> None:
        self.database = database if database is not None else InMemoryDatabase()
        self.auth = InMemoryAuthClient(self.database)

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self, name)

    async def execute(self, query: QueryBuilder) -> QueryResult:
        return self.database.run(query)

    async def aclose(self) -> None:
        """Nothing to release; present for interface parity."""
