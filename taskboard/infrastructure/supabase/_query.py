"""Fluent query builder shared by the REST client and the in-memory backend.

A query is built in Python (filters, order, range, count) and handed to an
executor: SupabaseRESTClient encodes it as a PostgREST request, while
InMemorySupabaseClient evaluates it against in-process rows. Repositories
only ever see this builder, so both backends behave the same way.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


class PostgrestError(Exception):
    """Error response from PostgREST (or the in-memory backend imitating it).

    Attributes mirror the JSON error body: code is the Postgres SQLSTATE
    (e.g. '42703' undefined column) or a PostgREST 'PGRST...' code.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        self.status_code = status_code
        super().__init__(message)


# Filter operators understood by both backends
OPERATORS = frozenset(
    {"eq", "neq", "gt", "gte", "lt", "lte", "is", "ilike", "in", "ov", "cs"}
)


@dataclass(frozen=True)
class Filter:
    """One column predicate, e.g. Filter('status', 'eq', 'done')."""

    column: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")


@dataclass(frozen=True)
class AnyOf:
    """Disjunction of predicates (PostgREST 'or=(...)')."""

    filters: tuple[Filter, ...]


@dataclass
class QueryResult:
    """Rows returned by a query plus the exact count when it was requested."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    count: int | None = None


class QueryExecutor(Protocol):
    """Anything that can run a built query (REST client or in-memory backend)."""

    async def execute(self, query: "QueryBuilder") -> QueryResult: ...


class QueryBuilder:
    """Fluent builder for one table operation; run via .execute()."""

    def __init__(self, executor: QueryExecutor, table: str) -> None:
        self._executor = executor
        self.table = table
        self.method = "GET"
        self.columns = "*"
        self.payload: list[dict[str, Any]] | dict[str, Any] | None = None
        self.filters: list[Filter | AnyOf] = []
        self.orders: list[tuple[str, bool]] = []
        self.row_offset: int | None = None
        self.row_limit: int | None = None
        self.count = False

    # ---- Operation ----

    def select(self, columns: str = "*", *, count: bool = False) -> "QueryBuilder":
        self.method = "GET"
        self.columns = columns
        self.count = count
        return self

    def insert(self, rows: dict[str, Any] | Sequence[dict[str, Any]]) -> "QueryBuilder":
        self.method = "POST"
        self.payload = [dict(rows)] if isinstance(rows, dict) else [dict(r) for r in rows]
        return self

    def update(self, values: dict[str, Any]) -> "QueryBuilder":
        self.method = "PATCH"
        self.payload = dict(values)
        return self

    def delete(self) -> "QueryBuilder":
        self.method = "DELETE"
        return self

    # ---- Filters ----

    def where(self, column: str, op: str, value: Any) -> "QueryBuilder":
        self.filters.append(Filter(column, op, value))
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        return self.where(column, "eq", value)

    def is_(self, column: str, value: bool | None) -> "QueryBuilder":
        return self.where(column, "is", value)

    def in_(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        return self.where(column, "in", list(values))

    def overlaps(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        """Array column shares at least one element with values."""
        return self.where(column, "ov", list(values))

    def any_of(self, *filters: Filter) -> "QueryBuilder":
        if not filters:
            raise ValueError("any_of() needs at least one filter")
        self.filters.append(AnyOf(tuple(filters)))
        return self

    # ---- Shaping ----

    def order(self, column: str, *, desc: bool = False) -> "QueryBuilder":
        self.orders.append((column, desc))
        return self

    def limit(self, n: int) -> "QueryBuilder":
        self.row_limit = n
        return self

    def range(self, start: int, size: int) -> "QueryBuilder":
        """Rows [start, start + size)."""
        self.row_offset = start
        self.row_limit = size
        return self

    async def execute(self) -> QueryResult:
        """Run the query on the executor that created it."""
        return await self._executor.execute(self)

    def __repr__(self) -> str:
        return f"<QueryBuilder {self.method} {self.table} filters={len(self.filters)}>"
