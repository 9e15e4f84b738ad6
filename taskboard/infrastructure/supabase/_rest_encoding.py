"""Encode built queries to PostgREST query parameters and headers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import httpx

from taskboard.infrastructure.supabase._query import AnyOf, Filter, PostgrestError, QueryBuilder

# Characters PostgREST treats as syntax inside or=(...) and in.(...) lists
_RESERVED = frozenset(',.:()"\\ ')
# Characters that need quoting inside a Postgres array literal
_ARRAY_RESERVED = frozenset(',{}"\\ ')

# Writes always ask for the affected rows back
_WRITE_METHODS = {"POST", "PATCH", "DELETE"}


def _scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _quote(text: str, reserved: frozenset[str] = _RESERVED) -> str:
    if not any(ch in reserved for ch in text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _array_literal(values: list[Any]) -> str:
    return "{" + ",".join(_quote(_scalar(v), _ARRAY_RESERVED) for v in values) + "}"


def encode_filter_value(f: Filter, *, nested: bool = False) -> str:
    """Right-hand side of a filter, e.g. 'eq.done' or 'in.(a,b)'."""
    if f.op == "is":
        return f"is.{_scalar(f.value)}"
    if f.op == "in":
        return "in.(" + ",".join(_quote(_scalar(v)) for v in f.value) + ")"
    if f.op in ("ov", "cs"):
        return f"{f.op}.{_array_literal(list(f.value))}"
    text = _scalar(f.value)
    return f"{f.op}.{_quote(text) if nested else text}"


def _encode_group(group: AnyOf) -> str:
    return ",".join(
        f"{f.column}.{encode_filter_value(f, nested=True)}" for f in group.filters
    )


def encode_params(query: QueryBuilder) -> list[tuple[str, str]]:
    """Query-string parameters for a built query (filters, select, order, range)."""
    params: list[tuple[str, str]] = []
    if query.method == "GET":
        params.append(("select", query.columns))

    groups: list[AnyOf] = []
    for item in query.filters:
        if isinstance(item, AnyOf):
            groups.append(item)
        else:
            params.append((item.column, encode_filter_value(item)))

    if len(groups) == 1:
        params.append(("or", f"({_encode_group(groups[0])})"))
    elif groups:
        inner = ",".join(f"or({_encode_group(g)})" for g in groups)
        params.append(("and", f"({inner})"))

    if query.orders:
        params.append(
            (
                "order",
                ",".join(f"{col}.{'desc' if desc else 'asc'}" for col, desc in query.orders),
            )
        )
    if query.row_offset is not None:
        params.append(("offset", str(query.row_offset)))
    if query.row_limit is not None:
        params.append(("limit", str(query.row_limit)))
    return params


def encode_prefer(query: QueryBuilder) -> str | None:
    """Value of the Prefer header, or None when no preference applies."""
    if query.method == "GET":
        return "count=exact" if query.count else None
    if query.method in _WRITE_METHODS:
        return "return=representation"
    return None


def parse_content_range(header: str | None) -> int | None:
    """Total row count from a Content-Range header ('0-9/42' -> 42, '*/0' -> 0)."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    if total == "*":
        return None
    try:
        return int(total)
    except ValueError:
        return None


def decode_error(response: httpx.Response) -> PostgrestError:
    """Build a PostgrestError from an error response (JSON body when present)."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return PostgrestError(
            body.get("message") or response.reason_phrase or "Request failed",
            code=body.get("code"),
            details=body.get("details"),
            hint=body.get("hint"),
            status_code=response.status_code,
        )
    return PostgrestError(
        response.text or response.reason_phrase or f"HTTP {response.status_code}",
        status_code=response.status_code,
    )
