"""Tests for PostgREST query encoding (filters, or-groups, order, range, Prefer)."""

from datetime import date

import httpx
import pytest

from taskboard.infrastructure.supabase._query import Filter, QueryBuilder
from taskboard.infrastructure.supabase._rest_encoding import (
    decode_error,
    encode_params,
    encode_prefer,
    parse_content_range,
)


def _q(table: str = "todos") -> QueryBuilder:
    # Encoding never executes, so no executor is needed
    return QueryBuilder(None, table)  # type: ignore[arg-type]


def test_select_with_filters_order_and_range() -> None:
    q = (
        _q()
        .select(count=True)
        .eq("user_id", "u1")
        .eq("completed", False)
        .order("created_at", desc=True)
        .order("id")
        .range(20, 10)
    )
    assert encode_params(q) == [
        ("select", "*"),
        ("user_id", "eq.u1"),
        ("completed", "eq.false"),
        ("order", "created_at.desc,id.asc"),
        ("offset", "20"),
        ("limit", "10"),
    ]
    assert encode_prefer(q) == "count=exact"


def test_is_in_and_array_operators() -> None:
    q = (
        _q()
        .select("id")
        .is_("deleted_at", None)
        .is_("is_public", True)
        .in_("name", ["work", "home"])
        .overlaps("tags", ["work", "big deal"])
        .where("tags", "cs", ["work"])
    )
    params = dict(encode_params(q))
    assert params["deleted_at"] == "is.null"
    assert params["is_public"] == "is.true"
    assert params["name"] == "in.(work,home)"
    assert ("tags", 'ov.{work,"big deal"}') in encode_params(q)
    assert ("tags", "cs.{work}") in encode_params(q)


def test_single_any_of_becomes_or_param() -> None:
    q = _q().select().any_of(
        Filter("user_id", "eq", "u1"),
        Filter("is_public", "is", True),
    )
    assert ("or", "(user_id.eq.u1,is_public.is.true)") in encode_params(q)


def test_nested_values_with_reserved_characters_are_quoted() -> None:
    q = _q().select().any_of(
        Filter("title", "ilike", "*big, bold*"),
        Filter("description", "ilike", "*big, bold*"),
    )
    assert ("or", '(title.ilike."*big, bold*",description.ilike."*big, bold*")') in encode_params(q)


def test_escaped_like_pattern_is_quoted() -> None:
    q = _q().select().any_of(Filter("title", "ilike", "*a\\_b*"))
    assert ("or", '(title.ilike."*a\\\\_b*")') in encode_params(q)


def test_multiple_any_of_groups_are_anded() -> None:
    q = (
        _q()
        .select()
        .any_of(Filter("user_id", "eq", "u1"), Filter("is_public", "is", True))
        .any_of(Filter("title", "ilike", "*x*"), Filter("description", "ilike", "*x*"))
    )
    assert (
        "and",
        "(or(user_id.eq.u1,is_public.is.true),or(title.ilike.*x*,description.ilike.*x*))",
    ) in encode_params(q)


def test_dates_encode_as_iso() -> None:
    q = _q("tasks").select().eq("due_date", date(2024, 5, 1))
    assert ("due_date", "eq.2024-05-01") in encode_params(q)


def test_writes_have_no_select_and_prefer_representation() -> None:
    insert = _q().insert({"title": "x"})
    assert encode_params(insert) == []
    assert encode_prefer(insert) == "return=representation"
    assert encode_prefer(_q().delete().eq("id", "1")) == "return=representation"
    assert encode_prefer(_q().select()) is None


def test_unknown_operator_rejected() -> None:
    with pytest.raises(ValueError):
        _q().where("title", "like", "x")


def test_empty_any_of_rejected() -> None:
    with pytest.raises(ValueError):
        _q().any_of()


@pytest.mark.parametrize(
    ("header", "expected"),
    [("0-9/42", 42), ("*/0", 0), ("0-9/*", None), (None, None), ("garbage", None)],
)
def test_parse_content_range(header: str | None, expected: int | None) -> None:
    assert parse_content_range(header) == expected


def test_decode_error_json_body() -> None:
    response = httpx.Response(
        400,
        json={
            "code": "42703",
            "message": "column todos.tags does not exist",
            "details": None,
            "hint": None,
        },
    )
    error = decode_error(response)
    assert error.code == "42703"
    assert error.message == "column todos.tags does not exist"
    assert error.status_code == 400


def test_decode_error_plain_text_body() -> None:
    error = decode_error(httpx.Response(503, text="upstream unavailable"))
    assert error.code is None
    assert error.message == "upstream unavailable"
    assert error.status_code == 503
