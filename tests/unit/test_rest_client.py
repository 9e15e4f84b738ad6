"""Wire-level tests for SupabaseRESTClient using httpx.MockTransport."""

import json

import httpx
import pytest

from taskboard.infrastructure.supabase import PostgrestError, SupabaseRESTClient

BASE_URL = "https://demo.supabase.co"
ANON_KEY = "anon-key"


def _client(handler) -> tuple[SupabaseRESTClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseRESTClient(BASE_URL, ANON_KEY, http_client=http), http


async def test_select_sends_params_and_anon_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "t1", "title": "Write report"}])

    client, http = _client(handler)
    result = await client.table("tasks").select().eq("user_id", "u1").order("status").execute()
    await http.aclose()

    assert result.rows == [{"id": "t1", "title": "Write report"}]
    assert result.count is None
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/tasks"
    assert request.url.params["select"] == "*"
    assert request.url.params["user_id"] == "eq.u1"
    assert request.url.params["order"] == "status.asc"
    assert request.headers["apikey"] == ANON_KEY
    assert request.headers["Authorization"] == f"Bearer {ANON_KEY}"
    assert "Prefer" not in request.headers


async def test_count_read_from_content_range() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Prefer"] == "count=exact"
        return httpx.Response(200, json=[], headers={"Content-Range": "*/42"})

    client, http = _client(handler)
    result = await client.table("todos").select(count=True).range(40, 10).execute()
    await http.aclose()
    assert result.count == 42


async def test_insert_posts_json_and_returns_representation() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.headers["Prefer"] == "return=representation"
        body = json.loads(request.content)
        assert body == [{"title": "Write report", "user_id": "u1"}]
        return httpx.Response(201, json=[{"id": "t1", **body[0]}])

    client, http = _client(handler)
    result = await client.table("tasks").insert({"title": "Write report", "user_id": "u1"}).execute()
    await http.aclose()
    assert result.rows[0]["id"] == "t1"


async def test_single_object_response_wrapped_in_list() -> None:
    client, http = _client(lambda request: httpx.Response(200, json={"id": "t1"}))
    result = await client.table("tasks").update({"title": "x"}).eq("id", "t1").execute()
    await http.aclose()
    assert result.rows == [{"id": "t1"}]


async def test_empty_write_response_has_no_rows() -> None:
    client, http = _client(lambda request: httpx.Response(204))
    result = await client.table("todos").delete().eq("id", "1").execute()
    await http.aclose()
    assert result.rows == []


async def test_error_response_raises_postgrest_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"code": "42703", "message": "column tasks.deleted_at does not exist"}
        )

    client, http = _client(handler)
    with pytest.raises(PostgrestError) as exc_info:
        await client.table("tasks").select("deleted_at").limit(1).execute()
    await http.aclose()
    assert exc_info.value.code == "42703"
    assert exc_info.value.status_code == 400


async def test_signed_in_session_authorizes_row_queries() -> None:
    auth_headers: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/auth/v1/user":
            return httpx.Response(200, json={"id": "u1", "email": "alice@example.com"})
        auth_headers.append(request.headers["Authorization"])
        return httpx.Response(200, json=[])

    client, http = _client(handler)
    user = await client.auth.set_session("user-token")
    await client.table("tasks").select().execute()
    await http.aclose()
    assert user.id == "u1"
    assert auth_headers == ["Bearer user-token"]


async def test_aclose_does_not_close_injected_client() -> None:
    client, http = _client(lambda request: httpx.Response(200, json=[]))
    await client.aclose()
    assert http.is_closed is False
    await http.aclose()


async def test_aclose_closes_owned_client() -> None:
    client = SupabaseRESTClient(BASE_URL, ANON_KEY)
    await client.aclose()
    assert client._http.is_closed is True


async def test_non_json_success_body_raises_postgrest_error() -> None:
    client, http = _client(lambda request: httpx.Response(200, text="<html>gateway</html>"))
    with pytest.raises(PostgrestError) as exc_info:
        await client.table("todos").select().execute()
    await http.aclose()
    assert exc_info.value.status_code == 200
