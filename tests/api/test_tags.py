"""Tests for tag endpoints."""

from httpx import AsyncClient


async def test_create_and_list_tags(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.post(
        "/api/v1/tags", json={"name": "Reading", "color": "#123456"}, headers=auth_headers
    )
    assert response.status_code == 201
    assert response.json()["name"] == "reading"

    tags = await client.get("/api/v1/tags")
    assert [(t["name"], t["color"]) for t in tags.json()] == [("reading", "#123456")]


async def test_duplicate_tag_returns_409(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    await client.post("/api/v1/tags", json={"name": "work"}, headers=auth_headers)
    response = await client.post("/api/v1/tags", json={"name": "Work"}, headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "TAG_ALREADY_EXISTS"


async def test_create_tag_requires_session(client: AsyncClient) -> None:
    response = await client.post("/api/v1/tags", json={"name": "work"})
    assert response.status_code == 401


async def test_invalid_color_returns_422(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.post(
        "/api/v1/tags", json={"name": "work", "color": "red"}, headers=auth_headers
    )
    assert response.status_code == 422
