"""Tests for auth endpoints (signup, login, logout, me)."""

from httpx import AsyncClient

from tests.conftest import TEST_PASSWORD, signup_headers


async def test_signup_returns_token_and_user(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/signup", json={"email": "alice@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "alice@example.com"
    assert data["access_token"]
    assert data["token_type"] == "bearer"


async def test_signup_duplicate_email_returns_401(client: AsyncClient) -> None:
    await signup_headers(client, "alice@example.com")
    response = await client.post(
        "/api/v1/auth/signup", json={"email": "alice@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_signup_invalid_email_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/signup", json={"email": "not-an-email", "password": TEST_PASSWORD}
    )
    assert response.status_code == 422


async def test_signup_short_password_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/signup", json={"email": "alice@example.com", "password": "123"}
    )
    assert response.status_code == 422


async def test_login_and_me(client: AsyncClient) -> None:
    await signup_headers(client, "alice@example.com")
    login = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"


async def test_login_wrong_password_returns_401(client: AsyncClient) -> None:
    await signup_headers(client, "alice@example.com")
    response = await client.post(
        "/api/v1/auth/login", json={"email": "alice@example.com", "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid login credentials"


async def test_me_without_token_returns_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTH_REQUIRED"


async def test_invalid_token_returns_401(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-session"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_logout_revokes_token(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 204
    me = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert me.status_code == 401
