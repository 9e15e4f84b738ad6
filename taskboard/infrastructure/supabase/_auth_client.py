"""Thin Supabase Auth (GoTrue) REST client.

Holds the current session in memory, the way the browser SDK caches it.
The PostgREST client reads access_token from here to authorize row queries.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from taskboard.application.dtos.user import AuthSession, UserIdentity
from taskboard.domain.exceptions import AuthenticationException, RepositoryException

logger = logging.getLogger(__name__)


def _user_from_payload(payload: dict[str, Any]) -> UserIdentity:
    return UserIdentity(id=str(payload["id"]), email=payload.get("email"))


def _error_message(response: httpx.Response) -> str:
    """GoTrue error bodies vary by endpoint: error_description, msg, or message."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class SupabaseAuthClient:
    """Session-holding auth client for one browser/API session."""

    def __init__(self, base_url: str, anon_key: str, http_client: httpx.AsyncClient) -> None:
        self._auth_url = f"{base_url.rstrip('/')}/auth/v1"
        self._anon_key = anon_key
        self._http = http_client
        self._session: AuthSession | None = None

    @property
    def current_session(self) -> AuthSession | None:
        return self._session

    @property
    def access_token(self) -> str | None:
        return self._session.access_token if self._session else None

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {bearer or self._anon_key}",
            "Content-Type": "application/json",
        }

    async def _post(
        self, path: str, body: dict[str, Any] | None = None, *, bearer: str | None = None
    ) -> httpx.Response:
        try:
            return await self._http.post(
                f"{self._auth_url}{path}", json=body, headers=self._headers(bearer)
            )
        except httpx.HTTPError as e:
            logger.error("Auth service request failed: %s", e)
            raise RepositoryException(f"Auth service unavailable: {e}") from e

    def _adopt(self, payload: dict[str, Any]) -> AuthSession:
        session = AuthSession(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            user=_user_from_payload(payload["user"]),
        )
        self._session = session
        return session

    async def sign_up(self, email: str, password: str) -> UserIdentity:
        """Register a user. Adopts the session when the project auto-confirms emails."""
        resp = await self._post("/signup", {"email": email, "password": password})
        if resp.status_code >= 400:
            raise AuthenticationException(_error_message(resp))
        payload = resp.json()
        if payload.get("access_token"):
            return self._adopt(payload).user
        # Email confirmation pending: GoTrue returns the bare user object
        return _user_from_payload(payload.get("user") or payload)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange email/password for a session and keep it."""
        resp = await self._post(
            "/token?grant_type=password", {"email": email, "password": password}
        )
        if resp.status_code >= 400:
            raise AuthenticationException(_error_message(resp))
        session = self._adopt(resp.json())
        logger.info("User signed in: %s", session.user.id)
        return session

    async def set_session(self, access_token: str) -> UserIdentity:
        """Validate a bearer token with the auth service and adopt it as the session."""
        try:
            resp = await self._http.get(
                f"{self._auth_url}/user", headers=self._headers(access_token)
            )
        except httpx.HTTPError as e:
            logger.error("Auth service request failed: %s", e)
            raise RepositoryException(f"Auth service unavailable: {e}") from e
        if resp.status_code >= 400:
            raise AuthenticationException("Invalid or expired session")
        user = _user_from_payload(resp.json())
        self._session = AuthSession(access_token=access_token, user=user)
        return user

    async def sign_out(self) -> None:
        """Revoke the session server-side and forget it locally."""
        session = self._session
        self._session = None
        if session is None:
            return
        resp = await self._post("/logout", bearer=session.access_token)
        # 401/403: token already revoked or expired, which is the goal
        if resp.status_code >= 400 and resp.status_code not in (401, 403):
            raise AuthenticationException(_error_message(resp))
        logger.info("User signed out: %s", session.user.id)
