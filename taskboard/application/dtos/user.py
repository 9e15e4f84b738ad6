"""DTOs for authenticated identities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserIdentity:
    """Opaque identity of the signed-in user."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthSession:
    """Session held by the auth client after sign-in."""

    access_token: str
    user: UserIdentity
    refresh_token: str | None = None
