"""Session accessor: who is calling, read from the auth client's cached session."""

from __future__ import annotations

from taskboard.application.dtos.user import UserIdentity
from taskboard.infrastructure.supabase.protocol import AuthClient


class SessionAccessor:
    """Implements ISessionAccessor over an auth client.

    Absence of a session is a normal state (None), never an error.
    """

    def __init__(self, auth: AuthClient) -> None:
        self._auth = auth

    def current_user(self) -> UserIdentity | None:
        """Return the signed-in identity, or None."""
        session = self._auth.current_session
        return session.user if session is not None else None
