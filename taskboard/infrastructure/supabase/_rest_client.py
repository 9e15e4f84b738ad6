"""Thin Supabase REST client (PostgREST rows + GoTrue auth, no supabase-py).

All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Row queries are authorized with the session's access token when signed in,
otherwise with the public anon key.
"""

from __future__ import annotations

import logging

import httpx

from taskboard.infrastructure.supabase._auth_client import SupabaseAuthClient
from taskboard.infrastructure.supabase._query import (
    PostgrestError,
    QueryBuilder,
    QueryResult,
)
from taskboard.infrastructure.supabase._rest_encoding import (
    decode_error,
    encode_params,
    encode_prefer,
    parse_content_range,
)

logger = logging.getLogger(__name__)


class SupabaseRESTClient:
    """Lightweight Supabase client for one session (REST only)."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._rest_url = f"{base_url.rstrip('/')}/rest/v1"
        self._anon_key = anon_key
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self.auth = SupabaseAuthClient(base_url, anon_key, self._http)

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self, name)

    def _headers(self, query: QueryBuilder) -> dict[str, str]:
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self.auth.access_token or self._anon_key}",
            "Accept": "application/json",
        }
        if query.payload is not None:
            headers["Content-Type"] = "application/json"
        prefer = encode_prefer(query)
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def execute(self, query: QueryBuilder) -> QueryResult:
        """Send the query to PostgREST. Non-2xx responses raise PostgrestError.

        Transport failures propagate as httpx.HTTPError.
        """
        resp = await self._http.request(
            query.method,
            f"{self._rest_url}/{query.table}",
            params=encode_params(query),
            headers=self._headers(query),
            json=query.payload,
        )
        if resp.status_code >= 400:
            error = decode_error(resp)
            logger.debug(
                "PostgREST %s %s failed (%s %s): %s",
                query.method,
                query.table,
                resp.status_code,
                error.code,
                error.message,
            )
            raise error
        try:
            rows = resp.json() if resp.content else []
        except ValueError as e:
            raise PostgrestError(
                f"Invalid JSON in response from {query.table}", status_code=resp.status_code
            ) from e
        if isinstance(rows, dict):
            rows = [rows]
        count = parse_content_range(resp.headers.get("Content-Range")) if query.count else None
        return QueryResult(rows=rows, count=count)


__all__ = ["PostgrestError", "SupabaseRESTClient"]
