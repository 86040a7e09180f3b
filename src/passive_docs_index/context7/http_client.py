"""Thin async client for the Context7 HTTP API.

Endpoints:
    GET /libs/search?libraryName=&query=        -> library candidates
    GET /context?libraryId=&query=&type=json    -> documentation snippets

Authentication is a Bearer token (``ctx7sk-...``). Failures raise
Context7ApiError whose message carries the HTTP status, so callers can
classify it with ``classify_context7_error``.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

CONTEXT7_API_URL = "https://context7.com/api/v2"
REQUEST_TIMEOUT = 30.0


class Context7ApiError(Exception):
    """Error response from the Context7 API."""

    def __init__(self, message: str, status_code: int | None = None, redirect_to: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.redirect_to = redirect_to


def _as_list(data, *keys: str) -> list[dict]:
    """Accept a bare JSON list or an object wrapping one under ``keys``."""
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    if isinstance(data, dict):
        for key in keys:
            value = data.get(key)
            if isinstance(value, list):
                return [item for item in value if isinstance(item, dict)]
    return []


class Context7Api:
    """HTTP transport bound to a single API key."""

    def __init__(
        self,
        api_key: str,
        base_url: str = CONTEXT7_API_URL,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(REQUEST_TIMEOUT),
                follow_redirects=False,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _get(self, path: str, params: dict[str, str]):
        logger.debug("Context7 GET %s %s", path, params)
        response = await self._get_client().get(
            f"{self.base_url}{path}",
            params=params,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
            },
        )
        self._raise_for_status(response)
        return response.json()

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status in (301, 302, 307, 308):
            raise Context7ApiError(
                f"library_redirected: library moved (HTTP {status})",
                status_code=status,
                redirect_to=response.headers.get("location"),
            )
        if status == 202:
            raise Context7ApiError(
                "Library is still being indexed (HTTP 202). Try again later.",
                status_code=status,
            )
        if response.is_success:
            return

        detail = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = str(body.get("error") or body.get("message") or "")
        if "library_redirected" in detail:
            raise Context7ApiError(f"library_redirected: {detail}", status_code=status)

        if status in (401, 403):
            message = f"Unauthorized (HTTP {status}): invalid API key"
        elif status == 404:
            message = "Library not found (HTTP 404)"
        elif status == 429:
            message = "Rate limit exceeded (HTTP 429): too many requests"
        else:
            message = f"Context7 API error (HTTP {status})"
        if detail:
            message = f"{message}: {detail}"
        raise Context7ApiError(message, status_code=status)

    async def get_context(self, query: str, library_id: str) -> list[dict]:
        """Documentation snippets (``title``/``source``/``content``) for a query."""
        data = await self._get(
            "/context",
            {"libraryId": library_id, "query": query, "type": "json"},
        )
        return _as_list(data, "results", "docs", "snippets")

    async def search_library(self, query: str, library_name: str) -> list[dict]:
        data = await self._get(
            "/libs/search",
            {"libraryName": library_name, "query": query},
        )
        return [r for r in _as_list(data, "results", "libraries") if r.get("id")]
