"""Unified Context7 client: HTTP API first, mcp-cli as fallback.

Source priority:
    1. HTTP API, when an API key is configured (argument or CONTEXT7_API_KEY)
    2. MCP via mcp-cli, when running alongside Claude Code
    3. Nothing: the caller writes placeholder docs instead
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

import httpx

from passive_docs_index.context7.http_client import Context7Api, Context7ApiError
from passive_docs_index.context7.mcp_client import McpCliClient, extract_context7_content

logger = logging.getLogger(__name__)

API_KEY_ENV = "CONTEXT7_API_KEY"
DOC_SEPARATOR = "\n\n--------------------------------\n\n"


@dataclass
class QueryResult:
    success: bool
    source: str
    content: str | None = None
    error: str | None = None
    docs: list[dict] = field(default_factory=list)


@dataclass
class Availability:
    http: bool
    mcp: bool
    available: bool
    recommended: str
    message: str

    def to_dict(self) -> dict:
        return {
            "http": self.http,
            "mcp": self.mcp,
            "available": self.available,
            "recommended": self.recommended,
            "message": self.message,
        }


def docs_to_markdown(docs: list[dict]) -> str:
    blocks = []
    for doc in docs:
        parts = []
        if doc.get("title"):
            parts.append(f"### {doc['title']}")
        if doc.get("source"):
            parts.append(f"\nSource: {doc['source']}")
        if doc.get("content"):
            parts.append(f"\n{doc['content']}")
        blocks.append("\n".join(parts))
    return DOC_SEPARATOR.join(blocks)


def _last_segment(library_id: str) -> str:
    parts = [p for p in library_id.split("/") if p]
    return parts[-1] if parts else library_id


class Context7Client:
    """Documentation fetcher holding the HTTP transport, MCP client and redirect cache."""

    def __init__(
        self,
        mcp: McpCliClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._mcp = mcp or McpCliClient()
        self._transport = transport
        self._api: Context7Api | None = None
        self._library_ids: dict[str, str] = {}

    @property
    def mcp(self) -> McpCliClient:
        return self._mcp

    def reset(self) -> None:
        """Drop the cached HTTP client, resolved library IDs and MCP discovery."""
        self._api = None
        self._library_ids.clear()
        self._mcp.reset()

    def _http(self, api_key: str | None = None) -> Context7Api | None:
        key = api_key or os.environ.get(API_KEY_ENV)
        if not key:
            self._api = None
            return None
        if self._api is None or self._api.api_key != key:
            client = httpx.AsyncClient(transport=self._transport) if self._transport else None
            self._api = Context7Api(key, client=client)
        return self._api

    def http_available(self, api_key: str | None = None) -> bool:
        return self._http(api_key) is not None

    async def _resolve_library_id(self, api: Context7Api, library_id: str) -> str | None:
        if library_id in self._library_ids:
            return self._library_ids[library_id]
        name = _last_segment(library_id)
        try:
            results = await api.search_library(name, name)
        except (Context7ApiError, httpx.HTTPError, ValueError) as exc:
            logger.warning("Failed to resolve library ID %s: %s", library_id, exc)
            return None
        if not results:
            return None
        exact = next((r for r in results if r["id"].lower() == library_id.lower()), None)
        best = (exact or results[0])["id"]
        self._library_ids[library_id] = best
        return best

    async def query_http(self, library_id: str, query: str, api_key: str | None = None) -> QueryResult:
        api = self._http(api_key)
        if api is None:
            return QueryResult(False, "none", error=f"{API_KEY_ENV} not set")

        try:
            docs = await api.get_context(query, library_id)
        except (Context7ApiError, httpx.HTTPError, ValueError) as exc:
            message = str(exc) or "HTTP request failed"
            if "redirected" not in message:
                return QueryResult(False, "http", error=message)
            return await self._retry_redirected(api, library_id, query)

        if not docs:
            return QueryResult(False, "http", error="No documentation found")
        return QueryResult(True, "http", content=docs_to_markdown(docs), docs=docs)

    async def _retry_redirected(self, api: Context7Api, library_id: str, query: str) -> QueryResult:
        resolved = await self._resolve_library_id(api, library_id)
        if resolved and resolved != library_id:
            logger.info("Library %s redirected to %s", library_id, resolved)
            try:
                docs = await api.get_context(query, resolved)
            except (Context7ApiError, httpx.HTTPError, ValueError) as exc:
                return QueryResult(
                    False, "http",
                    error=f"Redirect resolved to {resolved} but query failed: {str(exc) or 'unknown'}",
                )
            if docs:
                return QueryResult(True, "http", content=docs_to_markdown(docs), docs=docs)
        return QueryResult(
            False, "http",
            error=f"Library ID changed. Try: pdi add {_last_segment(library_id)} --force",
        )

    async def query_mcp(self, library_id: str, query: str) -> QueryResult:
        if not await self._mcp.is_available():
            return QueryResult(False, "none", error="MCP not available (Claude Code not running)")

        result = await self._mcp.query_docs(library_id, query)
        if not result.success:
            return QueryResult(False, "mcp", error=result.error or "MCP query failed")

        content = extract_context7_content(result.content or "")
        if not content.strip():
            return QueryResult(False, "mcp", error="MCP returned empty content")
        return QueryResult(True, "mcp", content=content)

    async def query(
        self,
        library_id: str,
        query: str,
        api_key: str | None = None,
        prefer_mcp: bool = False,
    ) -> QueryResult:
        """Query the best available source, falling back from HTTP to MCP."""
        mcp_result: QueryResult | None = None
        if prefer_mcp:
            mcp_result = await self.query_mcp(library_id, query)
            if mcp_result.success:
                return mcp_result

        http_available = self.http_available(api_key)
        if http_available:
            http_result = await self.query_http(library_id, query, api_key)
            if http_result.success:
                return http_result
            logger.warning("HTTP query failed: %s", http_result.error)

        if mcp_result is None:
            mcp_result = await self.query_mcp(library_id, query)
            if mcp_result.success:
                return mcp_result

        prefix = "HTTP failed" if http_available else "No API key set"
        return QueryResult(False, "none", error=f"{prefix}, MCP failed: {mcp_result.error}")

    async def search_library(
        self, query: str, library_name: str, api_key: str | None = None,
    ) -> dict | None:
        """First search hit as ``{"id", "name"}``, or None."""
        api = self._http(api_key)
        if api is None:
            return None
        try:
            results = await api.search_library(query, library_name)
        except (Context7ApiError, httpx.HTTPError, ValueError) as exc:
            logger.warning("Failed to search library %s: %s", library_name, exc)
            return None
        if not results:
            return None
        return {"id": results[0]["id"], "name": results[0].get("name", "")}

    async def check_availability(self) -> Availability:
        http = self.http_available()
        mcp = await self._mcp.is_available()
        if http:
            recommended, message = "http", "Using Context7 HTTP API (API key configured)"
        elif mcp:
            recommended, message = "mcp", "MCP available (requires active Claude Code session)"
        else:
            recommended, message = "offline", "No documentation source available. Run: pdi auth"
        return Availability(http=http, mcp=mcp, available=http or mcp, recommended=recommended, message=message)

    async def aclose(self) -> None:
        if self._api is not None:
            await self._api.aclose()
