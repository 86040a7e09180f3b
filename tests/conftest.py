"""Shared test fixtures for passive-docs-index."""

import json
from pathlib import Path

import httpx
import pytest

from passive_docs_index.config.loader import create_default_config
from passive_docs_index.context7.mcp_client import McpResult

DOCS = [{"title": "Create an app", "source": "https://hono.dev/docs/api/hono", "content": "const app = new Hono()"}]


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def framework_record(version: str = "4.x", **overrides) -> dict:
    record = {
        "version": version,
        "source": "context7",
        "libraryId": "/honojs/hono",
        "lastUpdate": "2026-01-15T10:00:00.000Z",
        "files": 2,
        "categories": ["api"],
    }
    record.update(overrides)
    return record


class FakeMcp:
    """Stands in for McpCliClient without spawning processes."""

    def __init__(self, available=True, result=None):
        self.available = available
        self.result = result or McpResult(True, content="mcp docs")
        self.calls = []
        self.resets = 0

    async def is_available(self):
        return self.available

    async def query_docs(self, library_id, query):
        self.calls.append((library_id, query))
        return self.result

    def reset(self):
        self.resets += 1


def api_router(routes, seen=None):
    """MockTransport keyed by (path, libraryId) with a path-only fallback."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        path = request.url.path.removeprefix("/api/v2")
        key = (path, request.url.params.get("libraryId"))
        status, body = routes.get(key) or routes.get(path) or (404, {"error": "not found"})
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory, monkeypatch):
    """Keep tests away from the real ~/.config/pdi and any exported API key."""
    monkeypatch.setenv("PDI_CONFIG_HOME", str(tmp_path_factory.mktemp("pdi-home")))
    # set-then-delete so keys exported by the code under test are undone too
    for name in ("CONTEXT7_API_KEY", "PDI_PROJECT_DIR", "PDI_DEBUG"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def no_mcp(monkeypatch):
    """Pretend no mcp-cli or Claude Code install exists on this machine."""
    monkeypatch.setattr("passive_docs_index.context7.mcp_client.find_mcp_cli", lambda home=None: None)


@pytest.fixture
def package_json():
    return {
        "name": "demo-api",
        "version": "1.0.0",
        "dependencies": {"hono": "^4.6.0", "zod": "^4.1.0"},
        "devDependencies": {"vitest": "^3.0.0"},
    }


@pytest.fixture
def project(tmp_path, package_json):
    """A Node.js project directory with a package.json and no PDI setup."""
    write_json(tmp_path / "package.json", package_json)
    return tmp_path


@pytest.fixture
def config():
    return create_default_config("demo-api", "backend")
