"""Query the Context7 MCP server through mcp-cli.

mcp-cli is either a standalone executable on PATH or bundled with Claude
Code (``claude --mcp-cli``). Commands are spawned with explicit argument
lists, never through a shell.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CONTEXT7_SERVER = "plugin_context7_context7"
QUERY_TIMEOUT = 60.0
RESOLVE_TIMEOUT = 30.0
VERSION_PROBE_TIMEOUT = 5.0


@dataclass
class McpResult:
    success: bool
    content: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class McpCliInfo:
    """Executable plus leading arguments; kept apart so paths with spaces survive."""

    cmd: str
    base_args: tuple[str, ...] = field(default_factory=tuple)


def _claude_executable_name() -> str:
    return "claude.exe" if sys.platform == "win32" else "claude"


def find_mcp_cli(home: Path | None = None) -> McpCliInfo | None:
    """Locate mcp-cli: PATH first, then known Claude Code install locations."""
    standalone = shutil.which("mcp-cli")
    if standalone:
        return McpCliInfo(standalone)

    home = home or Path.home()
    exe_name = _claude_executable_name()
    claude_args = ("--mcp-cli",)

    for base in (
        home / ".local" / "share" / "claude",
        home / ".local" / "bin",
        home / "AppData" / "Local" / "Programs" / "claude",
    ):
        candidate = base / exe_name
        if candidate.is_file():
            return McpCliInfo(str(candidate), claude_args)

    versions = home / ".local" / "share" / "claude" / "versions"
    if versions.is_dir():
        for version in sorted(os.listdir(versions), reverse=True):
            candidate = versions / version
            if sys.platform == "win32":
                candidate = candidate / exe_name
            if candidate.is_file():
                return McpCliInfo(str(candidate), claude_args)

    on_path = shutil.which(exe_name)
    if on_path:
        return McpCliInfo(on_path, claude_args)
    return None


class McpCliClient:
    """mcp-cli wrapper with cached discovery and availability."""

    def __init__(self, home: Path | None = None):
        self._home = home
        self._info: McpCliInfo | None = None
        self._searched = False
        self._available: bool | None = None

    def reset(self) -> None:
        self._info = None
        self._searched = False
        self._available = None

    def cli_info(self) -> McpCliInfo | None:
        if not self._searched:
            self._info = find_mcp_cli(self._home)
            self._searched = True
        return self._info

    async def is_available(self) -> bool:
        """True when ``--version`` exits 0 within five seconds (cached)."""
        if self._available is not None:
            return self._available
        info = self.cli_info()
        if info is None:
            self._available = False
            return False

        try:
            proc = await asyncio.create_subprocess_exec(
                info.cmd, *info.base_args, "--version",
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.debug("mcp-cli probe failed to spawn: %s", exc)
            self._available = False
            return False

        try:
            await asyncio.wait_for(proc.communicate(), timeout=VERSION_PROBE_TIMEOUT)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            self._available = False
            return False
        self._available = proc.returncode == 0
        return self._available

    async def _call(self, tool: str, params: dict, timeout: float) -> McpResult:
        info = self.cli_info()
        if info is None:
            return McpResult(False, error="mcp-cli not found")

        args = [*info.base_args, "call", f"{CONTEXT7_SERVER}/{tool}", json.dumps(params)]
        try:
            proc = await asyncio.create_subprocess_exec(
                info.cmd, *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            return McpResult(False, error=f"Failed to spawn mcp-cli: {exc}")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return McpResult(False, error=f"mcp-cli call timed out after {int(timeout * 1000)}ms")

        out = stdout.decode("utf-8", errors="replace").strip()
        if proc.returncode == 0 and out:
            return McpResult(True, content=out)
        err = stderr.decode("utf-8", errors="replace").strip()
        return McpResult(False, error=err or f"mcp-cli exited with code {proc.returncode}")

    async def query_docs(self, library_id: str, query: str) -> McpResult:
        if not await self.is_available():
            return McpResult(False, error="mcp-cli is not available. Install it or use --offline mode.")
        return await self._call("query-docs", {"libraryId": library_id, "query": query}, QUERY_TIMEOUT)

    async def resolve_library(self, library_name: str) -> McpResult:
        if not await self.is_available():
            return McpResult(False, error="mcp-cli is not available.")
        return await self._call("resolve-library-id", {"libraryName": library_name}, RESOLVE_TIMEOUT)


def _text_blocks(blocks: list, include_content: bool) -> list[str]:
    parts: list[str] = []
    for block in blocks:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict):
            if block.get("text"):
                parts.append(block["text"])
            elif include_content and block.get("content"):
                content = block["content"]
                parts.append(content if isinstance(content, str) else json.dumps(content))
    return parts


def _as_text(value) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def extract_context7_content(raw: str) -> str:
    """Unwrap the documentation text from an mcp-cli response.

    Responses may be plain text, a JSON string, a list of content blocks,
    or an object carrying the text under ``content``/``result``/``text``.
    """
    try:
        parsed = json.loads(raw)
    except ValueError:
        return raw

    if isinstance(parsed, str):
        return parsed
    if isinstance(parsed, list):
        parts = _text_blocks(parsed, include_content=True)
        if parts:
            return "\n\n".join(parts)
        return json.dumps(parsed, indent=2)
    if not isinstance(parsed, dict):
        return raw

    if parsed.get("content"):
        content = parsed["content"]
        if isinstance(content, list):
            parts = _text_blocks(content, include_content=False)
            if parts:
                return "\n\n".join(parts)
        return _as_text(content)
    if parsed.get("result"):
        return _as_text(parsed["result"])
    if parsed.get("text"):
        return _as_text(parsed["text"])
    for key in ("documentation", "docs", "body"):
        if parsed.get(key):
            return _as_text(parsed[key])
    return json.dumps(parsed, indent=2)
