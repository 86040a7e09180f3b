"""Pure config mutations. Each helper returns a new dict."""

from __future__ import annotations

import copy
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """ISO-8601 timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def update_framework(config: dict, name: str, update: dict) -> dict:
    """Merge ``update`` into the framework record, creating it if needed."""
    new = copy.deepcopy(config)
    frameworks = new.setdefault("frameworks", {})
    frameworks[name] = {**frameworks.get(name, {}), **update}
    return new


def remove_framework(config: dict, name: str) -> dict:
    """Drop a framework and its library mapping."""
    new = copy.deepcopy(config)
    new.get("frameworks", {}).pop(name, None)
    mappings = new.get("mcp", {}).get("libraryMappings")
    if mappings:
        mappings.pop(name, None)
    return new


def set_library_mapping(config: dict, name: str, library_id: str) -> dict:
    new = copy.deepcopy(config)
    mcp = new.setdefault("mcp", {})
    mcp["libraryMappings"] = {**(mcp.get("libraryMappings") or {}), name: library_id}
    return new


def update_sync_time(config: dict, when: str | None = None) -> dict:
    new = copy.deepcopy(config)
    new.setdefault("sync", {})["lastSync"] = when or utc_now_iso()
    return new
