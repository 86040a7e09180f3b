"""Read package.json."""

from __future__ import annotations

import json
from pathlib import Path

from passive_docs_index.errors import PDIError
from passive_docs_index.paths import package_json_path


def read_package_json(root: Path) -> dict | None:
    """Return the parsed package.json, or None if the project has none."""
    path = package_json_path(root)
    if not path.is_file():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise PDIError(
            f"Failed to parse package.json: {exc.msg} (line {exc.lineno})",
            code="PACKAGE_JSON_INVALID",
            hint=f"Check {path} for syntax errors.",
        ) from exc
    if not isinstance(data, dict):
        raise PDIError(
            f"Expected a JSON object in {path}, got {type(data).__name__}",
            code="PACKAGE_JSON_INVALID",
        )
    return data


def all_dependencies(package_json: dict | None) -> dict[str, str]:
    """dependencies merged with devDependencies (dev wins on conflict)."""
    if not package_json:
        return {}
    return {
        **(package_json.get("dependencies") or {}),
        **(package_json.get("devDependencies") or {}),
    }
