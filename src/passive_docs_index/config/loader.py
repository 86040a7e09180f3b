"""Load and save .claude-docs/config.json."""

from __future__ import annotations

import copy
import json
from pathlib import Path

from passive_docs_index.config.validator import validate_config
from passive_docs_index.errors import ConfigError, NotInitializedError
from passive_docs_index.paths import config_path

CONFIG_VERSION = "1.0.0"

DEFAULT_CONFIG: dict = {
    "version": CONFIG_VERSION,
    "project": {"name": "", "type": "backend"},
    "sync": {"lastSync": None, "autoSyncOnInstall": True},
    "frameworks": {},
    "internal": {"enabled": False, "categories": [], "totalFiles": 0},
    "mcp": {
        "fallbackEnabled": True,
        "preferredProvider": "context7",
        "libraryMappings": {},
        "cacheHours": 168,
    },
    "limits": {"maxIndexKb": 4, "maxDocsKb": 80, "maxFilesPerFramework": 20},
}

_REINIT_HINT = "Fix the file by hand or run `pdi init --force` to recreate it."


def config_exists(root: Path) -> bool:
    return config_path(root).is_file()


def create_default_config(project_name: str, project_type: str) -> dict:
    """Fresh config for a newly initialized project."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["project"] = {"name": project_name, "type": project_type}
    return config


def load_config(root: Path) -> dict | None:
    """Load and validate config.json.

    Returns None when the project is not initialized. Raises ConfigError
    for unparseable JSON or a document with the wrong shape.
    """
    path = config_path(root)
    if not path.is_file():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigError(
            f"Config file contains invalid JSON: {exc.msg} (line {exc.lineno})",
            config_path=str(path),
            hint=_REINIT_HINT,
            cause=exc,
        ) from exc

    result = validate_config(data)
    if not result.passed:
        raise ConfigError(
            f"Config file has {len(result.issues)} validation issue(s)",
            config_path=str(path),
            validation_issues=result.issues,
            hint=_REINIT_HINT,
        )
    return data


def require_config(root: Path) -> dict:
    """Like load_config, but a missing config is an error."""
    config = load_config(root)
    if config is None:
        raise NotInitializedError()
    return config


def save_config(root: Path, config: dict) -> Path:
    """Write config.json with consistent formatting."""
    path = config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
        f.write("\n")
    return path
