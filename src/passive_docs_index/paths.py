"""Project and user path resolution.

Everything PDI writes for a project lives under ``<project>/.claude-docs``.
The user-level API key store lives under ``~/.config/pdi``.

Environment variables:
    PDI_PROJECT_DIR: project root (default: current directory)
    PDI_CONFIG_HOME: user config directory (default: ~/.config/pdi)
"""

from __future__ import annotations

import os
from pathlib import Path

CLAUDE_DOCS_DIR = ".claude-docs"
FRAMEWORKS_DIR = "frameworks"
INTERNAL_DIR = "internal"
CACHE_DIR = ".cache"
CONFIG_FILE = "config.json"
CLAUDE_MD_FILE = "CLAUDE.md"
PACKAGE_JSON_FILE = "package.json"
DOC_EXTENSION = ".mdx"

# Display roots used in the index headers (always forward slashes)
FRAMEWORKS_ROOT = f"{CLAUDE_DOCS_DIR}/{FRAMEWORKS_DIR}"
INTERNAL_ROOT = f"{CLAUDE_DOCS_DIR}/{INTERNAL_DIR}"


def project_root(raw: Path | str | None = None) -> Path:
    """Return the project root from an explicit path, env, or the cwd."""
    if raw:
        return Path(raw).expanduser().resolve()
    env = os.environ.get("PDI_PROJECT_DIR")
    if env:
        return Path(env).expanduser().resolve()
    return Path.cwd()


def docs_dir(root: Path) -> Path:
    return root / CLAUDE_DOCS_DIR


def frameworks_dir(root: Path) -> Path:
    return docs_dir(root) / FRAMEWORKS_DIR


def framework_dir(root: Path, framework: str) -> Path:
    return frameworks_dir(root) / framework


def internal_dir(root: Path) -> Path:
    return docs_dir(root) / INTERNAL_DIR


def config_path(root: Path) -> Path:
    """Return the path to the project's config.json."""
    return docs_dir(root) / CONFIG_FILE


def claude_md_path(root: Path) -> Path:
    return root / CLAUDE_MD_FILE


def package_json_path(root: Path) -> Path:
    return root / PACKAGE_JSON_FILE


def global_config_dir() -> Path:
    """Return the user-level PDI config directory."""
    env = os.environ.get("PDI_CONFIG_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "pdi"


def global_config_path() -> Path:
    return global_config_dir() / CONFIG_FILE
