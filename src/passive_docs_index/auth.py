"""User-level API key storage (~/.config/pdi/config.json)."""

from __future__ import annotations

import json
import logging
import os

from passive_docs_index.config.updater import utc_now_iso
from passive_docs_index.context7.client import API_KEY_ENV
from passive_docs_index.paths import global_config_path

logger = logging.getLogger(__name__)

API_KEY_PREFIX = "ctx7"


def read_global_config() -> dict:
    """Return the global config, or {} when missing or unreadable."""
    path = global_config_path()
    if not path.is_file():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable global config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def write_global_config(config: dict) -> None:
    path = global_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
        f.write("\n")


def validate_key_format(key: str) -> str | None:
    """Return an error message for a malformed key, or None if it looks valid."""
    if not key:
        return "API key is required"
    if not key.startswith(API_KEY_PREFIX):
        return f"Invalid API key format (should start with {API_KEY_PREFIX})"
    return None


def save_api_key(key: str) -> None:
    config = read_global_config()
    config["apiKey"] = key
    config["configuredAt"] = utc_now_iso()
    write_global_config(config)


def remove_api_key() -> bool:
    """Forget the stored key. Returns False if none was stored."""
    config = read_global_config()
    if "apiKey" not in config:
        return False
    config.pop("apiKey", None)
    config.pop("configuredAt", None)
    write_global_config(config)
    return True


def load_api_key_from_config() -> None:
    """Export the stored key as CONTEXT7_API_KEY unless the env already has one."""
    if os.environ.get(API_KEY_ENV):
        return
    key = read_global_config().get("apiKey")
    if key:
        os.environ[API_KEY_ENV] = key
