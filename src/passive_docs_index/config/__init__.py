"""Project configuration (.claude-docs/config.json)."""

from passive_docs_index.config.loader import (
    DEFAULT_CONFIG,
    config_exists,
    create_default_config,
    load_config,
    require_config,
    save_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "config_exists",
    "create_default_config",
    "load_config",
    "require_config",
    "save_config",
]
