"""Tests for the user-level API key store."""

import json
import os

from conftest import write_json
from passive_docs_index.auth import (
    load_api_key_from_config,
    read_global_config,
    remove_api_key,
    save_api_key,
    validate_key_format,
)
from passive_docs_index.paths import global_config_path


class TestValidateKeyFormat:
    def test_valid(self):
        assert validate_key_format("ctx7sk-abc123") is None

    def test_empty(self):
        assert validate_key_format("") == "API key is required"

    def test_wrong_prefix(self):
        assert "should start with ctx7" in validate_key_format("sk-abc")


class TestGlobalConfig:
    def test_missing_is_empty(self):
        assert read_global_config() == {}

    def test_unreadable_is_empty(self):
        path = global_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("not json", encoding="utf-8")
        assert read_global_config() == {}

    def test_non_object_is_empty(self):
        write_json(global_config_path(), ["ctx7sk-abc"])
        assert read_global_config() == {}

    def test_save_keeps_other_keys(self):
        write_json(global_config_path(), {"theme": "dark"})
        save_api_key("ctx7sk-abc")
        data = json.loads(global_config_path().read_text(encoding="utf-8"))
        assert data["theme"] == "dark"
        assert data["apiKey"] == "ctx7sk-abc"
        assert "configuredAt" in data

    def test_remove(self):
        assert not remove_api_key()
        save_api_key("ctx7sk-abc")
        assert remove_api_key()
        assert read_global_config() == {}


class TestLoadApiKey:
    def test_exports_stored_key(self, monkeypatch):
        save_api_key("ctx7sk-stored")
        load_api_key_from_config()
        assert os.environ["CONTEXT7_API_KEY"] == "ctx7sk-stored"

    def test_env_wins(self, monkeypatch):
        monkeypatch.setenv("CONTEXT7_API_KEY", "ctx7sk-env")
        save_api_key("ctx7sk-stored")
        load_api_key_from_config()
        assert os.environ["CONTEXT7_API_KEY"] == "ctx7sk-env"

    def test_nothing_stored(self):
        load_api_key_from_config()
        assert "CONTEXT7_API_KEY" not in os.environ
