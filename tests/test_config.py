"""Tests for config.json loading, validation and updates."""

import json

import pytest

from conftest import framework_record, write_json
from passive_docs_index.config.loader import (
    CONFIG_VERSION,
    config_exists,
    create_default_config,
    load_config,
    require_config,
    save_config,
)
from passive_docs_index.config.updater import (
    remove_framework,
    set_library_mapping,
    update_framework,
    update_sync_time,
    utc_now_iso,
)
from passive_docs_index.config.validator import validate_config
from passive_docs_index.errors import ConfigError, NotInitializedError
from passive_docs_index.paths import config_path


class TestDefaultConfig:
    def test_shape(self, config):
        assert config["version"] == CONFIG_VERSION
        assert config["project"] == {"name": "demo-api", "type": "backend"}
        assert config["sync"] == {"lastSync": None, "autoSyncOnInstall": True}
        assert config["frameworks"] == {}
        assert config["limits"] == {"maxIndexKb": 4, "maxDocsKb": 80, "maxFilesPerFramework": 20}
        assert config["mcp"]["cacheHours"] == 168

    def test_copies_are_independent(self):
        a = create_default_config("a", "backend")
        b = create_default_config("b", "frontend")
        a["frameworks"]["hono"] = framework_record()
        assert b["frameworks"] == {}

    def test_default_validates(self, config):
        assert validate_config(config).passed


class TestLoadSave:
    def test_round_trip(self, tmp_path, config):
        path = save_config(tmp_path, config)
        assert path == config_path(tmp_path)
        assert path.read_text(encoding="utf-8").endswith("}\n")
        assert load_config(tmp_path) == config

    def test_missing_returns_none(self, tmp_path):
        assert not config_exists(tmp_path)
        assert load_config(tmp_path) is None

    def test_require_missing_raises(self, tmp_path):
        with pytest.raises(NotInitializedError) as exc_info:
            require_config(tmp_path)
        assert exc_info.value.code == "NOT_INITIALIZED"
        assert "pdi init" in exc_info.value.hint

    def test_invalid_json(self, tmp_path):
        path = config_path(tmp_path)
        path.parent.mkdir(parents=True)
        path.write_text('{"version": "1.0.0",\n  oops}', encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        err = exc_info.value
        assert err.message.startswith("Config file contains invalid JSON")
        assert "(line 2)" in err.message
        assert err.config_path == str(path)
        assert isinstance(err.cause, json.JSONDecodeError)
        assert err.hint

    def test_schema_violation(self, tmp_path, config):
        config["project"]["type"] = "mainframe"
        del config["limits"]
        write_json(config_path(tmp_path), config)
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        paths = [issue.path for issue in exc_info.value.validation_issues]
        assert paths == ["project.type", "limits"]
        assert "2 validation issue(s)" in exc_info.value.message


class TestValidator:
    def test_not_an_object(self):
        result = validate_config(["nope"])
        assert not result.passed
        assert result.issues[0].path == "(root)"
        assert result.issues[0].expected == "object"

    def test_collects_all_issues(self, config):
        config["version"] = 1
        config["sync"]["lastSync"] = 12
        config["sync"]["autoSyncOnInstall"] = "yes"
        config["mcp"]["preferredProvider"] = "other"
        result = validate_config(config)
        assert [i.path for i in result.issues] == [
            "version",
            "sync.lastSync",
            "sync.autoSyncOnInstall",
            "mcp.preferredProvider",
        ]
        assert result.issues[0].message == "Invalid type: got number"
        assert result.issues[0].expected == "string"

    def test_framework_record(self, config):
        config["frameworks"]["hono"] = framework_record(source="scraped", files="2")
        config["frameworks"]["zod"] = "4.x"
        paths = [i.path for i in validate_config(config).issues]
        assert paths == ["frameworks.hono.source", "frameworks.hono.files", "frameworks.zod"]

    def test_boolean_is_not_a_number(self, config):
        config["limits"]["maxIndexKb"] = True
        issue = validate_config(config).issues[0]
        assert issue.path == "limits.maxIndexKb"
        assert issue.message == "Invalid type: got boolean"

    def test_library_mappings(self, config):
        config["mcp"]["libraryMappings"] = {"hono": 5}
        assert validate_config(config).issues[0].path == "mcp.libraryMappings.hono"

    def test_summary(self, config):
        assert validate_config(config).summary() == "Config Validation: OK"
        del config["version"]
        summary = validate_config(config).summary()
        assert summary.startswith("Config Validation: 1 issue(s)")
        assert "  - version: Required, expected string" in summary


class TestUpdater:
    def test_update_framework_merges(self, config):
        with_hono = update_framework(config, "hono", framework_record())
        updated = update_framework(with_hono, "hono", {"files": 7})
        assert updated["frameworks"]["hono"]["files"] == 7
        assert updated["frameworks"]["hono"]["version"] == "4.x"
        assert with_hono["frameworks"]["hono"]["files"] == 2
        assert config["frameworks"] == {}

    def test_remove_framework_drops_mapping(self, config):
        config = update_framework(config, "hono", framework_record())
        config = set_library_mapping(config, "hono", "/honojs/hono")
        config = set_library_mapping(config, "zod", "/colinhacks/zod")
        removed = remove_framework(config, "hono")
        assert "hono" not in removed["frameworks"]
        assert removed["mcp"]["libraryMappings"] == {"zod": "/colinhacks/zod"}
        assert "hono" in config["frameworks"]

    def test_remove_unknown_is_noop(self, config):
        assert remove_framework(config, "nope") == config

    def test_update_sync_time(self, config):
        stamped = update_sync_time(config, "2026-02-01T00:00:00.000Z")
        assert stamped["sync"]["lastSync"] == "2026-02-01T00:00:00.000Z"
        assert config["sync"]["lastSync"] is None

    def test_utc_now_iso_format(self):
        stamp = utc_now_iso()
        assert stamp.endswith("Z")
        assert len(stamp.split(".")[1]) == 4  # three digits of millis plus Z
