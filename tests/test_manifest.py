"""Tests for package.json reading, framework detection and known-framework rules."""

import pytest

from conftest import write_json
from passive_docs_index.errors import PDIError
from passive_docs_index.frameworks import (
    find_known_framework,
    framework_to_npm,
    match_framework,
    npm_to_framework,
)
from passive_docs_index.manifest.detect import (
    clean_version,
    detect_dependencies,
    detect_project_type,
    get_major_version,
)
from passive_docs_index.manifest.reader import all_dependencies, read_package_json


class TestReadPackageJson:
    def test_reads(self, project, package_json):
        assert read_package_json(project) == package_json

    def test_missing(self, tmp_path):
        assert read_package_json(tmp_path) is None

    def test_invalid_json(self, tmp_path):
        (tmp_path / "package.json").write_text("{ nope", encoding="utf-8")
        with pytest.raises(PDIError) as exc_info:
            read_package_json(tmp_path)
        assert exc_info.value.code == "PACKAGE_JSON_INVALID"

    def test_not_an_object(self, tmp_path):
        write_json(tmp_path / "package.json", ["react"])
        with pytest.raises(PDIError, match="Expected a JSON object"):
            read_package_json(tmp_path)

    def test_all_dependencies_dev_wins(self):
        pj = {"dependencies": {"zod": "^3.0.0"}, "devDependencies": {"zod": "^4.0.0"}}
        assert all_dependencies(pj) == {"zod": "^4.0.0"}
        assert all_dependencies(None) == {}


class TestKnownFrameworks:
    def test_exact_and_prefix_rules(self):
        assert match_framework("hono").name == "hono"
        assert match_framework("@hono/zod-validator").name == "hono"
        assert match_framework("@tanstack/vue-query").name == "tanstack-query"
        assert match_framework("left-pad") is None

    def test_first_rule_wins(self):
        assert find_known_framework("drizzle").pattern == r"^drizzle-orm$"

    def test_framework_to_npm(self):
        mapping = framework_to_npm()
        assert mapping["hono"] == "hono"
        assert mapping["drizzle"] == "drizzle-orm"
        assert mapping["nextjs"] == "next"
        assert mapping["tanstack-query"] == "@tanstack/react-query"
        assert mapping["nestjs"] == "@nestjs/core"

    def test_npm_to_framework_skips_wildcards(self):
        mapping = npm_to_framework()
        assert mapping["drizzle-kit"].name == "drizzle"
        assert mapping["@prisma/client"].name == "prisma"
        assert not any("[" in name for name in mapping)
        assert "@hono/" not in mapping


class TestVersions:
    @pytest.mark.parametrize("raw,expected", [
        ("^18.2.0", "18.2.0"),
        ("~4.1.0", "4.1.0"),
        (">=1.0.0", "1.0.0"),
        ("4.0.0", "4.0.0"),
    ])
    def test_clean_version(self, raw, expected):
        assert clean_version(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("^18.2.0", "18.x"),
        ("0.44.1", "0.44"),
        ("5", "5.x"),
        ("latest", "latest"),
    ])
    def test_major_version(self, raw, expected):
        assert get_major_version(raw) == expected


class TestDetectDependencies:
    def test_detects_known_frameworks(self, package_json):
        detected = detect_dependencies(package_json)
        assert [d.framework.name for d in detected] == ["hono", "zod", "vitest"]
        hono = detected[0]
        assert hono.version == "4.6.0"
        assert hono.has_template

    def test_one_entry_per_framework(self):
        pj = {"dependencies": {"drizzle-orm": "^0.44.0"}, "devDependencies": {"drizzle-kit": "^0.31.0"}}
        detected = detect_dependencies(pj)
        assert len(detected) == 1
        assert detected[0].name == "drizzle-orm"

    def test_known_without_template(self):
        detected = detect_dependencies({"dependencies": {"express": "^5.0.0"}})
        assert detected[0].framework.name == "express"
        assert not detected[0].has_template

    def test_none(self):
        assert detect_dependencies(None) == []


class TestProjectType:
    @pytest.mark.parametrize("pj,expected", [
        ({"dependencies": {"hono": "1"}}, "backend"),
        ({"dependencies": {"react": "1"}}, "frontend"),
        ({"dependencies": {"react": "1", "hono": "1"}}, "fullstack"),
        ({"dependencies": {"next": "1", "react": "1"}}, "fullstack"),
        ({"main": "index.js", "dependencies": {"lodash": "1"}}, "library"),
        ({"bin": {"x": "cli.js"}}, "cli"),
        ({}, "backend"),
    ])
    def test_detection(self, pj, expected):
        assert detect_project_type(pj) == expected
