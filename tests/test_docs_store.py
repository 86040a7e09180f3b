"""Tests for the .claude-docs store and index building from disk."""

from conftest import framework_record
from passive_docs_index.docs.store import (
    GITIGNORE_ENTRY,
    calculate_docs_size,
    format_size,
    read_all_framework_docs,
    read_framework_docs,
    read_internal_docs,
    remove_framework_docs,
    update_gitignore,
    write_doc_file,
    write_internal_doc_file,
)
from passive_docs_index.index.builder import (
    DEFAULT_FRAMEWORK_CRITICALS,
    build_sections,
    refresh_index,
    sections_from_disk,
)
from passive_docs_index.index.claudemd import extract_index, read_claude_md
from passive_docs_index.index.codec import generate_index, parse_index


class TestDocFiles:
    def test_write_and_read(self, tmp_path):
        path = write_doc_file(tmp_path, "hono", "api", "app.mdx", "# App\n")
        assert path == tmp_path / ".claude-docs" / "frameworks" / "hono" / "api" / "app.mdx"
        write_doc_file(tmp_path, "hono", "api", "routing.mdx", "# Routing\n")
        write_doc_file(tmp_path, "hono", "patterns", "errors.mdx", "# Errors\n")

        docs = read_framework_docs(tmp_path, "hono")
        assert list(docs) == ["api", "patterns"]
        assert [d.name for d in docs["api"]] == ["app.mdx", "routing.mdx"]
        assert docs["api"][0].size_bytes == len("# App\n")
        assert docs["api"][0].framework == "hono"

    def test_only_mdx_files_are_read(self, tmp_path):
        write_doc_file(tmp_path, "zod", "schemas", "a.mdx", "x")
        (tmp_path / ".claude-docs/frameworks/zod/schemas/notes.txt").write_text("x")
        docs = read_framework_docs(tmp_path, "zod")
        assert [d.name for d in docs["schemas"]] == ["a.mdx"]

    def test_read_missing(self, tmp_path):
        assert read_framework_docs(tmp_path, "hono") == {}
        assert read_all_framework_docs(tmp_path) == {}
        assert read_internal_docs(tmp_path) == {}

    def test_remove(self, tmp_path):
        write_doc_file(tmp_path, "hono", "api", "app.mdx", "x")
        assert remove_framework_docs(tmp_path, "hono")
        assert not remove_framework_docs(tmp_path, "hono")
        assert read_all_framework_docs(tmp_path) == {}

    def test_sizes(self, tmp_path):
        write_doc_file(tmp_path, "hono", "api", "app.mdx", "a" * 100)
        write_doc_file(tmp_path, "zod", "schemas", "s.mdx", "b" * 50)
        write_internal_doc_file(tmp_path, "database", "queries.mdx", "c" * 25)
        sizes = calculate_docs_size(tmp_path)
        assert sizes.frameworks == {"hono": 100, "zod": 50}
        assert sizes.internal == 25
        assert sizes.total == 175

    def test_format_size(self):
        assert format_size(512) == "512B"
        assert format_size(2048) == "2.0KB"
        assert format_size(3 * 1024 * 1024) == "3.00MB"


class TestGitignore:
    def test_creates(self, tmp_path):
        assert update_gitignore(tmp_path)
        assert GITIGNORE_ENTRY in (tmp_path / ".gitignore").read_text()

    def test_appends_once(self, tmp_path):
        (tmp_path / ".gitignore").write_text("node_modules/\n")
        assert update_gitignore(tmp_path)
        assert not update_gitignore(tmp_path)
        content = (tmp_path / ".gitignore").read_text()
        assert content.startswith("node_modules/\n\n# PDI temp files\n")
        assert content.count(GITIGNORE_ENTRY) == 1


class TestBuildSections:
    def test_empty(self):
        assert build_sections("f", "i", {}, {}) == []

    def test_frameworks_and_internal(self):
        sections = build_sections(
            ".claude-docs/frameworks",
            ".claude-docs/internal",
            {"hono": {"version": "4.x", "categories": {"api": ["app.mdx"]}}},
            {"database": ["queries.mdx"], "auth": ["session.mdx"]},
        )
        assert [s.title for s in sections] == ["Framework Docs", "Internal Patterns"]
        assert sections[0].critical_instructions == DEFAULT_FRAMEWORK_CRITICALS
        internal = sections[1].entries
        assert [(e.package, e.version) for e in internal] == [("database", ""), ("auth", "")]
        assert internal[1].categories[0].name == "auth"

    def test_generated_text_parses_back(self):
        sections = build_sections(
            "f", "i",
            {"hono": {"version": "4.x", "categories": {"api": ["app.mdx", "routing.mdx"]}}},
            {"database": ["queries.mdx"]},
        )
        text = generate_index(sections)
        assert parse_index(text) == sections
        assert generate_index(parse_index(text)) == text

    def test_custom_criticals(self):
        sections = build_sections("f", "i", {"hono": {"version": "4.x", "categories": {}}}, {}, ["Only this"])
        assert sections[0].critical_instructions == ["Only this"]

    def test_empty_criticals_are_kept(self):
        sections = build_sections(
            "f", "i",
            {"hono": {"version": "4.x", "categories": {"api": ["app.mdx"]}}},
            {"database": ["queries.mdx"]},
            framework_criticals=[],
            internal_criticals=[],
        )
        assert [s.critical_instructions for s in sections] == [[], []]
        assert "CRITICAL" not in generate_index(sections)


class TestRefreshIndex:
    def test_from_disk(self, tmp_path, config):
        write_doc_file(tmp_path, "hono", "api", "app.mdx", "# App\n")
        write_doc_file(tmp_path, "stale-dir", "api", "x.mdx", "# X\n")
        write_internal_doc_file(tmp_path, "database", "queries.mdx", "# Q\n")
        config["frameworks"]["hono"] = framework_record()
        config["mcp"]["libraryMappings"] = {"hono": "/honojs/hono"}

        sections = sections_from_disk(tmp_path, config)
        assert [e.package for e in sections[0].entries] == ["hono"]

        result, size_kb = refresh_index(tmp_path, config)
        assert result.created
        assert size_kb > 0
        content = read_claude_md(tmp_path)
        index = extract_index(content)
        assert "|hono@4.x|api:{app.mdx}" in index
        assert "|database@|database:{queries.mdx}" in index
        assert "stale-dir" not in index
        assert "hono=/honojs/hono" in content
