"""Tests for injecting the index block into CLAUDE.md."""

from passive_docs_index.index import BEGIN_MARKER, END_MARKER
from passive_docs_index.index.claudemd import (
    extract_index,
    read_claude_md,
    splice_block,
    update_claude_md_index,
)
from passive_docs_index.index.codec import generate_block
from passive_docs_index.index.models import IndexCategory, IndexEntry, IndexSection


def _sections(version="4.x"):
    return [IndexSection(
        title="Framework Docs",
        root=".claude-docs/frameworks",
        critical_instructions=["Read docs first"],
        entries=[IndexEntry("hono", version, [IndexCategory("api", ["app.mdx"])])],
    )]


class TestSpliceBlock:
    def test_appends_when_no_markers(self):
        block = generate_block(_sections())
        result = splice_block("# My Project\n\nNotes.\n\n", block)
        assert result == "# My Project\n\nNotes.\n\n---\n\n## Docs Index\n\n" + block + "\n"

    def test_replaces_between_markers(self):
        existing = f"# Top\n\n{BEGIN_MARKER}\nold index\n{END_MARKER}\n\n## Footer\n"
        block = generate_block(_sections())
        result = splice_block(existing, block)
        assert result == f"# Top\n\n{block}\n\n## Footer\n"

    def test_out_of_order_markers_treated_as_missing(self):
        existing = f"{END_MARKER}\nstray\n{BEGIN_MARKER}\n"
        result = splice_block(existing, "BLOCK")
        assert result.endswith("## Docs Index\n\nBLOCK\n")
        assert result.startswith(existing.rstrip())

    def test_idempotent_with_fallback_comment(self):
        block = generate_block(_sections(), {"hono": "/honojs/hono"})
        once = splice_block("# Title\n\nIntro.\n", block)
        twice = splice_block(once, block)
        assert twice == once
        assert twice.count("MCP Fallback") == 1

    def test_old_fallback_replaced_by_new_mappings(self):
        old = generate_block(_sections(), {"hono": "/honojs/hono"})
        new = generate_block(_sections("5.x"), {"zod": "/colinhacks/zod"})
        result = splice_block(f"# T\n\n{old}\n\nTail.\n", new)
        assert "hono=/honojs/hono" not in result
        assert "zod=/colinhacks/zod" in result
        assert result.endswith("\n\nTail.\n")


class TestExtractIndex:
    def test_extract(self):
        content = f"intro\n{BEGIN_MARKER}\n  [A]|root:r  \n{END_MARKER}\n"
        assert extract_index(content) == "[A]|root:r"

    def test_missing_markers(self):
        assert extract_index("no markers here") is None
        assert extract_index(f"{BEGIN_MARKER} only") is None


class TestUpdateClaudeMd:
    def test_creates_new_file(self, tmp_path):
        result = update_claude_md_index(tmp_path, _sections(), {"hono": "/honojs/hono"})
        assert result.created
        content = read_claude_md(tmp_path)
        assert content.startswith("# CLAUDE.md\n")
        assert "## Docs Index" in content
        assert extract_index(content).startswith("[Framework Docs]")

    def test_updates_existing_preserving_content(self, tmp_path):
        (tmp_path / "CLAUDE.md").write_text("# Rules\n\nUse tabs.\n", encoding="utf-8")
        result = update_claude_md_index(tmp_path, _sections())
        assert result.updated and not result.created
        content = read_claude_md(tmp_path)
        assert content.startswith("# Rules\n\nUse tabs.\n")
        assert BEGIN_MARKER in content

    def test_crlf_outside_block_preserved(self, tmp_path):
        original = f"# Rules\r\n\r\n{BEGIN_MARKER}\nold\n{END_MARKER}\r\nTail\r\n"
        (tmp_path / "CLAUDE.md").write_bytes(original.encode("utf-8"))
        update_claude_md_index(tmp_path, _sections())
        raw = (tmp_path / "CLAUDE.md").read_bytes().decode("utf-8")
        assert raw.startswith("# Rules\r\n\r\n")
        assert raw.endswith(f"{END_MARKER}\r\nTail\r\n")

    def test_read_missing(self, tmp_path):
        assert read_claude_md(tmp_path) is None
