"""CLAUDE.md splice: inject or replace the index block.

Content before the begin marker and after the end marker (plus any MCP
fallback comment directly following it) is preserved byte for byte.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from passive_docs_index.index import BEGIN_MARKER, END_MARKER
from passive_docs_index.index.codec import generate_block
from passive_docs_index.index.models import IndexSection
from passive_docs_index.paths import claude_md_path

NEW_FILE_TEMPLATE = """# CLAUDE.md

This file provides guidance to Claude Code when working with this repository.

---

## Docs Index

{block}
"""

_APPEND_SEPARATOR = "\n\n---\n\n## Docs Index\n\n"
_TRAILING_FALLBACK_RE = re.compile(r"^\n*<!-- MCP Fallback:[^>]+-->")


@dataclass
class SpliceResult:
    path: Path
    created: bool = False
    updated: bool = False


def _read_exact(path: Path) -> str:
    # newline="" keeps CRLF files intact
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def read_claude_md(root: Path) -> str | None:
    path = claude_md_path(root)
    if not path.exists():
        return None
    return _read_exact(path)


def _marker_span(content: str) -> tuple[int, int] | None:
    begin = content.find(BEGIN_MARKER)
    end = content.find(END_MARKER)
    if begin == -1 or end == -1 or begin >= end:
        return None
    return begin, end


def extract_index(content: str) -> str | None:
    """Return the stripped text between the markers, or None."""
    span = _marker_span(content)
    if span is None:
        return None
    begin, end = span
    return content[begin + len(BEGIN_MARKER):end].strip()


def splice_block(existing: str, block: str) -> str:
    """Replace the marked region of ``existing`` with ``block``.

    With no (or out-of-order) markers the block is appended under a
    ``## Docs Index`` heading instead.
    """
    span = _marker_span(existing)
    if span is None:
        return existing.rstrip() + _APPEND_SEPARATOR + block + "\n"

    begin, end = span
    stop = end + len(END_MARKER)
    trailing = _TRAILING_FALLBACK_RE.match(existing[stop:])
    if trailing:
        stop += trailing.end()
    return existing[:begin] + block + existing[stop:]


def update_claude_md_index(
    root: Path,
    sections: list[IndexSection],
    library_mappings: dict[str, str] | None = None,
) -> SpliceResult:
    """Write the generated index into ``<root>/CLAUDE.md``."""
    path = claude_md_path(root)
    block = generate_block(sections, library_mappings)

    if not path.exists():
        path.write_text(NEW_FILE_TEMPLATE.format(block=block), encoding="utf-8", newline="")
        return SpliceResult(path=path, created=True)

    existing = _read_exact(path)
    path.write_text(splice_block(existing, block), encoding="utf-8", newline="")
    return SpliceResult(path=path, updated=True)
