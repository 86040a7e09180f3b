"""Parse and generate the compressed index format.

Format (one item per line):
    [Section Title]|root:path
    |CRITICAL:instruction
    |package@version|category:{file1.mdx,file2.mdx}|category2:{file3.mdx}

Parsing never raises: lines that match none of the three shapes are
skipped, as are lines seen before the first section header.
"""

from __future__ import annotations

import re

from passive_docs_index.index import BEGIN_MARKER, END_MARKER, MCP_FALLBACK_PREFIX
from passive_docs_index.index.models import IndexCategory, IndexEntry, IndexSection

_SECTION_RE = re.compile(r"^\[([^\]]+)\]\|root:(.+)$")
_CRITICAL_RE = re.compile(r"^\|CRITICAL:(.+)$")
# Version may be empty: internal categories are written as ``|name@|name:{...}``
_ENTRY_RE = re.compile(r"^\|([^@|]+)@([^|]*)\|(.+)$")
_CATEGORY_RE = re.compile(r"([^:{|]+):\{([^}]+)\}")


def parse_index(content: str) -> list[IndexSection]:
    """Parse index text into sections in a single forward pass."""
    sections: list[IndexSection] = []
    current: IndexSection | None = None

    for line in content.split("\n"):
        if not line.strip():
            continue

        m = _SECTION_RE.match(line)
        if m:
            if current is not None:
                sections.append(current)
            current = IndexSection(title=m.group(1), root=m.group(2))
            continue

        if current is None:
            continue

        m = _CRITICAL_RE.match(line)
        if m:
            current.critical_instructions.append(m.group(1))
            continue

        m = _ENTRY_RE.match(line)
        if m:
            entry = _parse_entry(m.group(1), m.group(2), m.group(3))
            if entry is not None:
                current.entries.append(entry)

    if current is not None:
        sections.append(current)
    return sections


def _parse_entry(package: str, version: str, categories_str: str) -> IndexEntry | None:
    categories = [
        IndexCategory(name=name, files=[f.strip() for f in files.split(",")])
        for name, files in _CATEGORY_RE.findall(categories_str)
    ]
    if not categories:
        return None
    return IndexEntry(package=package, version=version, categories=categories)


def generate_index(sections: list[IndexSection]) -> str:
    """Render sections back to index text (no trailing newline)."""
    lines: list[str] = []
    for section in sections:
        lines.append(f"[{section.title}]|root:{section.root}")
        for instruction in section.critical_instructions:
            lines.append(f"|CRITICAL:{instruction}")
        for entry in section.entries:
            cats = "|".join(
                f"{cat.name}:{{{','.join(cat.files)}}}" for cat in entry.categories
            )
            lines.append(f"|{entry.package}@{entry.version}|{cats}")
    return "\n".join(lines)


def generate_block(
    sections: list[IndexSection],
    library_mappings: dict[str, str] | None = None,
) -> str:
    """Wrap the index in markers, plus the MCP fallback comment if any mappings."""
    lines = [BEGIN_MARKER, generate_index(sections), END_MARKER]
    if library_mappings:
        pairs = ", ".join(f"{name}={lib_id}" for name, lib_id in library_mappings.items())
        lines.append("")
        lines.append(MCP_FALLBACK_PREFIX)
        lines.append(f"     {pairs} -->")
    return "\n".join(lines)


def index_size_kb(sections: list[IndexSection]) -> float:
    """UTF-8 size of the marker-wrapped index in KB."""
    return len(generate_block(sections).encode("utf-8")) / 1024
