"""Build index sections from docs on disk and write them into CLAUDE.md."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from passive_docs_index.docs.store import DocFile, read_all_framework_docs, read_internal_docs
from passive_docs_index.index.claudemd import SpliceResult, update_claude_md_index
from passive_docs_index.index.codec import index_size_kb
from passive_docs_index.index.models import IndexCategory, IndexEntry, IndexSection
from passive_docs_index.paths import FRAMEWORKS_ROOT, INTERNAL_ROOT

DEFAULT_FRAMEWORK_CRITICALS = [
    "Prefer retrieval-led reasoning over pre-training-led reasoning",
    "Read the relevant .mdx files BEFORE writing code that uses these libraries",
]
DEFAULT_INTERNAL_CRITICALS = [
    "Follow these project-specific patterns for consistency",
]


def build_sections(
    frameworks_root: str,
    internal_root: str,
    frameworks: dict[str, dict[str, Any]],
    internal: dict[str, list[str]],
    framework_criticals: list[str] | None = None,
    internal_criticals: list[str] | None = None,
) -> list[IndexSection]:
    """Turn framework and internal doc listings into zero, one or two sections.

    ``frameworks`` maps name -> {"version": str, "categories": {cat: [files]}}.
    Internal docs become one entry per category, each carrying only that
    category under its own name with an empty version.
    """
    sections: list[IndexSection] = []

    if frameworks:
        entries = [
            IndexEntry(
                package=name,
                version=data["version"],
                categories=[
                    IndexCategory(name=cat, files=list(files))
                    for cat, files in data["categories"].items()
                ],
            )
            for name, data in frameworks.items()
        ]
        sections.append(IndexSection(
            title="Framework Docs",
            root=frameworks_root,
            critical_instructions=list(
                DEFAULT_FRAMEWORK_CRITICALS if framework_criticals is None else framework_criticals
            ),
            entries=entries,
        ))

    if internal:
        entries = [
            IndexEntry(
                package=cat,
                version="",
                categories=[IndexCategory(name=cat, files=list(files))],
            )
            for cat, files in internal.items()
        ]
        sections.append(IndexSection(
            title="Internal Patterns",
            root=internal_root,
            critical_instructions=list(
                DEFAULT_INTERNAL_CRITICALS if internal_criticals is None else internal_criticals
            ),
            entries=entries,
        ))

    return sections


def frameworks_listing(
    frameworks: dict[str, dict[str, Any]],
    all_docs: dict[str, dict[str, list[DocFile]]],
) -> dict[str, dict[str, Any]]:
    """Configured frameworks joined with the files actually on disk."""
    listing: dict[str, dict[str, Any]] = {}
    for name, fw_config in frameworks.items():
        docs = all_docs.get(name, {})
        listing[name] = {
            "version": fw_config["version"],
            "categories": {cat: [d.name for d in files] for cat, files in docs.items()},
        }
    return listing


def internal_listing(internal_docs: dict[str, list[DocFile]]) -> dict[str, list[str]]:
    return {cat: [d.name for d in files] for cat, files in internal_docs.items()}


def sections_from_disk(root: Path, config: dict) -> list[IndexSection]:
    """Build sections for the current config and docs tree."""
    return build_sections(
        FRAMEWORKS_ROOT,
        INTERNAL_ROOT,
        frameworks_listing(config.get("frameworks") or {}, read_all_framework_docs(root)),
        internal_listing(read_internal_docs(root)),
    )


def refresh_index(root: Path, config: dict) -> tuple[SpliceResult, float]:
    """Regenerate the CLAUDE.md index. Returns the splice result and size in KB."""
    sections = sections_from_disk(root, config)
    mappings = (config.get("mcp") or {}).get("libraryMappings") or {}
    result = update_claude_md_index(root, sections, mappings)
    return result, index_size_kb(sections)
