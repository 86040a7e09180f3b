"""Turn raw Context7 output into the .mdx documents stored under .claude-docs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from passive_docs_index.templates.loader import FrameworkTemplate

_FRONTMATTER_RE = re.compile(r"^---[\s\S]*?---\n*", re.MULTILINE)
_HEADING_RE = re.compile(r"^#\s", re.MULTILINE)
_SECTION_SPLIT_RE = re.compile(r"(?=^#{1,3}\s)", re.MULTILINE)

PRIORITY_SECTION_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (r"overview", r"quick\s*start", r"getting\s*started", r"basic", r"usage", r"example", r"api")
]

DEFAULT_MAX_SECTION_LENGTH = 8000


@dataclass(frozen=True)
class DocQuery:
    """One file to fetch for a framework."""

    category: str
    file: str
    query: str
    library_id: str


def generate_template_queries(template: FrameworkTemplate) -> list[DocQuery]:
    """One query per file in the template's structure, in declaration order."""
    if not template.library_id:
        return []
    return [
        DocQuery(category=category, file=file, query=entry.query, library_id=template.library_id)
        for category, files in template.structure.items()
        for file, entry in files.items()
    ]


def title_from_filename(file: str) -> str:
    """``error-handling.mdx`` -> ``Error handling``."""
    title = file.replace(".mdx", "", 1).replace("-", " ")
    return title[:1].upper() + title[1:]


def _frontmatter(display_name: str, version: str, source: str, category: str, today: date) -> str:
    return "\n".join([
        "---",
        f"# Part of Passive Docs Index for {display_name}@{version}",
        f"# Source: {source}",
        f"# Last updated: {today.isoformat()}",
        f"# Category: {category}",
        "---",
        "",
    ])


def process_context7_response(
    raw: str,
    framework: str,
    version: str,
    category: str,
    file: str,
    library_id: str | None = None,
    today: date | None = None,
) -> str:
    """Prefix our frontmatter, dropping any the response carried.

    A top-level heading derived from the file name is added when the
    content has none.
    """
    header = _frontmatter(
        framework, version, f"Context7 ({library_id or 'manual'})", category, today or date.today(),
    )
    content = _FRONTMATTER_RE.sub("", raw, count=1)
    if not _HEADING_RE.search(content):
        content = f"# {title_from_filename(file)}\n\n{content}"
    return header + content


def placeholder_doc(
    display_name: str,
    slug: str,
    version: str,
    category: str,
    file: str,
    query: str,
    library_id: str | None = None,
    today: date | None = None,
) -> str:
    """Stand-in document written when no source could provide content."""
    header = _frontmatter(
        display_name, version, "Placeholder (needs CONTEXT7_API_KEY)", category, today or date.today(),
    )
    return header + (
        f"\n# {title_from_filename(file)}\n"
        "\n"
        "> This is a placeholder document. Set CONTEXT7_API_KEY and run `pdi update` "
        "to fetch real content.\n"
        "\n"
        "## Query for Context7\n"
        "\n"
        "```\n"
        f"Library ID: {library_id or 'N/A'}\n"
        f"Query: {query}\n"
        "```\n"
        "\n"
        "## Setup Instructions\n"
        "\n"
        "1. Get your free API key from https://context7.com\n"
        "2. Set the environment variable:\n"
        "   ```bash\n"
        "   export CONTEXT7_API_KEY=ctx7sk-...\n"
        "   ```\n"
        "3. Update docs:\n"
        "   ```bash\n"
        f"   pdi update {slug}\n"
        "   ```\n"
    )


def extract_relevant_sections(content: str, max_length: int = DEFAULT_MAX_SECTION_LENGTH) -> str:
    """Trim content to ``max_length``, keeping overview/usage/example sections first."""
    if len(content) <= max_length:
        return content

    prioritized: list[str] = []
    remaining: list[str] = []
    for section in _SECTION_SPLIT_RE.split(content):
        if not section:
            continue
        if any(p.search(section) for p in PRIORITY_SECTION_PATTERNS):
            prioritized.append(section)
        else:
            remaining.append(section)

    result = ""
    for section in prioritized + remaining:
        if len(result) + len(section) <= max_length:
            result += section
        elif not result:
            return section[:max_length]
        else:
            break
    return result
