"""On-disk docs store under .claude-docs/.

Layout:
    .claude-docs/frameworks/<framework>/<category>/<file>.mdx
    .claude-docs/internal/<category>/<file>.mdx
    .claude-docs/.cache/            (ignored by git)
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from passive_docs_index.paths import (
    CACHE_DIR,
    CLAUDE_DOCS_DIR,
    DOC_EXTENSION,
    FRAMEWORKS_DIR,
    INTERNAL_DIR,
    docs_dir,
    framework_dir,
    frameworks_dir,
    internal_dir,
)

GITIGNORE_ENTRY = f"{CLAUDE_DOCS_DIR}/{CACHE_DIR}/"
GITIGNORE_COMMENT = "# PDI temp files"


@dataclass
class DocFile:
    path: Path
    framework: str
    category: str
    name: str
    size_bytes: int


@dataclass
class DocsSize:
    frameworks: dict[str, int] = field(default_factory=dict)
    internal: int = 0
    total: int = 0


def write_doc_file(root: Path, framework: str, category: str, file_name: str, content: str) -> Path:
    """Write one framework doc, creating parent directories."""
    target = framework_dir(root, framework) / category / file_name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


def write_internal_doc_file(root: Path, category: str, file_name: str, content: str) -> Path:
    target = internal_dir(root) / category / file_name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


def remove_framework_docs(root: Path, framework: str) -> bool:
    target = framework_dir(root, framework)
    if not target.is_dir():
        return False
    shutil.rmtree(target)
    return True


def _read_category_dirs(base: Path, owner: str) -> dict[str, list[DocFile]]:
    result: dict[str, list[DocFile]] = {}
    if not base.is_dir():
        return result
    for category_dir in sorted(p for p in base.iterdir() if p.is_dir()):
        files = []
        for doc in sorted(category_dir.iterdir()):
            if doc.is_file() and doc.name.endswith(DOC_EXTENSION):
                files.append(DocFile(
                    path=doc,
                    framework=owner,
                    category=category_dir.name,
                    name=doc.name,
                    size_bytes=doc.stat().st_size,
                ))
        result[category_dir.name] = files
    return result


def read_framework_docs(root: Path, framework: str) -> dict[str, list[DocFile]]:
    """Docs for one framework keyed by category."""
    return _read_category_dirs(framework_dir(root, framework), framework)


def read_all_framework_docs(root: Path) -> dict[str, dict[str, list[DocFile]]]:
    base = frameworks_dir(root)
    if not base.is_dir():
        return {}
    return {
        fw_dir.name: read_framework_docs(root, fw_dir.name)
        for fw_dir in sorted(base.iterdir())
        if fw_dir.is_dir()
    }


def read_internal_docs(root: Path) -> dict[str, list[DocFile]]:
    return _read_category_dirs(internal_dir(root), "internal")


def calculate_docs_size(root: Path) -> DocsSize:
    """Sum .mdx sizes per framework, for internal docs, and overall."""
    sizes = DocsSize()
    base = docs_dir(root)
    if not base.is_dir():
        return sizes
    for doc in base.rglob(f"*{DOC_EXTENSION}"):
        if not doc.is_file():
            continue
        size = doc.stat().st_size
        parts = doc.relative_to(base).parts
        sizes.total += size
        if parts[0] == FRAMEWORKS_DIR and len(parts) >= 2:
            sizes.frameworks[parts[1]] = sizes.frameworks.get(parts[1], 0) + size
        elif parts[0] == INTERNAL_DIR:
            sizes.internal += size
    return sizes


def format_size(num_bytes: float) -> str:
    if num_bytes < 1024:
        return f"{int(num_bytes)}B"
    kb = num_bytes / 1024
    if kb < 1024:
        return f"{kb:.1f}KB"
    return f"{kb / 1024:.2f}MB"


def update_gitignore(root: Path) -> bool:
    """Ensure the cache directory is ignored. Returns True if the file changed."""
    gitignore = root / ".gitignore"
    block = f"{GITIGNORE_COMMENT}\n{GITIGNORE_ENTRY}\n"
    if not gitignore.exists():
        gitignore.write_text(block, encoding="utf-8")
        return True
    content = gitignore.read_text(encoding="utf-8")
    if GITIGNORE_ENTRY in content:
        return False
    gitignore.write_text(content.rstrip() + "\n\n" + block, encoding="utf-8")
    return True
