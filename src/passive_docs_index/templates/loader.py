"""Load framework templates from the bundled frameworks.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources

import yaml

TEMPLATE_CATEGORIES = (
    "backend", "frontend", "database", "auth", "validation",
    "styling", "ui", "build", "testing",
)
PRIORITIES = ("P0", "P1", "P2")


@dataclass(frozen=True)
class FileQuery:
    query: str
    topics: tuple[str, ...] = ()


@dataclass(frozen=True)
class CriticalPattern:
    pattern: str
    warning: str
    correct: str


@dataclass(frozen=True)
class FrameworkTemplate:
    name: str
    display_name: str
    version: str
    source: str
    category: str
    priority: str
    description: str
    structure: dict[str, dict[str, FileQuery]] = field(default_factory=dict)
    library_id: str | None = None
    critical_patterns: tuple[CriticalPattern, ...] = ()

    @property
    def file_count(self) -> int:
        return sum(len(files) for files in self.structure.values())

    @classmethod
    def from_dict(cls, name: str, data: dict) -> FrameworkTemplate:
        structure = {
            category: {
                file: FileQuery(query=entry["query"], topics=tuple(entry.get("topics") or ()))
                for file, entry in files.items()
            }
            for category, files in (data.get("structure") or {}).items()
        }
        patterns = tuple(
            CriticalPattern(p["pattern"], p["warning"], p["correct"])
            for p in data.get("criticalPatterns") or ()
        )
        return cls(
            name=name,
            display_name=data["displayName"],
            version=str(data["version"]),
            source=data.get("source", "context7"),
            category=data["category"],
            priority=data["priority"],
            description=data.get("description", ""),
            structure=structure,
            library_id=data.get("libraryId"),
            critical_patterns=patterns,
        )


@lru_cache(maxsize=1)
def load_templates() -> dict[str, FrameworkTemplate]:
    """Parse frameworks.yaml once; keys keep the file's order."""
    text = resources.files("passive_docs_index.templates").joinpath("frameworks.yaml").read_text(
        encoding="utf-8"
    )
    raw = yaml.safe_load(text) or {}
    return {name: FrameworkTemplate.from_dict(name, data) for name, data in raw.items()}


def get_template(name: str) -> FrameworkTemplate | None:
    return load_templates().get(name)


def has_template(name: str) -> bool:
    return name in load_templates()


def list_templates() -> list[FrameworkTemplate]:
    return list(load_templates().values())


def templates_by_category(category: str) -> list[FrameworkTemplate]:
    return [t for t in load_templates().values() if t.category == category]


def templates_by_priority(priority: str) -> list[FrameworkTemplate]:
    return [t for t in load_templates().values() if t.priority == priority]
