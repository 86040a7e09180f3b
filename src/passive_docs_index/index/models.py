"""Index value types. Built fresh on every regeneration, never mutated."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class IndexCategory:
    name: str
    files: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class IndexEntry:
    """One documented package; ``version`` is empty for internal categories."""

    package: str
    version: str
    categories: list[IndexCategory] = field(default_factory=list)


@dataclass(frozen=True)
class IndexSection:
    title: str
    root: str
    critical_instructions: list[str] = field(default_factory=list)
    entries: list[IndexEntry] = field(default_factory=list)
