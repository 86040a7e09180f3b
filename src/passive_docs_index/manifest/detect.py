"""Detect known frameworks and the project type from package.json."""

from __future__ import annotations

import re
from dataclasses import dataclass

from passive_docs_index.frameworks import PROJECT_TYPE_INDICATORS, KnownFramework, match_framework
from passive_docs_index.manifest.reader import all_dependencies
from passive_docs_index.templates.loader import has_template

_RANGE_PREFIX_RE = re.compile(r"^[\^~>=<]+")


@dataclass
class DetectedDependency:
    name: str
    version: str
    framework: KnownFramework
    has_template: bool


def clean_version(version: str) -> str:
    """Strip range operators: ``^18.2.0`` -> ``18.2.0``."""
    return _RANGE_PREFIX_RE.sub("", version)


def get_major_version(version: str) -> str:
    """Docs version bucket: ``18.2.0`` -> ``18.x``, ``0.44.1`` -> ``0.44``."""
    parts = clean_version(version).split(".")
    m = re.match(r"\d+", parts[0])
    if not m:
        return clean_version(version)
    major = int(m.group())
    if major == 0 and len(parts) > 1:
        return f"{parts[0]}.{parts[1]}"
    return f"{major}.x"


def detect_dependencies(package_json: dict | None) -> list[DetectedDependency]:
    """Known frameworks among the dependencies, one per framework key."""
    detected: list[DetectedDependency] = []
    seen: set[str] = set()
    for name, version in all_dependencies(package_json).items():
        fw = match_framework(name)
        if fw is None or fw.name in seen:
            continue
        seen.add(fw.name)
        detected.append(DetectedDependency(
            name=name,
            version=clean_version(str(version)),
            framework=fw,
            has_template=has_template(fw.name),
        ))
    return detected


def detect_project_type(package_json: dict) -> str:
    deps = list(all_dependencies(package_json))
    indicators = PROJECT_TYPE_INDICATORS

    def has_any(kind: str) -> bool:
        return any(dep in indicators[kind] for dep in deps)

    if package_json.get("exports") or package_json.get("main"):
        if not (has_any("backend") or has_any("frontend") or has_any("fullstack")):
            return "library"
    if package_json.get("bin"):
        return "cli"
    if has_any("fullstack"):
        return "fullstack"
    backend, frontend = has_any("backend"), has_any("frontend")
    if backend and frontend:
        return "fullstack"
    if frontend:
        return "frontend"
    # Default when nothing matches is backend too
    return "backend"
