"""Validate config.json against the expected shape.

Collects every problem in one pass rather than stopping at the first, so
the user can fix them all at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from passive_docs_index.errors import ValidationIssue

VALID_PROJECT_TYPES = {"backend", "frontend", "fullstack", "library", "cli"}
VALID_SOURCES = {"context7", "template", "manual"}
VALID_PROVIDERS = {"context7", "firecrawl"}

_TYPE_NAMES = {str: "string", bool: "boolean", dict: "object", list: "array"}


@dataclass
class ValidationResult:
    """Result of a config validation run."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return len(self.issues) == 0

    def add(self, path: str, message: str, expected: str | None = None) -> None:
        self.issues.append(ValidationIssue(path=path, message=message, expected=expected))

    def summary(self) -> str:
        if self.passed:
            return "Config Validation: OK"
        lines = [f"Config Validation: {len(self.issues)} issue(s)"]
        lines.extend(issue.format() for issue in self.issues)
        return "\n".join(lines)


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return _TYPE_NAMES.get(type(value), type(value).__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require(
    result: ValidationResult, data: dict, key: str, path: str, kind: type | str,
) -> Any:
    """Check ``data[key]`` exists with the right type; return it or None."""
    full = f"{path}.{key}" if path else key
    expected = kind if isinstance(kind, str) else _TYPE_NAMES[kind]
    if key not in data:
        result.add(full, "Required", expected)
        return None
    value = data[key]
    ok = _is_number(value) if kind == "number" else isinstance(value, kind)
    if not ok:
        result.add(full, f"Invalid type: got {_describe(value)}", expected)
        return None
    return value


def _enum(result: ValidationResult, value: Any, path: str, allowed: set[str]) -> None:
    if value is not None and value not in allowed:
        result.add(path, f"Invalid value '{value}'", " | ".join(sorted(allowed)))


def _validate_framework(result: ValidationResult, name: str, fw: Any) -> None:
    path = f"frameworks.{name}"
    if not isinstance(fw, dict):
        result.add(path, f"Invalid type: got {_describe(fw)}", "object")
        return
    _require(result, fw, "version", path, str)
    source = _require(result, fw, "source", path, str)
    _enum(result, source, f"{path}.source", VALID_SOURCES)
    _require(result, fw, "lastUpdate", path, str)
    _require(result, fw, "files", path, "number")
    if "libraryId" in fw and not isinstance(fw["libraryId"], str):
        result.add(f"{path}.libraryId", f"Invalid type: got {_describe(fw['libraryId'])}", "string")
    if "categories" in fw and not isinstance(fw["categories"], list):
        result.add(f"{path}.categories", f"Invalid type: got {_describe(fw['categories'])}", "array")


def validate_config(data: Any) -> ValidationResult:
    """Validate a parsed config.json document."""
    result = ValidationResult()
    if not isinstance(data, dict):
        result.add("(root)", f"Invalid type: got {_describe(data)}", "object")
        return result

    _require(result, data, "version", "", str)

    project = _require(result, data, "project", "", dict)
    if project is not None:
        _require(result, project, "name", "project", str)
        ptype = _require(result, project, "type", "project", str)
        _enum(result, ptype, "project.type", VALID_PROJECT_TYPES)

    sync = _require(result, data, "sync", "", dict)
    if sync is not None:
        if "lastSync" not in sync:
            result.add("sync.lastSync", "Required", "string | null")
        elif sync["lastSync"] is not None and not isinstance(sync["lastSync"], str):
            result.add("sync.lastSync", f"Invalid type: got {_describe(sync['lastSync'])}", "string | null")
        _require(result, sync, "autoSyncOnInstall", "sync", bool)

    frameworks = _require(result, data, "frameworks", "", dict)
    if frameworks is not None:
        for name, fw in frameworks.items():
            _validate_framework(result, name, fw)

    internal = _require(result, data, "internal", "", dict)
    if internal is not None:
        _require(result, internal, "enabled", "internal", bool)
        _require(result, internal, "categories", "internal", list)
        _require(result, internal, "totalFiles", "internal", "number")

    mcp = _require(result, data, "mcp", "", dict)
    if mcp is not None:
        _require(result, mcp, "fallbackEnabled", "mcp", bool)
        provider = _require(result, mcp, "preferredProvider", "mcp", str)
        _enum(result, provider, "mcp.preferredProvider", VALID_PROVIDERS)
        _require(result, mcp, "cacheHours", "mcp", "number")
        mappings = mcp.get("libraryMappings")
        if mappings is not None:
            if not isinstance(mappings, dict):
                result.add("mcp.libraryMappings", f"Invalid type: got {_describe(mappings)}", "object")
            else:
                for key, lib_id in mappings.items():
                    if not isinstance(lib_id, str):
                        result.add(f"mcp.libraryMappings.{key}", f"Invalid type: got {_describe(lib_id)}", "string")

    limits = _require(result, data, "limits", "", dict)
    if limits is not None:
        for key in ("maxIndexKb", "maxDocsKb", "maxFilesPerFramework"):
            _require(result, limits, key, "limits", "number")

    return result
