"""Structured error hierarchy for user-facing CLI messages.

Every error carries a machine-readable ``code`` and an optional ``hint``
that the CLI prints as a "Fix:" line. Chained exceptions are preserved
through ``__cause__``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

CONTEXT7_CATEGORIES = {"auth", "network", "rate_limit", "redirect", "not_found", "unknown"}
CONTEXT7_SOURCES = {"http", "mcp", "none"}


@dataclass
class ValidationIssue:
    """One schema problem found in config.json."""

    path: str
    message: str
    expected: str | None = None

    def format(self) -> str:
        expected = f", expected {self.expected}" if self.expected else ""
        return f"  - {self.path}: {self.message}{expected}"


class PDIError(Exception):
    """Base error for everything PDI reports to the user."""

    def __init__(
        self,
        message: str,
        code: str = "PDI_ERROR",
        hint: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class ConfigError(PDIError):
    """config.json is unreadable or does not match the expected shape."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        validation_issues: list[ValidationIssue] | None = None,
        hint: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code="CONFIG_INVALID", hint=hint, cause=cause)
        self.config_path = config_path
        self.validation_issues = validation_issues

    def format_validation_issues(self) -> str:
        if not self.validation_issues:
            return ""
        return "\n".join(issue.format() for issue in self.validation_issues)


class Context7Error(PDIError):
    """A documentation fetch failed; ``source`` names the transport."""

    def __init__(
        self,
        message: str,
        category: str = "unknown",
        source: str = "none",
        hint: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code="CONTEXT7_ERROR", hint=hint, cause=cause)
        if category not in CONTEXT7_CATEGORIES:
            raise ValueError(f"Unknown Context7 error category: {category}")
        if source not in CONTEXT7_SOURCES:
            raise ValueError(f"Unknown Context7 error source: {source}")
        self.category = category
        self.source = source


class NotInitializedError(PDIError):
    def __init__(self) -> None:
        super().__init__(
            "PDI not initialized in this project.",
            code="NOT_INITIALIZED",
            hint="Run `pdi init` to initialize.",
        )


# Checked in order; first match wins.
_CONTEXT7_RULES: list[tuple[str, re.Pattern[str], str]] = [
    (
        "redirect",
        re.compile(r"library_redirected|redirect", re.IGNORECASE),
        "The library ID has moved. Re-add the framework with --force.",
    ),
    (
        "auth",
        re.compile(r"\b401\b|\b403\b|unauthori[sz]ed|forbidden|invalid api key", re.IGNORECASE),
        "Check your Context7 API key. Run: pdi auth",
    ),
    (
        "rate_limit",
        re.compile(r"\b429\b|rate limit|too many requests", re.IGNORECASE),
        "Wait a minute and retry, or reduce the number of frameworks per run.",
    ),
    (
        "network",
        re.compile(
            r"fetch failed|failed to fetch|econnrefused|enotfound|econnreset|"
            r"timed? ?out|timeout|network|connect",
            re.IGNORECASE,
        ),
        "Check your internet connection and retry.",
    ),
    (
        "not_found",
        re.compile(r"\b404\b|not found|no documentation", re.IGNORECASE),
        "Verify the library ID exists on context7.com.",
    ),
]


def classify_context7_error(error: BaseException | str, source: str = "none") -> Context7Error:
    """Map a raw transport failure onto a categorized Context7Error."""
    if isinstance(error, Context7Error):
        return error
    message = str(error)
    cause = error if isinstance(error, BaseException) else None
    for category, pattern, hint in _CONTEXT7_RULES:
        if pattern.search(message):
            return Context7Error(message, category=category, source=source, hint=hint, cause=cause)
    return Context7Error(message, category="unknown", source=source, cause=cause)
