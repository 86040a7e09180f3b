"""Tests for the error hierarchy and Context7 error classification."""

import httpx
import pytest

from passive_docs_index.errors import (
    ConfigError,
    Context7Error,
    PDIError,
    ValidationIssue,
    classify_context7_error,
)


class TestErrorHierarchy:
    def test_pdi_error_fields(self):
        cause = ValueError("inner")
        err = PDIError("outer", code="X", hint="do this", cause=cause)
        assert str(err) == "outer"
        assert err.code == "X"
        assert err.hint == "do this"
        assert err.cause is cause

    def test_config_error_issues(self):
        err = ConfigError(
            "bad config",
            config_path="/p/.claude-docs/config.json",
            validation_issues=[ValidationIssue("limits", "Required", "object")],
        )
        assert isinstance(err, PDIError)
        assert err.code == "CONFIG_INVALID"
        assert err.format_validation_issues() == "  - limits: Required, expected object"
        assert ConfigError("x").format_validation_issues() == ""

    def test_context7_error_rejects_unknown_category(self):
        with pytest.raises(ValueError):
            Context7Error("x", category="weird")
        with pytest.raises(ValueError):
            Context7Error("x", source="carrier-pigeon")


class TestClassify:
    @pytest.mark.parametrize("message,category", [
        ("library_redirected: library moved (HTTP 301)", "redirect"),
        ("Unauthorized (HTTP 401): invalid API key", "auth"),
        ("HTTP 403 Forbidden", "auth"),
        ("Rate limit exceeded (HTTP 429): too many requests", "rate_limit"),
        ("fetch failed", "network"),
        ("mcp-cli call timed out after 60000ms", "network"),
        ("getaddrinfo ENOTFOUND context7.com", "network"),
        ("Library not found (HTTP 404)", "not_found"),
        ("No documentation found", "not_found"),
        ("something unexpected", "unknown"),
    ])
    def test_categories(self, message, category):
        assert classify_context7_error(message, source="http").category == category

    def test_hint_and_source(self):
        err = classify_context7_error("Unauthorized (HTTP 401)", source="http")
        assert err.source == "http"
        assert "pdi auth" in err.hint

    def test_unknown_has_no_hint(self):
        assert classify_context7_error("odd").hint is None

    def test_exception_becomes_cause(self):
        exc = httpx.ConnectError("connection refused")
        err = classify_context7_error(exc, source="http")
        assert err.category == "network"
        assert err.cause is exc

    def test_passthrough(self):
        original = Context7Error("x", category="auth", source="mcp")
        assert classify_context7_error(original) is original
