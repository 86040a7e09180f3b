"""Tests for the bundled framework templates."""

import pytest

from passive_docs_index.frameworks import find_known_framework
from passive_docs_index.templates.loader import (
    PRIORITIES,
    TEMPLATE_CATEGORIES,
    get_template,
    has_template,
    list_templates,
    load_templates,
    templates_by_category,
    templates_by_priority,
)


class TestTemplates:
    def test_bundled_set(self):
        names = set(load_templates())
        assert {"hono", "drizzle", "better-auth", "zod", "react", "nextjs", "shadcn"} <= names
        assert len(names) == 14

    def test_hono(self):
        hono = get_template("hono")
        assert hono.display_name == "Hono"
        assert hono.version == "4.x"
        assert hono.library_id == "/honojs/hono"
        assert list(hono.structure) == ["api", "patterns"]
        assert hono.file_count == 7
        app = hono.structure["api"]["app.mdx"]
        assert "new Hono()" in app.query
        assert app.topics[0] == "app creation"
        assert hono.critical_patterns[0].correct == "c.req.raw.headers"

    def test_unknown(self):
        assert get_template("cobol") is None
        assert not has_template("cobol")

    @pytest.mark.parametrize("template", list_templates(), ids=lambda t: t.name)
    def test_every_template_is_well_formed(self, template):
        assert template.category in TEMPLATE_CATEGORIES
        assert template.priority in PRIORITIES
        assert template.library_id and template.library_id.startswith("/")
        assert template.file_count > 0
        for files in template.structure.values():
            for name, query in files.items():
                assert name.endswith(".mdx")
                assert query.query

    @pytest.mark.parametrize("name", ["hono", "zod", "react", "vitest", "tailwind"])
    def test_detectable_templates_share_the_framework_key(self, name):
        assert find_known_framework(name) is not None
        assert has_template(name)

    def test_filters(self):
        assert {t.name for t in templates_by_category("database")} == {"drizzle", "drizzle-v1"}
        assert all(t.priority == "P0" for t in templates_by_priority("P0"))
        assert get_template("hono") in templates_by_priority("P0")
