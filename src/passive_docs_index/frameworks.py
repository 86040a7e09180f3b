"""Canonical framework detection rules, the single source of truth.

Each rule maps an npm dependency name pattern to a framework key. Rules with
an exact ``^name$`` pattern can be inverted (framework -> npm package) and
drive the freshness check; prefix rules only help detection. Rules are
checked in order and the first match wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_REGEX_META = re.compile(r"[\[\]()*+?{}|]")


@dataclass(frozen=True)
class KnownFramework:
    pattern: str
    name: str
    display_name: str
    category: str
    library_id: str | None = None
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regex", re.compile(self.pattern))

    def matches(self, package_name: str) -> bool:
        return self._regex.search(package_name) is not None

    @property
    def npm_package(self) -> str | None:
        """The npm package for an exact ``^name$`` rule, else None."""
        if not (self.pattern.startswith("^") and self.pattern.endswith("$")):
            return None
        name = self.pattern[1:-1].replace("\\", "")
        if _REGEX_META.search(name):
            return None
        return name


def _fw(pattern: str, name: str, display: str, category: str, library_id: str | None = None) -> KnownFramework:
    return KnownFramework(pattern, name, display, category, library_id)


KNOWN_FRAMEWORKS: list[KnownFramework] = [
    # Backend
    _fw(r"^hono$", "hono", "Hono", "backend", "/honojs/hono"),
    _fw(r"^@hono\/", "hono", "Hono", "backend", "/honojs/hono"),
    _fw(r"^elysia$", "elysia", "Elysia", "backend", "/elysiajs/elysia"),
    _fw(r"^express$", "express", "Express", "backend", "/expressjs/express"),
    _fw(r"^fastify$", "fastify", "Fastify", "backend", "/fastify/fastify"),
    _fw(r"^@nestjs\/core$", "nestjs", "NestJS", "backend", "/nestjs/docs.nestjs.com"),
    # Database
    _fw(r"^drizzle-orm$", "drizzle", "Drizzle ORM", "database", "/drizzle-team/drizzle-orm"),
    _fw(r"^drizzle-kit$", "drizzle", "Drizzle ORM", "database", "/drizzle-team/drizzle-orm"),
    _fw(r"^prisma$", "prisma", "Prisma", "database", "/prisma/docs"),
    _fw(r"^@prisma\/client$", "prisma", "Prisma", "database", "/prisma/docs"),
    # Auth
    _fw(r"^better-auth$", "better-auth", "Better Auth", "auth", "/better-auth/better-auth"),
    # Validation
    _fw(r"^zod$", "zod", "Zod", "validation", "/colinhacks/zod"),
    # Frontend
    _fw(r"^react$", "react", "React", "frontend", "/facebook/react"),
    _fw(r"^vue$", "vue", "Vue", "frontend", "/vuejs/docs"),
    _fw(r"^svelte$", "svelte", "Svelte", "frontend", "/sveltejs/svelte"),
    _fw(r"^solid-js$", "solid", "SolidJS", "frontend", "/solidjs/solid"),
    _fw(r"^next$", "nextjs", "Next.js", "frontend", "/vercel/next.js"),
    _fw(r"^@tanstack\/react-query$", "tanstack-query", "TanStack Query", "frontend", "/tanstack/query"),
    _fw(r"^@tanstack\/[a-z]+-query$", "tanstack-query", "TanStack Query", "frontend", "/tanstack/query"),
    _fw(r"^@tanstack\/react-router$", "tanstack-router", "TanStack Router", "frontend", "/tanstack/router"),
    # UI / styling
    _fw(r"^tailwindcss$", "tailwind", "Tailwind CSS", "styling", "/tailwindlabs/tailwindcss.com"),
    _fw(r"^shadcn$", "shadcn", "shadcn/ui", "ui", "/shadcn-ui/ui"),
    # Build / testing
    _fw(r"^vite$", "vite", "Vite", "build", "/vitejs/vite"),
    _fw(r"^vitest$", "vitest", "Vitest", "testing", "/vitest-dev/vitest"),
]

# Dependency names that hint at the project shape.
PROJECT_TYPE_INDICATORS: dict[str, list[str]] = {
    "backend": ["hono", "elysia", "express", "fastify", "koa", "@nestjs/core"],
    "frontend": ["react", "vue", "svelte", "solid-js", "preact", "@angular/core"],
    "fullstack": ["next", "nuxt", "@remix-run/react", "@sveltejs/kit", "astro"],
}


def match_framework(package_name: str) -> KnownFramework | None:
    """Return the first rule matching a dependency name."""
    for fw in KNOWN_FRAMEWORKS:
        if fw.matches(package_name):
            return fw
    return None


def find_known_framework(name: str) -> KnownFramework | None:
    """Look up a rule by framework key (first rule wins)."""
    for fw in KNOWN_FRAMEWORKS:
        if fw.name == name:
            return fw
    return None


def framework_to_npm() -> dict[str, str]:
    """Map framework key -> primary npm package (exact rules only)."""
    result: dict[str, str] = {}
    for fw in KNOWN_FRAMEWORKS:
        pkg = fw.npm_package
        if pkg and fw.name not in result:
            result[fw.name] = pkg
    return result


def npm_to_framework() -> dict[str, KnownFramework]:
    """Map npm package -> framework rule (exact rules only)."""
    result: dict[str, KnownFramework] = {}
    for fw in KNOWN_FRAMEWORKS:
        pkg = fw.npm_package
        if pkg and pkg not in result:
            result[pkg] = fw
    return result
