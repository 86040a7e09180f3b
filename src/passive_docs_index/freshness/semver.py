"""Loose semantic-version coercion and diffing.

Only the subset needed for freshness checks: coerce a free-form string to
major.minor.patch (``"v18"`` -> 18.0.0, ``"4.x"`` -> 4.0.0) and classify
the difference between two versions.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_COERCE_RE = re.compile(r"(?<!\d)(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?!\d)")

STALE_DIFFS = frozenset({"major", "minor", "premajor", "preminor"})


class Version(NamedTuple):
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        return f"{core}-{'.'.join(self.prerelease)}" if self.prerelease else core


def coerce(value) -> Version | None:
    """Pull the first numeric version out of ``value``; missing parts become 0.

    Numbers are read as their string form. Anything else that is not a
    string cannot be coerced.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not value or not isinstance(value, str):
        return None
    m = _COERCE_RE.search(value)
    if not m:
        return None
    return Version(int(m.group(1)), int(m.group(2) or 0), int(m.group(3) or 0))


def diff(a: Version, b: Version) -> str | None:
    """Name the most significant difference between two versions.

    Returns None when equal, otherwise one of major, minor, patch,
    premajor, preminor, prepatch or prerelease.
    """
    if a == b:
        return None
    has_pre = bool(a.prerelease or b.prerelease)
    prefix = "pre" if has_pre else ""
    if a.major != b.major:
        return prefix + "major"
    if a.minor != b.minor:
        return prefix + "minor"
    if a.patch != b.patch:
        return prefix + "patch"
    return "prerelease"


def check_version_freshness(indexed: str, latest: str) -> tuple[bool, str | None]:
    """Return (is_stale, diff_type). Patch drift is never stale.

    Versions that cannot be coerced report ``(False, "uncoercible")``.
    """
    a = coerce(indexed)
    b = coerce(latest)
    if a is None or b is None:
        return False, "uncoercible"
    kind = diff(a, b)
    if kind is None:
        return False, None
    return kind in STALE_DIFFS, kind
