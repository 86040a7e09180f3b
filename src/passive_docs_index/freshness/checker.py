"""Classify configured frameworks as up-to-date, stale, missing, orphaned or unknown.

The checker performs no I/O itself: the latest versions come from an
injected async callback (the npm registry client by default). If that
callback raises, the whole check becomes a NETWORK_ERROR with no results.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from passive_docs_index.freshness import DEFAULT_STALE_DAYS, EXIT_CODES
from passive_docs_index.freshness.semver import check_version_freshness
from passive_docs_index.frameworks import find_known_framework, framework_to_npm, npm_to_framework

logger = logging.getLogger(__name__)

FetchVersions = Callable[[list[str]], Awaitable[dict[str, str | None]]]


@dataclass
class FreshnessResult:
    framework: str
    display_name: str
    indexed_version: str
    latest_version: str | None
    status: str
    diff_type: str | None = None

    def to_dict(self) -> dict:
        return {
            "framework": self.framework,
            "displayName": self.display_name,
            "indexedVersion": self.indexed_version,
            "latestVersion": self.latest_version,
            "status": self.status,
            "diffType": self.diff_type,
        }


@dataclass
class FreshnessSummary:
    total: int = 0
    stale: int = 0
    missing: int = 0
    orphaned: int = 0
    up_to_date: int = 0
    unknown: int = 0

    @classmethod
    def from_results(cls, results: list[FreshnessResult]) -> FreshnessSummary:
        def count(status: str) -> int:
            return sum(1 for r in results if r.status == status)

        return cls(
            total=len(results),
            stale=count("stale"),
            missing=count("missing"),
            orphaned=count("orphaned"),
            up_to_date=count("up-to-date"),
            unknown=count("unknown"),
        )

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "stale": self.stale,
            "missing": self.missing,
            "orphaned": self.orphaned,
            "upToDate": self.up_to_date,
            "unknown": self.unknown,
        }


@dataclass
class FreshnessCheckOutput:
    results: list[FreshnessResult] = field(default_factory=list)
    exit_code: int = EXIT_CODES["SUCCESS"]
    summary: FreshnessSummary = field(default_factory=FreshnessSummary)

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "exitCode": self.exit_code,
            "summary": self.summary.to_dict(),
        }


def compute_exit_code(summary: FreshnessSummary) -> int:
    """0 for no problems, the type's code for one problem type, MIXED for several.

    ``unknown`` results are informational and never count.
    """
    problems = [
        (summary.stale, EXIT_CODES["STALE"]),
        (summary.missing, EXIT_CODES["MISSING"]),
        (summary.orphaned, EXIT_CODES["ORPHANED"]),
    ]
    present = [code for count, code in problems if count > 0]
    if not present:
        return EXIT_CODES["SUCCESS"]
    if len(present) > 1:
        return EXIT_CODES["MIXED"]
    return present[0]


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _days_since(moment: datetime, now: datetime) -> int:
    return math.floor((now - moment).total_seconds() / 86400)


async def check_freshness(
    config: dict,
    package_json: dict | None,
    stale_days: int = DEFAULT_STALE_DAYS,
    fetch_versions: FetchVersions | None = None,
    now: datetime | None = None,
) -> FreshnessCheckOutput:
    """Run the full freshness check for a project."""
    if fetch_versions is None:
        from passive_docs_index.freshness.npm_registry import fetch_latest_versions
        fetch_versions = fetch_latest_versions
    now = now or datetime.now(timezone.utc)

    package_json = package_json or {}
    all_deps: dict[str, str] = {
        **(package_json.get("dependencies") or {}),
        **(package_json.get("devDependencies") or {}),
    }
    frameworks: dict[str, dict] = config.get("frameworks") or {}

    fw_to_npm = framework_to_npm()
    npm_to_fw = npm_to_framework()

    wanted = [fw_to_npm[name] for name in frameworks if name in fw_to_npm]
    try:
        latest_versions = await fetch_versions(wanted)
    except Exception as exc:
        logger.error("Failed to fetch versions from registry: %s", exc)
        return FreshnessCheckOutput(exit_code=EXIT_CODES["NETWORK_ERROR"])

    results: list[FreshnessResult] = []
    processed: set[str] = set()

    for name, fw_config in frameworks.items():
        processed.add(name)
        npm_pkg = fw_to_npm.get(name)
        known = find_known_framework(name)
        display_name = known.display_name if known else name
        indexed = fw_config.get("version", "")

        in_deps = (npm_pkg in all_deps) if npm_pkg else (name in all_deps)
        if not in_deps:
            results.append(FreshnessResult(
                framework=name,
                display_name=display_name,
                indexed_version=indexed,
                latest_version=latest_versions.get(npm_pkg) if npm_pkg else None,
                status="orphaned",
            ))
            continue

        if npm_pkg:
            latest = latest_versions.get(npm_pkg)
            if latest:
                is_stale, diff_type = check_version_freshness(indexed, latest)
                results.append(FreshnessResult(
                    framework=name,
                    display_name=display_name,
                    indexed_version=indexed,
                    latest_version=latest,
                    status="stale" if is_stale else "up-to-date",
                    diff_type=diff_type,
                ))
            else:
                results.append(FreshnessResult(
                    framework=name,
                    display_name=display_name,
                    indexed_version=indexed,
                    latest_version=None,
                    status="unknown",
                    diff_type="fetch-failed",
                ))
            continue

        # No npm mapping: fall back to the age of the last update
        updated_at = _parse_timestamp(fw_config.get("lastUpdate"))
        if updated_at is None:
            results.append(FreshnessResult(
                framework=name,
                display_name=display_name,
                indexed_version=indexed,
                latest_version=None,
                status="stale",
                diff_type="invalid-timestamp",
            ))
            continue
        is_stale = _days_since(updated_at, now) > stale_days
        results.append(FreshnessResult(
            framework=name,
            display_name=display_name,
            indexed_version=indexed,
            latest_version=None,
            status="stale" if is_stale else "up-to-date",
            diff_type="timestamp" if is_stale else None,
        ))

    for dep_name in all_deps:
        matched = npm_to_fw.get(dep_name)
        if matched and matched.name not in processed:
            processed.add(matched.name)
            results.append(FreshnessResult(
                framework=matched.name,
                display_name=matched.display_name,
                indexed_version="",
                latest_version=None,
                status="missing",
            ))

    summary = FreshnessSummary.from_results(results)
    return FreshnessCheckOutput(
        results=results,
        exit_code=compute_exit_code(summary),
        summary=summary,
    )
