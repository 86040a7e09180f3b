"""Doctor CLI command: diagnose the setup and recommend next steps."""

import argparse
import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone

from passive_docs_index.config.loader import config_exists, load_config
from passive_docs_index.context7.client import Context7Client
from passive_docs_index.errors import ConfigError
from passive_docs_index.manifest.detect import detect_dependencies
from passive_docs_index.manifest.reader import read_package_json
from passive_docs_index.paths import claude_md_path, global_config_path, project_root

OUTDATED_AFTER_DAYS = 30


@dataclass
class Diagnostic:
    name: str
    status: str  # ok | warn | error | info
    message: str
    hint: str | None = None


def _days_since(raw: str | None, now: datetime) -> float | None:
    if not raw:
        return None
    try:
        moment = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (now - moment).total_seconds() / 86400


def check_docs(config: dict, now: datetime) -> list[Diagnostic]:
    frameworks = config.get("frameworks") or {}
    if not frameworks:
        return [Diagnostic("Docs", "warn", "No docs installed", "Run: pdi add <framework>")]

    total_files = sum(fw.get("files", 0) for fw in frameworks.values())
    results = [Diagnostic("Docs", "ok", f"{len(frameworks)} framework(s), {total_files} files")]
    outdated = [
        name for name, fw in frameworks.items()
        if (age := _days_since(fw.get("lastUpdate"), now)) is None or age > OUTDATED_AFTER_DAYS
    ]
    if outdated:
        results.append(Diagnostic(
            "Docs Age", "warn", f"{len(outdated)} framework(s) may be outdated", "Run: pdi update",
        ))
    return results


async def _availability():
    client = Context7Client()
    try:
        return await client.check_availability()
    finally:
        await client.aclose()


def run_diagnostics(root, availability, now: datetime | None = None) -> tuple[list[Diagnostic], dict | None, dict | None]:
    """Collect every diagnostic. Returns (results, config, package_json)."""
    now = now or datetime.now(timezone.utc)
    results: list[Diagnostic] = []

    if availability.http:
        results.append(Diagnostic("Context7 API", "ok", "Authenticated via HTTP API"))
    elif availability.mcp:
        results.append(Diagnostic(
            "Context7 API", "warn", "MCP only (works inside Claude Code sessions)",
            "Run: pdi auth (for standalone use outside Claude Code)",
        ))
    else:
        results.append(Diagnostic("Context7 API", "error", "Not authenticated", "Run: pdi auth"))

    initialized = config_exists(root)
    config = None
    if initialized:
        try:
            config = load_config(root)
            results.append(Diagnostic("PDI Init", "ok", "Project initialized"))
        except ConfigError as exc:
            results.append(Diagnostic("PDI Init", "error", exc.message, exc.hint))
    else:
        results.append(Diagnostic("PDI Init", "error", "Project not initialized", "Run: pdi init"))

    package_json = read_package_json(root)
    if package_json is not None:
        results.append(Diagnostic("package.json", "ok", f"Found: {package_json.get('name') or 'unnamed'}"))
        with_templates = [d for d in detect_dependencies(package_json) if d.has_template]
        if with_templates:
            results.append(Diagnostic(
                "Frameworks", "info",
                f"{len(with_templates)} framework(s) with docs available",
                ", ".join(d.framework.name for d in with_templates),
            ))
    else:
        results.append(Diagnostic("package.json", "warn", "Not found", "PDI works best in Node.js projects"))

    if config is not None:
        results.extend(check_docs(config, now))

    if claude_md_path(root).is_file():
        results.append(Diagnostic("CLAUDE.md", "ok", "Found with docs index"))
    elif initialized:
        results.append(Diagnostic("CLAUDE.md", "warn", "Not found", "Will be created when you add docs"))

    if global_config_path().is_file():
        results.append(Diagnostic("Global Config", "info", f"Found at {global_config_path()}"))

    return results, config, package_json


def cmd_doctor(args: argparse.Namespace) -> int:
    root = project_root(args.project)
    availability = asyncio.run(_availability())
    results, config, package_json = run_diagnostics(root, availability)

    print("\n  PDI Doctor - Diagnostic Report")
    print(f"  {'═' * 50}")
    icons = {"ok": "✓", "warn": "⚠", "error": "✗", "info": "ℹ"}
    for r in results:
        print(f"  {icons[r.status]} {r.name}: {r.message}")

    errors = [r for r in results if r.status == "error"]
    warnings = [r for r in results if r.status == "warn"]
    print(f"\n  {'═' * 50}")
    print("  Summary\n")
    if not errors and not warnings:
        print("  ✓ All checks passed!")
    if errors:
        print(f"  ✗ {len(errors)} error(s) found:")
        for r in errors:
            print(f"    • {r.name}: {r.message}")
            if r.hint:
                print(f"      → {r.hint}")
    if warnings:
        print(f"  ⚠ {len(warnings)} warning(s):")
        for r in warnings:
            print(f"    • {r.name}: {r.message}")
            if r.hint:
                print(f"      → {r.hint}")

    print("\n  Recommended Actions:\n")
    if not availability.available:
        print("    pdi auth          # Configure Context7 API key")
    if not config_exists(root):
        print("    pdi init          # Initialize PDI in this project")
    if config is not None and package_json is not None:
        missing = [
            d.framework.name for d in detect_dependencies(package_json)
            if d.has_template and d.framework.name not in config.get("frameworks", {})
        ]
        if missing:
            print(f"    pdi add {' '.join(missing)}  # Add detected frameworks")
    print("    pdi status        # Check current status\n")
    return 1 if errors else 0
