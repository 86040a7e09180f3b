"""Add CLI command: fetch framework docs and index them."""

import argparse
import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from passive_docs_index.config.loader import require_config, save_config
from passive_docs_index.config.updater import (
    set_library_mapping,
    update_framework,
    update_sync_time,
    utc_now_iso,
)
from passive_docs_index.context7.client import Context7Client
from passive_docs_index.context7.content import (
    generate_template_queries,
    placeholder_doc,
    process_context7_response,
)
from passive_docs_index.context7.fetcher import fetch_docs_parallel
from passive_docs_index.docs.store import format_size, write_doc_file
from passive_docs_index.index.builder import refresh_index
from passive_docs_index.manifest.detect import detect_dependencies
from passive_docs_index.manifest.reader import read_package_json
from passive_docs_index.paths import project_root
from passive_docs_index.templates.loader import get_template, has_template, list_templates

SOURCE_LABELS = {"http": "Context7 HTTP API", "mcp": "Context7 MCP", "offline": "Placeholders"}


@dataclass
class AddReport:
    config: dict
    can_fetch: bool = False
    added: list[str] = field(default_factory=list)


async def _pick_source(client: Context7Client, offline: bool) -> str:
    if offline:
        print("Offline mode - generating placeholders")
        return "offline"
    availability = await client.check_availability()
    if availability.http:
        print("✓ Using Context7 HTTP API")
        return "http"
    if availability.mcp:
        print("⚠ Using MCP (may fail outside Claude Code)")
        print('  Tip: Run "pdi auth" to configure HTTP API for reliable standalone use')
        return "mcp"
    print("⚠ No documentation source available")
    print('  Run "pdi auth" to configure Context7 API key')
    print("  Generating placeholders instead...")
    return "offline"


async def add_frameworks(
    root: Path,
    config: dict,
    names: list[str],
    client: Context7Client,
    version: str | None = None,
    force: bool = False,
    offline: bool = False,
) -> AddReport:
    """Fetch and write docs for each template framework, updating ``config``.

    Queries that fail, or every query when no source is available, get a
    placeholder document so the index stays complete.
    """
    source = await _pick_source(client, offline)
    report = AddReport(config=config, can_fetch=source != "offline")

    for name in names:
        template = get_template(name)
        if template is None:
            continue
        fw_version = version or template.version

        if not force and name in report.config.get("frameworks", {}):
            print(f"\n{template.display_name} already exists. Use --force to overwrite.")
            continue

        print(f"\nFetching {template.display_name}@{fw_version} docs...")
        print(f"  Source: {SOURCE_LABELS[source]} ({template.library_id or 'N/A'})")

        queries = generate_template_queries(template)
        outcomes = await fetch_docs_parallel(client, queries) if report.can_fetch else []
        results = [o.result for o in outcomes] or [None] * len(queries)

        total_size = 0
        fetched = 0
        for query, result in zip(queries, results):
            if result is not None and result.success and result.content:
                content = process_context7_response(
                    result.content,
                    framework=template.display_name,
                    version=fw_version,
                    category=query.category,
                    file=query.file,
                    library_id=query.library_id,
                )
                fetched += 1
                icon = "✓"
            else:
                content = placeholder_doc(
                    template.display_name, template.name, fw_version,
                    query.category, query.file, query.query, template.library_id,
                )
                icon = "○"
                if result is not None and result.error:
                    print(f"  ! {query.category}/{query.file} (fallback - {result.error})")

            write_doc_file(root, name, query.category, query.file, content)
            size = len(content.encode("utf-8"))
            total_size += size
            print(f"  {icon} {query.category}/{query.file} ({format_size(size)})")

        print(f"  Total: {len(queries)} files, {format_size(total_size)}")
        if report.can_fetch:
            print(f"  Fetched: {fetched}, Placeholders: {len(queries) - fetched}")

        report.config = update_framework(report.config, name, {
            "version": fw_version,
            "source": "context7" if fetched > 0 else "template",
            "libraryId": template.library_id,
            "lastUpdate": utc_now_iso(),
            "files": len(queries),
            "categories": list(template.structure),
        })
        if template.library_id:
            report.config = set_library_mapping(report.config, name, template.library_id)
        report.added.append(name)

    return report


async def run_add(
    root: Path,
    config: dict,
    names: list[str],
    version: str | None = None,
    force: bool = False,
    offline: bool = False,
) -> AddReport:
    client = Context7Client()
    try:
        return await add_frameworks(root, config, names, client, version, force, offline)
    finally:
        await client.aclose()


def _detected_names(root: Path, config: dict) -> list[str]:
    package_json = read_package_json(root)
    return [
        dep.framework.name
        for dep in detect_dependencies(package_json)
        if dep.has_template and dep.framework.name not in config.get("frameworks", {})
    ]


def cmd_add(args: argparse.Namespace) -> int:
    root = project_root(args.project)
    config = require_config(root)

    requested = list(args.frameworks)
    if not requested:
        requested = _detected_names(root, config)
        if not requested:
            print("No frameworks specified and none detected in package.json.")
            print("Run: pdi list")
            return 1
        print(f"Adding detected frameworks: {', '.join(requested)}")

    valid = [name for name in requested if has_template(name)]
    invalid = [name for name in requested if not has_template(name)]
    if invalid:
        print(f"Unknown frameworks: {', '.join(invalid)}")
        print(f"Available: {', '.join(t.name for t in list_templates())}")
    if not valid:
        print("No valid frameworks to add")
        return 1

    report = asyncio.run(run_add(
        root, config, valid,
        version=args.fw_version, force=args.force, offline=args.offline,
    ))
    config = update_sync_time(report.config)
    save_config(root, config)

    if not args.no_index:
        result, size_kb = refresh_index(root, config)
        if result.created:
            print(f"\nCreated CLAUDE.md with index ({size_kb:.2f}KB)")
        else:
            print(f"\nUpdated index in CLAUDE.md ({size_kb:.2f}KB)")

    print("\n✓ Docs added successfully")
    if not report.can_fetch:
        print("\nTo fetch real documentation:")
        print("  1. Get API key from https://context7.com")
        print("  2. Set: export CONTEXT7_API_KEY=ctx7sk-...")
        print("  3. Run: pdi update")
    return 0
