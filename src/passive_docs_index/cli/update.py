"""Update CLI command: refetch docs for configured frameworks."""

import argparse
import asyncio
from dataclasses import dataclass
from pathlib import Path

from passive_docs_index.config.loader import require_config, save_config
from passive_docs_index.config.updater import update_framework, update_sync_time, utc_now_iso
from passive_docs_index.context7.client import Context7Client, QueryResult
from passive_docs_index.context7.content import generate_template_queries, process_context7_response
from passive_docs_index.context7.fetcher import fetch_docs_parallel
from passive_docs_index.docs.store import format_size, write_doc_file
from passive_docs_index.errors import classify_context7_error
from passive_docs_index.index.builder import refresh_index
from passive_docs_index.paths import project_root
from passive_docs_index.templates.loader import get_template, has_template


@dataclass
class UpdateReport:
    config: dict
    updated: int = 0
    failed: int = 0
    first_failure: QueryResult | None = None


async def update_frameworks(
    root: Path, config: dict, names: list[str], client: Context7Client,
) -> UpdateReport | None:
    """Refetch each framework. Returns None when no source is available."""
    availability = await client.check_availability()
    if not availability.available:
        print("✗ No documentation source available")
        print("\nTo fetch documentation, you need one of:")
        print("  1. Set CONTEXT7_API_KEY (get from https://context7.com)")
        print("  2. Run inside Claude Code session (for MCP access)")
        return None
    print(f"✓ {availability.message}")
    label = "Context7 HTTP API" if availability.recommended == "http" else "Context7 MCP"

    report = UpdateReport(config=config)
    for name in names:
        template = get_template(name)
        if template is None:
            print(f"\nNo template found for {name}, skipping")
            continue

        existing = report.config["frameworks"][name]
        version = existing.get("version") or template.version
        print(f"\nUpdating {template.display_name}@{version} docs...")
        print(f"  Source: {label} ({template.library_id})")

        queries = generate_template_queries(template)
        outcomes = await fetch_docs_parallel(client, queries)

        written = failed = total_size = 0
        for outcome in outcomes:
            query, result = outcome.query, outcome.result
            if result.success and result.content:
                content = process_context7_response(
                    result.content,
                    framework=template.display_name,
                    version=version,
                    category=query.category,
                    file=query.file,
                    library_id=query.library_id,
                )
                write_doc_file(root, name, query.category, query.file, content)
                size = len(content.encode("utf-8"))
                total_size += size
                written += 1
                print(f"  ✓ {query.category}/{query.file} ({format_size(size)})")
            else:
                failed += 1
                if report.first_failure is None:
                    report.first_failure = result
                print(f"  ✗ {query.category}/{query.file} ({result.error or 'unknown error'})")

        print(f"  Total: {written} files updated, {format_size(total_size)}")
        if failed:
            print(f"  Failed: {failed} files")
        report.updated += written
        report.failed += failed
        if not written:
            continue

        report.config = update_framework(report.config, name, {
            "source": "context7",
            "lastUpdate": utc_now_iso(),
            "files": max(written, existing.get("files") or 0),
        })

    return report


async def _run(root: Path, config: dict, names: list[str]):
    client = Context7Client()
    try:
        return await update_frameworks(root, config, names, client)
    finally:
        await client.aclose()


def cmd_update(args: argparse.Namespace) -> int:
    root = project_root(args.project)
    config = require_config(root)
    installed = config.get("frameworks") or {}

    if not args.frameworks:
        names = list(installed)
        if not names:
            print("No frameworks installed. Run: pdi add <framework>")
            return 0
        print(f"Found {len(names)} installed framework(s):")
        for name in names:
            print(f"  - {name}@{installed[name]['version']} ({installed[name]['files']} files)")
    else:
        names, unknown = [], []
        for name in args.frameworks:
            if name in installed:
                names.append(name)
            elif has_template(name):
                print(f"{name} is not installed. Use: pdi add {name}")
            else:
                unknown.append(name)
        if unknown:
            print(f"Unknown frameworks: {', '.join(unknown)}")
        if not names:
            print("No valid frameworks to update")
            return 1

    report = asyncio.run(_run(root, config, names))
    if report is None:
        return 1
    if not report.updated and report.first_failure is not None:
        failure = report.first_failure
        raise classify_context7_error(failure.error or "unknown error", source=failure.source)

    config = update_sync_time(report.config)
    save_config(root, config)
    _, size_kb = refresh_index(root, config)
    print(f"\nUpdated index in CLAUDE.md ({size_kb:.2f}KB)")

    print("\n✓ Update complete")
    print(f"  Updated: {report.updated} files")
    if report.failed:
        print(f"  Failed: {report.failed} files")
    return 0
