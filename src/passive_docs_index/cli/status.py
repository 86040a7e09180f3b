"""Status CLI command: docs overview and freshness check."""

import argparse
import asyncio
import json
from datetime import datetime

from passive_docs_index.config.loader import require_config
from passive_docs_index.docs.store import calculate_docs_size, read_internal_docs
from passive_docs_index.freshness import EXIT_CODES
from passive_docs_index.freshness.checker import FreshnessCheckOutput, check_freshness
from passive_docs_index.index.builder import sections_from_disk
from passive_docs_index.index.codec import index_size_kb
from passive_docs_index.manifest.detect import detect_dependencies, get_major_version
from passive_docs_index.manifest.reader import read_package_json
from passive_docs_index.paths import project_root

STATUS_ICONS = {
    "up-to-date": "✓",
    "stale": "⚠",
    "missing": "+",
    "orphaned": "✗",
    "unknown": "?",
}


def _tree_prefix(i: int, total: int) -> str:
    return "└──" if i == total - 1 else "├──"


def _print_overview(root, config: dict, package_json: dict | None) -> None:
    installed = detect_dependencies(package_json)
    installed_by_fw = {dep.framework.name: dep for dep in installed}
    sizes = calculate_docs_size(root)
    internal_docs = read_internal_docs(root)
    size_kb = index_size_kb(sections_from_disk(root, config))
    limits = config["limits"]
    frameworks = config.get("frameworks") or {}

    print(f"\n  PDI Status for {config['project']['name']}")
    print(f"  {'═' * 40}")

    print(f"\n  Frameworks ({len(frameworks)}):")
    if not frameworks:
        print("    No frameworks configured")
    for i, (name, fw) in enumerate(frameworks.items()):
        dep = installed_by_fw.get(name)
        installed_version = get_major_version(dep.version) if dep else None
        status = "✓ up-to-date"
        if installed_version and installed_version != fw["version"]:
            status = f"⚠ update available ({installed_version})"
        fw_kb = sizes.frameworks.get(name, 0) / 1024
        print(
            f"    {_tree_prefix(i, len(frameworks))} {name}@{fw['version']}"
            f"  {fw['files']} files  {fw_kb:.1f}KB  {status}"
        )

    print(f"\n  Internal Patterns ({len(config['internal']['categories'])} categories):")
    if not internal_docs:
        print("    No internal patterns configured")
    for i, (category, files) in enumerate(internal_docs.items()):
        cat_kb = sum(f.size_bytes for f in files) / 1024
        print(f"    {_tree_prefix(i, len(internal_docs))} {category}  {len(files)} files  {cat_kb:.1f}KB")

    index_pct = size_kb / limits["maxIndexKb"] * 100
    docs_kb = sizes.total / 1024
    docs_pct = docs_kb / limits["maxDocsKb"] * 100
    print(f"\n  Index: {size_kb:.2f}KB / {limits['maxIndexKb']}KB limit ({index_pct:.0f}% used)")
    print(f"  Total docs: {docs_kb:.1f}KB / {limits['maxDocsKb']}KB limit ({docs_pct:.0f}% of limit)")

    last_sync = config["sync"].get("lastSync")
    if last_sync:
        try:
            shown = datetime.fromisoformat(last_sync.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
        except ValueError:
            shown = last_sync
        print(f"\n  Last sync: {shown}")
    else:
        print("\n  Last sync: never")

    missing = [dep for dep in installed if dep.has_template and dep.framework.name not in frameworks]
    if missing:
        print("\n  Missing frameworks (installed but not documented):")
        for dep in missing:
            print(f"    └── {dep.framework.display_name}@{get_major_version(dep.version)}")
        print(f"\n  Run: pdi add {' '.join(dep.framework.name for dep in missing)}")
    print()


def _print_freshness(output: FreshnessCheckOutput) -> None:
    print("\n  Docs Freshness")
    print(f"  {'═' * 40}")
    if output.exit_code == EXIT_CODES["NETWORK_ERROR"]:
        print("  ✗ Could not reach the npm registry")
        return
    if not output.results:
        print("  No frameworks to check")
    for r in output.results:
        icon = STATUS_ICONS.get(r.status, "?")
        detail = r.status
        if r.diff_type:
            detail += f" ({r.diff_type})"
        latest = f"  latest {r.latest_version}" if r.latest_version else ""
        indexed = f"@{r.indexed_version}" if r.indexed_version else ""
        print(f"    {icon} {r.display_name}{indexed}  {detail}{latest}")

    s = output.summary
    print(f"  {'─' * 40}")
    print(
        f"  {s.total} checked: {s.up_to_date} up-to-date, {s.stale} stale,"
        f" {s.missing} missing, {s.orphaned} orphaned, {s.unknown} unknown"
    )


def cmd_status(args: argparse.Namespace) -> int:
    root = project_root(args.project)
    config = require_config(root)
    package_json = read_package_json(root)

    if not args.check and args.format == "text":
        _print_overview(root, config, package_json)
        return 0

    output = asyncio.run(check_freshness(config, package_json, stale_days=args.stale_days))
    if args.format == "json":
        print(json.dumps(output.to_dict(), indent=2))
    else:
        _print_freshness(output)
    return output.exit_code if args.check else 0
