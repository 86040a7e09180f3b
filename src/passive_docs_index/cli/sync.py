"""Sync CLI command: reconcile docs with package.json."""

import argparse
import asyncio
from dataclasses import dataclass

from passive_docs_index.cli.add import run_add
from passive_docs_index.config.loader import require_config, save_config
from passive_docs_index.config.updater import remove_framework, update_sync_time
from passive_docs_index.docs.store import remove_framework_docs
from passive_docs_index.index.builder import refresh_index
from passive_docs_index.manifest.detect import DetectedDependency, detect_dependencies, get_major_version
from passive_docs_index.manifest.reader import read_package_json
from passive_docs_index.paths import project_root


@dataclass
class SyncAction:
    kind: str  # add | update | remove
    framework: str
    reason: str
    current_version: str | None = None
    new_version: str | None = None


def plan_sync(config: dict, installed: list[DetectedDependency]) -> list[SyncAction]:
    """Diff configured frameworks against detected dependencies."""
    frameworks = config.get("frameworks") or {}
    by_name = {dep.framework.name: dep for dep in installed}
    actions: list[SyncAction] = []

    for name, fw in frameworks.items():
        dep = by_name.get(name)
        if dep is None:
            actions.append(SyncAction("remove", name, "Not in package.json", current_version=fw["version"]))
            continue
        installed_version = get_major_version(dep.version)
        if installed_version != fw["version"]:
            actions.append(SyncAction(
                "update", name,
                f"Version changed: {fw['version']} → {installed_version}",
                current_version=fw["version"],
                new_version=installed_version,
            ))

    for dep in installed:
        if dep.has_template and dep.framework.name not in frameworks:
            actions.append(SyncAction(
                "add", dep.framework.name, "New dependency detected",
                new_version=get_major_version(dep.version),
            ))
    return actions


def _print_dependency_table(config: dict, installed: list[DetectedDependency]) -> None:
    frameworks = config.get("frameworks") or {}
    for dep in installed:
        name = dep.framework.name
        version = get_major_version(dep.version)
        docs_version = (frameworks.get(name) or {}).get("version")
        if not docs_version:
            status = "NOT DOCUMENTED"
        elif docs_version == version:
            status = "OK"
        else:
            status = f"UPDATE AVAILABLE ({docs_version} → {version})"
        print(f"  ├── {name}: {dep.version} → docs: {docs_version or 'none'} ({status})")


def cmd_sync(args: argparse.Namespace) -> int:
    root = project_root(args.project)
    config = require_config(root)
    package_json = read_package_json(root)
    if package_json is None:
        print("No package.json found")
        return 1

    print("Checking package.json...\n")
    installed = detect_dependencies(package_json)
    actions = plan_sync(config, installed)
    _print_dependency_table(config, installed)

    adds = [a for a in actions if a.kind == "add"]
    updates = [a for a in actions if a.kind == "update"]
    removes = [a for a in actions if a.kind == "remove"]

    if removes and args.prune:
        print("\nOrphan docs (not in package.json):")
        for action in removes:
            print(f"  └── {action.framework}")

    pending = adds + updates + (removes if args.prune else [])
    if args.check:
        if not pending:
            print("\n✓ Everything is in sync")
            return 0
        print(f"\n{len(pending)} action(s) needed. Run without --check to apply.")
        return 1

    if not pending:
        print("\n✓ Everything is in sync")
        save_config(root, update_sync_time(config))
        return 0

    print("\nPlanned actions:")
    if adds:
        print(f"  Add: {', '.join(a.framework for a in adds)}")
    if updates:
        changes = ", ".join(f"{a.framework} ({a.current_version} → {a.new_version})" for a in updates)
        print(f"  Update: {changes}")
    if removes and args.prune:
        print(f"  Remove: {', '.join(a.framework for a in removes)}")

    if adds:
        report = asyncio.run(run_add(root, config, [a.framework for a in adds]))
        config = report.config
    for action in updates:
        report = asyncio.run(run_add(root, config, [action.framework], version=action.new_version, force=True))
        config = report.config

    if args.prune:
        for action in removes:
            remove_framework_docs(root, action.framework)
            config = remove_framework(config, action.framework)
            print(f"✓ Removed {action.framework}")

    config = update_sync_time(config)
    save_config(root, config)
    refresh_index(root, config)
    print("✓ Updated index in CLAUDE.md")

    print("\n✓ Sync completed")
    return 0
