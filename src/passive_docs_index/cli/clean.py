"""Clean CLI command: remove docs for frameworks no longer installed."""

import argparse

from passive_docs_index.config.loader import require_config, save_config
from passive_docs_index.config.updater import remove_framework
from passive_docs_index.docs.store import calculate_docs_size, format_size, remove_framework_docs
from passive_docs_index.index.builder import refresh_index, sections_from_disk
from passive_docs_index.index.codec import index_size_kb
from passive_docs_index.manifest.detect import detect_dependencies
from passive_docs_index.manifest.reader import read_package_json
from passive_docs_index.paths import project_root


def find_orphans(config: dict, installed_names: set[str], framework_sizes: dict[str, int]) -> dict[str, int]:
    """Configured frameworks with docs on disk that package.json no longer lists."""
    configured = config.get("frameworks") or {}
    return {
        name: size
        for name, size in framework_sizes.items()
        if name in configured and name not in installed_names
    }


def cmd_clean(args: argparse.Namespace) -> int:
    root = project_root(args.project)
    config = require_config(root)
    installed = {dep.framework.name for dep in detect_dependencies(read_package_json(root))}

    orphans = find_orphans(config, installed, calculate_docs_size(root).frameworks)
    size_before = index_size_kb(sections_from_disk(root, config))

    print("PDI Clean\n")
    if not orphans:
        print("✓ No orphan docs found")
    else:
        print("Found orphan docs:")
        for name, size in orphans.items():
            print(f"  └── {name} ({format_size(size)})")
        print(f"  Total: {format_size(sum(orphans.values()))}")

    if args.dry_run:
        print("\nDry run mode - no changes made")
        return 0

    if not orphans:
        _, size_after = refresh_index(root, config)
        if size_before > size_after:
            print(f"\n✓ Optimized index (saved {(size_before - size_after) * 1024:.0f} bytes)")
        else:
            print("\n✓ Index already optimized")
        return 0

    print()
    for name, size in orphans.items():
        remove_framework_docs(root, name)
        config = remove_framework(config, name)
        print(f"✓ Removed {name} ({format_size(size)})")

    _, size_after = refresh_index(root, config)
    save_config(root, config)
    print("✓ Rebuilt index")

    print("\nIndex optimization:")
    print(f"  Before: {size_before:.2f}KB")
    print(f"  After: {size_after:.2f}KB")
    saved = size_before - size_after
    if saved > 0:
        print(f"  Saved: {saved:.2f}KB ({saved / size_before * 100:.0f}%)")

    print(f"\n✓ Cleaned {len(orphans)} orphan(s), freed {format_size(sum(orphans.values()))}")
    return 0
