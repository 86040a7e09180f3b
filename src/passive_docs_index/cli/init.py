"""Init CLI command."""

import argparse

from passive_docs_index.config.loader import config_exists, create_default_config, save_config
from passive_docs_index.docs.store import update_gitignore
from passive_docs_index.manifest.detect import detect_dependencies, detect_project_type, get_major_version
from passive_docs_index.manifest.reader import read_package_json
from passive_docs_index.paths import frameworks_dir, internal_dir, project_root


def cmd_init(args: argparse.Namespace) -> int:
    root = project_root(args.project)

    if not args.force and config_exists(root):
        print("PDI already initialized in this project.")
        print("Use --force to reinitialize.")
        return 0

    package_json = read_package_json(root)
    if package_json is None:
        print("✗ No package.json found")
        print("  Please run this command in a Node.js project directory.")
        return 1

    project_type = detect_project_type(package_json)
    project_name = package_json.get("name") or "unnamed-project"
    print(f"Project: {project_name} ({project_type})")

    frameworks_dir(root).mkdir(parents=True, exist_ok=True)
    if args.internal:
        internal_dir(root).mkdir(parents=True, exist_ok=True)
    print("✓ Created .claude-docs/")

    config = create_default_config(project_name, project_type)
    if args.internal:
        config["internal"]["enabled"] = True
    save_config(root, config)
    print("✓ Created config.json")

    if update_gitignore(root):
        print("  Updated .gitignore")

    if not args.no_detect:
        print("\nDetected dependencies:")
        detected = detect_dependencies(package_json)
        if not detected:
            print("  No supported frameworks detected.")
        for dep in detected:
            status = "docs available" if dep.has_template else "no template"
            display = dep.framework.display_name
            print(
                f"  ├── {display}@{dep.version} → {display.lower()}"
                f"@{get_major_version(dep.version)} {status}"
            )

        addable = [dep.framework.name for dep in detected if dep.has_template]
        if addable:
            print("\nNext steps:")
            print(f"  pdi add {' '.join(addable)}")
            print("  Or run: pdi sync  (auto-add all detected)")

    print("\n✓ PDI initialized successfully")
    return 0
