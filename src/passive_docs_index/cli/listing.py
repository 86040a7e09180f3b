"""List CLI command: show bundled framework templates."""

import argparse

from passive_docs_index.templates.loader import TEMPLATE_CATEGORIES, list_templates


def cmd_list(args: argparse.Namespace) -> int:
    templates = list_templates()
    if args.category:
        templates = [t for t in templates if t.category == args.category]
        if not templates:
            print(f"No templates in category '{args.category}'")
            print(f"  Categories: {', '.join(TEMPLATE_CATEGORIES)}")
            return 1

    print(f"\n  Available Templates ({len(templates)})")
    print(f"  {'═' * 50}")
    for category in TEMPLATE_CATEGORIES:
        group = sorted(
            (t for t in templates if t.category == category),
            key=lambda t: (t.priority, t.name),
        )
        if not group:
            continue
        print(f"\n  {category.upper()}")
        for t in group:
            print(f"    [{t.priority}] {t.name:<18} v{t.version:<6} {t.display_name}  ({t.file_count} files)")
    print("\n  Run: pdi add <framework>\n")
    return 0
