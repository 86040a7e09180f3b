"""Command-line interface for the Passive Docs Index.

Usage:
    pdi init [--force] [--no-detect] [--internal]
    pdi add [frameworks...] [--version V] [--force] [--no-index] [--offline]
    pdi update [frameworks...]
    pdi status [--check] [--format text|json] [--stale-days N]
    pdi sync [--check] [--prune]
    pdi clean [--dry-run]
    pdi auth [--key K | --status | --logout] [--save file|show|both]
    pdi doctor
    pdi list [--category C]
"""

import argparse
import logging
import os
import sys
import traceback

from passive_docs_index import __version__
from passive_docs_index.auth import load_api_key_from_config
from passive_docs_index.cli.add import cmd_add
from passive_docs_index.cli.auth import cmd_auth
from passive_docs_index.cli.clean import cmd_clean
from passive_docs_index.cli.doctor import cmd_doctor
from passive_docs_index.cli.init import cmd_init
from passive_docs_index.cli.listing import cmd_list
from passive_docs_index.cli.status import cmd_status
from passive_docs_index.cli.sync import cmd_sync
from passive_docs_index.cli.update import cmd_update
from passive_docs_index.errors import ConfigError, Context7Error, PDIError
from passive_docs_index.freshness import DEFAULT_STALE_DAYS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdi",
        description="Passive Docs Index: local framework docs plus a compressed index in CLAUDE.md",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project", default=None,
        help="Project root (default: $PDI_PROJECT_DIR or the current directory)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log diagnostics to stderr",
    )
    sub = parser.add_subparsers(dest="command")

    # init
    init = sub.add_parser("init", help="Initialize .claude-docs/ in this project")
    init.add_argument("--force", action="store_true", help="Reinitialize an existing setup")
    init.add_argument("--no-detect", action="store_true", help="Skip dependency detection")
    init.add_argument("--internal", action="store_true", help="Also create internal/ for project patterns")

    # add
    add = sub.add_parser("add", help="Fetch docs for frameworks and index them")
    add.add_argument("frameworks", nargs="*", help="Framework names (default: detected ones)")
    add.add_argument("--version", dest="fw_version", default=None, help="Override the docs version label")
    add.add_argument("--force", action="store_true", help="Overwrite frameworks already added")
    add.add_argument("--no-index", action="store_true", help="Do not update CLAUDE.md")
    add.add_argument("--offline", action="store_true", help="Write placeholders without fetching")

    # update
    upd = sub.add_parser("update", help="Refetch docs for configured frameworks")
    upd.add_argument("frameworks", nargs="*", help="Framework names (default: all configured)")

    # status
    st = sub.add_parser("status", help="Show docs overview or check freshness")
    st.add_argument(
        "--check", action="store_true",
        help="Compare against npm and exit nonzero when docs need attention",
    )
    st.add_argument("--format", choices=["text", "json"], default="text")
    st.add_argument(
        "--stale-days", type=int, default=DEFAULT_STALE_DAYS,
        help="Age threshold for frameworks without an npm mapping",
    )

    # sync
    sy = sub.add_parser("sync", help="Reconcile docs with package.json")
    sy.add_argument("--check", action="store_true", help="Report planned actions without applying them")
    sy.add_argument("--prune", action="store_true", help="Remove docs for dependencies no longer installed")

    # clean
    cl = sub.add_parser("clean", help="Remove orphaned framework docs")
    cl.add_argument("--dry-run", action="store_true", help="Report without removing anything")

    # auth
    au = sub.add_parser("auth", help="Configure the Context7 API key")
    mode = au.add_mutually_exclusive_group()
    mode.add_argument("--key", default=None, help="API key to validate and store (ctx7sk-...)")
    mode.add_argument("--status", action="store_true", help="Show authentication status")
    mode.add_argument("--logout", action="store_true", help="Remove the stored API key")
    au.add_argument(
        "--save", choices=["both", "file", "show"], default="both",
        help="Store in ~/.config/pdi, print an export line, or both",
    )

    # doctor
    sub.add_parser("doctor", help="Diagnose setup and suggest fixes")

    # list
    ls = sub.add_parser("list", help="List available framework templates")
    ls.add_argument("--category", default=None)

    return parser


def handle_command_error(exc: Exception) -> int:
    """Print a user-facing error report and return the failure exit code."""
    if isinstance(exc, ConfigError):
        print(f"Config Error: {exc.message}", file=sys.stderr)
        if exc.config_path:
            print(f"  File: {exc.config_path}", file=sys.stderr)
        issues = exc.format_validation_issues()
        if issues:
            print(issues, file=sys.stderr)
    elif isinstance(exc, Context7Error):
        print(f"Context7 Error: {exc.message}", file=sys.stderr)
        print(f"  Category: {exc.category} (source: {exc.source})", file=sys.stderr)
    elif isinstance(exc, PDIError):
        print(f"Error: {exc.message}", file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)

    hint = getattr(exc, "hint", None)
    if hint:
        print(f"Fix: {hint}", file=sys.stderr)
    if exc.__cause__ is not None:
        print(f"Caused by: {exc.__cause__}", file=sys.stderr)
    if os.environ.get("PDI_DEBUG"):
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
    return 1


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.environ.get("PDI_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)
    load_api_key_from_config()

    dispatch = {
        "init": cmd_init,
        "add": cmd_add,
        "update": cmd_update,
        "status": cmd_status,
        "sync": cmd_sync,
        "clean": cmd_clean,
        "auth": cmd_auth,
        "doctor": cmd_doctor,
        "list": cmd_list,
    }
    try:
        return dispatch[args.command](args)
    except (PDIError, OSError) as exc:
        return handle_command_error(exc)


if __name__ == "__main__":
    sys.exit(main())
