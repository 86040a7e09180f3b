"""Auth CLI command: manage the Context7 API key."""

import argparse
import asyncio
import os

from passive_docs_index.auth import read_global_config, remove_api_key, save_api_key, validate_key_format
from passive_docs_index.context7.client import API_KEY_ENV, Context7Client
from passive_docs_index.paths import global_config_path


async def _availability(client: Context7Client):
    try:
        return await client.check_availability()
    finally:
        await client.aclose()


def _status() -> int:
    availability = asyncio.run(_availability(Context7Client()))
    if availability.http:
        print(f"✓ Authenticated via {API_KEY_ENV}")
        print("  API key is set in environment")
    else:
        stored = read_global_config().get("apiKey")
        if stored:
            print("⚠ API key saved but not loaded")
            print("  Add to your shell profile:")
            print(f'  export {API_KEY_ENV}="{stored}"')
        else:
            print("Not authenticated")
            print("  Run: pdi auth --key <ctx7sk-...>")
    if availability.mcp:
        print("  MCP fallback: available (Claude Code session detected)")
    return 0


def _logout() -> int:
    if remove_api_key():
        print("✓ API key removed from config")
        print(f"  Note: Also unset {API_KEY_ENV} from your environment if set")
    else:
        print("No API key configured")
    return 0


def _configure(key: str, save: str) -> int:
    problem = validate_key_format(key)
    if problem:
        print(f"✗ {problem}")
        return 1

    previous = os.environ.get(API_KEY_ENV)
    os.environ[API_KEY_ENV] = key
    availability = asyncio.run(_availability(Context7Client()))
    if not availability.http:
        print("✗ Invalid API key")
        if previous is None:
            os.environ.pop(API_KEY_ENV, None)
        else:
            os.environ[API_KEY_ENV] = previous
        return 1
    print("✓ API key validated")

    if save in ("file", "both"):
        save_api_key(key)
        print(f"✓ Saved to {global_config_path()}")
    if save in ("show", "both"):
        print("\nAdd this to your shell profile (~/.bashrc, ~/.zshrc, etc.):\n")
        print(f'  export {API_KEY_ENV}="{key}"\n')
        print("Then reload your shell or run:")
        print("  source ~/.zshrc  # or ~/.bashrc")

    print("\n✓ Authentication configured!")
    print("  Run: pdi add <framework>")
    return 0


def cmd_auth(args: argparse.Namespace) -> int:
    if args.status:
        return _status()
    if args.logout:
        return _logout()
    if args.key is None:
        print("Context7 provides up-to-date documentation for frameworks.")
        print("Get your free API key at: https://context7.com\n")
        print("Usage: pdi auth --key <ctx7sk-...>  |  --status  |  --logout")
        return _status()
    return _configure(args.key, args.save)
