"""npm registry client: latest published version per package.

Uses the abbreviated ("corgi") metadata document and caps concurrent
requests at five.
"""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

NPM_REGISTRY_URL = "https://registry.npmjs.org"
ABBREVIATED_METADATA_ACCEPT = (
    "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
)
REQUEST_TIMEOUT = 5.0
MAX_CONCURRENCY = 5


class RegistryError(Exception):
    """Non-404 error response from the registry."""


def encode_package_name(name: str) -> str:
    """``@tanstack/react-query`` -> ``%40tanstack%2Freact-query``."""
    return quote(name, safe="")


async def fetch_latest_version(client: httpx.AsyncClient, package_name: str) -> str | None:
    """Return ``dist-tags.latest``, or None if the package does not exist.

    Raises RegistryError on other HTTP errors and httpx errors on
    network failure.
    """
    response = await client.get(
        f"{NPM_REGISTRY_URL}/{encode_package_name(package_name)}",
        headers={"Accept": ABBREVIATED_METADATA_ACCEPT},
    )
    if response.status_code == 404:
        return None
    if not response.is_success:
        raise RegistryError(
            f'npm registry error for "{package_name}": HTTP {response.status_code}'
        )
    data = response.json()
    if not isinstance(data, dict):
        raise RegistryError(f'npm registry returned non-object metadata for "{package_name}"')
    tags = data.get("dist-tags")
    latest = tags.get("latest") if isinstance(tags, dict) else None
    return latest if isinstance(latest, str) else None


async def fetch_latest_versions(
    package_names: list[str],
    client: httpx.AsyncClient | None = None,
) -> dict[str, str | None]:
    """Fetch many packages concurrently; per-package failures map to None."""
    if not package_names:
        return {}

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
    semaphore = asyncio.Semaphore(MAX_CONCURRENCY)

    async def one(name: str) -> tuple[str, str | None]:
        async with semaphore:
            try:
                return name, await fetch_latest_version(client, name)
            # one bad package must not fail the batch
            except Exception as exc:
                logger.warning('Failed to fetch version for "%s": %s', name, exc)
                return name, None

    try:
        pairs = await asyncio.gather(*(one(name) for name in package_names))
    finally:
        if owns_client:
            await client.aclose()
    return dict(pairs)
