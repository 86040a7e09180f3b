"""Bounded-concurrency fetching of a framework's documentation queries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from passive_docs_index.context7.client import Context7Client, QueryResult
from passive_docs_index.context7.content import DocQuery

logger = logging.getLogger(__name__)

MAX_CONCURRENT_QUERIES = 5


@dataclass
class FetchOutcome:
    query: DocQuery
    result: QueryResult


async def fetch_docs_parallel(
    client: Context7Client,
    queries: list[DocQuery],
    api_key: str | None = None,
    concurrency: int = MAX_CONCURRENT_QUERIES,
    on_done: Callable[[FetchOutcome], None] | None = None,
) -> list[FetchOutcome]:
    """Run every query with at most ``concurrency`` in flight.

    Outcomes come back in the order of ``queries`` regardless of completion
    order. ``on_done`` is called as each query finishes.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def one(query: DocQuery) -> FetchOutcome:
        async with semaphore:
            logger.debug("Fetching %s/%s", query.category, query.file)
            result = await client.query(query.library_id, query.query, api_key=api_key)
        outcome = FetchOutcome(query, result)
        if on_done is not None:
            on_done(outcome)
        return outcome

    return list(await asyncio.gather(*(one(q) for q in queries)))
