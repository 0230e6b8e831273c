"""Bounded-concurrency helpers for the ingestion pipeline.

Ingestion runs one source at a time by default.  When ``sync_concurrency``
is raised, source processing fans out through :func:`throttled_gather` so
network latency (S3 fetches, embedding calls) overlaps while at most N
sources are in flight.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    coros: list[Awaitable[_T]],
    limit: int = 1,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with at most *limit* in flight.

    Each coroutine is wrapped so it acquires a semaphore before executing
    and releases it afterward.  With ``limit=1`` the awaitables run strictly
    in list order.

    Parameters
    ----------
    coros:
        Awaitable objects to execute.
    limit:
        Maximum number of awaitables running at once (values below 1 are
        treated as 1).
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
