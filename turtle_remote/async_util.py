"""Helpers for running coroutines concurrently."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Iterable


async def join_parallel(coros: Iterable[Awaitable[Any]]) -> list[Any]:
    """Run every awaitable as its own task and return the results in order.

    The first exception raised by any of them propagates.
    """
    tasks = [asyncio.ensure_future(c) for c in coros]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise