"""
Concurrency helpers shared by the fan-out style operations.
"""

import asyncio
from typing import Awaitable, Iterable, TypeVar

T = TypeVar("T")


async def gather_all(aws: Iterable[Awaitable[T]]) -> list[T]:
    """
    Run awaitables concurrently and return their results in order.

    The first exception propagates and every sibling still running is
    cancelled (and awaited) before it does. Cancelling the caller cancels
    all children.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
