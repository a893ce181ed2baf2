"""
Bounded Concurrency Fan-Out
app/scoring/pool.py

pooled_map runs independent async unit computations with at most
``concurrency`` in flight and returns results in input order.

Workers share one "next index" cursor. Claiming an index is a plain
increment with no await in between, so on a single event loop no two
workers can claim the same slot.

The worker callable is assumed total: callers that can fail wrap their own
errors and resolve to a default. pooled_map is a scheduler, not a retry engine.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def pooled_map(
    items: Sequence[T],
    concurrency: int,
    worker: Callable[[T], Awaitable[R]],
) -> List[R]:
    """
    Map ``worker`` over ``items`` with bounded concurrency.

    Args:
        items: Inputs, one unit computation each.
        concurrency: Maximum computations in flight (>= 1).
        worker: Async callable applied to each item.

    Returns:
        Results aligned with ``items`` regardless of completion order.

    Raises:
        ValueError: If concurrency < 1.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    total = len(items)
    results: List[Optional[R]] = [None] * total
    if total == 0:
        return []

    cursor = 0

    async def run_worker() -> None:
        nonlocal cursor
        while True:
            index = cursor
            if index >= total:
                return
            cursor += 1
            results[index] = await worker(items[index])

    await asyncio.gather(*(run_worker() for _ in range(min(concurrency, total))))
    return results  # type: ignore[return-value]
