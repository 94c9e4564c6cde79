"""Bounded fan-out with queue-based fan-in of failures.

``fan_out`` runs ``count`` units of work with at most ``concurrency`` of them in
flight. A failing unit never cancels the others: its reason is pushed onto a
bounded queue that the coordinator drains once every unit has finished.
"""

import asyncio
from collections.abc import Awaitable, Callable


async def fan_out(
    unit: Callable[[int], Awaitable[None]],
    count: int,
    concurrency: int,
) -> list[str]:
    """Run unit(0) .. unit(count - 1) and return the failure reasons.

    A concurrency of 0 or 1 runs the units strictly one after another, in index
    order. There is no timeout: a unit that never finishes stalls the batch.
    """
    errors: asyncio.Queue[str] = asyncio.Queue(maxsize=max(count, 1))
    sem = asyncio.Semaphore(max(concurrency, 1))

    async def _worker(index: int) -> None:
        async with sem:
            try:
                await unit(index)
            except Exception as exc:  # noqa: BLE001
                errors.put_nowait(describe_error(exc))

    async with asyncio.TaskGroup() as tg:
        for index in range(count):
            tg.create_task(_worker(index))

    return drain(errors)


def drain(queue: asyncio.Queue[str]) -> list[str]:
    """Empty the queue without waiting and return its items in order."""
    items: list[str] = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


def describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
