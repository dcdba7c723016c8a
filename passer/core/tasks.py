import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

T = TypeVar("T")


async def gather_ordered(awaitables: Iterable[Awaitable[T]]) -> list[T]:
    """
    Run awaitables concurrently and return their results in input order.

    Results are only observable once every awaitable has completed, whatever
    order they finish in. If one raises, the others are cancelled and the
    error propagates.

    Example:
        ```python
        results = await gather_ordered(encrypt(item) for item in items)
        ```
    """
    async with asyncio.TaskGroup() as group:
        tasks = [group.create_task(_as_coroutine(awaitable)) for awaitable in awaitables]
    return [task.result() for task in tasks]


async def _as_coroutine(awaitable: Awaitable[T]) -> T:
    return await awaitable
