from asyncio import BoundedSemaphore, gather
from collections.abc import Coroutine, Iterable
from typing import Any, TypeVar

T = TypeVar("T")


async def run_with_concurrency(
    limit: int,
    coroutines: Iterable[Coroutine[Any, Any, T]],
) -> list[T | BaseException]:
    """
    Runs the provided coroutines with at most `limit` running at once.

    Results come back in input order. A coroutine that raises has its
    exception returned in its slot, so every coroutine runs to completion.
    """
    semaphore = BoundedSemaphore(max(limit, 1))

    async def bounded_task(coroutine: Coroutine[Any, Any, T]) -> T:
        async with semaphore:
            return await coroutine

    return await gather(
        *(bounded_task(coroutine) for coroutine in coroutines),
        return_exceptions=True,
    )
