"""Bounded-concurrency fan-out and per-key mutual exclusion for asyncio."""

import asyncio
from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 3


async def bounded_gather(
    items: Iterable[T],
    func: Callable[[T], Awaitable[R]],
    concurrency: int = DEFAULT_CONCURRENCY,
    *,
    return_exceptions: bool = False,
) -> list[Any]:
    """Apply ``func`` to every item with at most ``concurrency`` calls in flight.

    Calls start in input order and may finish out of order; results are
    returned aligned with the input. With ``return_exceptions=True`` a failing
    call yields its exception in place of a result instead of aborting.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _run(item: T) -> R:
        async with semaphore:
            return await func(item)

    return await asyncio.gather(
        *[_run(item) for item in items],
        return_exceptions=return_exceptions,
    )


class KeyedLock:
    """One asyncio.Lock per key, dropped once no task holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: Counter[str] = Counter()

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] <= 0:
                del self._users[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)
