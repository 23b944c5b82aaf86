"""Sequential, rate-limited iteration over work items.

Used to feed resume chunks to the oracle one at a time with a pause between
calls, so a long resume does not trip the provider's per-minute limits.

Usage:
    async for chunk in RateLimitedQueue(chunks, delay_seconds=20):
        result = await oracle(chunk)
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RateLimitedQueue(Generic[T]):
    """Async iterator that yields items in order, awaiting `delay_seconds` between them.

    The delay is awaited before every item except the first, and only suspends
    the current task. `sleep` is injectable for tests.
    """

    def __init__(
        self,
        items: Iterable[T],
        delay_seconds: float,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._items = list(items)
        self._delay = max(0.0, delay_seconds)
        self._sleep = sleep
        self._index = 0

    def __len__(self) -> int:
        return len(self._items)

    def __aiter__(self) -> "RateLimitedQueue[T]":
        return self

    async def __anext__(self) -> T:
        if self._index >= len(self._items):
            raise StopAsyncIteration
        if self._index > 0 and self._delay:
            logger.debug("Waiting %.1fs before item %d/%d", self._delay, self._index + 1, len(self._items))
            await self._sleep(self._delay)
        item = self._items[self._index]
        self._index += 1
        return item
