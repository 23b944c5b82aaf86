"""In-process TTL caches for salary data and job-search results.

Entries are immutable once written. Expiry is lazy on read, plus a periodic
sweep so keys that are never read again do not accumulate.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)


class TTLCache:
    """Key -> (value, timestamp) map with a fixed time-to-live.

    `clock` returns seconds; tests inject a fake clock instead of sleeping.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: dict[Hashable, tuple[Any, float]] = {}

    def _expired(self, timestamp: float, now: float) -> bool:
        return now - timestamp >= self.ttl_seconds

    def get(self, key: Hashable) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, timestamp = entry
        if self._expired(timestamp, self._clock()):
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._store[key] = (value, self._clock())

    def delete(self, key: Hashable) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def sweep(self) -> int:
        """Remove expired entries. Returns the number removed."""
        now = self._clock()
        expired = [k for k, (_, ts) in self._store.items() if self._expired(ts, now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._store)


def job_search_cache_key(role_id: str, location: str | None = None) -> str:
    return f"job-search:{role_id}:{location}" if location else f"job-search:{role_id}"


async def run_periodic_sweep(caches: list[TTLCache], interval_seconds: float) -> None:
    """Sweep every cache forever, once per interval. Cancel the task to stop."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = sum(cache.sweep() for cache in caches)
        if removed:
            logger.info("Cache sweep removed %d expired entries", removed)
