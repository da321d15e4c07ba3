"""
Keyed read-replica cache with invalidation

Mutations never write here. They call `invalidate`, and the next fetch
for that key is the only writer.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]


@dataclass
class CacheEntry:
    data: Any = None
    fetched_at: Optional[float] = None
    stale: bool = True
    # Bumped by every invalidation; a fetch records the value it started under
    generation: int = 0
    written_generation: int = -1
    inflight: Optional[asyncio.Task] = field(default=None, repr=False)
    inflight_generation: int = -1


class QueryCache:
    """Cache of backend reads keyed by tuples such as ("events",) or ("questions", 7)"""

    def __init__(self, stale_time: float = 0.0, clock: Callable[[], float] = time.monotonic):
        self.stale_time = stale_time
        self.clock = clock
        self._entries: Dict[QueryKey, CacheEntry] = {}

    def _entry(self, key: QueryKey) -> CacheEntry:
        if key not in self._entries:
            self._entries[key] = CacheEntry()
        return self._entries[key]

    def keys(self, prefix: Optional[Hashable] = None) -> List[QueryKey]:
        return [key for key in self._entries if prefix is None or (key and key[0] == prefix)]

    def peek(self, key: QueryKey, default: Any = None) -> Any:
        """Last stored data for a key, without fetching"""
        entry = self._entries.get(key)
        if entry is None or entry.fetched_at is None:
            return default
        return entry.data

    def is_fresh(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.fetched_at is None or entry.stale:
            return False
        return self.clock() - entry.fetched_at < self.stale_time

    def invalidate(self, key: QueryKey) -> None:
        """Force the next read of `key` to go to the backend"""
        entry = self._entry(key)
        entry.stale = True
        entry.generation += 1
        logger.debug(f"Invalidated query {key} (generation {entry.generation})")

    def invalidate_prefix(self, prefix: Hashable) -> None:
        for key in self.keys(prefix):
            self.invalidate(key)

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[Any]],
        force: bool = False,
    ) -> Any:
        """Return cached data while fresh, otherwise run `fetcher` and store its result.

        Concurrent reads of the same key started under the same generation share one fetch.
        """
        if not force and self.is_fresh(key):
            return self._entries[key].data

        entry = self._entry(key)
        if (
            entry.inflight is not None
            and not entry.inflight.done()
            and entry.inflight_generation == entry.generation
        ):
            return await asyncio.shield(entry.inflight)

        entry.inflight_generation = entry.generation
        entry.inflight = asyncio.ensure_future(self._run(key, entry.generation, fetcher))
        return await asyncio.shield(entry.inflight)

    async def _run(self, key: QueryKey, started_generation: int, fetcher) -> Any:
        data = await fetcher()
        entry = self._entry(key)
        if started_generation < entry.written_generation:
            # A fetch started after this one has already landed
            return data
        entry.data = data
        entry.fetched_at = self.clock()
        entry.written_generation = started_generation
        # A fetch that raced an invalidation still stores data, but stays stale
        entry.stale = entry.generation != started_generation
        return data

    def cancel_all(self) -> None:
        """Abandon every in-flight fetch"""
        for entry in self._entries.values():
            if entry.inflight is not None and not entry.inflight.done():
                entry.inflight.cancel()
            entry.inflight = None
