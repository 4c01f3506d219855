"""
Hot-tier memory cache.

A capacity-bounded InMemoryVectorStore with hit/miss accounting and
score-based eviction.
"""

import random
from typing import List, Optional, Tuple

from agent_memory.interfaces import (
    CacheStats,
    MemoryEntry,
    SearchResult,
    DuplicateIdError,
    ValidationError,
)
from agent_memory.storage import InMemoryVectorStore
from agent_memory.utils import get_logger
from .eviction import eviction_score

logger = get_logger(__name__)

DEFAULT_CAPACITY = 10
EVICTION_SAMPLE_SIZE = 100


class MemoryCache:
    """
    Memory cache wrapping an InMemoryVectorStore.

    Capacity is a soft ceiling: insert() evicts only once the store already
    holds more than `max_memory_limit` entries.
    """

    def __init__(
        self,
        store: InMemoryVectorStore,
        max_memory_limit: int = DEFAULT_CAPACITY,
        sample_size: int = EVICTION_SAMPLE_SIZE,
        rng: Optional[random.Random] = None,
    ):
        if max_memory_limit < 0:
            raise ValidationError("max_memory_limit must be non-negative")
        if sample_size <= 0:
            raise ValidationError("sample_size must be positive")

        self.store = store
        self.max_memory_limit = max_memory_limit
        self.sample_size = sample_size
        self._rng = rng or random.Random()
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def reset_stats(self) -> None:
        self._stats.reset()

    async def evict(self, count: int, now: Optional[int] = None) -> List[str]:
        """
        Evict up to `count` entries and return their ids.

        Candidates are a uniform random sample of at most `sample_size` live
        entries (the whole store when it is smaller); the lowest-scoring ones
        are deleted.
        """
        if count <= 0:
            return []

        store_len = await self.store.count()
        candidates = self.store.random_sample(min(self.sample_size, store_len), self._rng)

        scored: List[Tuple[int, str]] = sorted(
            ((eviction_score(entry, now), entry.id) for entry in candidates),
            key=lambda pair: pair[0],
        )
        victims = [entry_id for _, entry_id in scored[:count]]

        await self.store.delete_batch(victims)

        if victims:
            logger.debug("Evicted cache entries", extra={
                "function": "MemoryCache.evict",
                "details": {"evicted": victims, "sampled": len(candidates)},
            })
        return victims

    async def prune(self, min_score: int, now: Optional[int] = None) -> List[str]:
        """Evict every cached entry whose eviction score is below min_score"""
        entries = self.store.entries()
        victims = [e.id for e in entries if eviction_score(e, now) < min_score]
        await self.store.delete_batch(victims)
        return victims

    def check_insert(self, embedding: List[float], entry: MemoryEntry) -> None:
        """Raise the error insert() would raise, without touching the cache"""
        self.store.check_embedding(embedding)
        if entry.id in self.store:
            raise DuplicateIdError(entry.id)

    async def insert(self, embedding: List[float], entry: MemoryEntry, evict_count: int = 1) -> None:
        """
        Insert, first evicting `evict_count` (at least one) entries when over capacity.

        A rejected insert evicts nothing.
        """
        self.check_insert(embedding, entry)
        if await self.store.count() > self.max_memory_limit:
            await self.evict(max(1, evict_count))
        await self.store.insert(embedding, entry)

    async def search(self, embedding: List[float], limit: int) -> List[SearchResult]:
        """Search the cache. An empty result is recorded as a miss."""
        results = await self.store.search(embedding, limit)
        if results:
            self._stats.add_hit()
        else:
            self._stats.add_miss()
        return results

    async def search_by_id(self, entry_id: str) -> Tuple[List[float], MemoryEntry]:
        return await self.store.search_by_id(entry_id)

    async def update_payload_by_id(self, entry_id: str, entry: MemoryEntry) -> None:
        await self.store.update_payload_by_id(entry_id, entry)

    async def delete(self, entry_id: str) -> None:
        await self.store.delete(entry_id)

    async def count(self) -> int:
        return await self.store.count()

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self.store
