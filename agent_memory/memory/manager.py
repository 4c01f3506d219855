"""
Memory Core Implementation

Coordinates the embedder, the durable storage backend and the optional
hot-tier cache.
"""

import time
import dataclasses
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from dotenv import load_dotenv

from agent_memory.interfaces import (
    CacheStats,
    Embedder,
    MemoryCoreError,
    MemoryEntry,
    SearchResult,
    Storage,
    EmbedderNotFoundError,
    StorageNotFoundError,
    ConfigurationError,
)
from agent_memory.storage import InMemoryVectorStore
from agent_memory.utils import get_logger, log_call, int_from_env, float_from_env
from .cache import MemoryCache, DEFAULT_CAPACITY

logger = get_logger(__name__)


@dataclass
class MemoryConfig:
    """Caching policy of a MemoryManager"""
    # an entry is cached when importance > threshold or access_count > threshold
    cache_importance_threshold: float = 0.5
    cache_access_threshold: int = 0
    # replaces the two thresholds above when set
    cache_predicate: Optional[Callable[[MemoryEntry], bool]] = None
    # cached entries scoring below this are pruned before each cache write
    min_retention_score: Optional[int] = None
    eviction_batch_size: int = 1
    # used when the hot cache is given as a bare InMemoryVectorStore
    cache_capacity: int = DEFAULT_CAPACITY
    max_age_seconds: Optional[int] = None

    def __post_init__(self):
        if self.eviction_batch_size < 1:
            raise ConfigurationError("eviction_batch_size must be at least 1")
        if self.cache_capacity < 0:
            raise ConfigurationError("cache_capacity must be non-negative")
        if self.max_age_seconds is not None and self.max_age_seconds < 0:
            raise ConfigurationError("max_age_seconds must be non-negative")

    def should_cache(self, entry: MemoryEntry) -> bool:
        if self.cache_predicate is not None:
            return bool(self.cache_predicate(entry))
        return (
            entry.importance > self.cache_importance_threshold
            or entry.access_count > self.cache_access_threshold
        )

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "MemoryConfig":
        """Build a config from MEMORY_* environment variables (and a .env file, if any)"""
        load_dotenv(dotenv_path)
        return cls(
            cache_importance_threshold=float_from_env("MEMORY_CACHE_IMPORTANCE_THRESHOLD", 0.5),
            cache_access_threshold=int_from_env("MEMORY_CACHE_ACCESS_THRESHOLD", 0),
            min_retention_score=int_from_env("MEMORY_MIN_RETENTION_SCORE", None),
            eviction_batch_size=int_from_env("MEMORY_EVICTION_BATCH_SIZE", 1),
            cache_capacity=int_from_env("MEMORY_CACHE_CAPACITY", DEFAULT_CAPACITY),
            max_age_seconds=int_from_env("MEMORY_MAX_AGE_SECONDS", None),
        )


class MemoryManager:
    """
    Main Memory Core implementation

    Writes always go to durable storage; entries that qualify under the
    config's caching policy are also written into the hot cache. Reads try the
    cache first and fill the remainder from storage.

    The cache is never reconciled against storage. An entry deleted from
    storage behind the manager's back can still be served from the cache, and
    an entry present in both tiers can appear twice in one retrieve() result.

    Not safe for concurrent use: callers serialize access to an instance.
    """

    def __init__(
        self,
        storage: Storage,
        embedder: Embedder,
        config: Optional[MemoryConfig] = None,
        cache: Optional[MemoryCache] = None,
    ):
        self._storage = storage
        self._embedder = embedder
        self._config = config or MemoryConfig()
        self._cache = cache

    @staticmethod
    def builder() -> "MemoryManagerBuilder":
        return MemoryManagerBuilder()

    @property
    def storage(self) -> Storage:
        return self._storage

    @property
    def cache(self) -> Optional[MemoryCache]:
        return self._cache

    @property
    def config(self) -> MemoryConfig:
        return self._config

    @property
    def has_cache(self) -> bool:
        return self._cache is not None

    @property
    def cache_stats(self) -> Optional[CacheStats]:
        return self._cache.stats if self._cache is not None else None

    @log_call(logger)
    async def store(self, raw_text: str, entry: MemoryEntry) -> None:
        """
        Embed raw_text and store it under entry.

        Embedding and durable-write errors propagate. A failed cache write is
        logged and does not undo the durable write.
        """
        embedding = await self._embedder.embed_text(raw_text)
        await self._storage.insert(embedding, entry)

        if self._cache is not None and self._config.should_cache(entry):
            await self._write_to_cache(embedding, entry)

    async def store_entries(self, entries: List[MemoryEntry]) -> None:
        """Store entries in order, embedding each one's content"""
        for entry in entries:
            await self.store(entry.content, entry)

    @log_call(logger)
    async def retrieve(self, query: str, limit: int) -> List[SearchResult]:
        """
        Retrieve up to `limit` memories similar to query.

        Cache results come first; durable storage fills whatever the cache
        could not. Ranks are renumbered over the merged list.
        """
        embedding = await self._embedder.embed_text(query)

        results: List[SearchResult] = []
        if self._cache is not None:
            results = await self._cache.search(embedding, limit)

        if len(results) < limit:
            results = results + await self._storage.search(embedding, limit - len(results))

        return [dataclasses.replace(r, rank=i) for i, r in enumerate(results, start=1)]

    async def update_memory_access(self, entry: MemoryEntry, now: Optional[int] = None) -> MemoryEntry:
        """
        Record an access to entry and promote it into the cache if it now qualifies.

        The durable payload is replaced first; entry itself gets the new
        last_accessed and access_count only once that succeeds. A cached entry
        gets its payload replaced; an uncached one is inserted into the cache
        with the embedding held by durable storage. Storage and cache errors
        propagate.
        """
        if now is None:
            now = int(time.time())

        updated = dataclasses.replace(
            entry,
            last_accessed=max(now, entry.created_at),
            access_count=entry.access_count + 1,
        )
        await self._storage.update_payload_by_id(entry.id, updated)

        entry.last_accessed = updated.last_accessed
        entry.access_count = updated.access_count

        if self._cache is not None and self._config.should_cache(updated):
            if updated.id in self._cache:
                await self._cache.update_payload_by_id(updated.id, updated)
            else:
                embedding, _ = await self._storage.search_by_id(updated.id)
                await self._insert_into_cache(embedding, updated)

        return entry

    async def delete(self, entry_id: str) -> None:
        """Delete from storage (NotFoundError propagates) and drop any cached copy"""
        await self._storage.delete(entry_id)
        if self._cache is not None and entry_id in self._cache:
            await self._cache.delete(entry_id)

    async def expire(self, now: Optional[int] = None) -> List[str]:
        """Delete entries created more than max_age_seconds ago. Returns their ids."""
        if self._config.max_age_seconds is None:
            return []
        if now is None:
            now = int(time.time())

        cutoff = now - self._config.max_age_seconds
        oldest = await self._storage.get_oldest(await self._storage.count())

        expired = []
        for entry in oldest:
            if entry.created_at >= cutoff:
                break
            expired.append(entry.id)

        await self._storage.delete_batch(expired)
        if self._cache is not None:
            await self._cache.store.delete_batch([i for i in expired if i in self._cache])

        if expired:
            logger.info(f"Expired {len(expired)} memories", extra={
                "function": "MemoryManager.expire",
                "details": {"cutoff": cutoff},
            })
        return expired

    async def prune_cache(self, now: Optional[int] = None) -> List[str]:
        """Drop cached entries scoring below min_retention_score"""
        if self._cache is None or self._config.min_retention_score is None:
            return []
        return await self._cache.prune(self._config.min_retention_score, now)

    # ========================================================================
    # HELPER METHODS
    # ========================================================================

    async def _write_to_cache(self, embedding: List[float], entry: MemoryEntry) -> None:
        try:
            await self._insert_into_cache(embedding, entry)
        except MemoryCoreError as e:
            logger.warning(f"Cache write failed for {entry.id}: {e}", extra={
                "function": "MemoryManager._write_to_cache",
                "entry_id": entry.id,
            })

    async def _insert_into_cache(self, embedding: List[float], entry: MemoryEntry) -> None:
        # reject before pruning so a failed insert leaves the cache as it was
        self._cache.check_insert(embedding, entry)
        await self.prune_cache()
        await self._cache.insert(embedding, entry, self._config.eviction_batch_size)


class MemoryManagerBuilder:
    """
    Incrementally configures a MemoryManager.

    Storage and embedder are required; build() raises StorageNotFoundError or
    EmbedderNotFoundError when one is missing.
    """

    def __init__(self):
        self._storage: Optional[Storage] = None
        self._embedder: Optional[Embedder] = None
        self._config: Optional[MemoryConfig] = None
        self._cache: Optional[Union[MemoryCache, InMemoryVectorStore]] = None

    def storage(self, storage: Storage) -> "MemoryManagerBuilder":
        self._storage = storage
        return self

    def embedder(self, embedder: Embedder) -> "MemoryManagerBuilder":
        self._embedder = embedder
        return self

    def config(self, config: MemoryConfig) -> "MemoryManagerBuilder":
        self._config = config
        return self

    def hot_cache(self, cache: Union[MemoryCache, InMemoryVectorStore]) -> "MemoryManagerBuilder":
        """Use a cache; a bare store is wrapped with the config's cache_capacity"""
        self._cache = cache
        return self

    def build(self) -> MemoryManager:
        if self._storage is None:
            raise StorageNotFoundError()
        if self._embedder is None:
            raise EmbedderNotFoundError()

        config = self._config or MemoryConfig()

        cache = self._cache
        if isinstance(cache, InMemoryVectorStore):
            cache = MemoryCache(cache, max_memory_limit=config.cache_capacity)

        return MemoryManager(
            storage=self._storage,
            embedder=self._embedder,
            config=config,
            cache=cache,
        )
