"""
agent_memory - an embedded memory substrate for AI agents.

Stores text with its embedding, retrieves the most similar entries for a
query, and keeps a small hot-tier cache in front of the durable store.

Usage example:
    from agent_memory import InMemoryVectorStore, MemoryManager, MemoryEntry

    manager = (
        MemoryManager.builder()
        .embedder(embedder)
        .storage(InMemoryVectorStore(dim=384))
        .hot_cache(InMemoryVectorStore(dim=384))
        .build()
    )
    await manager.store("User likes rabbits", MemoryEntry(id="mem-1", content="User likes rabbits"))
    results = await manager.retrieve("Which animals does the user like?", limit=3)
"""

from .interfaces import (
    MemoryEntry,
    MemoryKind,
    Confidence,
    CacheStats,
    MemoryDraft,
    SearchResult,
    Storage,
    Embedder,
    MemoryGeneration,
    IdGenerationStrategy,
    MemoryCoreError,
)
from .storage import InMemoryVectorStore, create_embedding_service
from .memory import MemoryCache, MemoryConfig, MemoryManager, MemoryManagerBuilder, eviction_score
from .id_gen import Counter, MemoryIdGenerator, UuidV4Generator

__version__ = "0.1.0"

__all__ = [
    "MemoryEntry",
    "MemoryKind",
    "Confidence",
    "CacheStats",
    "MemoryDraft",
    "SearchResult",
    "Storage",
    "Embedder",
    "MemoryGeneration",
    "IdGenerationStrategy",
    "MemoryCoreError",
    "InMemoryVectorStore",
    "create_embedding_service",
    "MemoryCache",
    "MemoryConfig",
    "MemoryManager",
    "MemoryManagerBuilder",
    "eviction_score",
    "Counter",
    "MemoryIdGenerator",
    "UuidV4Generator",
]
