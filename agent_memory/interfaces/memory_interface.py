"""
Memory Interface - Shared Data Structures

This file contains ONLY shared data structures for Memory Core.
For implementation, see agent_memory/memory/
"""

import time
from typing import Any, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


class MemoryKind(str, Enum):
    """The kind of memory an entry represents"""
    WORKING = "working"  # what is in the current context window
    EPISODIC = "episodic"  # past conversations and events
    SEMANTIC = "semantic"  # facts and ground truths


class Confidence(str, Enum):
    """How confident the producer of a memory was about it"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class MemoryEntry:
    """
    A stored unit of agent memory.

    Timestamps are Unix seconds. access_count only grows, and only through
    MemoryManager.update_memory_access().
    """
    id: str
    content: str
    kind: MemoryKind = MemoryKind.EPISODIC
    importance: float = 0.5
    created_at: int = field(default_factory=lambda: int(time.time()))
    last_accessed: Optional[int] = None
    access_count: int = 0
    source_context: str = ""
    confidence: Confidence = Confidence.MEDIUM
    metadata: List[Tuple[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        if not self.id:
            raise ValueError("id must be a non-empty string")
        if not 0 <= self.importance <= 1:
            raise ValueError("importance must be between 0 and 1")
        if self.access_count < 0:
            raise ValueError("access_count must be non-negative")
        if self.last_accessed is None:
            self.last_accessed = self.created_at
        if self.last_accessed < self.created_at:
            raise ValueError("last_accessed must not precede created_at")

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Return the first metadata value stored under key"""
        for k, v in self.metadata:
            if k == key:
                return v
        return default


@dataclass
class CacheStats:
    """Hit/miss counters of a cache. Observational only."""
    hits: int = 0
    misses: int = 0

    def add_hit(self) -> None:
        self.hits += 1

    def add_miss(self) -> None:
        self.misses += 1

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        if not self.total:
            return 0.0
        return self.hits / self.total
