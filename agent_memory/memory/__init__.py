"""
Memory Module

Provides memory management capabilities:
- MemoryManager: dual-tier store/retrieve coordinator (see manager.py)
- MemoryCache: capacity-bounded hot tier with eviction (see cache.py)
- eviction_score: the heuristic ranking cache entries for eviction
"""

from .eviction import eviction_score
from .cache import MemoryCache
from .manager import MemoryConfig, MemoryManager, MemoryManagerBuilder

__all__ = [
    "eviction_score",
    "MemoryCache",
    "MemoryConfig",
    "MemoryManager",
    "MemoryManagerBuilder",
]
