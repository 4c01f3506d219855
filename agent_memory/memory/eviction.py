"""Eviction scoring for the hot-tier cache."""

import time
from typing import Optional

from agent_memory.interfaces import MemoryEntry

FREQUENCY_WEIGHT = 1000
IMPORTANCE_WEIGHT = 100


def eviction_score(entry: MemoryEntry, now: Optional[int] = None) -> int:
    """
    Score an entry for eviction. Lower means more evictable.

    Access frequency dominates, importance (scaled to 0..100) is a secondary
    boost, and every second since the last access subtracts one point.
    """
    if now is None:
        now = int(time.time())

    recency = now - entry.last_accessed
    importance = round(entry.importance * 100)

    return entry.access_count * FREQUENCY_WEIGHT + importance * IMPORTANCE_WEIGHT - recency
