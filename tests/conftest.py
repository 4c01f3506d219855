import hashlib
from typing import Dict, List, Optional

import pytest

from agent_memory.interfaces import Embedder, EmbeddingError, MemoryEntry

DIM = 4
NOW = 1_700_000_000


class FakeEmbedder(Embedder):
    """Deterministic embedder: fixed vectors for known texts, hashed buckets otherwise."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, dim: int = DIM):
        self.vectors = vectors or {}
        self.dim = dim
        self.calls: List[str] = []

    async def embed_text(self, text: str) -> List[float]:
        self.calls.append(text)
        if text in self.vectors:
            return list(self.vectors[text])
        vector = [0.0] * self.dim
        for word in text.lower().split():
            bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self.dim
            vector[bucket] += 1.0
        return vector


class FailingEmbedder(Embedder):
    async def embed_text(self, text: str) -> List[float]:
        raise EmbeddingError("embedding backend unavailable")


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def make_entry():
    def _make(entry_id: str, **kwargs) -> MemoryEntry:
        kwargs.setdefault("content", f"memory {entry_id}")
        kwargs.setdefault("created_at", NOW)
        return MemoryEntry(id=entry_id, **kwargs)
    return _make
