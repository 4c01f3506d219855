"""
In-Memory Vector Storage

Brute-force exact search over a single contiguous embedding buffer. Intended
for thousands of entries, not millions: no index is built.
"""

import random
from typing import Dict, List, Optional, Tuple

import numpy as np

from agent_memory.interfaces import (
    MemoryEntry,
    SearchResult,
    Storage,
    DimensionMismatchError,
    DuplicateIdError,
    NotFoundError,
    ValidationError,
)
from agent_memory.utils import get_logger

logger = get_logger(__name__)

_INITIAL_CAPACITY = 64


class InMemoryVectorStore(Storage):
    """
    Vector store keeping every embedding in one growable float buffer.

    Each live id owns a `dim`-sized region starting at an offset recorded in
    `_id_to_slot`. Deleting an id never shrinks or compacts the buffer: the
    offset goes on `_free_list` and is reused by the next insert. The old
    values stay in place until that reuse overwrites them.
    """

    def __init__(self, dim: int):
        if dim <= 0:
            raise ValidationError(f"dim must be positive, got {dim}")

        self.dim = dim
        self._data = np.zeros(_INITIAL_CAPACITY * dim, dtype=np.float64)
        self._length = 0  # logical end of the buffer, in floats
        self._payloads: Dict[str, MemoryEntry] = {}
        self._id_to_slot: Dict[str, int] = {}
        self._free_list: List[int] = []

    # ========================================================================
    # PUBLIC INTERFACE
    # ========================================================================

    async def insert(self, embedding: List[float], entry: MemoryEntry) -> None:
        """Store an embedding and its entry, reusing a freed slot when possible"""
        vector = self._as_vector(embedding)

        if entry.id in self._id_to_slot:
            raise DuplicateIdError(entry.id)

        if self._free_list:
            offset = self._free_list.pop()
        else:
            offset = self._allocate()

        self._data[offset:offset + self.dim] = vector
        self._id_to_slot[entry.id] = offset
        self._payloads[entry.id] = entry

    async def search(self, embedding: List[float], limit: int) -> List[SearchResult]:
        """Rank every live embedding by rescaled cosine similarity"""
        query = self._as_vector(embedding)

        if limit <= 0 or not self._id_to_slot:
            return []

        ids = list(self._id_to_slot)
        rows = np.array([self._id_to_slot[i] // self.dim for i in ids])
        matrix = self._matrix()[rows]
        scores = _cosine_scores(query, matrix)

        # stable: ties keep insertion order
        order = np.argsort(-scores, kind="stable")[:limit]

        return [
            SearchResult(
                entry=self._payloads[ids[idx]],
                embedding=matrix[idx].tolist(),
                similarity_score=float(scores[idx]),
                rank=rank,
            )
            for rank, idx in enumerate(order, start=1)
        ]

    async def search_by_id(self, entry_id: str) -> Tuple[List[float], MemoryEntry]:
        offset = self._id_to_slot.get(entry_id)
        if offset is None:
            raise NotFoundError(entry_id)

        return self._data[offset:offset + self.dim].tolist(), self._payloads[entry_id]

    async def get_oldest(self, limit: int) -> List[MemoryEntry]:
        entries = sorted(self._payloads.values(), key=lambda e: e.created_at)
        return entries[:max(limit, 0)]

    async def get_recent(self, limit: int) -> List[MemoryEntry]:
        entries = sorted(self._payloads.values(), key=lambda e: e.created_at, reverse=True)
        return entries[:max(limit, 0)]

    async def delete(self, entry_id: str) -> None:
        offset = self._id_to_slot.pop(entry_id, None)
        if offset is None:
            raise NotFoundError(entry_id)

        del self._payloads[entry_id]
        self._free_list.append(offset)

    async def delete_batch(self, entry_ids: List[str]) -> None:
        for entry_id in entry_ids:
            await self.delete(entry_id)

    async def update_payload_by_id(self, entry_id: str, entry: MemoryEntry) -> None:
        """Replace the payload of an existing id. Absent ids raise NotFoundError."""
        if entry_id not in self._payloads:
            raise NotFoundError(entry_id)
        if entry.id != entry_id:
            raise ValidationError(
                f"Entry id {entry.id!r} does not match the id being updated ({entry_id!r})"
            )

        self._payloads[entry_id] = entry

    async def count(self) -> int:
        return len(self._id_to_slot)

    # ========================================================================
    # HELPERS
    # ========================================================================

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self._id_to_slot

    @property
    def buffer_len(self) -> int:
        """Number of floats allocated to slots, live or free"""
        return self._length

    @property
    def free_slots(self) -> int:
        return len(self._free_list)

    def check_embedding(self, embedding: List[float]) -> None:
        """Raise DimensionMismatchError unless embedding fits this store"""
        self._as_vector(embedding)

    def entries(self) -> List[MemoryEntry]:
        """Live entries in insertion order"""
        return list(self._payloads.values())

    def random_sample(self, size: int, rng: Optional[random.Random] = None) -> List[MemoryEntry]:
        """Pick up to `size` live entries uniformly at random, without replacement"""
        entries = list(self._payloads.values())
        if size >= len(entries):
            return entries
        return (rng or random).sample(entries, size)

    def _as_vector(self, embedding: List[float]) -> np.ndarray:
        vector = np.asarray(embedding, dtype=np.float64)
        if vector.ndim != 1 or vector.shape[0] != self.dim:
            got = vector.shape[0] if vector.ndim == 1 else vector.size
            raise DimensionMismatchError(self.dim, got)
        return vector

    def _allocate(self) -> int:
        """Append a new slot at the logical end, growing the backing array if full"""
        offset = self._length
        if offset + self.dim > self._data.shape[0]:
            grown = np.zeros(max(self._data.shape[0] * 2, offset + self.dim), dtype=np.float64)
            grown[:offset] = self._data[:offset]
            self._data = grown
            logger.debug("Grew embedding buffer", extra={
                "function": "InMemoryVectorStore._allocate",
                "details": {"capacity": self._data.shape[0], "dim": self.dim},
            })
        self._length += self.dim
        return offset

    def _matrix(self) -> np.ndarray:
        return self._data[:self._length].reshape(-1, self.dim)


def _cosine_scores(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of query against each row, mapped from [-1, 1] to [0, 1].

    A zero vector on either side has cosine 0, i.e. a score of 0.5.
    """
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query
    cos = np.divide(dots, norms, out=np.zeros_like(dots), where=norms != 0)
    cos = np.clip(cos, -1.0, 1.0)
    return (cos + 1.0) / 2.0
