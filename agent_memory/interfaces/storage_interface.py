"""
Storage Interface - Shared Definitions

Capabilities every storage backend and embedder must provide. The in-memory
vector store is one implementation among others (see agent_memory/storage/).

All operations are coroutines, but no backend is safe for concurrent
mutation: callers serialize access to a given instance.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple
from dataclasses import dataclass

from .memory_interface import MemoryEntry
from .exceptions import NoOpError


@dataclass
class SearchResult:
    """Result from vector similarity search"""
    entry: MemoryEntry
    embedding: List[float]
    similarity_score: float  # cosine rescaled to [0, 1]
    rank: int


class Embedder(ABC):
    """Turns text into a fixed-length float vector."""

    @abstractmethod
    async def embed_text(self, text: str) -> List[float]:
        """Generate embedding for a single text. Raises EmbeddingError on failure."""


class Storage(ABC):
    """
    Durable backend for embeddings and their memory entries.

    Error semantics shared by every implementation:
    - insert() raises DimensionMismatchError on a wrong-length embedding and
      DuplicateIdError when the id is already stored.
    - search_by_id(), delete() and update_payload_by_id() raise NotFoundError
      for an absent id.
    """

    @abstractmethod
    async def insert(self, embedding: List[float], entry: MemoryEntry) -> None:
        """Store an embedding together with its entry"""

    @abstractmethod
    async def search(self, embedding: List[float], limit: int) -> List[SearchResult]:
        """Return up to `limit` entries ranked by similarity, best first"""

    @abstractmethod
    async def search_by_id(self, entry_id: str) -> Tuple[List[float], MemoryEntry]:
        """Return the embedding and entry stored under entry_id"""

    @abstractmethod
    async def get_recent(self, limit: int) -> List[MemoryEntry]:
        """Return the most recently created entries, newest first"""

    @abstractmethod
    async def get_oldest(self, limit: int) -> List[MemoryEntry]:
        """Return the oldest entries, oldest first"""

    @abstractmethod
    async def delete(self, entry_id: str) -> None:
        """Delete an entry and its embedding"""

    @abstractmethod
    async def delete_batch(self, entry_ids: List[str]) -> None:
        """
        Delete several entries in order.

        Best-effort: the first error stops the remaining deletions and is
        raised; entries already deleted are not restored.
        """

    @abstractmethod
    async def update_payload_by_id(self, entry_id: str, entry: MemoryEntry) -> None:
        """Replace the entry stored under entry_id, leaving its embedding alone"""

    @abstractmethod
    async def count(self) -> int:
        """Number of live entries"""


class StorageNotSet(Storage):
    """
    Placeholder storage that refuses every operation with NoOpError.

    Useful for wiring code paths that must never reach a durable backend.
    """

    def _fail(self):
        raise NoOpError("No storage backend has been configured")

    async def insert(self, embedding, entry):
        self._fail()

    async def search(self, embedding, limit):
        self._fail()

    async def search_by_id(self, entry_id):
        self._fail()

    async def get_recent(self, limit):
        self._fail()

    async def get_oldest(self, limit):
        self._fail()

    async def delete(self, entry_id):
        self._fail()

    async def delete_batch(self, entry_ids):
        self._fail()

    async def update_payload_by_id(self, entry_id, entry):
        self._fail()

    async def count(self):
        self._fail()
