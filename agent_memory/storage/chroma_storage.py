"""
ChromaDB Storage Backend

Durable Storage implementation on top of a ChromaDB collection. Follows the
same error semantics as InMemoryVectorStore.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

try:
    import chromadb
except ImportError:
    chromadb = None

from agent_memory.interfaces import (
    MemoryEntry,
    MemoryKind,
    Confidence,
    SearchResult,
    Storage,
    StorageError,
    DimensionMismatchError,
    DuplicateIdError,
    NotFoundError,
    ValidationError,
)
from agent_memory.utils import get_logger

logger = get_logger(__name__)


class ChromaStorage(Storage):
    """
    Vector Database Storage Backend
    Implementation using ChromaDB
    """

    def __init__(
        self,
        dim: int,
        collection_name: str = "agent_memory",
        persist_path: Optional[str] = None,
        client: Any = None,
    ):
        """
        Args:
            dim: Embedding dimensionality accepted by this backend
            collection_name: Chroma collection to use (created if missing)
            persist_path: Directory for a persistent client; in-process
                ephemeral client when omitted
            client: An already constructed Chroma client, overrides persist_path
        """
        if chromadb is None:
            raise ImportError("chromadb not installed. Please run `pip install chromadb`")

        self.dim = dim
        self.collection_name = collection_name
        if client is None:
            client = (
                chromadb.PersistentClient(path=persist_path)
                if persist_path
                else chromadb.EphemeralClient()
            )
        self.client = client
        self.collection = self.client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"}
        )
        logger.info("ChromaStorage ready", extra={
            "function": "ChromaStorage.__init__",
            "details": {"collection": collection_name, "persist_path": persist_path},
        })

    # ========================================================================
    # PUBLIC INTERFACE
    # ========================================================================

    async def insert(self, embedding: List[float], entry: MemoryEntry) -> None:
        if len(embedding) != self.dim:
            raise DimensionMismatchError(self.dim, len(embedding))
        if self._exists(entry.id):
            raise DuplicateIdError(entry.id)

        try:
            self.collection.add(
                ids=[entry.id],
                embeddings=[[float(x) for x in embedding]],
                documents=[entry.content],
                metadatas=[self._prepare_metadata(entry)]
            )
        except Exception as e:
            raise StorageError(f"Insert failed: {e}") from e

    async def search(self, embedding: List[float], limit: int) -> List[SearchResult]:
        if len(embedding) != self.dim:
            raise DimensionMismatchError(self.dim, len(embedding))

        n_results = min(limit, self.collection.count())
        if n_results <= 0:
            return []

        try:
            results = self.collection.query(
                query_embeddings=[[float(x) for x in embedding]],
                n_results=n_results,
                include=["documents", "metadatas", "distances", "embeddings"]
            )
        except Exception as e:
            raise StorageError(f"Search failed: {e}") from e

        search_results = []
        for i, res_id in enumerate(results["ids"][0]):
            cos = 1.0 - results["distances"][0][i]  # cosine distance
            search_results.append(SearchResult(
                entry=self._convert_to_entry(
                    res_id, results["documents"][0][i], results["metadatas"][0][i]
                ),
                embedding=[float(x) for x in results["embeddings"][0][i]],
                similarity_score=(cos + 1.0) / 2.0,
                rank=i + 1,
            ))
        return search_results

    async def search_by_id(self, entry_id: str) -> Tuple[List[float], MemoryEntry]:
        results = self.collection.get(
            ids=[entry_id],
            include=["documents", "metadatas", "embeddings"]
        )
        if not results["ids"]:
            raise NotFoundError(entry_id)

        entry = self._convert_to_entry(
            results["ids"][0], results["documents"][0], results["metadatas"][0]
        )
        return [float(x) for x in results["embeddings"][0]], entry

    async def get_oldest(self, limit: int) -> List[MemoryEntry]:
        return sorted(self._all_entries(), key=lambda e: e.created_at)[:max(limit, 0)]

    async def get_recent(self, limit: int) -> List[MemoryEntry]:
        entries = sorted(self._all_entries(), key=lambda e: e.created_at, reverse=True)
        return entries[:max(limit, 0)]

    async def delete(self, entry_id: str) -> None:
        if not self._exists(entry_id):
            raise NotFoundError(entry_id)
        try:
            self.collection.delete(ids=[entry_id])
        except Exception as e:
            raise StorageError(f"Delete failed: {e}") from e

    async def delete_batch(self, entry_ids: List[str]) -> None:
        for entry_id in entry_ids:
            await self.delete(entry_id)

    async def update_payload_by_id(self, entry_id: str, entry: MemoryEntry) -> None:
        if entry.id != entry_id:
            raise ValidationError(
                f"Entry id {entry.id!r} does not match the id being updated ({entry_id!r})"
            )
        if not self._exists(entry_id):
            raise NotFoundError(entry_id)
        try:
            self.collection.update(
                ids=[entry_id],
                documents=[entry.content],
                metadatas=[self._prepare_metadata(entry)]
            )
        except Exception as e:
            raise StorageError(f"Update failed: {e}") from e

    async def count(self) -> int:
        return self.collection.count()

    # ========================================================================
    # INTERNAL HELPERS
    # ========================================================================

    def _exists(self, entry_id: str) -> bool:
        return bool(self.collection.get(ids=[entry_id], include=[])["ids"])

    def _all_entries(self) -> List[MemoryEntry]:
        results = self.collection.get(include=["documents", "metadatas"])
        return [
            self._convert_to_entry(res_id, results["documents"][i], results["metadatas"][i])
            for i, res_id in enumerate(results["ids"])
        ]

    def _prepare_metadata(self, entry: MemoryEntry) -> Dict[str, Any]:
        """Flatten a MemoryEntry into Chroma's scalar-only metadata"""
        return {
            "kind": entry.kind.value,
            "importance": entry.importance,
            "created_at": entry.created_at,
            "last_accessed": entry.last_accessed,
            "access_count": entry.access_count,
            "source_context": entry.source_context,
            "confidence": entry.confidence.value,
            # ordered pairs do not fit Chroma's flat metadata
            "metadata_json": json.dumps([list(pair) for pair in entry.metadata]),
        }

    def _convert_to_entry(self, res_id: str, res_doc: str, res_meta: Dict[str, Any]) -> MemoryEntry:
        """Convert raw vector DB result to MemoryEntry"""
        return MemoryEntry(
            id=res_id,
            content=res_doc,
            kind=MemoryKind(res_meta["kind"]),
            importance=float(res_meta["importance"]),
            created_at=int(res_meta["created_at"]),
            last_accessed=int(res_meta["last_accessed"]),
            access_count=int(res_meta["access_count"]),
            source_context=res_meta.get("source_context", ""),
            confidence=Confidence(res_meta["confidence"]),
            metadata=[tuple(pair) for pair in json.loads(res_meta.get("metadata_json", "[]"))],
        )
