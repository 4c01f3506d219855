"""
Storage Module

Export storage backends and embedding service implementations.
"""

from .vector_storage import InMemoryVectorStore
from .chroma_storage import ChromaStorage
from .embedding_service import (
    OpenAIEmbeddingService,
    SentenceTransformerEmbeddingService,
    LangChainEmbeddingService,
    EmbedderNotSet,
    create_embedding_service
)

__all__ = [
    "InMemoryVectorStore",
    "ChromaStorage",
    "OpenAIEmbeddingService",
    "SentenceTransformerEmbeddingService",
    "LangChainEmbeddingService",
    "EmbedderNotSet",
    "create_embedding_service",
]
