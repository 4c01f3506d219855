"""
Embedding Service Implementation

Embedders for OpenAI, local sentence-transformers models, or any LangChain
embedding model. All of them implement the Embedder capability.
"""

import os
import asyncio
from typing import List, Optional

# Dependency checks
try:
    from openai import AsyncOpenAI
except ImportError:
    AsyncOpenAI = None

try:
    from sentence_transformers import SentenceTransformer
except ImportError:
    SentenceTransformer = None

from langchain_core.embeddings import Embeddings

from agent_memory.interfaces import Embedder, EmbeddingError, NoOpError, ConfigurationError
from agent_memory.utils import get_logger

logger = get_logger(__name__)


def _clean(text: str) -> str:
    return text.replace("\n", " ")


class OpenAIEmbeddingService(Embedder):
    """Embedding service using OpenAI"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-3-small",
        dimension: int = 1536,
    ):
        if AsyncOpenAI is None:
            raise ImportError("OpenAI library not installed. Please run `pip install openai`")

        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")

        self.model = model
        self.dimension = dimension
        self.client = AsyncOpenAI(api_key=self.api_key)

    async def embed_text(self, text: str) -> List[float]:
        """Generate embedding for a single text"""
        try:
            response = await self.client.embeddings.create(
                input=[_clean(text)],
                model=self.model
            )
            return response.data[0].embedding
        except Exception as e:
            logger.error(f"OpenAI embedding failed: {e}")
            raise EmbeddingError(f"OpenAI embedding error: {e}") from e

    async def embed_texts_batch(self, texts: List[str]) -> List[List[float]]:
        """Generate embeddings for multiple texts"""
        if not texts:
            return []
        try:
            response = await self.client.embeddings.create(
                input=[_clean(t) for t in texts],
                model=self.model
            )
            return [data.embedding for data in response.data]
        except Exception as e:
            logger.error(f"OpenAI batch embedding failed: {e}")
            raise EmbeddingError(f"OpenAI batch error: {e}") from e

    def get_embedding_dimension(self) -> int:
        return self.dimension


class SentenceTransformerEmbeddingService(Embedder):
    """
    Embedding service using sentence-transformers (local).

    The model is not safe to call from several tasks at once, so calls are
    serialized behind a lock and run in a worker thread. Callers see a plain
    coroutine.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        if SentenceTransformer is None:
            raise ImportError(
                "sentence-transformers not installed. Please run `pip install sentence-transformers`"
            )

        self.model_name = model_name
        self.model = SentenceTransformer(model_name)
        self.dimension = self.model.get_sentence_embedding_dimension()
        self._lock = asyncio.Lock()

    async def embed_text(self, text: str) -> List[float]:
        try:
            async with self._lock:
                vector = await asyncio.to_thread(self.model.encode, _clean(text))
            return vector.tolist()
        except Exception as e:
            raise EmbeddingError(f"Local embedding error: {e}") from e

    async def embed_texts_batch(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        try:
            async with self._lock:
                vectors = await asyncio.to_thread(self.model.encode, [_clean(t) for t in texts])
            return vectors.tolist()
        except Exception as e:
            raise EmbeddingError(f"Local batch embedding error: {e}") from e

    def get_embedding_dimension(self) -> int:
        return self.dimension


class LangChainEmbeddingService(Embedder):
    """Adapts any LangChain `Embeddings` model to the Embedder capability."""

    def __init__(self, embeddings: Embeddings):
        self.embeddings = embeddings

    async def embed_text(self, text: str) -> List[float]:
        try:
            return [float(x) for x in await self.embeddings.aembed_query(_clean(text))]
        except Exception as e:
            logger.error(f"LangChain embedding failed: {e}")
            raise EmbeddingError(f"LangChain embedding error: {e}") from e


class EmbedderNotSet(Embedder):
    """Placeholder embedder. Every call raises NoOpError."""

    async def embed_text(self, text: str) -> List[float]:
        raise NoOpError("No embedder has been configured")


def create_embedding_service(provider: str = "openai", **kwargs) -> Embedder:
    """
    Factory function to create embedding service
    """
    if provider == "openai":
        kwargs.setdefault("model", os.environ.get("EMBEDDING_MODEL", "text-embedding-3-small"))
        return OpenAIEmbeddingService(**kwargs)
    elif provider == "sentence-transformers":
        if "EMBEDDING_MODEL" in os.environ:
            kwargs.setdefault("model_name", os.environ["EMBEDDING_MODEL"])
        return SentenceTransformerEmbeddingService(**kwargs)
    elif provider == "langchain":
        return LangChainEmbeddingService(**kwargs)
    else:
        raise ConfigurationError(f"Unknown embedding provider: {provider}")
