"""
Tests for the embedding services and the placeholder capabilities.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from agent_memory.interfaces import (
    ConfigurationError,
    EmbeddingError,
    NoOpError,
    StorageNotSet,
)
from agent_memory.storage import (
    EmbedderNotSet,
    LangChainEmbeddingService,
    create_embedding_service,
)

from conftest import DIM


def test_langchain_embeddings_are_deterministic():
    service = LangChainEmbeddingService(DeterministicFakeEmbedding(size=DIM))

    first = asyncio.run(service.embed_text("User likes rabbits"))
    second = asyncio.run(service.embed_text("User likes rabbits"))

    assert len(first) == DIM
    assert first == second
    assert all(isinstance(x, float) for x in first)


def test_langchain_failure_becomes_embedding_error():
    embeddings = MagicMock()
    embeddings.aembed_query = AsyncMock(side_effect=RuntimeError("boom"))
    service = LangChainEmbeddingService(embeddings)

    with pytest.raises(EmbeddingError) as exc_info:
        asyncio.run(service.embed_text("anything"))

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_factory_builds_langchain_service():
    service = create_embedding_service("langchain", embeddings=DeterministicFakeEmbedding(size=DIM))

    assert isinstance(service, LangChainEmbeddingService)


def test_factory_rejects_unknown_provider():
    with pytest.raises(ConfigurationError):
        create_embedding_service("carrier-pigeon")


def test_embedder_not_set():
    with pytest.raises(NoOpError):
        asyncio.run(EmbedderNotSet().embed_text("hello"))


def test_storage_not_set(make_entry):
    storage = StorageNotSet()

    with pytest.raises(NoOpError):
        asyncio.run(storage.insert([0.0] * DIM, make_entry("a")))
    with pytest.raises(NoOpError):
        asyncio.run(storage.search([0.0] * DIM, 1))
    with pytest.raises(NoOpError):
        asyncio.run(storage.count())


# ============================================================================
# OPENAI
# ============================================================================

def _openai_service(vectors):
    pytest.importorskip("openai")
    from agent_memory.storage import OpenAIEmbeddingService

    service = OpenAIEmbeddingService(api_key="sk-test", dimension=DIM)
    service.client = MagicMock()
    service.client.embeddings.create = AsyncMock(return_value=SimpleNamespace(
        data=[SimpleNamespace(embedding=v) for v in vectors]
    ))
    return service


def test_openai_requires_api_key(monkeypatch):
    pytest.importorskip("openai")
    from agent_memory.storage import OpenAIEmbeddingService

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ConfigurationError):
        OpenAIEmbeddingService()


def test_openai_embed_text():
    service = _openai_service([[0.1, 0.2, 0.3, 0.4]])

    vector = asyncio.run(service.embed_text("first line\nsecond line"))

    assert vector == [0.1, 0.2, 0.3, 0.4]
    service.client.embeddings.create.assert_awaited_once_with(
        input=["first line second line"],
        model="text-embedding-3-small",
    )


def test_openai_batch():
    service = _openai_service([[1.0, 0.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0]])

    vectors = asyncio.run(service.embed_texts_batch(["a", "b"]))

    assert vectors == [[1.0, 0.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0]]
    assert asyncio.run(service.embed_texts_batch([])) == []
    assert service.get_embedding_dimension() == DIM


def test_openai_failure_becomes_embedding_error():
    service = _openai_service([])
    service.client.embeddings.create = AsyncMock(side_effect=RuntimeError("rate limited"))

    with pytest.raises(EmbeddingError):
        asyncio.run(service.embed_text("hello"))
