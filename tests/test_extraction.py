"""
Tests for memory extraction and memory generation.
"""

import asyncio
from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage
from pydantic import ValidationError as PydanticValidationError

from agent_memory.extraction import (
    LLMMemoryExtractor,
    MemoryExtraction,
    MemoryGenerator,
    serialize_history,
)
from agent_memory.id_gen import Counter, MemoryIdGenerator
from agent_memory.interfaces import (
    Confidence,
    GenerationConfig,
    GenerationError,
    MemoryDraft,
    MemoryGeneration,
    MemoryKind,
    MetadataItem,
)
from agent_memory.memory import MemoryManager
from agent_memory.storage import InMemoryVectorStore

from conftest import DIM, NOW, FakeEmbedder


def _mock_model(result=None, error=None):
    structured = MagicMock()
    structured.ainvoke = AsyncMock(return_value=result, side_effect=error)
    model = MagicMock()
    model.with_structured_output.return_value = structured
    return model, structured


class StaticGeneration(MemoryGeneration):
    def __init__(self, drafts: List[MemoryDraft]):
        self.drafts = drafts
        self.inputs: List[str] = []

    async def generate(self, serialized_input: str) -> List[MemoryDraft]:
        self.inputs.append(serialized_input)
        return self.drafts


# ============================================================================
# LLMMemoryExtractor
# ============================================================================

def test_extractor_returns_drafts():
    extraction = MemoryExtraction(
        memories=[
            MemoryDraft(content="User likes rabbits", kind=MemoryKind.SEMANTIC, importance=0.8),
            MemoryDraft(content="User asked about the weather", importance=0.3),
        ],
        reasoning="preferences are durable",
    )
    model, structured = _mock_model(result=extraction)
    extractor = LLMMemoryExtractor(model)

    drafts = asyncio.run(extractor.generate("User: I love rabbits"))

    assert [d.content for d in drafts] == ["User likes rabbits", "User asked about the weather"]
    model.with_structured_output.assert_called_once_with(MemoryExtraction)
    messages = structured.ainvoke.await_args.args[0]
    assert isinstance(messages[0], SystemMessage)
    assert messages[1].content == "User: I love rabbits"


def test_extractor_filters_and_caps():
    extraction = MemoryExtraction(memories=[
        MemoryDraft(content=f"fact {i}", importance=i / 10) for i in range(10)
    ])
    model, _ = _mock_model(result=extraction)
    extractor = LLMMemoryExtractor(
        model, config=GenerationConfig(min_importance=0.5, max_memories_per_call=3)
    )

    drafts = asyncio.run(extractor.generate("User: lots of facts"))

    assert [d.content for d in drafts] == ["fact 5", "fact 6", "fact 7"]


def test_extractor_skips_blank_input():
    model, structured = _mock_model(result=MemoryExtraction())
    extractor = LLMMemoryExtractor(model)

    assert asyncio.run(extractor.generate("   ")) == []
    structured.ainvoke.assert_not_called()


def test_extractor_wraps_model_errors():
    model, _ = _mock_model(error=RuntimeError("model unavailable"))
    extractor = LLMMemoryExtractor(model)

    with pytest.raises(GenerationError) as exc_info:
        asyncio.run(extractor.generate("User: hi"))

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_draft_importance_is_validated():
    with pytest.raises(PydanticValidationError):
        MemoryDraft(content="too important", importance=1.5)


# ============================================================================
# serialize_history
# ============================================================================

def test_serialize_history_formats_roles():
    history = [
        SystemMessage(content="Be helpful"),
        HumanMessage(content="I have two rabbits"),
        AIMessage(content="", tool_calls=[{"name": "lookup", "args": {}, "id": "call-1"}]),
        ToolMessage(content="lookup result", tool_call_id="call-1"),
        AIMessage(content="Rabbits are great"),
    ]

    assert serialize_history(history) == (
        "System: Be helpful\n"
        "User: I have two rabbits\n"
        "Assistant: Rabbits are great"
    )


def test_serialize_history_passes_strings_through():
    assert serialize_history(["User: hi", "  ", "Assistant: hello"]) == "User: hi\nAssistant: hello"
    assert serialize_history([]) == ""


# ============================================================================
# MemoryGenerator
# ============================================================================

def test_generator_assigns_ids_and_timestamps():
    drafts = [
        MemoryDraft(
            content="User owns two rabbits",
            kind=MemoryKind.SEMANTIC,
            importance=0.9,
            confidence=Confidence.HIGH,
            source_context="turn 1",
            metadata=[MetadataItem(key="topic", value="pets")],
        ),
        MemoryDraft(content="User said hello"),
    ]
    generation = StaticGeneration(drafts)
    generator = MemoryGenerator(generation, MemoryIdGenerator(counter=Counter.from_number(7)))

    entries = asyncio.run(generator.generate_memory([HumanMessage(content="I own two rabbits")], now=NOW))

    assert generation.inputs == ["User: I own two rabbits"]
    assert [e.id for e in entries] == ["mem-000000007", "mem-000000008"]
    first = entries[0]
    assert first.kind == MemoryKind.SEMANTIC
    assert first.importance == 0.9
    assert first.confidence == Confidence.HIGH
    assert first.created_at == NOW
    assert first.last_accessed == NOW
    assert first.access_count == 0
    assert first.get_metadata("topic") == "pets"


def test_generator_skips_empty_history():
    generation = StaticGeneration([MemoryDraft(content="never used")])
    generator = MemoryGenerator(generation)

    assert asyncio.run(generator.generate_memory([])) == []
    assert generation.inputs == []


def test_generated_memories_can_be_stored_and_retrieved():
    generation = StaticGeneration([
        MemoryDraft(content="user likes rabbits", importance=0.9),
        MemoryDraft(content="user lives in paris", importance=0.2),
    ])
    embedder = FakeEmbedder({
        "user likes rabbits": [1.0, 0.0, 0.0, 0.0],
        "user lives in paris": [0.0, 1.0, 0.0, 0.0],
        "which pets": [1.0, 0.1, 0.0, 0.0],
    })
    manager = (
        MemoryManager.builder()
        .storage(InMemoryVectorStore(dim=DIM))
        .embedder(embedder)
        .hot_cache(InMemoryVectorStore(dim=DIM))
        .build()
    )

    entries = asyncio.run(MemoryGenerator(generation).generate_memory(["User: hi"], now=NOW))
    asyncio.run(manager.store_entries(entries))
    results = asyncio.run(manager.retrieve("which pets", 1))

    assert results[0].entry.content == "user likes rabbits"
    assert manager.cache_stats.hits == 1
