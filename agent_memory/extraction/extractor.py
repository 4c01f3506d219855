"""
Memory Extraction Implementation

LLMMemoryExtractor turns conversation text into memory drafts with a chat
model's structured output. MemoryGenerator turns those drafts into entries
ready to be stored.
"""

import time
from typing import List, Optional, Sequence, Union, cast

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from agent_memory.interfaces import (
    GenerationConfig,
    GenerationError,
    IdGenerationStrategy,
    MemoryDraft,
    MemoryEntry,
    MemoryGeneration,
)
from agent_memory.id_gen import MemoryIdGenerator
from agent_memory.utils import get_logger, get_message_text, load_chat_model
from .prompts import MEMORY_EXTRACTION_SYSTEM_PROMPT
from .schemas import MemoryExtraction

logger = get_logger(__name__)


class LLMMemoryExtractor(MemoryGeneration):
    """Extracts memory drafts with a LangChain chat model."""

    def __init__(
        self,
        model: Union[str, BaseChatModel],
        config: Optional[GenerationConfig] = None,
        system_prompt: str = MEMORY_EXTRACTION_SYSTEM_PROMPT,
    ):
        """
        Args:
            model: A chat model, or a 'provider/model' name to load one
            config: Filtering applied to the model's output
            system_prompt: Instructions sent ahead of the conversation
        """
        if isinstance(model, str):
            model = load_chat_model(model)
        self.config = config or GenerationConfig()
        self.system_prompt = system_prompt
        self._structured_llm = model.with_structured_output(MemoryExtraction)

    async def generate(self, serialized_input: str) -> List[MemoryDraft]:
        if not serialized_input.strip():
            return []

        start_time = time.time()
        messages = [
            SystemMessage(content=self.system_prompt),
            HumanMessage(content=serialized_input),
        ]

        try:
            result = cast(MemoryExtraction, await self._structured_llm.ainvoke(messages))
        except Exception as e:
            logger.error("Error during memory extraction", exc_info=True)
            raise GenerationError(f"Memory extraction failed: {e}") from e

        drafts = [d for d in result.memories if d.importance >= self.config.min_importance]
        drafts = drafts[:self.config.max_memories_per_call]

        logger.info("Memories extracted", extra={
            "function": "LLMMemoryExtractor.generate",
            "duration_ms": round((time.time() - start_time) * 1000, 2),
            "details": {
                "returned": len(result.memories),
                "kept": len(drafts),
                "reasoning": result.reasoning,
            },
        })
        return drafts


class MemoryGenerator:
    """
    Runs a MemoryGeneration collaborator over chat history and assigns an id
    and timestamps to every draft it returns.
    """

    def __init__(
        self,
        generation: MemoryGeneration,
        id_strategy: Optional[IdGenerationStrategy] = None,
    ):
        self.generation = generation
        self.id_strategy = id_strategy or MemoryIdGenerator()

    async def generate_memory(
        self,
        history: Sequence[Union[str, BaseMessage]],
        now: Optional[int] = None,
    ) -> List[MemoryEntry]:
        serialized = serialize_history(history)
        if not serialized:
            return []

        drafts = await self.generation.generate(serialized)
        if now is None:
            now = int(time.time())

        return [self.to_entry(draft, now) for draft in drafts]

    def to_entry(self, draft: MemoryDraft, now: int) -> MemoryEntry:
        return MemoryEntry(
            id=self.id_strategy.generate_id(),
            content=draft.content,
            kind=draft.kind,
            importance=draft.importance,
            created_at=now,
            last_accessed=now,
            access_count=0,
            source_context=draft.source_context,
            confidence=draft.confidence,
            metadata=draft.metadata_pairs(),
        )


def serialize_history(history: Sequence[Union[str, BaseMessage]]) -> str:
    """
    One line per message. Strings are used as-is; LangChain messages become
    'Role: content'. Tool messages and tool-calling AI turns are skipped.
    """
    lines = []
    for msg in history:
        if isinstance(msg, str):
            if msg.strip():
                lines.append(msg)
            continue
        if isinstance(msg, ToolMessage):
            continue
        if isinstance(msg, AIMessage) and getattr(msg, "tool_calls", None):
            continue
        text = get_message_text(msg)
        if text:
            lines.append(f"{_get_message_role(msg)}: {text}")
    return "\n".join(lines)


def _get_message_role(message: BaseMessage) -> str:
    if isinstance(message, HumanMessage):
        return "User"
    elif isinstance(message, AIMessage):
        return "Assistant"
    elif isinstance(message, SystemMessage):
        return "System"
    return "User"
