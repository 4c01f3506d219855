"""
Extraction Interface - Shared Data Structures
This file contains ONLY shared data structures and capabilities for the
extraction layer. For implementation, see agent_memory/extraction/
"""

from abc import ABC, abstractmethod
from typing import List, Tuple, Any
from dataclasses import dataclass

from pydantic import BaseModel, Field

from .memory_interface import MemoryKind, Confidence


# ============================================================================
# INTERFACE DATA STRUCTURES
# ============================================================================


class MetadataItem(BaseModel):
    """A single key/value annotation attached to a memory"""
    key: str = Field(..., description="Short metadata key, e.g. 'topic'")
    value: str = Field(..., description="Metadata value")


class MemoryDraft(BaseModel):
    """A candidate memory produced by extraction. Has no id or timestamps yet."""
    content: str = Field(..., description="The memory itself, written as a standalone statement")
    kind: MemoryKind = Field(
        MemoryKind.EPISODIC,
        description="working: current task state; episodic: past events; semantic: durable facts",
    )
    source_context: str = Field("", description="Where in the input this memory came from")
    importance: float = Field(0.5, ge=0.0, le=1.0, description="Importance from 0.0 to 1.0")
    confidence: Confidence = Field(Confidence.MEDIUM, description="How certain the extraction is")
    metadata: List[MetadataItem] = Field(default_factory=list)

    def metadata_pairs(self) -> List[Tuple[str, Any]]:
        return [(item.key, item.value) for item in self.metadata]


@dataclass
class GenerationConfig:
    """Configuration for memory generation"""
    min_importance: float = 0.0
    max_memories_per_call: int = 16


# ============================================================================
# CAPABILITIES
# ============================================================================


class MemoryGeneration(ABC):
    """Produces memory drafts from serialized input (usually chat history)."""

    @abstractmethod
    async def generate(self, serialized_input: str) -> List[MemoryDraft]:
        """Extract drafts. Raises GenerationError on failure."""


class IdGenerationStrategy(ABC):
    """Assigns ids to drafts before they are stored."""

    @abstractmethod
    def generate_id(self) -> str:
        """Return a new id. Called once per stored draft."""
