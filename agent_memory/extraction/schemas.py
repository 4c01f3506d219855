from pydantic import BaseModel, Field
from typing import List

from agent_memory.interfaces import MemoryDraft


class MemoryExtraction(BaseModel):
    """The output structure for the memory extraction model."""
    memories: List[MemoryDraft] = Field(
        default_factory=list,
        description="Memories worth keeping from the conversation"
    )
    reasoning: str = Field("", description="Brief reasoning for why these memories were extracted")
