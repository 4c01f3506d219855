"""
Extraction Module

Export memory extraction implementations and schemas.
"""

from .extractor import LLMMemoryExtractor, MemoryGenerator, serialize_history
from .schemas import MemoryExtraction
from .prompts import MEMORY_EXTRACTION_SYSTEM_PROMPT

__all__ = [
    "LLMMemoryExtractor",
    "MemoryGenerator",
    "serialize_history",
    "MemoryExtraction",
    "MEMORY_EXTRACTION_SYSTEM_PROMPT",
]
