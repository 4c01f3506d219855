"""
Memory Core Interfaces - Shared Definitions

This package contains the shared data structures, enums, capabilities and
exceptions. Implementation classes are in their respective modules:
- agent_memory/memory/manager.py (MemoryManager)
- agent_memory/memory/cache.py (MemoryCache)
- agent_memory/storage/vector_storage.py (InMemoryVectorStore)
- agent_memory/storage/embedding_service.py (OpenAIEmbeddingService, etc.)
- agent_memory/extraction/extractor.py (LLMMemoryExtractor, MemoryGenerator)

Usage example:
    from agent_memory.interfaces import (
        # Data structures
        MemoryEntry,
        SearchResult,

        # Enums
        MemoryKind,
        Confidence,

        # Exceptions
        NotFoundError,
        DimensionMismatchError,
    )
"""

# Memory data structures
from .memory_interface import MemoryEntry, MemoryKind, Confidence, CacheStats

# Storage capabilities
from .storage_interface import SearchResult, Storage, StorageNotSet, Embedder

# Extraction data structures and capabilities
from .extraction_interface import (
    MemoryDraft,
    MetadataItem,
    GenerationConfig,
    MemoryGeneration,
    IdGenerationStrategy,
)

# Exception classes
from .exceptions import (
    MemoryCoreError,
    BuildError,
    EmbedderNotFoundError,
    StorageNotFoundError,
    StorageError,
    DimensionMismatchError,
    NotFoundError,
    DuplicateIdError,
    NoOpError,
    EmbeddingError,
    GenerationError,
    ConfigurationError,
    ValidationError,
)

__all__ = [
    # Memory data structures
    "MemoryEntry",
    "MemoryKind",
    "Confidence",
    "CacheStats",

    # Storage capabilities
    "SearchResult",
    "Storage",
    "StorageNotSet",
    "Embedder",

    # Extraction
    "MemoryDraft",
    "MetadataItem",
    "GenerationConfig",
    "MemoryGeneration",
    "IdGenerationStrategy",

    # Exceptions
    "MemoryCoreError",
    "BuildError",
    "EmbedderNotFoundError",
    "StorageNotFoundError",
    "StorageError",
    "DimensionMismatchError",
    "NotFoundError",
    "DuplicateIdError",
    "NoOpError",
    "EmbeddingError",
    "GenerationError",
    "ConfigurationError",
    "ValidationError",
]
