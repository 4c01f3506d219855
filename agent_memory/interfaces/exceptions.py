"""Exception Definitions"""


class MemoryCoreError(Exception):
    """Base class for every error raised by agent_memory.

    Raising it directly is the escape hatch for collaborator-specific failures.
    """
    pass


# Build exceptions
class BuildError(MemoryCoreError):
    """A required dependency was not supplied before build()"""
    pass


class EmbedderNotFoundError(BuildError):
    """MemoryManagerBuilder.build() was called without an embedder"""

    def __init__(self):
        super().__init__("An embedder must be set before building a MemoryManager")


class StorageNotFoundError(BuildError):
    """MemoryManagerBuilder.build() was called without a storage backend"""

    def __init__(self):
        super().__init__("A storage backend must be set before building a MemoryManager")


# Storage exceptions
class StorageError(MemoryCoreError):
    """Base class for storage backend errors"""
    pass


class DimensionMismatchError(StorageError):
    """Embedding length does not match the store's dimensionality"""

    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"Expected an embedding of dimension {expected}, got {got}")


class NotFoundError(StorageError):
    """No entry exists for the requested id"""

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"No memory entry with id {entry_id!r}")


class DuplicateIdError(StorageError):
    """An entry with the same id is already stored"""

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"A memory entry with id {entry_id!r} already exists")


class NoOpError(MemoryCoreError):
    """A placeholder collaborator was used instead of a real one"""
    pass


# Collaborator exceptions
class EmbeddingError(MemoryCoreError):
    """Error generating embedding vectors"""
    pass


class GenerationError(MemoryCoreError):
    """Error while extracting memory drafts from input text"""
    pass


class ConfigurationError(MemoryCoreError):
    """Invalid configuration value"""
    pass


class ValidationError(MemoryCoreError):
    """Input validation error"""
    pass
