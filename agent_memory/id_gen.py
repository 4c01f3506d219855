"""ID generation strategies for memories that do not come with their own ids."""

import uuid
from typing import Optional

from agent_memory.interfaces import IdGenerationStrategy, ValidationError


class Counter(IdGenerationStrategy):
    """A monotonically increasing counter. Starts from 1 by default."""

    def __init__(self, start: int = 1):
        if start < 0:
            raise ValidationError("Counter start must be non-negative")
        self._next = start

    @classmethod
    def from_number(cls, number: int) -> "Counter":
        return cls(number)

    def get_id(self) -> int:
        number = self._next
        self._next += 1
        return number

    def generate_id(self) -> str:
        return str(self.get_id())


class MemoryIdGenerator(IdGenerationStrategy):
    """Produces ids of the form '<prefix>-<9-digit zero-padded counter>', e.g. mem-000000001."""

    def __init__(self, prefix: str = "mem", counter: Optional[Counter] = None):
        self.prefix = prefix
        self.counter = counter or Counter()

    def with_prefix(self, prefix: str) -> "MemoryIdGenerator":
        self.prefix = prefix
        return self

    def with_counter(self, counter: Counter) -> "MemoryIdGenerator":
        self.counter = counter
        return self

    def generate_id(self) -> str:
        return f"{self.prefix}-{self.counter.get_id():09d}"


class UuidV4Generator(IdGenerationStrategy):
    """Random UUID4 ids."""

    def generate_id(self) -> str:
        return str(uuid.uuid4())
