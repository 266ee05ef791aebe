"""Storage backends."""

from turnstate.storage.memory import MemoryStorage
from turnstate.storage.protocol import Storage

__all__ = [
    "Storage",
    "MemoryStorage",
]
