"""Storage protocol for swappable durable backends.

The storage layer persists state documents by key. State managers issue
single-key reads and single-entry write batches; backends may support more.

Usage:
    storage = MemoryStorage()
    conversation_state = ConversationState(storage)
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Protocol, runtime_checkable

from turnstate.core.types import StateDocument


@runtime_checkable
class Storage(Protocol):
    """Abstract key-value storage for state documents.

    No transactional multi-key guarantee is required. Writes to the same key
    are last-writer-wins. Errors propagate to the caller unchanged.
    """

    async def read(self, keys: Collection[str]) -> dict[str, StateDocument]:
        """Read documents by key.

        Args:
            keys: Keys to read.

        Returns:
            Mapping of key to document. Keys that are absent are omitted.
        """
        ...

    async def write(self, changes: Mapping[str, StateDocument]) -> None:
        """Write documents, replacing any stored under the same keys.

        Args:
            changes: Mapping of key to document.
        """
        ...

    async def delete(self, keys: Collection[str]) -> None:
        """Delete documents by key. Absent keys are ignored.

        Args:
            keys: Keys to delete.
        """
        ...
