"""In-memory storage implementation.

Simple dict-based storage suitable for single-process use and testing.
Documents are deep-copied on the way in and out, so mutations to a cached
document never reach storage until they are written.

Usage:
    storage = MemoryStorage()
    user_state = UserState(storage)
"""

from __future__ import annotations

import copy as cp
import logging
from collections.abc import Collection, Mapping

from turnstate.core.errors import require, require_name
from turnstate.core.types import StateDocument

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Dict-backed storage.

    Structure:
        _documents[key] = document

    Args:
        documents: Optional initial contents (copied).
    """

    def __init__(self, documents: Mapping[str, StateDocument] | None = None):
        """Initialize memory storage.

        Args:
            documents: Optional initial contents (copied).
        """
        self._documents: dict[str, StateDocument] = {}
        if documents:
            for key, document in documents.items():
                self._documents[require_name(key, "key")] = cp.deepcopy(document)

    async def read(self, keys: Collection[str]) -> dict[str, StateDocument]:
        """Read documents by key.

        Args:
            keys: Keys to read.

        Returns:
            Mapping of key to a copy of the stored document. Absent keys are omitted.
        """
        require(keys, "keys")
        result: dict[str, StateDocument] = {}
        for key in keys:
            document = self._documents.get(require_name(key, "key"))
            if document is not None:
                result[key] = cp.deepcopy(document)
        logger.debug("read %d of %d key(s)", len(result), len(keys))
        return result

    async def write(self, changes: Mapping[str, StateDocument]) -> None:
        """Write documents, replacing any stored under the same keys.

        Args:
            changes: Mapping of key to document.
        """
        require(changes, "changes")
        for key in changes:
            require_name(key, "key")
        for key, document in changes.items():
            self._documents[key] = cp.deepcopy(document)
        logger.debug("wrote %d key(s)", len(changes))

    async def delete(self, keys: Collection[str]) -> None:
        """Delete documents by key. Absent keys are ignored.

        Args:
            keys: Keys to delete.
        """
        require(keys, "keys")
        for key in keys:
            self._documents.pop(require_name(key, "key"), None)
        logger.debug("deleted %d key(s)", len(keys))

    def __contains__(self, key: object) -> bool:
        return key in self._documents

    def __len__(self) -> int:
        return len(self._documents)
