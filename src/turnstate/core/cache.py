"""Cached state entry for one state manager in one turn.

Usage:
    entry = CacheEntry({"count": 1})
    entry.document["count"] = 2
    assert entry.is_changed()
    entry.mark_saved()
    assert not entry.is_changed()
"""

from __future__ import annotations

from turnstate.core.fingerprint import DEFAULT_ALGORITHM, compute_fingerprint, is_changed
from turnstate.core.types import StateDocument


class CacheEntry:
    """A state document plus the fingerprint taken at its last known-good state.

    The fingerprint is taken on construction, so a fresh entry is never dirty.

    Args:
        document: Loaded document, or None for an empty one.
        algorithm: hashlib algorithm used for fingerprints.
    """

    __slots__ = ("document", "fingerprint", "algorithm")

    def __init__(
        self,
        document: StateDocument | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ):
        self.document: StateDocument = document if document is not None else {}
        self.algorithm = algorithm
        self.fingerprint = compute_fingerprint(self.document, algorithm)

    def is_changed(self) -> bool:
        """Check whether the document was mutated since the last fingerprint.

        Returns:
            True if the document's current fingerprint differs.
        """
        return is_changed(self)

    def mark_saved(self) -> None:
        """Re-take the fingerprint after the document was persisted."""
        self.fingerprint = compute_fingerprint(self.document, self.algorithm)

    def __repr__(self) -> str:
        return f"CacheEntry(fields={sorted(self.document)!r}, fingerprint={self.fingerprint[:12]!r})"
