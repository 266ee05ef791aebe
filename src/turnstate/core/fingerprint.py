"""Document fingerprinting for change detection.

A fingerprint is a hash over the canonical JSON form of the whole document.
Any structural change (field added, removed or changed at any depth) yields a
different fingerprint, so no per-field bookkeeping is needed.

Usage:
    before = compute_fingerprint(document)
    document["count"] = 2
    assert compute_fingerprint(document) != before
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

from pydantic_core import to_jsonable_python

if TYPE_CHECKING:
    from turnstate.core.cache import CacheEntry

DEFAULT_ALGORITHM = "sha256"


def canonical_json(value: Any) -> str:
    """Serialize value to canonical JSON (sorted keys, compact separators).

    Pydantic models, dataclasses, sets, datetimes and the other types Pydantic
    knows how to serialize are converted to their JSON form first.

    Args:
        value: Value to serialize.

    Returns:
        Deterministic JSON string.

    Raises:
        pydantic_core.PydanticSerializationError: If value is not serializable.
    """
    return json.dumps(to_jsonable_python(value), sort_keys=True, separators=(",", ":"))


def compute_fingerprint(document: Any, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Compute the fingerprint of a document.

    Args:
        document: State document (or any serializable value).
        algorithm: hashlib algorithm name.

    Returns:
        Hex digest of the document's canonical JSON.
    """
    return hashlib.new(algorithm, canonical_json(document).encode()).hexdigest()


def is_changed(entry: CacheEntry) -> bool:
    """Check whether an entry's document differs from its last fingerprint."""
    return compute_fingerprint(entry.document, entry.algorithm) != entry.fingerprint
