"""Core building blocks: document types, errors, fingerprinting, turn context.

Architecture Note:
    core/ is stateless functionality shared by the state managers. Nothing in
    here performs I/O.
"""

from turnstate.core.cache import CacheEntry
from turnstate.core.context import Activity, TurnContext, TurnStateBag
from turnstate.core.errors import (
    InvalidArgumentError,
    PropertyNotSetError,
    PropertyTypeError,
    StateNotLoadedError,
    TurnStateError,
)
from turnstate.core.fingerprint import canonical_json, compute_fingerprint, is_changed
from turnstate.core.types import StateDocument

__all__ = [
    # Types
    "StateDocument",
    # Context
    "Activity",
    "TurnContext",
    "TurnStateBag",
    # Change tracking
    "CacheEntry",
    "canonical_json",
    "compute_fingerprint",
    "is_changed",
    # Errors
    "TurnStateError",
    "InvalidArgumentError",
    "PropertyNotSetError",
    "PropertyTypeError",
    "StateNotLoadedError",
]
