"""turnstate: turn-scoped state caching over pluggable storage.

Usage:
    from turnstate import Activity, ConversationState, MemoryStorage, TurnContext

    conversation_state = ConversationState(MemoryStorage())
    count = conversation_state.create_property("count", int)

    async def handler() -> None:
        value = await count.get(turn_context, lambda: 0)
        await count.set(turn_context, value + 1)

    turn_context = TurnContext(Activity(channel_id="test", conversation_id="c1"))
    await conversation_state.on_turn(turn_context, handler)
"""

__version__ = "0.1.0"

# Configuration
from turnstate.config import StateSettings

# Core primitives
from turnstate.core import (
    Activity,
    CacheEntry,
    InvalidArgumentError,
    PropertyNotSetError,
    PropertyTypeError,
    StateDocument,
    StateNotLoadedError,
    TurnContext,
    TurnStateBag,
    TurnStateError,
    compute_fingerprint,
    is_changed,
)

# State managers
from turnstate.state import (
    AutoSaveStateMiddleware,
    ConversationState,
    Middleware,
    NextHandler,
    PrivateConversationState,
    StateManager,
    StatePropertyAccessor,
    StateSet,
    UserState,
)

# Storage
from turnstate.storage import (
    MemoryStorage,
    Storage,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "StateDocument",
    "Activity",
    "TurnContext",
    "TurnStateBag",
    "CacheEntry",
    "compute_fingerprint",
    "is_changed",
    # Errors
    "TurnStateError",
    "InvalidArgumentError",
    "PropertyNotSetError",
    "PropertyTypeError",
    "StateNotLoadedError",
    # State
    "StateManager",
    "StatePropertyAccessor",
    "NextHandler",
    "ConversationState",
    "UserState",
    "PrivateConversationState",
    "StateSet",
    "Middleware",
    "AutoSaveStateMiddleware",
    # Storage
    "Storage",
    "MemoryStorage",
    # Config
    "StateSettings",
]
