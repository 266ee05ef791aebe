"""State managers and property accessors.

Architecture Note:
    state/ is the stateful service layer. Managers own no data themselves;
    each turn's document lives in that turn's TurnStateBag.
"""

from turnstate.state.accessor import StatePropertyAccessor
from turnstate.state.manager import NextHandler, StateManager
from turnstate.state.scopes import ConversationState, PrivateConversationState, UserState
from turnstate.state.state_set import AutoSaveStateMiddleware, Middleware, StateSet

__all__ = [
    "StateManager",
    "StatePropertyAccessor",
    "NextHandler",
    "ConversationState",
    "UserState",
    "PrivateConversationState",
    "StateSet",
    "Middleware",
    "AutoSaveStateMiddleware",
]
