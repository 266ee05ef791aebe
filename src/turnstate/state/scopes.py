"""Built-in storage-key strategies.

Each scope partitions state differently:
- ConversationState: shared by everyone in a conversation
- UserState: follows a user across conversations on a channel
- PrivateConversationState: one user within one conversation

Usage:
    storage = MemoryStorage()
    conversation_state = ConversationState(storage)
    user_state = UserState(storage)
"""

from __future__ import annotations

from turnstate.core.context import TurnContext
from turnstate.core.errors import InvalidArgumentError, require
from turnstate.state.manager import StateManager


def _activity_field(turn_context: TurnContext, field_name: str) -> str:
    require(turn_context, "turn_context")
    value = getattr(turn_context.activity, field_name)
    if not value:
        raise InvalidArgumentError(f"activity.{field_name} is required for this state scope")
    return str(value)


class ConversationState(StateManager):
    """State scoped to a conversation."""

    def get_storage_key(self, turn_context: TurnContext) -> str:
        channel_id = _activity_field(turn_context, "channel_id")
        conversation_id = _activity_field(turn_context, "conversation_id")
        return f"{channel_id}/conversations/{conversation_id}"


class UserState(StateManager):
    """State scoped to a user on a channel."""

    def get_storage_key(self, turn_context: TurnContext) -> str:
        channel_id = _activity_field(turn_context, "channel_id")
        user_id = _activity_field(turn_context, "from_id")
        return f"{channel_id}/users/{user_id}"


class PrivateConversationState(StateManager):
    """State scoped to a user within a single conversation."""

    def get_storage_key(self, turn_context: TurnContext) -> str:
        channel_id = _activity_field(turn_context, "channel_id")
        conversation_id = _activity_field(turn_context, "conversation_id")
        user_id = _activity_field(turn_context, "from_id")
        return f"{channel_id}/conversations/{conversation_id}/users/{user_id}"
