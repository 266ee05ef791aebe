"""Per-turn context objects.

A TurnContext is created by the pipeline for each inbound request and passed
explicitly to every state operation. Its TurnStateBag is the per-turn cache
slot where state managers keep their CacheEntry.

Usage:
    activity = Activity(channel_id="slack", conversation_id="c1", from_id="u1")
    turn_context = TurnContext(activity)

    await conversation_state.load(turn_context)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Activity(BaseModel):
    """Inbound request data used to derive storage keys.

    Attributes:
        channel_id: Channel the request arrived on.
        conversation_id: Conversation the request belongs to.
        from_id: Sender identifier.
        recipient_id: Recipient identifier.
        text: Optional message text.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    channel_id: str | None = Field(default=None, alias="channelId")
    conversation_id: str | None = Field(default=None, alias="conversationId")
    from_id: str | None = Field(default=None, alias="fromId")
    recipient_id: str | None = Field(default=None, alias="recipientId")
    text: str | None = None


class TurnStateBag:
    """Request-scoped key-value bag shared by everything handling one turn."""

    def __init__(self) -> None:
        self._items: dict[str, Any] = {}

    def get(self, key: str, default: T | None = None) -> Any | T | None:
        """Get an item, or default if absent."""
        return self._items.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store an item, replacing any previous one under key."""
        self._items[key] = value

    def pop(self, key: str, default: Any = None) -> Any:
        """Remove an item and return it, or default if absent."""
        return self._items.pop(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


@dataclass(slots=True)
class TurnContext:
    """Everything known about the current turn.

    Attributes:
        activity: Inbound request data.
        turn_state: Per-turn cache slot, empty at the start of every turn.
    """

    activity: Activity = field(default_factory=Activity)
    turn_state: TurnStateBag = field(default_factory=TurnStateBag)
