"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

import copy
from collections.abc import Collection, Mapping

from turnstate import Activity, MemoryStorage, StateDocument, StateManager, TurnContext


class RecordingStorage(MemoryStorage):
    """MemoryStorage that records every read and write batch."""

    def __init__(self, documents: Mapping[str, StateDocument] | None = None):
        super().__init__(documents)
        self.reads: list[list[str]] = []
        self.writes: list[dict[str, StateDocument]] = []
        self.deletes: list[list[str]] = []

    async def read(self, keys: Collection[str]) -> dict[str, StateDocument]:
        self.reads.append(list(keys))
        return await super().read(keys)

    async def write(self, changes: Mapping[str, StateDocument]) -> None:
        self.writes.append(copy.deepcopy(dict(changes)))
        await super().write(changes)

    async def delete(self, keys: Collection[str]) -> None:
        self.deletes.append(list(keys))
        await super().delete(keys)


class FixedKeyState(StateManager):
    """State manager that always uses the same storage key."""

    def __init__(self, storage, key: str = "fixed/key", **kwargs):
        super().__init__(storage, **kwargs)
        self.key = key

    def get_storage_key(self, turn_context: TurnContext) -> str:
        return self.key


@pytest.fixture
def storage() -> RecordingStorage:
    """Fresh recording storage."""
    return RecordingStorage()


@pytest.fixture
def state(storage: RecordingStorage) -> FixedKeyState:
    """State manager over the recording storage."""
    return FixedKeyState(storage)


@pytest.fixture
def activity() -> Activity:
    return Activity(channel_id="test", conversation_id="convo-1", from_id="user-1")


@pytest.fixture
def turn_context(activity: Activity) -> TurnContext:
    """Fresh context for one turn."""
    return TurnContext(activity)


@pytest.fixture
def new_turn(activity: Activity):
    """Factory for additional turns of the same conversation."""

    def _new_turn() -> TurnContext:
        return TurnContext(activity)

    return _new_turn


@pytest.fixture
def state_cls():
    return FixedKeyState


@pytest.fixture
def storage_cls():
    return RecordingStorage
