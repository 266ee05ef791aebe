"""Tests for StatePropertyAccessor.

Critical Invariants:
- Accessors load lazily and never overwrite an already loaded document
- Default factories run at most once per turn
- Absent and wrong-type fields are distinct failures
"""

from dataclasses import dataclass, field

import pytest

from turnstate import InvalidArgumentError, PropertyNotSetError, PropertyTypeError


@dataclass
class Preferences:
    language: str = "en"
    topics: list[str] = field(default_factory=list)


@pytest.mark.asyncio
async def test_get_loads_state_lazily(state, storage, turn_context):
    await storage.write({"fixed/key": {"count": 5}})
    count = state.create_property("count")

    assert storage.reads == []
    assert await count.get(turn_context) == 5
    assert storage.reads == [["fixed/key"]]


@pytest.mark.asyncio
async def test_accessors_share_one_load_per_turn(state, storage, turn_context):
    count = state.create_property("count")
    name = state.create_property("name")

    await count.set(turn_context, 1)
    await name.set(turn_context, "Ada")
    await count.get(turn_context)

    assert len(storage.reads) == 1
    assert state.get_cached_state(turn_context) == {"count": 1, "name": "Ada"}


@pytest.mark.asyncio
async def test_get_without_default_raises_property_not_set(state, turn_context):
    count = state.create_property("count")
    with pytest.raises(PropertyNotSetError):
        await count.get(turn_context)


@pytest.mark.asyncio
async def test_default_factory_runs_once_per_turn(state, turn_context):
    """CRITICAL: The second get returns the cached default, not a new one."""
    calls = []

    def make_preferences() -> Preferences:
        calls.append(1)
        return Preferences()

    preferences = state.create_property("preferences", Preferences)

    first = await preferences.get(turn_context, make_preferences)
    second = await preferences.get(turn_context, make_preferences)

    assert len(calls) == 1
    assert first is second


@pytest.mark.asyncio
async def test_default_is_cached_but_not_written(state, storage, turn_context):
    count = state.create_property("count")

    assert await count.get(turn_context, lambda: 0) == 0

    assert storage.writes == []
    assert state.is_changed(turn_context)


@pytest.mark.asyncio
async def test_mutating_returned_value_marks_state_changed(state, storage, turn_context):
    preferences = state.create_property("preferences", Preferences)

    prefs = await preferences.get(turn_context, Preferences)
    await state.save(turn_context)
    prefs.topics.append("python")
    await state.save(turn_context)

    assert storage.writes[-1]["fixed/key"]["preferences"].topics == ["python"]
    assert len(storage.writes) == 2


@pytest.mark.asyncio
async def test_delete_then_get_raises_property_not_set(state, turn_context):
    count = state.create_property("count")
    await count.set(turn_context, 1)

    await count.delete(turn_context)

    with pytest.raises(PropertyNotSetError):
        await count.get(turn_context)


@pytest.mark.asyncio
async def test_delete_absent_property_is_fine(state, turn_context):
    count = state.create_property("count")
    await count.delete(turn_context)
    assert state.get_cached_state(turn_context) == {}


@pytest.mark.asyncio
async def test_wrong_type_does_not_fall_back_to_default(state, turn_context):
    """A present value of the wrong type fails loudly instead of being replaced."""
    count = state.create_property("count", int)
    await state.load(turn_context)
    state.set_field(turn_context, "count", "not-a-number")
    factory_calls = []

    with pytest.raises(PropertyTypeError):
        await count.get(turn_context, lambda: factory_calls.append(1) or 0)

    assert factory_calls == []
    assert state.get_field(turn_context, "count") == "not-a-number"


@pytest.mark.asyncio
async def test_set_does_not_overwrite_loaded_changes(state, storage, turn_context):
    await storage.write({"fixed/key": {"count": 1, "other": "kept"}})
    await state.load(turn_context)
    state.set_field(turn_context, "other", "changed")

    await state.create_property("count").set(turn_context, 2)

    assert state.get_cached_state(turn_context) == {"count": 2, "other": "changed"}


@pytest.mark.asyncio
async def test_accessor_rejects_none_turn_context(state, storage):
    count = state.create_property("count")
    with pytest.raises(InvalidArgumentError):
        await count.get(None)
    with pytest.raises(InvalidArgumentError):
        await count.set(None, 1)
    with pytest.raises(InvalidArgumentError):
        await count.delete(None)
    assert storage.reads == []


def test_accessor_exposes_name_and_type(state):
    count = state.create_property("count", int)
    assert count.name == "count"
    assert count.value_type is int
    assert "count" in repr(count)
