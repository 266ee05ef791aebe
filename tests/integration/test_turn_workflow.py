"""End-to-end turns through a middleware pipeline."""

import pytest

from turnstate import ConversationState, PropertyNotSetError, TurnContext, UserState


async def run_pipeline(turn_context: TurnContext, middlewares, handler):
    """Chain middlewares around handler, outermost first."""

    async def call(index: int):
        if index == len(middlewares):
            return await handler(turn_context)
        return await middlewares[index].on_turn(turn_context, lambda: call(index + 1))

    return await call(0)


@pytest.mark.asyncio
async def test_count_persists_across_turns(storage, state, new_turn):
    """Scenario: empty storage, set count, save, new turn force-loads it back."""
    count = state.create_property("count", int)

    first = new_turn()
    await count.set(first, 1)
    await state.save(first)

    second = new_turn()
    await state.load(second, force=True)
    assert await count.get(second) == 1


@pytest.mark.asyncio
async def test_counter_bot_over_several_turns(storage, new_turn):
    conversation = ConversationState(storage)
    user = UserState(storage)
    turns = conversation.create_property("turns", int)
    name = user.create_property("name", str)

    async def handler(turn_context: TurnContext) -> int:
        value = await turns.get(turn_context, lambda: 0) + 1
        await turns.set(turn_context, value)
        try:
            await name.get(turn_context)
        except PropertyNotSetError:
            await name.set(turn_context, "Ada")
        return value

    results = [
        await run_pipeline(new_turn(), [conversation, user], handler) for _ in range(3)
    ]

    assert results == [1, 2, 3]
    # conversation changes every turn; user only on the first
    assert [list(w) for w in storage.writes] == [
        ["test/users/user-1"],
        ["test/conversations/convo-1"],
        ["test/conversations/convo-1"],
        ["test/conversations/convo-1"],
    ]


@pytest.mark.asyncio
async def test_read_only_turn_issues_no_writes(storage, new_turn):
    await storage.write({"test/conversations/convo-1": {"turns": 7}})
    storage.writes.clear()
    conversation = ConversationState(storage)
    turns = conversation.create_property("turns", int)

    async def handler(turn_context: TurnContext) -> int:
        return await turns.get(turn_context)

    assert await run_pipeline(new_turn(), [conversation], handler) == 7
    assert storage.writes == []
