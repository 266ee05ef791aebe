"""Groups of state managers loaded and saved together.

Usage:
    states = StateSet(conversation_state, user_state)
    await states.load_all(turn_context)
    ...
    await states.save_all(turn_context)

    # Or save every manager at the end of each turn
    middleware = AutoSaveStateMiddleware(conversation_state, user_state)
    await middleware.on_turn(turn_context, handler)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import Any, Protocol

from turnstate.core.context import TurnContext
from turnstate.core.errors import require
from turnstate.state.manager import NextHandler, StateManager


async def _gather_all(operations: Iterable[Awaitable[None]]) -> None:
    """Run operations concurrently and wait for every one of them to finish.

    A single failure is re-raised as is. Several failures are raised together
    as an exception group.
    """
    results = await asyncio.gather(*operations, return_exceptions=True)
    errors = [r for r in results if isinstance(r, BaseException)]
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise BaseExceptionGroup("state operations failed", errors)


class Middleware(Protocol):
    """A pipeline step wrapping the rest of the pipeline."""

    async def on_turn(self, turn_context: TurnContext, next_handler: NextHandler) -> Any:
        """Handle one turn, awaiting next_handler to continue the pipeline."""
        ...


class StateSet:
    """Ordered collection of state managers.

    Managers keep their entries in separate turn state slots, so loading and
    saving them concurrently is safe within one turn.

    Args:
        *managers: Initial managers.
    """

    def __init__(self, *managers: StateManager):
        self._managers: list[StateManager] = []
        self.add(*managers)

    @property
    def managers(self) -> tuple[StateManager, ...]:
        """Managers in this set, in insertion order."""
        return tuple(self._managers)

    def add(self, *managers: StateManager) -> StateSet:
        """Add managers to the set.

        Returns:
            self, for chaining.
        """
        for manager in managers:
            require(manager, "manager")
            self._managers.append(manager)
        return self

    async def load_all(self, turn_context: TurnContext, force: bool = False) -> None:
        """Load every manager's state for the turn."""
        require(turn_context, "turn_context")
        await _gather_all(m.load(turn_context, force) for m in self._managers)

    async def save_all(self, turn_context: TurnContext, force: bool = False) -> None:
        """Save every manager's state for the turn if it changed (or if forced)."""
        require(turn_context, "turn_context")
        await _gather_all(m.save(turn_context, force) for m in self._managers)

    def __len__(self) -> int:
        return len(self._managers)


class AutoSaveStateMiddleware:
    """Saves a set of state managers after the rest of the pipeline runs.

    Unlike StateManager.on_turn, this does not load on entry: state is loaded
    lazily by accessors, and only managers that were touched get saved.

    Args:
        *managers: Managers (or a StateSet) to save.
    """

    def __init__(self, *managers: StateManager | StateSet):
        self._state_set = StateSet()
        for manager in managers:
            if isinstance(manager, StateSet):
                self._state_set.add(*manager.managers)
            else:
                self._state_set.add(manager)

    @property
    def state_set(self) -> StateSet:
        """Managers saved by this middleware."""
        return self._state_set

    async def on_turn(self, turn_context: TurnContext, next_handler: NextHandler) -> Any:
        """Run the rest of the pipeline, then save all managers.

        If next_handler raises, the error propagates and nothing is saved.
        """
        require(turn_context, "turn_context")
        require(next_handler, "next_handler")
        result = await next_handler()
        await self._state_set.save_all(turn_context)
        return result
