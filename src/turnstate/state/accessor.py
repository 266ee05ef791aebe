"""Named property accessors over a state manager's cached document.

Usage:
    profile = user_state.create_property("profile", UserProfile)

    # Loads state on first use, creates and caches a default if unset
    current = await profile.get(turn_context, UserProfile)
    current.name = "Ada"

    await profile.set(turn_context, current)
    await profile.delete(turn_context)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar

from turnstate.core.context import TurnContext
from turnstate.core.errors import PropertyNotSetError, require

if TYPE_CHECKING:
    from turnstate.state.manager import StateManager

T = TypeVar("T")


class StatePropertyAccessor(Generic[T]):
    """Lazily-loading handle to one named field of a state manager's document.

    Every operation first makes sure state is loaded for the turn without
    re-reading an already loaded (and possibly mutated) document.

    Args:
        state_manager: Manager owning the document.
        name: Field name.
        value_type: Optional expected type, checked on every read.
    """

    def __init__(
        self,
        state_manager: StateManager,
        name: str,
        value_type: type[T] | None = None,
    ):
        """Initialize property accessor.

        Args:
            state_manager: Manager owning the document.
            name: Field name.
            value_type: Optional expected type, checked on every read.
        """
        self._state_manager = state_manager
        self._name = name
        self._value_type = value_type

    @property
    def name(self) -> str:
        """Get the field name this accessor reads and writes.

        Returns:
            The field name.
        """
        return self._name

    @property
    def value_type(self) -> type[T] | None:
        """Expected value type, or None if reads are unchecked."""
        return self._value_type

    async def get(
        self,
        turn_context: TurnContext,
        default_factory: Callable[[], T] | None = None,
    ) -> T:
        """Get the field value, loading state first if needed.

        If the field is absent and a default factory is given, its result is
        stored in the cached document (not in storage) and returned, so later
        reads in the same turn see the same object.

        Args:
            turn_context: Context for the current turn.
            default_factory: Called to produce a value when the field is absent.

        Returns:
            The field value.

        Raises:
            PropertyNotSetError: If the field is absent and no factory was given.
            PropertyTypeError: If the field holds a value of another type.
        """
        require(turn_context, "turn_context")
        await self._state_manager.load(turn_context, force=False)
        try:
            return self._state_manager.get_field(turn_context, self._name, self._value_type)
        except PropertyNotSetError:
            if default_factory is None:
                raise
        value = default_factory()
        self._state_manager.set_field(turn_context, self._name, value)
        return value

    async def set(self, turn_context: TurnContext, value: T) -> None:
        """Set the field value in the cached document, loading state first if needed.

        Args:
            turn_context: Context for the current turn.
            value: New value.
        """
        require(turn_context, "turn_context")
        await self._state_manager.load(turn_context, force=False)
        self._state_manager.set_field(turn_context, self._name, value)

    async def delete(self, turn_context: TurnContext) -> None:
        """Remove the field from the cached document, loading state first if needed.

        Args:
            turn_context: Context for the current turn.
        """
        require(turn_context, "turn_context")
        await self._state_manager.load(turn_context, force=False)
        self._state_manager.delete_field(turn_context, self._name)

    def __repr__(self) -> str:
        return f"StatePropertyAccessor({type(self._state_manager).__name__}, {self._name!r})"
