"""Exception hierarchy and argument checks.

Usage:
    from turnstate.core.errors import PropertyNotSetError

    try:
        profile = await profile_accessor.get(turn_context)
    except PropertyNotSetError:
        ...
"""

from __future__ import annotations

from typing import Any


class TurnStateError(Exception):
    """Base class for all turnstate errors."""

    pass


class InvalidArgumentError(TurnStateError, ValueError):
    """Raised when a required argument is None or blank."""

    pass


class PropertyNotSetError(TurnStateError, LookupError):
    """Raised when a property is read that is not set and no default was provided."""

    def __init__(self, name: str):
        super().__init__(f"Property '{name}' not set and no default provided.")
        self.name = name


class PropertyTypeError(TurnStateError, TypeError):
    """Raised when a property is set but holds a value of an unexpected type."""

    def __init__(self, name: str, expected: type, actual: Any):
        super().__init__(
            f"Property '{name}' expected {getattr(expected, '__name__', expected)}, "
            f"got {type(actual).__name__}"
        )
        self.name = name
        self.expected = expected
        self.actual = actual


class StateNotLoadedError(TurnStateError, RuntimeError):
    """Raised when a field is accessed before state was loaded for the turn."""

    pass


def require(value: Any, name: str) -> None:
    """Fail with InvalidArgumentError if value is None.

    Args:
        value: Argument to check.
        name: Argument name for the error message.

    Raises:
        InvalidArgumentError: If value is None.
    """
    if value is None:
        raise InvalidArgumentError(f"{name} is required")


def require_name(value: str | None, name: str) -> str:
    """Fail with InvalidArgumentError if value is None, not a string, or blank."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{name} must be a non-empty string")
    return value
