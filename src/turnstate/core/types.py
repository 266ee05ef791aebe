"""Core type definitions for turnstate."""

from typing import Any, TypeAlias

StateDocument: TypeAlias = dict[str, Any]
"""Named-field bag cached per turn and persisted as one storage item.

Values may be any JSON-serializable value, including Pydantic models and
dataclasses. Field order is irrelevant to change detection.
"""
