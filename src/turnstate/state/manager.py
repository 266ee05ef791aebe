"""StateManager: turn-scoped cache in front of durable storage.

Usage:
    class ConversationState(StateManager):
        def get_storage_key(self, turn_context: TurnContext) -> str:
            activity = turn_context.activity
            return f"{activity.channel_id}/conversations/{activity.conversation_id}"

    conversation_state = ConversationState(MemoryStorage())
    counter = conversation_state.create_property("count", int)

    async def handler() -> None:
        count = await counter.get(turn_context, lambda: 0)
        await counter.set(turn_context, count + 1)

    # Loads on entry, saves on exit only if something changed
    await conversation_state.on_turn(turn_context, handler)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from types import UnionType
from typing import TYPE_CHECKING, Any, TypeVar, Union, cast, get_args, get_origin

from pydantic import BaseModel, ValidationError

from turnstate.config import StateSettings
from turnstate.core.cache import CacheEntry
from turnstate.core.context import TurnContext
from turnstate.core.errors import (
    PropertyNotSetError,
    PropertyTypeError,
    StateNotLoadedError,
    require,
    require_name,
)
from turnstate.core.fingerprint import canonical_json
from turnstate.core.types import StateDocument
from turnstate.storage.protocol import Storage

if TYPE_CHECKING:
    from turnstate.state.accessor import StatePropertyAccessor

T = TypeVar("T")

NextHandler = Callable[[], Awaitable[Any]]

logger = logging.getLogger(__name__)


def _type_matches(value: Any, value_type: Any) -> bool:
    """Shallow isinstance check that understands unions and generic aliases."""
    if value_type is Any:
        return True
    origin = get_origin(value_type)
    if origin in (Union, UnionType):
        return any(_type_matches(value, arg) for arg in get_args(value_type))
    check_type = origin or value_type
    if not isinstance(check_type, type):
        # Literal, TypeVar and other special forms are not checked
        return True
    if check_type is int and isinstance(value, bool):
        return False
    return isinstance(value, check_type)


class StateManager(ABC):
    """Loads, caches and saves one state document per turn.

    The cached entry lives in the turn's TurnStateBag under
    ``context_service_key``, so every accessor touching the same turn shares
    it. Subclasses decide where the document lives by implementing
    ``get_storage_key``.

    Args:
        storage: Durable storage backend.
        context_service_key: Slot name in the turn state bag (default: class name).
        settings: State settings (default: loaded from environment).
    """

    def __init__(
        self,
        storage: Storage,
        context_service_key: str | None = None,
        settings: StateSettings | None = None,
    ):
        require(storage, "storage")
        self._storage = storage
        self._context_service_key = (
            require_name(context_service_key, "context_service_key")
            if context_service_key is not None
            else type(self).__name__
        )
        self._settings = settings or StateSettings()

    @property
    def storage(self) -> Storage:
        """Storage backend this manager reads from and writes to."""
        return self._storage

    @property
    def context_service_key(self) -> str:
        """Slot name of this manager's entry in the turn state bag."""
        return self._context_service_key

    @abstractmethod
    def get_storage_key(self, turn_context: TurnContext) -> str:
        """Compute the storage key for this turn's document.

        Must be deterministic for a given turn.

        Args:
            turn_context: Context for the current turn.

        Returns:
            Storage key.
        """
        ...

    def create_property(
        self, name: str, value_type: type[T] | None = None
    ) -> StatePropertyAccessor[T]:
        """Create a named accessor bound to this manager.

        Args:
            name: Field name in the state document.
            value_type: Optional expected type, checked on every read.

        Returns:
            Accessor for the field.

        Raises:
            InvalidArgumentError: If name is None or blank.
        """
        from turnstate.state.accessor import StatePropertyAccessor

        return StatePropertyAccessor(self, require_name(name, "name"), value_type)

    # Lifecycle

    async def load(self, turn_context: TurnContext, force: bool = False) -> None:
        """Read the document from storage into this turn's cache.

        Does nothing if an entry is already cached, unless forced. A key
        missing from storage yields an empty document.

        Args:
            turn_context: Context for the current turn.
            force: Re-read even if an entry is cached, discarding unsaved changes.
        """
        require(turn_context, "turn_context")
        entry = self._get_entry(turn_context)
        if not force and entry is not None and entry.document is not None:
            return

        storage_key = require_name(self.get_storage_key(turn_context), "storage key")
        items = await self._storage.read([storage_key])
        document = items.get(storage_key)
        self._set_entry(turn_context, CacheEntry(document, self._settings.fingerprint_algorithm))
        logger.debug(
            "%s loaded %r (%s)",
            self._context_service_key,
            storage_key,
            "found" if document is not None else "new",
        )

    async def save(self, turn_context: TurnContext, force: bool = False) -> None:
        """Write the cached document to storage if it changed.

        Args:
            turn_context: Context for the current turn.
            force: Write even if nothing changed.
        """
        require(turn_context, "turn_context")
        entry = self._get_entry(turn_context)
        if entry is None:
            return
        if not force and not entry.is_changed():
            logger.debug("%s unchanged, skipping save", self._context_service_key)
            return

        storage_key = require_name(self.get_storage_key(turn_context), "storage key")
        await self._storage.write({storage_key: entry.document})
        entry.mark_saved()
        logger.debug("%s saved %r", self._context_service_key, storage_key)

    async def clear(self, turn_context: TurnContext) -> None:
        """Replace this turn's cached document with an empty one.

        Unsaved changes are discarded. Storage is not touched; saving afterwards
        writes nothing unless new changes are made.

        Args:
            turn_context: Context for the current turn.
        """
        require(turn_context, "turn_context")
        if self._get_entry(turn_context) is not None:
            self._set_entry(turn_context, CacheEntry(None, self._settings.fingerprint_algorithm))
            logger.debug("%s cleared", self._context_service_key)

    async def delete(self, turn_context: TurnContext) -> None:
        """Clear the cached document and delete it from storage.

        Args:
            turn_context: Context for the current turn.
        """
        require(turn_context, "turn_context")
        self._set_entry(turn_context, CacheEntry(None, self._settings.fingerprint_algorithm))
        storage_key = require_name(self.get_storage_key(turn_context), "storage key")
        await self._storage.delete([storage_key])
        logger.debug("%s deleted %r", self._context_service_key, storage_key)

    async def on_turn(self, turn_context: TurnContext, next_handler: NextHandler) -> Any:
        """Run one turn of the pipeline with state loaded and saved around it.

        Always re-reads state on entry and saves on exit only if it changed.
        If next_handler raises, the error propagates and nothing is saved.

        Args:
            turn_context: Context for the current turn.
            next_handler: Rest of the pipeline.

        Returns:
            Whatever next_handler returns.
        """
        require(turn_context, "turn_context")
        require(next_handler, "next_handler")
        await self.load(turn_context, force=True)
        result = await next_handler()
        await self.save(turn_context, force=False)
        return result

    def get_cached_state(self, turn_context: TurnContext) -> StateDocument | None:
        """Get this turn's cached document, or None if nothing is loaded."""
        require(turn_context, "turn_context")
        entry = self._get_entry(turn_context)
        return entry.document if entry is not None else None

    def is_changed(self, turn_context: TurnContext) -> bool:
        """Check whether this turn's cached document has unsaved changes."""
        require(turn_context, "turn_context")
        entry = self._get_entry(turn_context)
        return entry is not None and entry.is_changed()

    # Field access (no implicit load; accessors handle that)

    def get_field(
        self, turn_context: TurnContext, name: str, value_type: type[T] | None = None
    ) -> T:
        """Get a field from this turn's cached document.

        A dict stored for a Pydantic model type is validated into the model. The
        model replaces the dict in the document only when its JSON form is
        identical, so reading never dirties the document or drops stored keys.
        Otherwise the model is returned detached; write it back with set_field
        to persist changes made to it.

        Args:
            turn_context: Context for the current turn.
            name: Field name.
            value_type: Optional expected type.

        Returns:
            The field value.

        Raises:
            PropertyNotSetError: If the field is absent.
            PropertyTypeError: If the field holds a value of another type.
            StateNotLoadedError: If nothing is loaded for this turn.
        """
        document = self._require_document(turn_context, name)
        if name not in document:
            raise PropertyNotSetError(name)
        value = document[name]
        if value_type is None:
            return cast(T, value)

        if _type_matches(value, value_type):
            return cast(T, value)
        if (
            isinstance(value, dict)
            and isinstance(value_type, type)
            and issubclass(value_type, BaseModel)
        ):
            try:
                model = value_type.model_validate(value)
            except ValidationError as exc:
                raise PropertyTypeError(name, value_type, value) from exc
            if canonical_json(model) == canonical_json(value):
                document[name] = model
            return cast(T, model)
        raise PropertyTypeError(name, value_type, value)

    def set_field(self, turn_context: TurnContext, name: str, value: Any) -> None:
        """Set a field on this turn's cached document."""
        self._require_document(turn_context, name)[name] = value

    def delete_field(self, turn_context: TurnContext, name: str) -> None:
        """Remove a field from this turn's cached document. Absent fields are ignored."""
        self._require_document(turn_context, name).pop(name, None)

    # Internal

    def _get_entry(self, turn_context: TurnContext) -> CacheEntry | None:
        return cast(CacheEntry | None, turn_context.turn_state.get(self._context_service_key))

    def _set_entry(self, turn_context: TurnContext, entry: CacheEntry) -> None:
        turn_context.turn_state.set(self._context_service_key, entry)

    def _require_document(self, turn_context: TurnContext, name: str) -> StateDocument:
        require(turn_context, "turn_context")
        require_name(name, "name")
        entry = self._get_entry(turn_context)
        if entry is None or entry.document is None:
            raise StateNotLoadedError(
                f"{self._context_service_key} has no state loaded for this turn; call load() first"
            )
        return entry.document
