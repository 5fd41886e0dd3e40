"""Minimal document persistence engine.

@public

Documents are mutable records made of declared scalar fields. The engine
tracks which fields changed since the last save, persists them through a
DocumentStore, and fires class-level lifecycle hooks around save, destroy and
load so that extensions (such as attachments) can take part in the lifecycle.
"""

import inspect
from collections.abc import Callable
from typing import Any, ClassVar, Literal, Self, get_args
from uuid import uuid4

from attachment_core.document_store.protocol import DocumentStore, get_document_store
from attachment_core.exceptions import DeclarationError, DocumentError
from attachment_core.logging import get_pipeline_logger

from .fields import Field
from .utils import camel_to_snake

logger = get_pipeline_logger(__name__)

HookEvent = Literal["before_save", "after_save", "before_destroy", "after_destroy", "after_load"]
Hook = Callable[["Document"], None]

HOOK_EVENTS: tuple[str, ...] = get_args(HookEvent)


class Document:
    """Base class for persisted documents.

    @public

    Subclasses declare fields in the class body. Field and hook registries are
    copied from the parent when a subclass is created, so registrations on a
    subclass never leak into its parent or siblings.

    Example:
        >>> class Note(Document):
        ...     title = Field(str)
        >>> note = Note.create(title="draft")
        >>> note.title = "final"
        >>> note.is_new_or_changed("title")
        True
        >>> note.save()
    """

    fields: ClassVar[dict[str, Field]] = {}
    document_store: ClassVar[DocumentStore | None] = None
    _hooks: ClassVar[dict[str, list[Hook]]] = {event: [] for event in HOOK_EVENTS}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        fields = dict(cls.fields)
        for attr, value in vars(cls).items():
            if isinstance(value, Field):
                if attr == "id":
                    raise DeclarationError(f"Document subclass '{cls.__name__}' cannot redeclare the 'id' field")
                fields[attr] = value
        cls.fields = fields
        cls._hooks = {event: list(callbacks) for event, callbacks in cls._hooks.items()}

    def __init__(self, **attributes: Any) -> None:
        self._init_state(attributes.pop("id", None))
        for key, value in attributes.items():
            self._check_assignable(key)
            setattr(self, key, value)

    def _init_state(self, document_id: str | None) -> None:
        self.id: str = document_id or uuid4().hex
        self._attributes: dict[str, Any] = {}
        self._changed: set[str] = set()
        self._new_record = True
        self._destroyed = False

    # --- Class-level registration ---

    @classmethod
    def collection_name(cls) -> str:
        """Snake_case collection name derived from the class name."""
        return camel_to_snake(cls.__name__)

    @classmethod
    def register_field(cls, name: str, field: Field, *, replace: bool = False) -> Field:
        """Add a field to this class's schema after class creation.

        Raises:
            DeclarationError: If a field with this name exists and replace is False.
        """
        if name == "id" or (name in cls.fields and not replace):
            raise DeclarationError(f"{cls.__name__} already has a field named '{name}'")
        if "fields" not in vars(cls):
            cls.fields = dict(cls.fields)
        field.__set_name__(cls, name)
        setattr(cls, name, field)
        cls.fields[name] = field
        return field

    @classmethod
    def register_hook(cls, event: HookEvent, callback: Hook) -> None:
        """Register a lifecycle callback on this class and its future subclasses."""
        if event not in HOOK_EVENTS:
            raise ValueError(f"Unknown hook event: {event}")
        if "_hooks" not in vars(cls):
            cls._hooks = {name: list(callbacks) for name, callbacks in cls._hooks.items()}
        cls._hooks[event].append(callback)

    def _run_hooks(self, event: HookEvent) -> None:
        for callback in type(self)._hooks[event]:
            callback(self)

    @classmethod
    def _check_assignable(cls, key: str) -> None:
        attr = inspect.getattr_static(cls, key, None)
        if key not in cls.fields and not hasattr(type(attr), "__set__"):
            raise DocumentError(f"{cls.__name__} has no field or attachment named '{key}'")

    @classmethod
    def _resolve_store(cls) -> DocumentStore:
        store = cls.document_store or get_document_store()
        if store is None:
            raise DocumentError("No document store configured. Call set_document_store() first.")
        return store

    # --- Attribute access ---

    def read_attribute(self, name: str) -> Any:
        field = self.fields[name]
        return self._attributes.get(name, field.default)

    def write_attribute(self, name: str, value: Any) -> None:
        """Validate and set a field value, recording the change."""
        field = self.fields.get(name)
        if field is None:
            raise DocumentError(f"{type(self).__name__} has no field named '{name}'")
        field.validate(value)
        previous = self._attributes.get(name, field.default)
        self._attributes[name] = value
        if previous != value:
            self._changed.add(name)

    def is_new_or_changed(self, name: str) -> bool:
        """True if the document was never saved or the field changed since the last save."""
        return self._new_record or name in self._changed

    @property
    def changed_fields(self) -> frozenset[str]:
        return frozenset(self._changed)

    @property
    def is_new_record(self) -> bool:
        return self._new_record

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def to_dict(self) -> dict[str, Any]:
        """All field values keyed by field name, including the id."""
        return {"id": self.id, **{name: self.read_attribute(name) for name in self.fields}}

    # --- Persistence ---

    @classmethod
    def create(cls, **attributes: Any) -> Self:
        """Construct and save a document in one step."""
        document = cls(**attributes)
        document.save()
        return document

    @classmethod
    def find(cls, document_id: str) -> Self:
        """Load a saved document by id. Raises DocumentNotFound if missing."""
        stored = cls._resolve_store().load(cls.collection_name(), document_id)
        document = cls.__new__(cls)
        document._init_state(document_id)
        document._load_attributes(stored)
        return document

    def _load_attributes(self, stored: dict[str, Any]) -> None:
        self._attributes = {name: value for name, value in stored.items() if name in self.fields}
        self._changed.clear()
        self._new_record = False
        self._run_hooks("after_load")

    def save(self) -> Self:
        """Run save hooks and persist new or changed fields."""
        if self._destroyed:
            raise DocumentError(f"Cannot save destroyed document {self.id}")
        self._run_hooks("before_save")
        store = self._resolve_store()
        collection = self.collection_name()
        if self._new_record:
            attributes = self.to_dict()
            attributes.pop("id")
            store.insert(collection, self.id, attributes)
        elif self._changed:
            store.update(collection, self.id, {name: self._attributes[name] for name in self._changed})
        else:
            logger.debug(f"No field changes to persist for {collection}/{self.id}")
        self._new_record = False
        self._changed.clear()
        self._run_hooks("after_save")
        return self

    def update_attributes(self, **attributes: Any) -> Self:
        """Assign several values and save."""
        for key, value in attributes.items():
            self._check_assignable(key)
            setattr(self, key, value)
        return self.save()

    def reload(self) -> Self:
        """Discard unsaved changes and re-read fields from the store."""
        stored = self._resolve_store().load(self.collection_name(), self.id)
        self._load_attributes(stored)
        return self

    def destroy(self) -> None:
        """Delete the document from the store, running destroy hooks around it."""
        if self._destroyed:
            return
        self._run_hooks("before_destroy")
        if not self._new_record:
            self._resolve_store().delete(self.collection_name(), self.id)
        self._destroyed = True
        self._run_hooks("after_destroy")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
