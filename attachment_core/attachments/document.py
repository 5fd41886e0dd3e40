"""Documents that own blob-backed attachments.

@public

Declare attachments in the class body with attachment(), or after class
creation with declare_attachment(). Each declaration adds four nullable
metadata fields (``<name>_id``, ``<name>_name``, ``<name>_type``,
``<name>_size``), an accessor that reads and assigns content, and a
``has_<name>`` presence predicate.

Example:
    >>> class Asset(AttachmentDocument):
    ...     title = Field(str)
    ...     image = attachment()
    ...     file = attachment()
    >>>
    >>> Asset.attachment_types()
    ('image', 'file')
    >>> with open("mr_t.jpg", "rb") as f:
    ...     asset = Asset.create(image=f)
    >>> asset.image_type, asset.has_image
    ('image/jpeg', True)
    >>> asset.image.read()
"""

import inspect
from typing import IO, Any, ClassVar

from attachment_core.documents.document import Document
from attachment_core.documents.fields import Field
from attachment_core.exceptions import DeclarationError, DocumentError

from .coordinator import LifecycleCoordinator
from .proxy import AttachmentProxy
from .registry import attachment_field_names, presence_attribute, registry, validate_attachment_name
from .resolver import declared_content_type, rewind
from .slot import AttachmentSlot, PendingUpload, Persisted

__all__ = [
    "AttachmentDescriptor",
    "AttachmentDocument",
    "attachment",
    "declare_attachment",
]


class AttachmentDescriptor:
    """Class attribute exposing one attachment on document instances.

    Reading returns an AttachmentProxy, or the assigned stream rewound to its
    start while an upload is pending. Assigning a stream schedules an upload;
    assigning None schedules removal.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: "AttachmentDocument | None", owner: type) -> Any:
        if instance is None:
            return self
        assert self.name is not None
        return instance.attachment(self.name)

    def __set__(self, instance: "AttachmentDocument", value: IO[Any] | None) -> None:
        assert self.name is not None
        instance.assign_attachment(self.name, value)


class _PresenceDescriptor:
    def __init__(self, name: str) -> None:
        self.name = name

    def __get__(self, instance: "AttachmentDocument | None", owner: type) -> Any:
        if instance is None:
            return self
        return instance.attachment_present(self.name)


def attachment() -> Any:
    """Declare an attachment in an AttachmentDocument class body."""
    return AttachmentDescriptor()


def declare_attachment(cls: "type[AttachmentDocument]", name: str) -> None:
    """Declare attachment ``name`` on an existing AttachmentDocument subclass.

    Raises:
        DeclarationError: If the name is invalid or collides with an existing
            attribute or field.
    """
    if not (isinstance(cls, type) and issubclass(cls, AttachmentDocument)):
        raise DeclarationError(f"{cls!r} is not an AttachmentDocument subclass")
    _declare(cls, name)


def _declare(cls: "type[AttachmentDocument]", name: str) -> None:
    validate_attachment_name(name)
    predicate = presence_attribute(name)
    for attr, allowed in ((name, AttachmentDescriptor), (predicate, _PresenceDescriptor)):
        existing = inspect.getattr_static(cls, attr, None)
        if existing is not None and not isinstance(existing, allowed):
            raise DeclarationError(f"Attachment '{name}' on {cls.__name__} collides with attribute '{attr}'")
    for attr in attachment_field_names(name):
        existing = inspect.getattr_static(cls, attr, None)
        if existing is not None and not (isinstance(existing, Field) and existing.attachment == name):
            raise DeclarationError(f"Attachment '{name}' on {cls.__name__} collides with attribute '{attr}'")

    registry.declare(cls, name)
    if name not in vars(cls):
        setattr(cls, name, AttachmentDescriptor(name))
    if predicate not in vars(cls):
        setattr(cls, predicate, _PresenceDescriptor(name))


class AttachmentDocument(Document):
    """Document with blob-backed attachments.

    @public

    Attachment content is uploaded, replaced and deleted by the class's
    LifecycleCoordinator during save() and destroy(). Subclasses may set their
    own ``coordinator`` to use a dedicated blob store or replace policy.
    """

    coordinator: ClassVar[LifecycleCoordinator] = LifecycleCoordinator()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        registry.register_class(cls)
        for attr, value in list(vars(cls).items()):
            if isinstance(value, AttachmentDescriptor):
                _declare(cls, attr)

    def _init_state(self, document_id: str | None) -> None:
        super()._init_state(document_id)
        self._attachment_slots: dict[str, AttachmentSlot] = {}

    @classmethod
    def attachment_types(cls) -> tuple[str, ...]:
        """Attachment names visible to this class: inherited first, then its own."""
        return registry.catalogue(cls)

    def _require_declared(self, name: str) -> None:
        if name not in self.attachment_types():
            raise DocumentError(f"{type(self).__name__} does not declare an attachment named '{name}'")

    def attachment_slot(self, name: str) -> AttachmentSlot:
        """Slot of attachment ``name``, created from the metadata fields on first access."""
        slot = self._attachment_slots.get(name)
        if slot is None:
            self._require_declared(name)
            slot = AttachmentSlot.from_fields(
                name,
                blob_id=self.read_attribute(f"{name}_id"),
                file_name=self.read_attribute(f"{name}_name"),
                content_type=self.read_attribute(f"{name}_type"),
                size=self.read_attribute(f"{name}_size"),
            )
            self._attachment_slots[name] = slot
        return slot

    def reset_attachment_slot(self, name: str) -> None:
        """Drop the slot so it is rebuilt from the metadata fields on next access."""
        self._attachment_slots.pop(name, None)

    def attachment(self, name: str) -> AttachmentProxy | IO[Any]:
        """Proxy for a persisted or absent attachment, or the pending stream itself."""
        state = self.attachment_slot(name).state
        if isinstance(state, PendingUpload):
            rewind(state.source)
            return state.source
        return AttachmentProxy(name, state, self.coordinator.resolve_store)

    def assign_attachment(self, name: str, source: IO[Any] | None, *, content_type: str | None = None) -> None:
        """Assign a stream (or None) to attachment ``name``; uploaded on the next save.

        Args:
            name: Declared attachment name.
            source: Readable stream, or None to remove the attachment.
            content_type: Explicit MIME type overriding detection from the file name.
        """
        declared = content_type
        if source is not None and declared is None:
            declared = declared_content_type(source)
        self.attachment_slot(name).assign(source, declared)

    def attachment_present(self, name: str) -> bool:
        """True iff the attachment is persisted. Never raises for declared names."""
        return self.attachment_slot(name).present

    def write_attachment_fields(self, name: str, persisted: Persisted | None) -> None:
        """Stamp (or clear, when None) the four metadata fields of an attachment."""
        self.write_attribute(f"{name}_id", persisted.id if persisted else None)
        self.write_attribute(f"{name}_name", persisted.name if persisted else None)
        self.write_attribute(f"{name}_type", persisted.type if persisted else None)
        self.write_attribute(f"{name}_size", persisted.size if persisted else None)


def _before_save(document: Document) -> None:
    assert isinstance(document, AttachmentDocument)
    document.coordinator.before_save(document)


def _after_destroy(document: Document) -> None:
    assert isinstance(document, AttachmentDocument)
    document.coordinator.after_destroy(document)


def _after_load(document: Document) -> None:
    assert isinstance(document, AttachmentDocument)
    document._attachment_slots.clear()


registry.register_class(AttachmentDocument)
AttachmentDocument.register_hook("before_save", _before_save)
AttachmentDocument.register_hook("after_destroy", _after_destroy)
AttachmentDocument.register_hook("after_load", _after_load)
