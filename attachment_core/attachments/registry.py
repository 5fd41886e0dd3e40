"""Per-class, inheritance-aware registry of declared attachments.

Each class gets its own catalogue, computed when the class is registered as a
copy of its nearest registered ancestor's catalogue. Declarations made later
on a parent never change an already registered subclass, and sibling
subclasses never observe each other's declarations.
"""

import keyword
import re
import threading
from typing import TYPE_CHECKING

from attachment_core.documents.fields import Field
from attachment_core.exceptions import DeclarationError

if TYPE_CHECKING:
    from attachment_core.documents.document import Document

__all__ = [
    "ATTACHMENT_FIELD_SUFFIXES",
    "AttachmentRegistry",
    "attachment_field_names",
    "presence_attribute",
    "registry",
    "validate_attachment_name",
]

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")
_RESERVED_NAMES = frozenset({"id"})

ATTACHMENT_FIELD_SUFFIXES: dict[str, type] = {
    "id": str,
    "name": str,
    "type": str,
    "size": int,
}


def attachment_field_names(name: str) -> tuple[str, ...]:
    """The four metadata field names backing attachment ``name``."""
    return tuple(f"{name}_{suffix}" for suffix in ATTACHMENT_FIELD_SUFFIXES)


def presence_attribute(name: str) -> str:
    return f"has_{name}"


def validate_attachment_name(name: str) -> None:
    if not isinstance(name, str) or not _NAME_PATTERN.match(name) or keyword.iskeyword(name):
        raise DeclarationError(
            f"Invalid attachment name {name!r}: use lowercase letters, digits and underscores, starting with a letter"
        )
    if name in _RESERVED_NAMES:
        raise DeclarationError(f"Attachment name {name!r} is reserved")


class AttachmentRegistry:
    """Catalogue of attachment names keyed by class identity.

    Reads are lock-free lookups of immutable tuples; registration and
    declaration are serialized by an internal lock.
    """

    def __init__(self) -> None:
        self._catalogues: dict[type, tuple[str, ...]] = {}
        self._own: dict[type, tuple[str, ...]] = {}
        self._lock = threading.RLock()

    def _inherited(self, cls: type) -> tuple[str, ...]:
        for base in cls.__mro__[1:]:
            if base in self._catalogues:
                return self._catalogues[base]
        return ()

    def register_class(self, cls: type) -> None:
        """Snapshot the inherited catalogue for a newly created class."""
        with self._lock:
            if cls not in self._catalogues:
                self._catalogues[cls] = self._inherited(cls)
                self._own[cls] = ()

    def declare(self, cls: "type[Document]", name: str) -> None:
        """Declare attachment ``name`` on ``cls`` and inject its metadata fields.

        Re-declaring a name already declared on the same class is a no-op.

        Raises:
            DeclarationError: If the name is invalid or one of the generated
                fields collides with an existing non-attachment field.
        """
        validate_attachment_name(name)
        with self._lock:
            self.register_class(cls)
            if name in self._own[cls]:
                return
            self._check_collisions(cls, name)
            for suffix, field_type in ATTACHMENT_FIELD_SUFFIXES.items():
                field_name = f"{name}_{suffix}"
                if field_name not in cls.fields:
                    cls.register_field(field_name, Field(field_type, nullable=True, attachment=name))
            self._own[cls] = (*self._own[cls], name)
            if name not in self._catalogues[cls]:
                self._catalogues[cls] = (*self._catalogues[cls], name)

    @staticmethod
    def _check_collisions(cls: "type[Document]", name: str) -> None:
        for field_name in (name, *attachment_field_names(name)):
            existing = cls.fields.get(field_name)
            if existing is not None and existing.attachment != name:
                raise DeclarationError(
                    f"Attachment '{name}' on {cls.__name__} collides with existing field '{field_name}'"
                )

    def catalogue(self, cls: type) -> tuple[str, ...]:
        """Ordered attachment names visible to ``cls``: ancestors first, then its own."""
        catalogue = self._catalogues.get(cls)
        if catalogue is None:
            return self._inherited(cls)
        return catalogue

    def own_declarations(self, cls: type) -> tuple[str, ...]:
        """Attachment names declared directly on ``cls``."""
        return self._own.get(cls, ())


registry = AttachmentRegistry()
"""Process-wide attachment registry."""
