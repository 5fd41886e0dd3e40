"""Per-instance attachment slot state machine.

A slot is in exactly one of four states:

    Empty          no blob and nothing pending
    PendingUpload  a stream was assigned and is waiting for the next save
    Persisted      mirrors the four metadata fields of a stored blob
    PendingDelete  a persisted blob was unassigned and is waiting for the next save

Assignment moves a slot between states without any I/O. Only the lifecycle
coordinator consumes PendingUpload and PendingDelete, through
mark_uploaded() and mark_deleted().
"""

from dataclasses import dataclass
from typing import IO, Any, TypeAlias

from attachment_core.blob_store._types import BlobId
from attachment_core.exceptions import AttachmentCoreError

__all__ = [
    "AttachmentSlot",
    "Empty",
    "PendingDelete",
    "PendingUpload",
    "Persisted",
    "SlotState",
]


@dataclass(frozen=True, slots=True)
class Empty:
    pass


@dataclass(frozen=True, slots=True)
class PendingUpload:
    source: IO[Any]
    declared_type: str | None = None
    replaces: BlobId | None = None
    """Blob that was durable when the stream was assigned."""


@dataclass(frozen=True, slots=True)
class Persisted:
    id: BlobId
    name: str
    type: str
    size: int


@dataclass(frozen=True, slots=True)
class PendingDelete:
    id: BlobId


SlotState: TypeAlias = Empty | PendingUpload | Persisted | PendingDelete

EMPTY = Empty()


class AttachmentSlot:
    """Assignment and persistence state of one attachment on one document."""

    def __init__(self, name: str, state: SlotState = EMPTY) -> None:
        self.name = name
        self._state: SlotState = state

    @classmethod
    def from_fields(
        cls,
        name: str,
        *,
        blob_id: BlobId | None,
        file_name: str | None,
        content_type: str | None,
        size: int | None,
    ) -> "AttachmentSlot":
        """Build a slot from stored metadata fields: Persisted when an id is set."""
        if blob_id is None:
            return cls(name)
        return cls(
            name,
            Persisted(id=blob_id, name=file_name or "", type=content_type or "", size=size or 0),
        )

    @property
    def state(self) -> SlotState:
        return self._state

    @property
    def present(self) -> bool:
        return isinstance(self._state, Persisted)

    @property
    def durable_blob_id(self) -> BlobId | None:
        """Id of the stored blob this slot still references, if any."""
        match self._state:
            case Persisted(id=blob_id) | PendingDelete(id=blob_id):
                return blob_id
            case PendingUpload(replaces=replaces):
                return replaces
            case _:
                return None

    def assign(self, source: IO[Any] | None, declared_type: str | None = None) -> SlotState:
        """Assign a new stream, or None to remove the attachment. No I/O happens here."""
        match self._state, source:
            case Empty(), None:
                pass
            case Empty(), _:
                self._state = PendingUpload(source, declared_type)
            case Persisted(id=blob_id), None:
                self._state = PendingDelete(blob_id)
            case PendingDelete(), None:
                pass
            case (Persisted(id=blob_id) | PendingDelete(id=blob_id)), _:
                self._state = PendingUpload(source, declared_type, replaces=blob_id)
            case PendingUpload(replaces=None), None:
                self._state = EMPTY
            case PendingUpload(replaces=replaces), None:
                self._state = PendingDelete(replaces)
            case PendingUpload(replaces=replaces), _:
                self._state = PendingUpload(source, declared_type, replaces=replaces)
        return self._state

    def mark_uploaded(self, persisted: Persisted) -> None:
        if not isinstance(self._state, PendingUpload):
            raise AttachmentCoreError(f"Attachment '{self.name}' has no pending upload")
        self._state = persisted

    def mark_deleted(self) -> None:
        if not isinstance(self._state, PendingDelete):
            raise AttachmentCoreError(f"Attachment '{self.name}' has no pending delete")
        self._state = EMPTY

    def discard(self) -> None:
        """Forget all state, used once the owning document is destroyed."""
        self._state = EMPTY

    def __repr__(self) -> str:
        return f"AttachmentSlot(name={self.name!r}, state={self._state!r})"
