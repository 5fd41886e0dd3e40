"""Read-only view of a persisted attachment."""

from collections.abc import Callable
from typing import Any, Self

from attachment_core.blob_store.handle import BlobHandle
from attachment_core.blob_store.protocol import BlobStore
from attachment_core.exceptions import AttachmentNotFound, UnsupportedCapability

from .slot import Persisted, SlotState

# First-class handle attributes reachable through query()
_HANDLE_CAPABILITIES = ("content_type", "size", "name")


class AttachmentProxy:
    """Metadata and lazily opened content of one attachment.

    @public

    ``id``, ``name``, ``type`` and ``size`` mirror the document's metadata
    fields. The blob is fetched with a single ``get`` on first read and the
    handle is cached for the lifetime of the proxy. Store-specific metadata is
    available through query().

    For an attachment that is not persisted the proxy is absent: metadata
    reads return None, ``bool(proxy)`` is False, and read() raises
    AttachmentNotFound.

    Example:
        >>> with asset.image as image:
        ...     data = image.read()
        ...     digest = image.query("sha256")
    """

    def __init__(self, attachment: str, state: SlotState, store_factory: Callable[[], BlobStore]) -> None:
        self.attachment = attachment
        self._persisted = state if isinstance(state, Persisted) else None
        self._store_factory = store_factory
        self._handle: BlobHandle | None = None

    @property
    def present(self) -> bool:
        return self._persisted is not None

    @property
    def absent(self) -> bool:
        return self._persisted is None

    def __bool__(self) -> bool:
        return self.present

    @property
    def id(self) -> str | None:
        return self._persisted.id if self._persisted else None

    @property
    def name(self) -> str | None:
        return self._persisted.name if self._persisted else None

    @property
    def type(self) -> str | None:
        return self._persisted.type if self._persisted else None

    @property
    def size(self) -> int | None:
        return self._persisted.size if self._persisted else None

    def _open(self) -> BlobHandle:
        if self._persisted is None:
            raise AttachmentNotFound(f"Attachment '{self.attachment}' is not present")
        if self._handle is None:
            self._handle = self._store_factory().get(self._persisted.id)
        return self._handle

    def read(self, size: int = -1) -> bytes:
        """Read content from the blob.

        Raises:
            AttachmentNotFound: If the attachment is not persisted.
        """
        return self._open().read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._open().seek(offset, whence)

    def query(self, capability: str) -> Any:
        """Return one piece of store-specific metadata from the blob handle.

        Looks up ``capability`` in the handle's extra metadata, then among the
        handle's first-class attributes.

        Raises:
            AttachmentNotFound: If the attachment is not persisted.
            UnsupportedCapability: If the store does not expose it.
        """
        handle = self._open()
        if capability in handle.extra:
            return handle.extra[capability]
        if capability in _HANDLE_CAPABILITIES:
            return getattr(handle, capability)
        raise UnsupportedCapability(
            f"Blob store does not expose '{capability}' for attachment '{self.attachment}'"
        )

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._persisted is None:
            return f"AttachmentProxy({self.attachment!r}, absent)"
        return f"AttachmentProxy({self.attachment!r}, id={self._persisted.id!r}, name={self._persisted.name!r})"
