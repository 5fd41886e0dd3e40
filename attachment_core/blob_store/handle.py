"""Readable handle and put result returned by blob stores."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import IO, Any, Self

from attachment_core.blob_store._types import BlobId


@dataclass(frozen=True, slots=True)
class PutResult:
    """Outcome of a successful put.

    @public

    Attributes:
        blob_id: Identifier assigned to the stored blob.
        size: Number of bytes written.
    """

    blob_id: BlobId
    size: int


class BlobHandle:
    """Read-only view of a stored blob.

    @public

    Wraps a binary stream positioned at the start of the blob content together
    with its metadata. ``extra`` carries store-specific metadata (content hash,
    upload time, chunk size) that callers query by key.
    """

    def __init__(
        self,
        blob_id: BlobId,
        stream: IO[bytes],
        *,
        name: str,
        content_type: str,
        size: int,
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        self.id = blob_id
        self.name = name
        self.content_type = content_type
        self.size = size
        self.extra: Mapping[str, Any] = MappingProxyType(dict(extra or {}))
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (everything remaining by default)."""
        return self._stream.read(size)

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._stream.seek(offset, whence)

    def tell(self) -> int:
        return self._stream.tell()

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"BlobHandle(id={self.id!r}, name={self.name!r}, content_type={self.content_type!r}, size={self.size})"
