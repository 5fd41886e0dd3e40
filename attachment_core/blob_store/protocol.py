"""Blob store protocol and singleton management.

Defines the BlobStore protocol that all storage backends must implement,
along with get/set helpers for the process-global singleton.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, Any, Protocol, runtime_checkable

from attachment_core.blob_store._types import BlobId
from attachment_core.blob_store.handle import BlobHandle, PutResult


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for blob storage backends.

    Implementations: LocalBlobStore (filesystem), MemoryBlobStore (testing).
    All calls are blocking.
    """

    def put(self, stream: IO[Any], *, name: str, content_type: str, blob_id: BlobId | None = None) -> PutResult:
        """Store the remaining content of ``stream``.

        A new id is generated unless ``blob_id`` is given, in which case any
        existing blob with that id is overwritten.
        """
        ...

    def get(self, blob_id: BlobId) -> BlobHandle:
        """Open a blob for reading. Raises BlobNotFound for unknown ids."""
        ...

    def delete(self, blob_id: BlobId) -> None:
        """Delete a blob. Raises BlobNotFound for unknown ids."""
        ...

    def exists(self, blob_id: BlobId) -> bool:
        """Check whether a blob with this id is stored."""
        ...

    def count(self) -> int:
        """Number of blobs currently stored."""
        ...


_blob_store: BlobStore | None = None


def get_blob_store() -> BlobStore | None:
    """Get the process-global blob store singleton."""
    return _blob_store


def set_blob_store(store: BlobStore | None) -> None:
    """Set the process-global blob store singleton."""
    global _blob_store
    _blob_store = store


@contextmanager
def temporary_blob_store(store: BlobStore) -> Iterator[BlobStore]:
    """Install ``store`` as the global blob store for the duration of the block.

    The previous store is restored on exit, even if an exception occurs.
    """
    global _blob_store
    previous = _blob_store
    _blob_store = store
    try:
        yield store
    finally:
        _blob_store = previous
