"""In-memory blob store for testing.

Simple dict-based storage implementing the full BlobStore protocol.
Not for production use: all data is lost when the process exits.
"""

import hashlib
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from io import BytesIO
from typing import IO, Any
from uuid import uuid4

from attachment_core.blob_store._streams import DEFAULT_CHUNK_SIZE, iter_chunks
from attachment_core.blob_store._types import BlobId
from attachment_core.blob_store.handle import BlobHandle, PutResult
from attachment_core.exceptions import BlobNotFound


@dataclass(frozen=True, slots=True)
class _StoredBlob:
    content: bytes
    name: str
    content_type: str
    sha256: str
    uploaded_at: datetime


class MemoryBlobStore:
    """Dict-based blob store for unit tests."""

    def __init__(self, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._blobs: dict[BlobId, _StoredBlob] = {}
        self._lock = threading.Lock()
        self._chunk_size = chunk_size

    def put(self, stream: IO[Any], *, name: str, content_type: str, blob_id: BlobId | None = None) -> PutResult:
        """Read the stream fully and keep its bytes in memory."""
        content = b"".join(iter_chunks(stream, self._chunk_size))
        blob_id = blob_id or BlobId(uuid4().hex)
        blob = _StoredBlob(
            content=content,
            name=name,
            content_type=content_type,
            sha256=hashlib.sha256(content).hexdigest(),
            uploaded_at=datetime.now(UTC),
        )
        with self._lock:
            self._blobs[blob_id] = blob
        return PutResult(blob_id=blob_id, size=len(content))

    def get(self, blob_id: BlobId) -> BlobHandle:
        """Return a handle over a copy of the stored bytes."""
        with self._lock:
            blob = self._blobs.get(blob_id)
        if blob is None:
            raise BlobNotFound(f"Blob {blob_id} not found")
        return BlobHandle(
            blob_id,
            BytesIO(blob.content),
            name=blob.name,
            content_type=blob.content_type,
            size=len(blob.content),
            extra={
                "sha256": blob.sha256,
                "uploaded_at": blob.uploaded_at,
                "chunk_size": self._chunk_size,
            },
        )

    def delete(self, blob_id: BlobId) -> None:
        with self._lock:
            if self._blobs.pop(blob_id, None) is None:
                raise BlobNotFound(f"Blob {blob_id} not found")

    def exists(self, blob_id: BlobId) -> bool:
        with self._lock:
            return blob_id in self._blobs

    def count(self) -> int:
        with self._lock:
            return len(self._blobs)

    def clear(self) -> None:
        """Drop every stored blob."""
        with self._lock:
            self._blobs.clear()
