"""Shared test helpers."""

from typing import IO, Any

from attachment_core.blob_store._types import BlobId
from attachment_core.blob_store.handle import BlobHandle, PutResult
from attachment_core.blob_store.memory import MemoryBlobStore


class RecordingBlobStore(MemoryBlobStore):
    """MemoryBlobStore that records every call and can be told to fail.

    Set ``fail_put`` / ``fail_delete`` to an exception instance to make the
    next calls raise it (the call is still recorded).
    """

    def __init__(self) -> None:
        super().__init__()
        self.puts: list[BlobId] = []
        self.gets: list[BlobId] = []
        self.deletes: list[BlobId] = []
        self.fail_put: Exception | None = None
        self.fail_delete: Exception | None = None

    def put(self, stream: IO[Any], *, name: str, content_type: str, blob_id: BlobId | None = None) -> PutResult:
        if self.fail_put is not None:
            self.puts.append(BlobId("<failed>"))
            raise self.fail_put
        result = super().put(stream, name=name, content_type=content_type, blob_id=blob_id)
        self.puts.append(result.blob_id)
        return result

    def get(self, blob_id: BlobId) -> BlobHandle:
        self.gets.append(blob_id)
        return super().get(blob_id)

    def delete(self, blob_id: BlobId) -> None:
        self.deletes.append(blob_id)
        if self.fail_delete is not None:
            raise self.fail_delete
        super().delete(blob_id)
