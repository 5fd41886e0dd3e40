"""Local filesystem blob store.

Layout:
    {base_path}/{blob_id[:2]}/{blob_id}            <- raw content
    {base_path}/{blob_id[:2]}/{blob_id}.meta.json  <- metadata

Write order (content before meta) ensures crash safety: a content file
without a valid .meta.json is treated as missing.
"""

import hashlib
import os
import re
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import IO, Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, ValidationError

from attachment_core.blob_store._streams import DEFAULT_CHUNK_SIZE, iter_chunks
from attachment_core.blob_store._types import BlobId
from attachment_core.blob_store.handle import BlobHandle, PutResult
from attachment_core.exceptions import BlobNotFound, StoreIOError
from attachment_core.logging import get_pipeline_logger

logger = get_pipeline_logger(__name__)

_BLOB_ID_PATTERN = re.compile(r"^[a-f0-9]{32}$")
META_SUFFIX = ".meta.json"


class _BlobMeta(BaseModel):
    """Sidecar metadata persisted next to each blob."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    content_type: str
    size: int
    sha256: str
    uploaded_at: datetime


class LocalBlobStore:
    """Filesystem-backed blob store for development and single-host deployments.

    Blobs are sharded into directories by the first two characters of their id.
    """

    def __init__(self, base_path: Path | None = None, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._base_path = base_path or Path.cwd() / ".attachments"
        self._chunk_size = chunk_size

    @property
    def base_path(self) -> Path:
        """Root directory for all stored blobs."""
        return self._base_path

    def _blob_path(self, blob_id: BlobId) -> Path:
        if not _BLOB_ID_PATTERN.match(blob_id):
            raise BlobNotFound(f"Invalid blob id: {blob_id!r}")
        return self._base_path / blob_id[:2] / blob_id

    @staticmethod
    def _meta_path(content_path: Path) -> Path:
        return content_path.with_name(content_path.name + META_SUFFIX)

    def _read_meta(self, blob_id: BlobId) -> _BlobMeta:
        meta_path = self._meta_path(self._blob_path(blob_id))
        try:
            return _BlobMeta.model_validate_json(meta_path.read_bytes())
        except FileNotFoundError as e:
            raise BlobNotFound(f"Blob {blob_id} not found") from e
        except ValidationError as e:
            raise StoreIOError(f"Corrupt metadata for blob {blob_id}: {e}") from e
        except OSError as e:
            raise StoreIOError(f"Failed to read metadata for blob {blob_id}: {e}") from e

    def put(self, stream: IO[Any], *, name: str, content_type: str, blob_id: BlobId | None = None) -> PutResult:
        """Stream content to a temporary file, then move it into place."""
        blob_id = blob_id or BlobId(uuid4().hex)
        content_path = self._blob_path(blob_id)
        digest = hashlib.sha256()
        size = 0
        try:
            content_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=content_path.parent, prefix=f".{blob_id}.")
            try:
                with os.fdopen(fd, "wb") as tmp:
                    for chunk in iter_chunks(stream, self._chunk_size):
                        tmp.write(chunk)
                        digest.update(chunk)
                        size += len(chunk)
                os.replace(tmp_name, content_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            meta = _BlobMeta(
                name=name,
                content_type=content_type,
                size=size,
                sha256=digest.hexdigest(),
                uploaded_at=datetime.now(UTC),
            )
            self._meta_path(content_path).write_text(meta.model_dump_json(), encoding="utf-8")
        except OSError as e:
            raise StoreIOError(f"Failed to write blob {blob_id}: {e}") from e
        logger.debug(f"Stored blob {blob_id} ({size} bytes) at {content_path}")
        return PutResult(blob_id=blob_id, size=size)

    def get(self, blob_id: BlobId) -> BlobHandle:
        meta = self._read_meta(blob_id)
        try:
            stream = open(self._blob_path(blob_id), "rb")
        except FileNotFoundError as e:
            raise BlobNotFound(f"Blob {blob_id} not found") from e
        except OSError as e:
            raise StoreIOError(f"Failed to open blob {blob_id}: {e}") from e
        return BlobHandle(
            blob_id,
            stream,
            name=meta.name,
            content_type=meta.content_type,
            size=meta.size,
            extra={
                "sha256": meta.sha256,
                "uploaded_at": meta.uploaded_at,
                "chunk_size": self._chunk_size,
                "path": str(self._blob_path(blob_id)),
            },
        )

    def delete(self, blob_id: BlobId) -> None:
        """Remove metadata first so a partial delete reads as missing."""
        content_path = self._blob_path(blob_id)
        meta_path = self._meta_path(content_path)
        try:
            meta_path.unlink()
        except FileNotFoundError as e:
            raise BlobNotFound(f"Blob {blob_id} not found") from e
        except OSError as e:
            raise StoreIOError(f"Failed to delete blob {blob_id}: {e}") from e
        try:
            content_path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreIOError(f"Failed to delete blob {blob_id}: {e}") from e

    def exists(self, blob_id: BlobId) -> bool:
        try:
            return self._meta_path(self._blob_path(blob_id)).exists()
        except BlobNotFound:
            return False

    def count(self) -> int:
        if not self._base_path.exists():
            return 0
        return sum(1 for _ in self._base_path.glob(f"*/*{META_SUFFIX}"))
