"""Blob store protocol and backends for attachment content."""

from ._types import BlobId
from .factory import create_blob_store
from .handle import BlobHandle, PutResult
from .protocol import BlobStore, get_blob_store, set_blob_store, temporary_blob_store

__all__ = [
    "BlobHandle",
    "BlobId",
    "BlobStore",
    "PutResult",
    "create_blob_store",
    "get_blob_store",
    "set_blob_store",
    "temporary_blob_store",
]
