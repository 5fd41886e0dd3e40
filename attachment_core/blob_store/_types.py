"""Domain-specific types for blob storage."""

from typing import NewType

BlobId = NewType("BlobId", str)
"""Opaque identifier of a blob, assigned by the store on put."""

__all__ = ["BlobId"]
