"""Factory function for creating blob store instances based on settings."""

from pathlib import Path

from attachment_core.blob_store.protocol import BlobStore
from attachment_core.settings import Settings
from attachment_core.settings import settings as default_settings


def create_blob_store(settings: Settings | None = None) -> BlobStore:
    """Create a BlobStore based on settings.

    Selects MemoryBlobStore when blob_store_backend is "memory",
    otherwise LocalBlobStore rooted at blob_store_path. Uses the global
    settings when none are given.

    Backends are imported lazily to avoid circular imports.
    """
    settings = settings or default_settings
    if settings.blob_store_backend == "memory":
        from attachment_core.blob_store.memory import MemoryBlobStore

        return MemoryBlobStore(chunk_size=settings.blob_chunk_size)

    from attachment_core.blob_store.local import LocalBlobStore

    return LocalBlobStore(Path(settings.blob_store_path), chunk_size=settings.blob_chunk_size)
