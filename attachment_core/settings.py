"""Core configuration settings for attachment storage.

@public

This module provides centralized configuration management for Attachment Core.
Settings are loaded from environment variables with .env file support via
pydantic-settings.

Environment variables:
    BLOB_STORE_BACKEND: Blob store backend, "memory" or "local"
    BLOB_STORE_PATH: Root directory of the local blob store
    BLOB_CHUNK_SIZE: Streaming chunk size in bytes
    ATTACHMENT_REPLACE_POLICY: What happens to the old blob when an attachment
        is replaced ("orphan", "delete" or "reuse")

Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values

Example:
    >>> from attachment_core.settings import settings
    >>> print(settings.blob_store_backend)
    local

Note:
    Settings are loaded once at module import and frozen. The process must be
    restarted to pick up changes to environment variables or the .env file.
"""

from enum import StrEnum
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ReplacePolicy(StrEnum):
    """Policy applied to the previous blob when a persisted attachment is replaced.

    @public
    """

    ORPHAN = "orphan"
    """Leave the old blob in the store; callers may garbage-collect it."""

    DELETE = "delete"
    """Delete the old blob once the new upload succeeded."""

    REUSE = "reuse"
    """Delete the old blob and store the new content under the same id."""


class Settings(BaseSettings):
    """Configuration for blob storage and attachment lifecycle.

    @public

    Attributes:
        blob_store_backend: Backend used by create_blob_store().
        blob_store_path: Root directory for the local filesystem backend.
        blob_chunk_size: Chunk size used when streaming content into a store.
        attachment_replace_policy: Default ReplacePolicy for the lifecycle
            coordinator.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    blob_store_backend: Literal["memory", "local"] = "local"
    blob_store_path: str = ".attachments"
    blob_chunk_size: int = 255 * 1024

    attachment_replace_policy: ReplacePolicy = ReplacePolicy.ORPHAN


settings = Settings()
"""Global settings instance.

@public
"""
