"""Attachment Core - blob-backed file attachments for document models.

@public

Declare named attachments on a document class. Each declaration adds four
metadata fields (``<name>_id``, ``<name>_name``, ``<name>_type``,
``<name>_size``) and an accessor. Assigned streams are uploaded to a blob
store when the document is saved, unassigned blobs are deleted on the next
save, and every referenced blob is deleted when the document is destroyed.

Quick Start:
    >>> from attachment_core import AttachmentDocument, Field, attachment
    >>> from attachment_core import MemoryDocumentStore, create_blob_store
    >>> from attachment_core import set_blob_store, set_document_store
    >>>
    >>> set_blob_store(create_blob_store())
    >>> set_document_store(MemoryDocumentStore())
    >>>
    >>> class Asset(AttachmentDocument):
    ...     title = Field(str)
    ...     image = attachment()
    >>>
    >>> with open("photo.jpg", "rb") as f:
    ...     asset = Asset.create(title="Portrait", image=f)
    >>> asset.image_name, asset.image_type
    ('photo.jpg', 'image/jpeg')
    >>> data = Asset.find(asset.id).image.read()

Environment Variables:
    - BLOB_STORE_BACKEND: "memory" or "local" (default)
    - BLOB_STORE_PATH: Root directory of the local blob store
    - ATTACHMENT_REPLACE_POLICY: "orphan" (default), "delete" or "reuse"
    - ATTACHMENT_CORE_LOG_LEVEL: Log level for attachment_core loggers
"""

from .attachments import (
    AttachmentDocument,
    AttachmentProxy,
    LifecycleCoordinator,
    attachment,
    declare_attachment,
)
from .blob_store import (
    BlobHandle,
    BlobStore,
    create_blob_store,
    get_blob_store,
    set_blob_store,
    temporary_blob_store,
)
from .document_store import DocumentStore, MemoryDocumentStore, get_document_store, set_document_store
from .documents import Document, Field
from .exceptions import (
    AttachmentCleanupError,
    AttachmentCoreError,
    AttachmentNotFound,
    BlobNotFound,
    DeclarationError,
    StoreError,
    StoreUnavailable,
    UnsupportedCapability,
)
from .logging import LoggingConfig, get_pipeline_logger, setup_logging
from .logging import get_pipeline_logger as get_logger
from .settings import ReplacePolicy, Settings, settings

__version__ = "0.1.0"

__all__ = [
    # Config/Settings
    "settings",
    "Settings",
    "ReplacePolicy",
    # Logging
    "get_logger",
    "get_pipeline_logger",
    "LoggingConfig",
    "setup_logging",
    # Documents
    "Document",
    "Field",
    "DocumentStore",
    "MemoryDocumentStore",
    "get_document_store",
    "set_document_store",
    # Attachments
    "AttachmentDocument",
    "AttachmentProxy",
    "LifecycleCoordinator",
    "attachment",
    "declare_attachment",
    # Blob stores
    "BlobHandle",
    "BlobStore",
    "create_blob_store",
    "get_blob_store",
    "set_blob_store",
    "temporary_blob_store",
    # Errors
    "AttachmentCoreError",
    "AttachmentCleanupError",
    "AttachmentNotFound",
    "BlobNotFound",
    "DeclarationError",
    "StoreError",
    "StoreUnavailable",
    "UnsupportedCapability",
]
