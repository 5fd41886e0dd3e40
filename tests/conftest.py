"""Common test fixtures for attachment tests."""

import pytest

from attachment_core.blob_store import set_blob_store
from attachment_core.document_store import MemoryDocumentStore, set_document_store
from tests.support.helpers import RecordingBlobStore


@pytest.fixture
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
def document_store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture(autouse=True)
def global_stores(blob_store: RecordingBlobStore, document_store: MemoryDocumentStore):
    """Install fresh in-memory stores as the process-global singletons for each test."""
    set_blob_store(blob_store)
    set_document_store(document_store)
    try:
        yield
    finally:
        set_blob_store(None)
        set_document_store(None)
