"""Document store protocol and backends for the persistence engine."""

from .memory import MemoryDocumentStore
from .protocol import DocumentStore, get_document_store, set_document_store

__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "get_document_store",
    "set_document_store",
]
