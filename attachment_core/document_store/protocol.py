"""Document store protocol and singleton management.

Defines the DocumentStore protocol that the document persistence engine
writes field values to, along with get/set helpers for the process-global
singleton.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for document field storage backends.

    Documents are addressed by collection name and document id; the stored
    value is a flat mapping of field name to scalar value.
    """

    def insert(self, collection: str, document_id: str, attributes: dict[str, Any]) -> None:
        """Insert a new document. Overwrites an existing entry with the same id."""
        ...

    def update(self, collection: str, document_id: str, changes: dict[str, Any]) -> None:
        """Apply changed fields to an existing document. Raises DocumentNotFound if missing."""
        ...

    def load(self, collection: str, document_id: str) -> dict[str, Any]:
        """Load all stored fields of a document. Raises DocumentNotFound if missing."""
        ...

    def delete(self, collection: str, document_id: str) -> None:
        """Delete a document. No-op if it does not exist."""
        ...

    def count(self, collection: str) -> int:
        """Number of documents stored in a collection."""
        ...


_document_store: DocumentStore | None = None


def get_document_store() -> DocumentStore | None:
    """Get the process-global document store singleton."""
    return _document_store


def set_document_store(store: DocumentStore | None) -> None:
    """Set the process-global document store singleton."""
    global _document_store
    _document_store = store
