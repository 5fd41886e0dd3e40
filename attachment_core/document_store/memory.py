"""In-memory document store for testing.

Simple dict-based storage implementing the full DocumentStore protocol.
Not for production use: all data is lost when the process exits.
"""

import copy
import threading
from typing import Any

from attachment_core.exceptions import DocumentNotFound


class MemoryDocumentStore:
    """Dict-based document store for unit tests.

    Storage layout: collection -> document id -> field values. Values are
    deep-copied on the way in and out so callers never share state with the
    store.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def insert(self, collection: str, document_id: str, attributes: dict[str, Any]) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[document_id] = copy.deepcopy(attributes)

    def update(self, collection: str, document_id: str, changes: dict[str, Any]) -> None:
        with self._lock:
            stored = self._collections.get(collection, {}).get(document_id)
            if stored is None:
                raise DocumentNotFound(f"Document {collection}/{document_id} not found")
            stored.update(copy.deepcopy(changes))

    def load(self, collection: str, document_id: str) -> dict[str, Any]:
        with self._lock:
            stored = self._collections.get(collection, {}).get(document_id)
            if stored is None:
                raise DocumentNotFound(f"Document {collection}/{document_id} not found")
            return copy.deepcopy(stored)

    def delete(self, collection: str, document_id: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(document_id, None)

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))
