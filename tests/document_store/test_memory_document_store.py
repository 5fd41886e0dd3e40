"""Tests for MemoryDocumentStore."""

import pytest

from attachment_core.document_store import DocumentStore, MemoryDocumentStore, get_document_store, set_document_store
from attachment_core.exceptions import DocumentNotFound


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


class TestProtocolCompliance:
    def test_satisfies_document_store_protocol(self):
        assert isinstance(MemoryDocumentStore(), DocumentStore)


class TestInsertAndLoad:
    def test_round_trip(self, store: MemoryDocumentStore):
        store.insert("assets", "a1", {"title": "x", "image_id": None})
        assert store.load("assets", "a1") == {"title": "x", "image_id": None}

    def test_collections_are_isolated(self, store: MemoryDocumentStore):
        store.insert("assets", "a1", {"title": "x"})
        with pytest.raises(DocumentNotFound):
            store.load("videos", "a1")
        assert store.count("assets") == 1
        assert store.count("videos") == 0

    def test_values_are_copied(self, store: MemoryDocumentStore):
        attributes = {"tags": ["a"]}
        store.insert("assets", "a1", attributes)
        attributes["tags"].append("b")

        loaded = store.load("assets", "a1")
        loaded["tags"].append("c")

        assert store.load("assets", "a1") == {"tags": ["a"]}

    def test_load_missing_raises(self, store: MemoryDocumentStore):
        with pytest.raises(DocumentNotFound):
            store.load("assets", "missing")


class TestUpdate:
    def test_update_merges_changes(self, store: MemoryDocumentStore):
        store.insert("assets", "a1", {"title": "x", "image_id": "abc"})
        store.update("assets", "a1", {"image_id": None})
        assert store.load("assets", "a1") == {"title": "x", "image_id": None}

    def test_update_missing_raises(self, store: MemoryDocumentStore):
        with pytest.raises(DocumentNotFound):
            store.update("assets", "missing", {"title": "y"})


class TestDelete:
    def test_delete(self, store: MemoryDocumentStore):
        store.insert("assets", "a1", {})
        store.delete("assets", "a1")
        assert store.count("assets") == 0

    def test_delete_missing_is_noop(self, store: MemoryDocumentStore):
        store.delete("assets", "missing")


class TestSingleton:
    def test_set_and_get(self):
        store = MemoryDocumentStore()
        set_document_store(store)
        assert get_document_store() is store
