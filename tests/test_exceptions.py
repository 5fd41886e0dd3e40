"""Tests for the exception hierarchy."""

import pytest

from attachment_core.exceptions import (
    AttachmentCleanupError,
    AttachmentCoreError,
    AttachmentNotFound,
    BlobNotFound,
    DeclarationError,
    DocumentError,
    DocumentNotFound,
    FieldTypeError,
    StoreError,
    StoreIOError,
    StoreUnavailable,
    UnsupportedCapability,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [DeclarationError, AttachmentNotFound, UnsupportedCapability, AttachmentCleanupError, StoreError, DocumentError],
    )
    def test_top_level_errors_share_base(self, exc_type: type[Exception]):
        assert issubclass(exc_type, AttachmentCoreError)

    @pytest.mark.parametrize("exc_type", [StoreUnavailable, StoreIOError, BlobNotFound])
    def test_store_errors(self, exc_type: type[Exception]):
        assert issubclass(exc_type, StoreError)

    @pytest.mark.parametrize("exc_type", [DocumentNotFound, FieldTypeError])
    def test_document_errors(self, exc_type: type[Exception]):
        assert issubclass(exc_type, DocumentError)


class TestAttachmentCleanupError:
    def test_lists_every_failure(self):
        failures: list[tuple[str, Exception]] = [
            ("image", StoreIOError("disk full")),
            ("file", StoreUnavailable("offline")),
        ]
        error = AttachmentCleanupError(failures)

        assert error.failures == failures
        message = str(error)
        assert message.startswith("Failed to delete 2 attachment blob(s)")
        assert "image: disk full" in message
        assert "file: offline" in message
