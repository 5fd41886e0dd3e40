"""Exception hierarchy for Attachment Core.

All exceptions inherit from AttachmentCoreError, providing a consistent error
handling interface for declaration, storage and lifecycle failures.
"""


class AttachmentCoreError(Exception):
    """Base exception for all Attachment Core errors."""


class DeclarationError(AttachmentCoreError):
    """Raised when an attachment declaration is invalid or collides with an existing field."""


class AttachmentNotFound(AttachmentCoreError):
    """Raised when code reads an attachment that is not persisted."""


class UnsupportedCapability(AttachmentCoreError):
    """Raised when a blob handle does not expose the requested metadata."""


class AttachmentCleanupError(AttachmentCoreError):
    """Raised after destroy when one or more blob deletions failed.

    Every slot is attempted before this is raised; ``failures`` holds one
    ``(attachment_name, exception)`` pair per failed deletion.
    """

    def __init__(self, failures: list[tuple[str, Exception]]) -> None:
        self.failures = failures
        details = "; ".join(f"{name}: {exc}" for name, exc in failures)
        super().__init__(f"Failed to delete {len(failures)} attachment blob(s): {details}")


class StoreError(AttachmentCoreError):
    """Base exception for blob store failures."""


class StoreUnavailable(StoreError):
    """Raised when no blob store is configured or the store cannot be reached."""


class StoreIOError(StoreError):
    """Raised when reading or writing blob data fails."""


class BlobNotFound(StoreError):
    """Raised when a blob id does not exist in the store."""


class DocumentError(AttachmentCoreError):
    """Base exception for document persistence errors."""


class DocumentNotFound(DocumentError):
    """Raised when a document id does not exist in the document store."""


class FieldTypeError(DocumentError):
    """Raised when a value does not match the declared field type."""
