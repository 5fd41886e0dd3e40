"""Synchronizes attachment slots with the blob store around save and destroy."""

from typing import TYPE_CHECKING

from attachment_core.blob_store._streams import rewind
from attachment_core.blob_store._types import BlobId
from attachment_core.blob_store.protocol import BlobStore, get_blob_store
from attachment_core.exceptions import AttachmentCleanupError, BlobNotFound, StoreError, StoreUnavailable
from attachment_core.logging import get_pipeline_logger
from attachment_core.settings import ReplacePolicy, settings

from .resolver import resolve_name, resolve_type
from .slot import AttachmentSlot, PendingDelete, PendingUpload, Persisted

if TYPE_CHECKING:
    from .document import AttachmentDocument

logger = get_pipeline_logger(__name__)


class LifecycleCoordinator:
    """Drives slot transitions during document save and destroy.

    @public

    Every store call happens only for a slot with pending work, and a slot
    only advances after its store call succeeded, so retrying a failed save
    is safe: a pending upload is put again, a pending delete is deleted again.

    Args:
        store: Blob store to use. When None, the process-global store set with
            set_blob_store() is resolved on every call.
        replace_policy: What to do with the previous blob when a persisted
            attachment is replaced. Defaults to settings.attachment_replace_policy.
    """

    def __init__(self, store: BlobStore | None = None, *, replace_policy: ReplacePolicy | None = None) -> None:
        self._store = store
        self._replace_policy = replace_policy

    @property
    def replace_policy(self) -> ReplacePolicy:
        return self._replace_policy or settings.attachment_replace_policy

    def resolve_store(self) -> BlobStore:
        store = self._store or get_blob_store()
        if store is None:
            raise StoreUnavailable("No blob store configured. Call set_blob_store() or pass a store to the coordinator.")
        return store

    def before_save(self, document: "AttachmentDocument") -> None:
        """Upload pending streams and delete unassigned blobs, in declaration order.

        Raises:
            StoreError: Propagated from the store; the failing slot stays pending
                and its metadata fields are left untouched.
        """
        for name in document.attachment_types():
            self._sync_from_fields(document, name)
            slot = document.attachment_slot(name)
            match slot.state:
                case PendingUpload() as pending:
                    self._upload(document, slot, pending)
                case PendingDelete(id=blob_id):
                    self._delete_pending(document, slot, blob_id)
                case _:
                    pass

    def _sync_from_fields(self, document: "AttachmentDocument", name: str) -> None:
        # Metadata fields written directly win over a stale Persisted slot
        if document.is_new_record or isinstance(document.attachment_slot(name).state, (PendingUpload, PendingDelete)):
            return
        if document.is_new_or_changed(f"{name}_id"):
            document.reset_attachment_slot(name)

    def _upload(self, document: "AttachmentDocument", slot: AttachmentSlot, pending: PendingUpload) -> None:
        store = self.resolve_store()
        file_name = resolve_name(pending.source)
        content_type = resolve_type(pending.source, pending.declared_type)
        policy = self.replace_policy

        # Under reuse the store overwrites the old blob in place
        target_id = pending.replaces if policy is ReplacePolicy.REUSE else None

        rewind(pending.source)
        result = store.put(pending.source, name=file_name, content_type=content_type, blob_id=target_id)
        persisted = Persisted(id=result.blob_id, name=file_name, type=content_type, size=result.size)
        document.write_attachment_fields(slot.name, persisted)
        slot.mark_uploaded(persisted)
        logger.info(
            f"Uploaded attachment '{slot.name}' of {type(document).__name__}/{document.id} "
            f"as blob {result.blob_id} ({result.size} bytes, {content_type})"
        )

        if pending.replaces is not None and pending.replaces != result.blob_id:
            if policy is ReplacePolicy.DELETE:
                try:
                    self._delete_quietly(store, pending.replaces)
                except StoreError as e:
                    logger.warning(f"Failed to delete replaced blob {pending.replaces} of attachment '{slot.name}': {e}")
            else:
                logger.debug(f"Left replaced blob {pending.replaces} of attachment '{slot.name}' in the store")

    def _delete_pending(self, document: "AttachmentDocument", slot: AttachmentSlot, blob_id: BlobId) -> None:
        self._delete_quietly(self.resolve_store(), blob_id)
        document.write_attachment_fields(slot.name, None)
        slot.mark_deleted()
        logger.info(f"Deleted attachment '{slot.name}' blob {blob_id} of {type(document).__name__}/{document.id}")

    @staticmethod
    def _delete_quietly(store: BlobStore, blob_id: BlobId) -> None:
        """Delete a blob, treating an already missing blob as deleted."""
        try:
            store.delete(blob_id)
        except BlobNotFound:
            logger.debug(f"Blob {blob_id} was already missing from the store")

    def after_destroy(self, document: "AttachmentDocument") -> None:
        """Delete every blob still referenced by the destroyed document.

        Each slot is attempted even if an earlier deletion failed.

        Raises:
            AttachmentCleanupError: Listing every failed deletion.
        """
        failures: list[tuple[str, Exception]] = []
        for name in document.attachment_types():
            slot = document.attachment_slot(name)
            blob_id = slot.durable_blob_id
            if blob_id is not None:
                try:
                    self._delete_quietly(self.resolve_store(), blob_id)
                except StoreError as e:
                    logger.error(f"Failed to delete blob {blob_id} of attachment '{name}': {e}")
                    failures.append((name, e))
                else:
                    logger.info(f"Deleted attachment '{name}' blob {blob_id} of destroyed {type(document).__name__}/{document.id}")
            slot.discard()
        if failures:
            raise AttachmentCleanupError(failures)
