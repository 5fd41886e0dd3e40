"""Tests for LifecycleCoordinator: policies, failures and retries."""

from io import BytesIO
from pathlib import Path
from unittest.mock import patch

import pytest

from attachment_core.attachments import AttachmentDocument, LifecycleCoordinator, attachment
from attachment_core.attachments.slot import PendingDelete, PendingUpload, Persisted
from attachment_core.blob_store import set_blob_store
from attachment_core.blob_store.local import LocalBlobStore
from attachment_core.blob_store.memory import MemoryBlobStore
from attachment_core.document_store import MemoryDocumentStore
from attachment_core.exceptions import AttachmentCleanupError, StoreIOError, StoreUnavailable
from attachment_core.settings import ReplacePolicy
from tests.support.helpers import RecordingBlobStore


class Asset(AttachmentDocument):
    image = attachment()
    file = attachment()


class DeletingAsset(AttachmentDocument):
    coordinator = LifecycleCoordinator(replace_policy=ReplacePolicy.DELETE)
    image = attachment()


class ReusingAsset(AttachmentDocument):
    coordinator = LifecycleCoordinator(replace_policy=ReplacePolicy.REUSE)
    image = attachment()


class TestReplacePolicy:
    def test_default_comes_from_settings(self):
        with patch("attachment_core.attachments.coordinator.settings") as mock_settings:
            mock_settings.attachment_replace_policy = ReplacePolicy.REUSE
            assert LifecycleCoordinator().replace_policy is ReplacePolicy.REUSE

    def test_explicit_policy_wins(self):
        assert LifecycleCoordinator(replace_policy=ReplacePolicy.DELETE).replace_policy is ReplacePolicy.DELETE

    def test_delete_policy_removes_old_blob(self, blob_store: RecordingBlobStore):
        asset = DeletingAsset.create(image=BytesIO(b"old"))
        old_id = asset.image_id

        asset.image = BytesIO(b"new")
        asset.save()

        assert blob_store.deletes == [old_id]
        assert blob_store.count() == 1
        assert asset.image_id != old_id
        assert DeletingAsset.find(asset.id).image.read() == b"new"

    def test_delete_policy_failure_keeps_new_upload(self, blob_store: RecordingBlobStore):
        asset = DeletingAsset.create(image=BytesIO(b"old"))
        old_id = asset.image_id

        asset.image = BytesIO(b"new")
        blob_store.fail_delete = StoreIOError("disk busy")
        asset.save()

        assert asset.has_image
        assert asset.image_id != old_id
        assert blob_store.exists(old_id)

    def test_reuse_policy_keeps_id(self, blob_store: RecordingBlobStore):
        asset = ReusingAsset.create(image=BytesIO(b"old"))
        old_id = asset.image_id

        asset.image = BytesIO(b"brand new")
        asset.save()

        assert asset.image_id == old_id
        assert asset.image_size == len(b"brand new")
        assert blob_store.count() == 1
        assert blob_store.deletes == []
        assert ReusingAsset.find(asset.id).image.read() == b"brand new"

    def test_reuse_policy_failed_put_keeps_old_blob(self, blob_store: RecordingBlobStore):
        asset = ReusingAsset.create(image=BytesIO(b"old"))
        old_id = asset.image_id

        asset.image = BytesIO(b"new")
        blob_store.fail_put = StoreIOError("disk full")
        with pytest.raises(StoreIOError):
            asset.save()

        assert asset.image_id == old_id
        assert blob_store.deletes == []
        assert blob_store.exists(old_id)
        loaded = ReusingAsset.find(asset.id)
        assert loaded.has_image
        assert loaded.image.read() == b"old"

    def test_reuse_policy_retry_after_failed_put(self, blob_store: RecordingBlobStore):
        asset = ReusingAsset.create(image=BytesIO(b"old"))
        old_id = asset.image_id
        asset.image = BytesIO(b"new")
        blob_store.fail_put = StoreIOError("disk full")
        with pytest.raises(StoreIOError):
            asset.save()

        blob_store.fail_put = None
        asset.save()

        assert asset.image_id == old_id
        assert blob_store.count() == 1
        assert ReusingAsset.find(asset.id).image.read() == b"new"

    def test_first_upload_ignores_policy(self, blob_store: RecordingBlobStore):
        DeletingAsset.create(image=BytesIO(b"x"))
        ReusingAsset.create(image=BytesIO(b"y"))

        assert blob_store.deletes == []
        assert blob_store.count() == 2


class TestFailedUpload:
    def test_failure_propagates_and_leaves_slot_pending(self, blob_store: RecordingBlobStore):
        asset = Asset(image=BytesIO(b"x"))
        blob_store.fail_put = StoreIOError("disk full")

        with pytest.raises(StoreIOError):
            asset.save()

        assert isinstance(asset.attachment_slot("image").state, PendingUpload)
        assert asset.image_id is None
        assert asset.image_name is None
        assert asset.is_new_record

    def test_document_is_not_written(self, blob_store: RecordingBlobStore, document_store: MemoryDocumentStore):
        blob_store.fail_put = StoreIOError("disk full")

        with pytest.raises(StoreIOError):
            Asset.create(image=BytesIO(b"x"))

        assert document_store.count("asset") == 0

    def test_retry_uploads_exactly_once(self, blob_store: RecordingBlobStore):
        asset = Asset(image=BytesIO(b"retry me"))
        blob_store.fail_put = StoreIOError("disk full")
        with pytest.raises(StoreIOError):
            asset.save()

        blob_store.fail_put = None
        asset.save()
        asset.save()

        assert blob_store.count() == 1
        assert asset.has_image
        assert asset.image.read() == b"retry me"

    def test_replacement_failure_keeps_old_fields(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"old"))
        old_id = asset.image_id

        asset.image = BytesIO(b"new")
        blob_store.fail_put = StoreIOError("disk full")
        with pytest.raises(StoreIOError):
            asset.save()

        assert asset.image_id == old_id
        assert Asset.find(asset.id).image.read() == b"old"

    def test_failed_delete_stays_pending(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"x"))
        old_id = asset.image_id
        asset.image = None
        blob_store.fail_delete = StoreIOError("disk busy")

        with pytest.raises(StoreIOError):
            asset.save()

        assert asset.attachment_slot("image").state == PendingDelete(old_id)
        assert asset.image_id == old_id

        blob_store.fail_delete = None
        asset.save()
        assert asset.image_id is None
        assert blob_store.deletes == [old_id, old_id]


class TestStoreResolution:
    def test_missing_store(self):
        set_blob_store(None)
        asset = Asset(image=BytesIO(b"x"))

        with pytest.raises(StoreUnavailable):
            asset.save()

    def test_save_without_pending_work_needs_no_store(self):
        set_blob_store(None)
        Asset.create()

    def test_dedicated_store(self, tmp_path: Path, blob_store: RecordingBlobStore):
        local = LocalBlobStore(tmp_path)

        class Archived(AttachmentDocument):
            coordinator = LifecycleCoordinator(local)
            scan = attachment()

        archived = Archived.create(scan=BytesIO(b"scan"))

        assert local.count() == 1
        assert blob_store.count() == 0
        assert Archived.find(archived.id).scan.read() == b"scan"  # type: ignore[attr-defined]
        archived.destroy()
        assert local.count() == 0


class TestSyncFromFields:
    def test_direct_field_write_wins_over_cached_slot(self, blob_store: RecordingBlobStore):
        first = Asset.create(image=BytesIO(b"first"))
        second = Asset.create(image=BytesIO(b"second"))
        assert second.has_image

        second.image_id = first.image_id
        second.image_size = first.image_size
        second.save()

        assert second.attachment_slot("image").state == Persisted(
            id=first.image_id, name="", type="application/octet-stream", size=5
        )
        assert second.image.read() == b"first"
        assert len(blob_store.puts) == 2

    def test_clearing_id_field_empties_slot(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"x"))

        asset.image_id = None
        asset.save()

        assert not asset.has_image
        assert blob_store.deletes == []


class TestDestroyCleanup:
    def test_failures_are_aggregated(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"i"), file=BytesIO(b"f"))
        blob_store.fail_delete = StoreIOError("disk busy")

        with pytest.raises(AttachmentCleanupError) as exc_info:
            asset.destroy()

        assert [name for name, _ in exc_info.value.failures] == ["image", "file"]
        assert all(isinstance(e, StoreIOError) for _, e in exc_info.value.failures)
        assert asset.is_destroyed

    def test_every_slot_is_attempted(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"i"), file=BytesIO(b"f"))
        real_delete = MemoryBlobStore.delete

        def flaky_delete(store: RecordingBlobStore, blob_id: str) -> None:
            store.deletes.append(blob_id)
            if blob_id == asset.image_id:
                raise StoreIOError("image blob locked")
            real_delete(store, blob_id)

        with patch.object(RecordingBlobStore, "delete", flaky_delete):
            with pytest.raises(AttachmentCleanupError) as exc_info:
                asset.destroy()

        assert [name for name, _ in exc_info.value.failures] == ["image"]
        assert not blob_store.exists(asset.file_id)
        assert blob_store.exists(asset.image_id)

    def test_non_store_errors_are_not_collected(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"i"), file=BytesIO(b"f"))
        blob_store.fail_delete = TypeError("bad blob id")

        with pytest.raises(TypeError, match="bad blob id"):
            asset.destroy()

    def test_already_missing_blob_is_not_a_failure(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"x"))
        blob_store.clear()

        asset.destroy()

        assert asset.is_destroyed

    def test_replacing_upload_deletes_old_blob_on_destroy(self, blob_store: RecordingBlobStore):
        asset = Asset.create(image=BytesIO(b"old"))
        old_id = asset.image_id
        asset.image = BytesIO(b"never saved")

        asset.destroy()

        assert blob_store.deletes == [old_id]
        assert blob_store.count() == 0
