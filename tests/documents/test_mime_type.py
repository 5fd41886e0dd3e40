"""Tests for MIME type utility functions."""

import pytest

from attachment_core.documents.mime_type import DEFAULT_MIME_TYPE, detect_mime_type_from_name


class TestDetectMimeTypeFromName:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("mr_t.jpg", "image/jpeg"),
            ("PHOTO.JPEG", "image/jpeg"),
            ("testing.txt", "text/plain"),
            ("README.md", "text/markdown"),
            ("config.yml", "application/yaml"),
            ("report.pdf", "application/pdf"),
            ("clip.mp4", "video/mp4"),
            ("archive.tar.gz", "application/gzip"),
        ],
    )
    def test_known_extensions(self, name: str, expected: str):
        assert detect_mime_type_from_name(name) == expected

    def test_falls_back_to_mimetypes_database(self):
        assert detect_mime_type_from_name("scan.tiff") == "image/tiff"

    @pytest.mark.parametrize("name", ["", "Makefile", "blob.unknownext"])
    def test_unknown_returns_none(self, name: str):
        assert detect_mime_type_from_name(name) is None

    def test_default_mime_type(self):
        assert DEFAULT_MIME_TYPE == "application/octet-stream"
