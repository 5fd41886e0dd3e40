"""MIME type detection from file names.

Detection is purely extension-based: attachment content is never read to
determine its type.
"""

import mimetypes
from pathlib import PurePosixPath

DEFAULT_MIME_TYPE = "application/octet-stream"

# Preferred over the platform mimetypes database, which varies between systems
EXTENSION_MIME_MAP: dict[str, str] = {
    "txt": "text/plain",
    "md": "text/markdown",
    "csv": "text/csv",
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "text/javascript",
    "py": "text/x-python",
    "json": "application/json",
    "yaml": "application/yaml",
    "yml": "application/yaml",
    "xml": "application/xml",
    "pdf": "application/pdf",
    "zip": "application/zip",
    "gz": "application/gzip",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
}


def detect_mime_type_from_name(name: str) -> str | None:
    """Return the MIME type implied by the file extension, or None if unknown."""
    suffix = PurePosixPath(name).suffix.lower().lstrip(".")
    if not suffix:
        return None
    if mime := EXTENSION_MIME_MAP.get(suffix):
        return mime
    guessed, _ = mimetypes.guess_type(f"file.{suffix}", strict=False)
    return guessed
