"""Display name and content type resolution for assigned streams.

Both resolvers only inspect metadata the stream object already carries; they
never read payload bytes.
"""

import os
from pathlib import PureWindowsPath
from typing import IO, Any

from attachment_core.blob_store._streams import rewind
from attachment_core.documents.mime_type import DEFAULT_MIME_TYPE, detect_mime_type_from_name

# Self-reported names exposed by upload wrappers, in order of preference
ORIGINAL_NAME_ATTRIBUTES = ("original_filename", "filename")

__all__ = ["declared_content_type", "resolve_name", "resolve_type", "rewind"]


def _basename(value: str) -> str:
    # PureWindowsPath splits on both "/" and "\"
    return PureWindowsPath(value).name


def resolve_name(source: IO[Any]) -> str:
    """Resolve the display name of a stream.

    Precedence:
        1. A self-reported original name (``original_filename``, then ``filename``)
        2. The last path component of the stream's ``name`` when it is a path
        3. An empty string
    """
    for attr in ORIGINAL_NAME_ATTRIBUTES:
        value = getattr(source, attr, None)
        if isinstance(value, str) and value:
            return _basename(value)

    path = getattr(source, "name", None)
    if isinstance(path, (str, bytes, os.PathLike)):
        return _basename(os.fsdecode(path))
    return ""


def resolve_type(source: IO[Any], declared_type: str | None = None) -> str:
    """Resolve the MIME type of a stream.

    Precedence:
        1. ``declared_type`` supplied at assignment time
        2. Detection from the resolved display name's extension
        3. ``application/octet-stream``
    """
    if declared_type:
        return declared_type
    return detect_mime_type_from_name(resolve_name(source)) or DEFAULT_MIME_TYPE


def declared_content_type(source: IO[Any]) -> str | None:
    """Content type announced by the stream object itself, if any."""
    value = getattr(source, "content_type", None)
    return value if isinstance(value, str) and value else None
