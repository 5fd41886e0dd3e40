"""Stream helpers shared by blob stores and the attachment resolver."""

from collections.abc import Iterator
from typing import IO, Any

DEFAULT_CHUNK_SIZE = 255 * 1024


def rewind(stream: IO[Any]) -> None:
    """Seek a stream back to offset 0 when it supports seeking."""
    seekable = getattr(stream, "seekable", None)
    if seekable is not None and not seekable():
        return
    if hasattr(stream, "seek"):
        stream.seek(0)


def iter_chunks(stream: IO[Any], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the remaining content of a stream as bytes chunks.

    Text-mode streams yield ``str``; those chunks are encoded as UTF-8.
    """
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        yield bytes(chunk)
