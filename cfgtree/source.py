from __future__ import annotations

from typing import Protocol, Union

from .errors import StreamError, UnexpectedDataEnd


class Readable(Protocol):
    def read(self, size: int = -1) -> bytes | str: ...


SourceData = Union[bytes, bytearray, str, Readable]


class ByteSource:
    """Pull-based byte reader with a single byte of lookahead.

    Accepts raw bytes, a ``str`` (encoded as UTF-8) or any object with a
    ``read(size)`` method. File-like objects are consumed in chunks of
    ``CHUNK_SIZE``; text chunks are encoded to UTF-8 as they arrive.
    ``offset`` counts consumed bytes and is only used for error reporting.
    """

    CHUNK_SIZE = 4096

    def __init__(self, data: SourceData) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8", "surrogatepass")
        if isinstance(data, (bytes, bytearray)):
            self._stream: Readable | None = None
            self._buffer = bytes(data)
        else:
            self._stream = data
            self._buffer = b""
        self._index = 0
        self._exhausted = self._stream is None
        self.offset = 0

    @property
    def at_start(self) -> bool:
        return self.offset == 0

    def peek(self) -> int | None:
        if self._index >= len(self._buffer) and not self._fill():
            return None
        return self._buffer[self._index]

    def read(self) -> int:
        byte = self.peek()
        if byte is None:
            raise UnexpectedDataEnd(self.offset)
        self._index += 1
        self.offset += 1
        return byte

    def _fill(self) -> bool:
        if self._exhausted or self._stream is None:
            return False
        try:
            chunk = self._stream.read(self.CHUNK_SIZE)
        except (OSError, ValueError) as exc:
            raise StreamError(self.offset) from exc
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8", "surrogatepass")
        if not chunk:
            self._exhausted = True
            return False
        self._buffer = chunk
        self._index = 0
        return True
