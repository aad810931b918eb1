"""Byte source/sink interfaces and the buffers the core works through.

WHY: The tokenizer must work on anything that yields bytes (files,
sockets, generators of chunks) without reading whole files into memory,
and the encoder must push bytes into anything that accepts them, even
sinks that only take part of a write at a time.

HOW: One ABC per direction with exactly two operations each:
  ByteSource: read_into(buf, offset, length) + close()
  ByteSink  : write_from(buf, offset, length) + close()
FileSource/FileSink adapt binary file objects, IterableSource adapts an
iterable of byte chunks. InputBuffer owns a fixed-size bytearray that
the scanners read directly through its start/end cursors. OutputWriter
retries short writes until every byte is flushed.

RULES:
- read_into returns the number of bytes read, 0 when the source is
  exhausted, or None when nothing is available right now
- Once a source reported exhaustion it is never queried again
- The valid window is data[start:end] with 0 <= start <= end <= capacity;
  end == -1 marks a closed buffer
- A short write is not a failure; OutputWriter keeps writing the rest
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, Iterable, Iterator, Optional

from csvstream.config import BUFFER_SIZE
from csvstream.core.errors import EndOfInput, IOClosed

logger = logging.getLogger(__name__)


class ByteSource(ABC):
    """Anything the reader can pull bytes from."""

    @abstractmethod
    def read_into(self, buf: bytearray, offset: int, length: int) -> Optional[int]:
        """Read up to ``length`` bytes into ``buf[offset:]``.

        Returns:
            The number of bytes read, ``0`` once the source is exhausted,
            or ``None`` when no bytes are available at the moment.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource."""


class ByteSink(ABC):
    """Anything the writer can push bytes into."""

    @abstractmethod
    def write_from(self, buf: bytes, offset: int, length: int) -> int:
        """Write up to ``length`` bytes from ``buf[offset:]``.

        Returns:
            The number of bytes actually written, possibly fewer than
            ``length``.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource."""


class FileSource(ByteSource):
    """ByteSource over a binary file object (open(..., "rb"), BytesIO, stdin.buffer)."""

    def __init__(self, fh: BinaryIO, close_file: bool = True) -> None:
        self._fh = fh
        self._close_file = close_file

    def read_into(self, buf: bytearray, offset: int, length: int) -> Optional[int]:
        readinto = getattr(self._fh, "readinto", None)
        if readinto is None:
            chunk = self._fh.read(length)
            if chunk is None:
                return None
            buf[offset:offset + len(chunk)] = chunk
            return len(chunk)
        return readinto(memoryview(buf)[offset:offset + length])

    def close(self) -> None:
        if self._close_file:
            self._fh.close()


class IterableSource(ByteSource):
    """ByteSource over an iterable of byte chunks.

    Each read returns at most one chunk; a chunk longer than the requested
    length is split and its remainder served by the next read. Empty
    chunks are reported as "nothing available right now".
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks: Optional[Iterator[bytes]] = iter(chunks)
        self._pending = b""

    def read_into(self, buf: bytearray, offset: int, length: int) -> Optional[int]:
        if not self._pending:
            if self._chunks is None:
                return 0
            try:
                self._pending = bytes(next(self._chunks))
            except StopIteration:
                self._chunks = None
                return 0
            if not self._pending:
                return None
        n = min(length, len(self._pending))
        buf[offset:offset + n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        close = getattr(self._chunks, "close", None)
        if close is not None:
            close()
        self._chunks = None
        self._pending = b""


class FileSink(ByteSink):
    """ByteSink over a binary file object."""

    def __init__(self, fh: BinaryIO, close_file: bool = True) -> None:
        self._fh = fh
        self._close_file = close_file

    def write_from(self, buf: bytes, offset: int, length: int) -> int:
        written = self._fh.write(memoryview(buf)[offset:offset + length])
        # Non-blocking raw files return None when they would block.
        return written or 0

    def close(self) -> None:
        if self._close_file:
            self._fh.close()
        else:
            self._fh.flush()


class InputBuffer:
    """Fixed-capacity refillable buffer in front of a ByteSource.

    WHY: Scanning byte by byte straight from the source would cost one
    call per byte. The scanners instead work on ``data[start:end]`` and
    ask for a refill only when the window is used up.

    RULES:
    - refill() is a no-op while the window holds unread bytes
    - refill() refills at offset 0, so a field split across refills
      must be saved by the caller before asking for more
    - The end-of-source flag is sticky
    """

    def __init__(self, source: ByteSource, capacity: int = BUFFER_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("buffer capacity must be positive, got {}".format(capacity))
        self._source = source
        self.data = bytearray(capacity)
        self.start = 0
        self.end = 0
        self.at_eof = False

    @property
    def capacity(self) -> int:
        return len(self.data)

    @property
    def closed(self) -> bool:
        return self.end < 0

    def refill(self) -> None:
        """Pull more bytes from the source if the window is empty.

        Raises:
            IOClosed: The buffer was closed.
            EndOfInput: The source is exhausted (now or earlier).
        """
        if self.end < 0:
            raise IOClosed()
        if self.at_eof:
            raise EndOfInput()
        if self.start < self.end:
            return
        self.start = 0
        self.end = 0
        n = self._source.read_into(self.data, 0, len(self.data))
        if n is None:
            return
        if n == 0:
            self.at_eof = True
            logger.debug("End of source reached")
            raise EndOfInput()
        self.end = n

    def fill(self) -> None:
        """Refill until at least one unread byte is available."""
        while self.start >= self.end:
            self.refill()

    def close(self) -> None:
        if self.end >= 0:
            self.start = 0
            self.end = -1
            logger.debug("Closing input buffer")
            self._source.close()

    def as_source(self) -> ByteSource:
        """Present this buffer, read-ahead bytes included, as a ByteSource."""
        return _BufferedSource(self)


class _BufferedSource(ByteSource):
    """ByteSource draining an InputBuffer before pulling fresh bytes."""

    def __init__(self, buffer: InputBuffer) -> None:
        self._buffer = buffer

    def read_into(self, buf: bytearray, offset: int, length: int) -> Optional[int]:
        if offset < 0 or length < 0 or offset + length > len(buf):
            raise ValueError("invalid offset/length for a buffer of {} bytes".format(len(buf)))
        ib = self._buffer
        try:
            ib.refill()
        except EndOfInput:
            return 0
        if ib.start >= ib.end:
            return None
        n = min(length, ib.end - ib.start)
        buf[offset:offset + n] = ib.data[ib.start:ib.start + n]
        ib.start += n
        return n

    def close(self) -> None:
        self._buffer.close()


class OutputWriter:
    """Byte Sink Writer: pushes whole byte strings into a ByteSink."""

    def __init__(self, sink: ByteSink) -> None:
        self._sink = sink
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write_all(self, data: bytes) -> None:
        """Write every byte of ``data``, retrying short writes."""
        if self._closed:
            raise IOClosed()
        offset = 0
        remaining = len(data)
        while remaining > 0:
            written = self._sink.write_from(data, offset, remaining)
            if written < remaining:
                logger.debug("Short write: %d of %d bytes", written, remaining)
            offset += written
            remaining -= written

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._sink.close()
