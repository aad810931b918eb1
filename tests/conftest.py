"""Shared test fixtures for the csvstream test suite.

WHY: Most tests need to feed the reader the same bytes cut into chunks
at awkward places, or to write through a sink that only accepts a few
bytes at a time. Centralizing those helpers keeps the tests about CSV
behaviour rather than plumbing.

HOW: Small ByteSource/ByteSink test doubles plus fixtures returning
callables: ``parse`` reads every record from bytes split into chunks,
``render`` writes records and returns the produced bytes.

RULES:
- ``parse`` accepts either a chunk size or explicit split offsets
- ShortWriteSink never writes more than ``max_chunk`` bytes per call
- Sources count their reads so sticky end-of-input can be asserted
"""

from typing import Any, Iterable, List, Optional, Sequence

import pytest

from csvstream.core.channels import ByteSink, ByteSource, IterableSource
from csvstream.core.dialect import Dialect
from csvstream.core.reader import RecordReader
from csvstream.core.writer import RecordWriter

COMMA = Dialect()
EXCEL = Dialect(excel_tricks=True)


class CountingSource(ByteSource):
    """IterableSource wrapper counting read_into() and close() calls."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._inner = IterableSource(chunks)
        self.reads = 0
        self.closes = 0

    def read_into(self, buf, offset, length):
        self.reads += 1
        return self._inner.read_into(buf, offset, length)

    def close(self) -> None:
        self.closes += 1
        self._inner.close()


class ShortWriteSink(ByteSink):
    """Sink accepting at most ``max_chunk`` bytes per write call."""

    def __init__(self, max_chunk: int = 3) -> None:
        self.max_chunk = max_chunk
        self.data = bytearray()
        self.calls = 0
        self.closes = 0

    def write_from(self, buf, offset, length):
        self.calls += 1
        n = min(length, self.max_chunk)
        self.data += buf[offset:offset + n]
        return n

    def close(self) -> None:
        self.closes += 1


def split_at(data: bytes, offsets: Sequence[int]) -> List[bytes]:
    """Cut ``data`` at the given offsets."""
    chunks = []
    previous = 0
    for offset in offsets:
        chunks.append(data[previous:offset])
        previous = offset
    chunks.append(data[previous:])
    return chunks


def chunked(data: bytes, size: int) -> List[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)] or [b""]


@pytest.fixture
def parse():
    """Return a callable reading every record of ``data``."""

    def _parse(
        data: bytes,
        dialect: Dialect = COMMA,
        chunk_size: Optional[int] = None,
        offsets: Optional[Sequence[int]] = None,
        buffer_size: int = 0x1FFF,
        encoding: str = "utf-8",
    ) -> List[List[str]]:
        if offsets is not None:
            chunks = split_at(data, offsets)
        elif chunk_size is not None:
            chunks = chunked(data, chunk_size)
        else:
            chunks = [data]
        reader = RecordReader(IterableSource(chunks), dialect=dialect,
                              encoding=encoding, buffer_size=buffer_size)
        with reader:
            return list(reader)

    return _parse


@pytest.fixture
def render():
    """Return a callable writing ``records`` and returning the bytes."""

    def _render(records: Iterable[Sequence[Any]], dialect: Dialect = COMMA,
                max_chunk: int = 1 << 20) -> bytes:
        sink = ShortWriteSink(max_chunk)
        with RecordWriter(sink, dialect=dialect) as writer:
            writer.write_records(records)
        return bytes(sink.data)

    return _render
