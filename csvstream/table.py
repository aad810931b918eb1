"""Whole-table helpers built on RecordReader and RecordWriter.

WHY: Many callers just want "load this file" or "save these rows", or a
fold over every record. These helpers cover those cases without the
core having to know about paths, stdout or in-memory tables.

HOW: Everything here is a loop over RecordReader.next_record() or
RecordWriter.write_record(). load()/save() open and close the file,
loads()/dumps() work on in-memory text, print_table() writes to stdout.

RULES:
- Only load()/loads()/input_all() hold a whole table in memory
- A fold stops at the record that raised; reader.record_number then
  tells which record it was
- fold_right() applies the function last record first
"""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, TextIO, TypeVar, Union

from csvstream.config import DEFAULT_ENCODING, check_encoding
from csvstream.core.channels import ByteSink, IterableSource
from csvstream.core.dialect import Dialect
from csvstream.core.errors import EndOfInput
from csvstream.core.reader import Record, RecordReader
from csvstream.core.writer import RecordWriter

T = TypeVar("T")

Table = List[Record]


def _resolve_encoding(encoding: Optional[str]) -> str:
    return check_encoding(encoding) if encoding else DEFAULT_ENCODING


def iter_records(reader: RecordReader, fn: Callable[[Record], Any]) -> None:
    """Call ``fn`` on every remaining record of ``reader``."""
    while True:
        try:
            record = reader.next_record()
        except EndOfInput:
            return
        fn(record)


def fold_left(fn: Callable[[T, Record], T], initial: T, reader: RecordReader) -> T:
    """Fold ``fn`` over the remaining records, first record first."""
    acc = initial
    while True:
        try:
            record = reader.next_record()
        except EndOfInput:
            return acc
        acc = fn(acc, record)


def fold_right(fn: Callable[[Record, T], T], reader: RecordReader, initial: T) -> T:
    """Fold ``fn`` over the remaining records, last record first.

    All records are read before ``fn`` is first called.
    """
    acc = initial
    for record in reversed(input_all(reader)):
        acc = fn(record, acc)
    return acc


def input_all(reader: RecordReader) -> Table:
    """Read every remaining record into a list."""
    return list(reader)


def load(
    path: Union[str, Path],
    dialect: Optional[Dialect] = None,
    encoding: Optional[str] = None,
) -> Table:
    """Load a whole CSV file."""
    with RecordReader.open(path, dialect=dialect, encoding=encoding) as reader:
        return input_all(reader)


def loads(
    data: Union[str, bytes],
    dialect: Optional[Dialect] = None,
    encoding: Optional[str] = None,
) -> Table:
    """Parse CSV held in memory (text or bytes)."""
    encoding = _resolve_encoding(encoding)
    if isinstance(data, str):
        data = data.encode(encoding)
    with RecordReader(IterableSource([data]), dialect=dialect, encoding=encoding) as reader:
        return input_all(reader)


def save(
    path: Union[str, Path],
    table: Iterable[Sequence[Any]],
    dialect: Optional[Dialect] = None,
    encoding: Optional[str] = None,
) -> None:
    """Write ``table`` to ``path``, replacing any existing file."""
    with RecordWriter.open(path, dialect=dialect, encoding=encoding) as writer:
        writer.write_records(table)


class _TextSink(ByteSink):
    """ByteSink decoding into a text stream (stdout, StringIO)."""

    def __init__(self, out: TextIO, encoding: str) -> None:
        self._out = out
        self._encoding = encoding

    def write_from(self, buf: bytes, offset: int, length: int) -> int:
        self._out.write(bytes(buf[offset:offset + length]).decode(self._encoding))
        return length

    def close(self) -> None:
        self._out.flush()


def dumps(
    table: Iterable[Sequence[Any]],
    dialect: Optional[Dialect] = None,
    encoding: Optional[str] = None,
) -> str:
    """Return ``table`` as CSV text."""
    out = io.StringIO()
    print_table(table, dialect=dialect, encoding=encoding, file=out)
    return out.getvalue()


def print_table(
    table: Iterable[Sequence[Any]],
    dialect: Optional[Dialect] = None,
    encoding: Optional[str] = None,
    file: Optional[TextIO] = None,
) -> None:
    """Write ``table`` as CSV to ``file`` (standard output by default)."""
    out = file if file is not None else sys.stdout
    encoding = _resolve_encoding(encoding)
    # Records are encoded and decoded with the same codec
    with RecordWriter(_TextSink(out, encoding), dialect=dialect, encoding=encoding) as writer:
        writer.write_records(table)
