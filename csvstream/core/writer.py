"""Field and record encoding: writing CSV records to a byte sink.

WHY: The writer is the mirror of the reader. Fields are only quoted
when they have to be, so plain data stays readable, and with the
spreadsheet tricks enabled the output survives a round trip through a
spreadsheet application that would otherwise trim spaces or turn
"007" into the number 7.

HOW: must_quote() and needs_excel_trick() decide how a field is
written, encode_field() produces the escaped bytes and encode_record()
joins a whole record. RecordWriter pushes encoded records through an
OutputWriter, which retries short writes.

RULES:
- Quote when the first/last byte is whitespace, or the field contains
  the delimiter, CR, LF, a quote or (tricks) a NUL byte
- Quotes are doubled; with tricks a NUL is written as "0
- With tricks, ="..." is used when the field starts with whitespace or
  "0", or ends with whitespace
- An empty field is written as nothing, never as ""
- Fields are separated by the delimiter, records end with a single LF
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Optional, Sequence, Union

from csvstream.config import DEFAULT_ENCODING, check_encoding, default_dialect
from csvstream.core.channels import ByteSink, FileSink, OutputWriter
from csvstream.core.dialect import CR, LF, NUL, QUOTE, ZERO, Dialect

logger = logging.getLogger(__name__)

_SPACES = b" \t"


def must_quote(field: bytes, dialect: Dialect) -> bool:
    """Whether ``field`` (non-empty) can only be written between quotes."""
    if field[0] in _SPACES or field[-1] in _SPACES:
        return True
    for c in (dialect.delimiter_byte, CR, LF, QUOTE):
        if c in field:
            return True
    return dialect.excel_tricks and NUL in field


def needs_excel_trick(field: bytes) -> bool:
    """Whether a spreadsheet would alter ``field`` unless written as ="..."."""
    return field[0] in _SPACES or field[0] == ZERO or field[-1] in _SPACES


def escape(field: bytes, dialect: Dialect) -> bytes:
    """Double the quotes of ``field`` and, with tricks, encode NUL as "0."""
    field = field.replace(b'"', b'""')
    if dialect.excel_tricks:
        field = field.replace(b"\x00", b'"0')
    return field


def encode_field(field: bytes, dialect: Dialect) -> bytes:
    """Return the bytes written for one field."""
    if not field:
        return b""
    use_excel_trick = dialect.excel_tricks and needs_excel_trick(field)
    if not use_excel_trick and not must_quote(field, dialect):
        return field
    opening = b'="' if use_excel_trick else b'"'
    return opening + escape(field, dialect) + b'"'


def _to_bytes(value: Any, encoding: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        value = str(value)
    return value.encode(encoding)


def encode_record(
    record: Sequence[Any],
    dialect: Dialect,
    encoding: str = DEFAULT_ENCODING,
) -> bytes:
    """Return the bytes of one record, line terminator included.

    str fields are encoded with ``encoding``, bytes fields are used as
    they are and anything else is written as ``str(value)``.
    """
    separator = bytes([dialect.delimiter_byte])
    fields = [encode_field(_to_bytes(value, encoding), dialect) for value in record]
    return separator.join(fields) + b"\n"


class RecordWriter:
    """Streaming CSV writer emitting one record per call.

    Usage::

        with RecordWriter.open("out.csv", dialect=Dialect(excel_tricks=True)) as writer:
            writer.write_record(["id", "zip"])
            writer.write_record(["1", "01234"])

    Args:
        sink: A ByteSink or a binary file object.
        dialect: Delimiter and trick settings; defaults to the
                 CSVSTREAM_* environment configuration.
        encoding: Text encoding used for str fields.
    """

    def __init__(
        self,
        sink: Union[ByteSink, BinaryIO],
        dialect: Optional[Dialect] = None,
        encoding: Optional[str] = None,
    ) -> None:
        if not isinstance(sink, ByteSink):
            sink = FileSink(sink)
        self.dialect = dialect or default_dialect()
        self.encoding = check_encoding(encoding) if encoding else DEFAULT_ENCODING
        self._out = OutputWriter(sink)
        self._records_written = 0

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        dialect: Optional[Dialect] = None,
        encoding: Optional[str] = None,
    ) -> RecordWriter:
        """Create (or truncate) ``path``; the file is closed with the writer."""
        fh = open(path, "wb")
        try:
            writer = cls(FileSink(fh), dialect=dialect, encoding=encoding)
        except Exception:
            fh.close()
            raise
        logger.debug("Opened %s for writing", path)
        return writer

    def write_record(self, record: Sequence[Any]) -> None:
        """Write one record followed by a line feed.

        Raises:
            IOClosed: The writer was closed.
        """
        self._out.write_all(encode_record(record, self.dialect, self.encoding))
        self._records_written += 1

    def write_records(self, records: Iterable[Sequence[Any]]) -> int:
        """Write every record of ``records``; return how many were written."""
        count = 0
        for record in records:
            self.write_record(record)
            count += 1
        return count

    @property
    def records_written(self) -> int:
        return self._records_written

    @property
    def closed(self) -> bool:
        return self._out.closed

    def close(self) -> None:
        if not self._out.closed:
            logger.debug("Closing writer after %d record(s)", self._records_written)
        self._out.close()

    def __enter__(self) -> RecordWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
