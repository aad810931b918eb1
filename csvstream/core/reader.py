"""Record assembly: turning a byte stream into CSV records one at a time.

WHY: Callers want "give me the next row" over files that may be far too
large to load, may have rows of different widths, and may use the
spreadsheet dialect. RecordReader is the single object that owns the
buffer, the scratch area and the record counter for one stream.

HOW: next_record() makes sure bytes are available, then repeatedly
skips leading whitespace, looks at the first byte of the field and
hands over to the quoted or unquoted scanner until a scanner reports
that the record is complete. Scanned bytes are decoded with the
reader's text encoding.

RULES:
- EndOfInput is raised only at a record boundary
- End of input right after a delimiter gives one empty trailing field
- A record is returned whole or not at all
- Errors carry the 1-based record number and 0-based field index
- A closed reader rejects every operation with IOClosed
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Tuple, Union

from csvstream.config import BUFFER_SIZE, DEFAULT_ENCODING, check_encoding, default_dialect
from csvstream.core.channels import ByteSource, FileSource, InputBuffer
from csvstream.core.dialect import EQUALS, QUOTE, Dialect
from csvstream.core.errors import CsvParseError, EndOfInput, IOClosed
from csvstream.core.scanner import (
    ScanPosition,
    scan_quoted,
    scan_unquoted,
    skip_spaces,
)

logger = logging.getLogger(__name__)

Record = List[str]


class RecordReader:
    """Streaming CSV reader producing one record per call.

    Usage::

        with RecordReader.open("data.csv") as reader:
            for record in reader:
                ...

    Args:
        source: A ByteSource or a binary file object.
        dialect: Delimiter and trick settings; defaults to the
                 CSVSTREAM_* environment configuration.
        encoding: Text encoding of the fields (ASCII-compatible).
        buffer_size: Capacity of the input buffer in bytes.
    """

    def __init__(
        self,
        source: Union[ByteSource, BinaryIO],
        dialect: Optional[Dialect] = None,
        encoding: Optional[str] = None,
        buffer_size: int = BUFFER_SIZE,
    ) -> None:
        if not isinstance(source, ByteSource):
            source = FileSource(source)
        self.dialect = dialect or default_dialect()
        self.encoding = check_encoding(encoding) if encoding else DEFAULT_ENCODING
        self._buffer = InputBuffer(source, buffer_size)
        self._field = bytearray()
        self._record: Record = []
        self._record_no = 0

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        dialect: Optional[Dialect] = None,
        encoding: Optional[str] = None,
        buffer_size: int = BUFFER_SIZE,
    ) -> RecordReader:
        """Open ``path`` for reading; the file is closed with the reader."""
        fh = open(path, "rb")
        try:
            reader = cls(FileSource(fh), dialect=dialect, encoding=encoding,
                         buffer_size=buffer_size)
        except Exception:
            fh.close()
            raise
        logger.debug("Opened %s for reading", path)
        return reader

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def next_record(self) -> Record:
        """Read the next record.

        Returns:
            The fields of the record in source order.

        Raises:
            EndOfInput: No record is left.
            MalformedQuotedField: Stray character after a closing quote.
            UnterminatedQuotedField: Input ended inside quotes.
            IOClosed: The reader was closed.
        """
        buf = self._buffer
        if buf.closed:
            raise IOClosed()
        buf.fill()
        self._record_no += 1
        record: Record = []
        more_fields = True
        field_no = 0
        try:
            while more_fields:
                value, more_fields = self._next_field(ScanPosition(self._record_no, field_no))
                record.append(value.decode(self.encoding))
                field_no += 1
        except CsvParseError as exc:
            logger.debug("CSV parse error: %s", exc)
            raise
        self._record = record
        return record

    def _next_field(self, pos: ScanPosition) -> Tuple[bytes, bool]:
        buf = self._buffer
        field = self._field
        field.clear()
        try:
            skip_spaces(buf, self.dialect.spaces)
        except EndOfInput:
            # Only possible after a delimiter (or a whitespace-only last
            # line): the field is empty.
            return b"", False

        c = buf.data[buf.start]
        if c == QUOTE:
            buf.start += 1
            return scan_quoted(buf, field, self.dialect, pos)
        if self.dialect.excel_tricks and c == EQUALS:
            buf.start += 1
            try:
                buf.fill()
            except EndOfInput:
                return b"=", False
            if buf.data[buf.start] == QUOTE:
                # ="..." keeps surrounding spaces and leading zeros
                buf.start += 1
                return scan_quoted(buf, field, self.dialect, pos)
            field.append(EQUALS)
        return scan_unquoted(buf, field, self.dialect)

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        try:
            return self.next_record()
        except EndOfInput:
            raise StopIteration from None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current_record(self) -> Record:
        """The last record successfully returned by next_record()."""
        return self._record

    @property
    def record_number(self) -> int:
        """Number of the record read last (or being read when an error occurred)."""
        return self._record_no

    @property
    def closed(self) -> bool:
        return self._buffer.closed

    def as_source(self) -> ByteSource:
        """Hand the rest of the stream, read-ahead bytes included, to another consumer."""
        return self._buffer.as_source()

    def close(self) -> None:
        self._buffer.close()

    def __enter__(self) -> RecordReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
