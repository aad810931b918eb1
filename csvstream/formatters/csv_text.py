"""CSV formatter: re-encodes records in the output dialect.

Used to convert between dialects (e.g. semicolon files to the
spreadsheet dialect) or simply to normalise quoting.
"""

from __future__ import annotations

from typing import BinaryIO, Iterable, List

from csvstream.core.channels import FileSink
from csvstream.core.writer import RecordWriter
from csvstream.formatters.base import BaseFormatter


class CsvFormatter(BaseFormatter):
    """Streams records straight through a RecordWriter."""

    @property
    def name(self) -> str:
        return "CSV"

    def write(self, records: Iterable[List[str]], out: BinaryIO) -> int:
        writer = RecordWriter(FileSink(out, close_file=False), dialect=self.dialect,
                              encoding=self.encoding)
        with writer:
            return writer.write_records(records)
