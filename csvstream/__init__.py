"""csvstream: streaming CSV reader and writer with spreadsheet-dialect support.

WHY: CSV files are often too large to load at once, have rows of
different widths, and come from (or go to) spreadsheet applications
with their own quoting conventions. This package reads and writes them
one record at a time over any byte source or sink.

HOW: Two core primitives. RecordReader.next_record() drives an
incremental tokenizer over a refillable byte buffer; RecordWriter
.write_record() escapes fields and pushes them to a byte sink. Table
helpers, formatters and the CLI are thin layers on top.

RULES:
- Records are lists of str; empty fields are "" and are never dropped
- The dialect (delimiter, excel_tricks) is fixed per reader/writer
- EndOfInput marks the end of records; parse errors carry the record
  and field position
"""

from csvstream.core.channels import (
    ByteSink,
    ByteSource,
    FileSink,
    FileSource,
    InputBuffer,
    IterableSource,
    OutputWriter,
)
from csvstream.core.dialect import Dialect
from csvstream.core.errors import (
    CsvError,
    CsvParseError,
    EndOfInput,
    IOClosed,
    MalformedQuotedField,
    UnterminatedQuotedField,
)
from csvstream.core.reader import RecordReader
from csvstream.core.writer import RecordWriter, encode_field, encode_record
from csvstream.presets import DIALECTS, get_dialect
from csvstream.table import (
    dumps,
    fold_left,
    fold_right,
    input_all,
    iter_records,
    load,
    loads,
    print_table,
    save,
)

__version__ = "0.1.0"

__all__ = [
    "ByteSink",
    "ByteSource",
    "CsvError",
    "CsvParseError",
    "DIALECTS",
    "Dialect",
    "EndOfInput",
    "FileSink",
    "FileSource",
    "IOClosed",
    "InputBuffer",
    "IterableSource",
    "MalformedQuotedField",
    "OutputWriter",
    "RecordReader",
    "RecordWriter",
    "UnterminatedQuotedField",
    "dumps",
    "encode_field",
    "encode_record",
    "fold_left",
    "fold_right",
    "get_dialect",
    "input_all",
    "iter_records",
    "load",
    "loads",
    "print_table",
    "save",
    "__version__",
]
