"""Exception taxonomy for reading and writing CSV streams.

WHY: Callers need to tell normal exhaustion of a stream apart from a
malformed file, and both apart from a programming error such as using a
reader after closing it. Typed exceptions make each case catchable on
its own.

HOW: Everything derives from CsvError. EndOfInput doubles as an
EOFError, IOClosed as a ValueError (the same base Python's own file
objects use for "I/O operation on closed file"). Parse errors carry the
position of the offending field.

RULES:
- EndOfInput is not a failure: it only signals a record boundary at the
  end of the source
- Parse errors always carry record_no (1-based) and field_no (0-based)
- Transport errors from sources and sinks are never wrapped
"""

from __future__ import annotations


class CsvError(Exception):
    """Base class for every error raised by csvstream."""


class EndOfInput(CsvError, EOFError):
    """Raised when the byte source is exhausted at a record boundary.

    WHY: Reading record by record needs a distinct signal for "no more
    records" that is not confused with a broken file.

    RULES:
    - Raised by InputBuffer.refill() once the source reports zero bytes,
      and on every later call without touching the source again
    - RecordReader iteration turns it into StopIteration
    """


class CsvParseError(CsvError):
    """A syntax error located at a record and field.

    Attributes:
        record_no: 1-based number of the record being read.
        field_no: 0-based index of the field inside that record.
        reason: Human-readable cause.
    """

    def __init__(self, record_no: int, field_no: int, reason: str) -> None:
        self.record_no = record_no
        self.field_no = field_no
        self.reason = reason
        super().__init__(
            "record {}, field {}: {}".format(record_no, field_no, reason)
        )


class MalformedQuotedField(CsvParseError):
    """A character other than a separator or space follows a closing quote."""


class UnterminatedQuotedField(CsvParseError):
    """The input ended inside an open quoted field."""

    def __init__(self, record_no: int, field_no: int,
                 reason: str = "quoted field closed by end of input") -> None:
        super().__init__(record_no, field_no, reason)


class IOClosed(CsvError, ValueError):
    """Raised when a reader or writer is used after close()."""

    def __init__(self, message: str = "I/O operation on closed CSV channel") -> None:
        super().__init__(message)
