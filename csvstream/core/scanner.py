"""Field scanners: the byte-level tokenizer behind RecordReader.

WHY: A CSV field can be arbitrarily long and can straddle any number of
buffer refills. The scanners must produce the same field whatever the
chunk boundaries are, without recursion and without rescanning bytes
they already consumed.

HOW: Each scanner is an index-based loop over ``InputBuffer.data``
between the ``start`` and ``end`` cursors. When the window runs out,
the unread part of the field is appended to a caller-owned scratch
bytearray, the buffer is refilled and the loop resumes at offset 0. The
quoted scanner carries its state as an explicit QuoteState value, so a
refill can happen in either state and scanning resumes identically.

RULES:
- Unquoted: stop at delimiter, CR, LF or end of input; strip trailing
  spaces/tabs; CR swallows one following LF
- Quoted: "" is a literal quote; after the closing quote only spaces
  may appear before the delimiter or line break
- Spreadsheet tricks: "0 inside a quoted field is a NUL byte
- End of input right after a closing quote completes the field; end of
  input anywhere else inside quotes is UnterminatedQuotedField
- Both scanners return (value, more_fields); more_fields is True only
  when the field ended on the delimiter
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple

from csvstream.core.channels import InputBuffer
from csvstream.core.dialect import CR, LF, NUL, QUOTE, ZERO, Dialect
from csvstream.core.errors import EndOfInput, MalformedQuotedField, UnterminatedQuotedField

_BAD_CLOSING_QUOTE = "non-space after closing quote"


class QuoteState(enum.Enum):
    """Where the quoted scanner is relative to the last quote it saw."""

    BODY = "body"
    AFTER_QUOTE = "after_quote"


@dataclass(frozen=True)
class ScanPosition:
    """Record/field coordinates of the field being scanned, for errors."""

    record_no: int
    field_no: int


def skip_lf(buf: InputBuffer) -> None:
    """Consume one LF right after a CR, if there is one.

    Reaching the end of input here is not an error.
    """
    try:
        buf.fill()
    except EndOfInput:
        return
    if buf.data[buf.start] == LF:
        buf.start += 1


def skip_spaces(buf: InputBuffer, spaces: bytes) -> None:
    """Advance past spaces/tabs, refilling as needed.

    Afterwards ``buf.start`` points at a non-space byte.

    Raises:
        EndOfInput: Only whitespace was left in the source.
    """
    while True:
        buf.fill()
        data = buf.data
        i = buf.start
        end = buf.end
        while i < end and data[i] in spaces:
            i += 1
        buf.start = i
        if i < end:
            return


def scan_unquoted(
    buf: InputBuffer,
    field: bytearray,
    dialect: Dialect,
) -> Tuple[bytes, bool]:
    """Scan an unquoted field starting at ``buf.start``.

    Args:
        buf: The input buffer, positioned on the first byte of the field.
        field: Scratch area. It may already hold a prefix of the field
               (the ``=`` of a spreadsheet formula); it is only written to
               when the field crosses a refill.
        dialect: Delimiter and whitespace settings.

    Returns:
        The field with trailing whitespace stripped, and whether more
        fields follow in the same record.
    """
    stop = dialect.unquoted_stop
    spaces = dialect.spaces
    try:
        while True:
            data = buf.data
            match = stop.search(data, buf.start, buf.end)
            if match is None:
                # End not found in this window: save it and look at the next one
                field += data[buf.start:buf.end]
                buf.start = buf.end
                buf.fill()
                continue
            i = match.start()
            if field:
                field += data[buf.start:i]
                value = bytes(field.rstrip(spaces))
            else:
                value = bytes(data[buf.start:i].rstrip(spaces))
            buf.start = i + 1
            c = data[i]
            if c == CR:
                skip_lf(buf)
                return value, False
            return value, c != LF
    except EndOfInput:
        return bytes(field.rstrip(spaces)), False


def _seek_separator(buf: InputBuffer, dialect: Dialect, pos: ScanPosition) -> bool:
    """Skip spaces after a closing quote up to the delimiter or line break."""
    delimiter = dialect.delimiter_byte
    spaces = dialect.spaces
    while True:
        buf.fill()
        c = buf.data[buf.start]
        buf.start += 1
        if c == delimiter:
            return True
        if c == LF:
            return False
        if c == CR:
            skip_lf(buf)
            return False
        if c not in spaces:
            raise MalformedQuotedField(pos.record_no, pos.field_no, _BAD_CLOSING_QUOTE)


def scan_quoted(
    buf: InputBuffer,
    field: bytearray,
    dialect: Dialect,
    pos: ScanPosition,
) -> Tuple[bytes, bool]:
    """Scan a quoted field whose opening quote was already consumed.

    Args:
        buf: The input buffer, positioned just after the opening quote.
        field: Scratch area receiving the decoded field.
        dialect: Delimiter, whitespace and trick settings.
        pos: Position reported by any error.

    Returns:
        The decoded field and whether more fields follow.

    Raises:
        MalformedQuotedField: A stray byte follows a closing quote.
        UnterminatedQuotedField: The input ended inside the quotes.
    """
    delimiter = dialect.delimiter_byte
    spaces = dialect.spaces
    excel_tricks = dialect.excel_tricks
    state = QuoteState.BODY
    try:
        while True:
            buf.fill()
            data = buf.data
            i = buf.start
            if state is QuoteState.BODY:
                q = data.find(QUOTE, i, buf.end)
                if q < 0:
                    field += data[i:buf.end]
                    buf.start = buf.end
                    continue
                field += data[i:q]
                buf.start = q + 1
                state = QuoteState.AFTER_QUOTE
                continue

            c = data[i]
            if c == QUOTE:
                field.append(QUOTE)
                buf.start = i + 1
                state = QuoteState.BODY
            elif c == delimiter or c == CR or c == LF or c in spaces:
                value = bytes(field)
                return value, _seek_separator(buf, dialect, pos)
            elif excel_tricks and c == ZERO:
                field.append(NUL)
                buf.start = i + 1
                state = QuoteState.BODY
            else:
                raise MalformedQuotedField(pos.record_no, pos.field_no, _BAD_CLOSING_QUOTE)
    except EndOfInput:
        if state is QuoteState.AFTER_QUOTE:
            return bytes(field), False
        raise UnterminatedQuotedField(pos.record_no, pos.field_no) from None
