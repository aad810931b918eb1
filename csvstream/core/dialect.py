"""Dialect configuration shared by readers and writers.

WHY: The tokenizer and the encoder must agree on the delimiter and on
whether the spreadsheet tricks (``="..."`` wrappers and ``"0`` NUL
escapes) are in play. Keeping both in one immutable value makes it
impossible to change them in the middle of a stream.

HOW: Dialect is a frozen dataclass validated in __post_init__. The byte
values the scanners need (delimiter byte, whitespace set, the compiled
"end of unquoted field" pattern) are derived properties so the hot
loops never recompute them from strings.

RULES:
- delimiter is exactly one ASCII character
- delimiter can not be the quote, CR or LF
- With excel_tricks, delimiter can not be "=" or "0" either: they
  are part of the ="..." wrapper and of the "0 NUL escape
- Whitespace is space and tab, minus the delimiter itself (so tab
  separated data keeps its empty fields)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

QUOTE = 0x22  # "
CR = 0x0D
LF = 0x0A
EQUALS = 0x3D  # =
ZERO = 0x30  # 0
NUL = 0x00

_WHITESPACE = b" \t"
_FORBIDDEN_DELIMITERS = frozenset({'"', "\r", "\n"})
_TRICK_DELIMITERS = frozenset({"=", "0"})


@lru_cache(maxsize=None)
def _unquoted_stop_pattern(delimiter: int) -> re.Pattern:
    return re.compile(b"[" + re.escape(bytes([delimiter])) + b"\r\n]")


@dataclass(frozen=True)
class Dialect:
    """Delimiter and spreadsheet-trick settings for one stream.

    Attributes:
        delimiter: Single ASCII field separator, ``","`` by default.
        excel_tricks: Enable the ``="..."`` wrapper and ``"0`` NUL
                      encoding understood by spreadsheet applications.
    """

    delimiter: str = ","
    excel_tricks: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.delimiter, str) or len(self.delimiter) != 1:
            raise ValueError(
                "delimiter must be a single character, got {!r}".format(self.delimiter)
            )
        if ord(self.delimiter) > 0x7F:
            raise ValueError(
                "delimiter must be an ASCII character, got {!r}".format(self.delimiter)
            )
        if self.delimiter in _FORBIDDEN_DELIMITERS:
            raise ValueError(
                "delimiter can not be a quote or line break, got {!r}".format(self.delimiter)
            )
        if self.excel_tricks and self.delimiter in _TRICK_DELIMITERS:
            raise ValueError(
                "delimiter {!r} conflicts with excel_tricks "
                "(used by the =\"...\" wrapper and the \"0 NUL escape)".format(self.delimiter)
            )

    @property
    def delimiter_byte(self) -> int:
        return ord(self.delimiter)

    @property
    def spaces(self) -> bytes:
        """Bytes treated as insignificant whitespace around fields."""
        return _WHITESPACE.replace(bytes([self.delimiter_byte]), b"")

    @property
    def unquoted_stop(self) -> re.Pattern:
        """Pattern matching any byte that ends an unquoted field."""
        return _unquoted_stop_pattern(self.delimiter_byte)
