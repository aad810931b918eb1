"""Configuration defaults and .env loading.

WHY: Default delimiter, spreadsheet tricks, text encoding and buffer size
should be adjustable per deployment without touching code, e.g. a site
that always exchanges semicolon-separated files with a spreadsheet.

HOW: python-dotenv loads the .env file on import. Each default is read
from a CSVSTREAM_* environment variable with a hardcoded fallback.
default_dialect() turns the delimiter/tricks defaults into a Dialect.

RULES:
- CSVSTREAM_DELIMITER: one character; "\\t" or "tab" mean a tab
- CSVSTREAM_EXCEL_TRICKS: true/false, 1/0, yes/no, on/off
- CSVSTREAM_ENCODING: must name an ASCII-compatible codec
- CSVSTREAM_BUFFER_SIZE: positive integer, bytes
- Invalid values raise ValueError naming the variable
"""

from __future__ import annotations

import codecs
import os

from dotenv import load_dotenv

from csvstream.core.dialect import Dialect

# Load .env from the current working directory
load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}

_DELIMITER_ALIASES = {
    "\\t": "\t",
    "tab": "\t",
}


def _env_bool(name: str, default: str) -> bool:
    raw = os.getenv(name, default).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError("{} must be a boolean (true/false), got {!r}".format(name, raw))


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw, 0)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}".format(name, raw)) from None
    if value <= 0:
        raise ValueError("{} must be positive, got {}".format(name, value))
    return value


def parse_delimiter(value: str) -> str:
    """Resolve a delimiter as typed on a command line or in .env.

    Accepts a single character or one of the aliases ``\\t`` / ``tab``.
    """
    return _DELIMITER_ALIASES.get(value.lower(), value)


def check_encoding(encoding: str) -> str:
    """Return the canonical codec name, rejecting non-ASCII-compatible ones.

    The scanners match delimiter, quote and line breaks as single bytes,
    so codecs such as UTF-16 that encode ASCII in several bytes would
    split fields in the wrong places.
    """
    try:
        info = codecs.lookup(encoding)
    except LookupError:
        raise ValueError("unknown encoding {!r}".format(encoding)) from None
    if ',"\r\n=0'.encode(info.name, errors="replace") != b',"\r\n=0':
        raise ValueError("encoding {!r} is not ASCII-compatible".format(encoding))
    return info.name


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_DELIMITER = parse_delimiter(os.getenv("CSVSTREAM_DELIMITER", ","))
DEFAULT_EXCEL_TRICKS = _env_bool("CSVSTREAM_EXCEL_TRICKS", "false")
DEFAULT_ENCODING = check_encoding(os.getenv("CSVSTREAM_ENCODING", "utf-8"))

BUFFER_SIZE = _env_int("CSVSTREAM_BUFFER_SIZE", 0x1FFF)
"""Capacity of the input buffer in bytes."""


def default_dialect() -> Dialect:
    """Build the Dialect described by the CSVSTREAM_* environment.

    RULES:
    - Raises ValueError if CSVSTREAM_DELIMITER is not a valid delimiter
    """
    return Dialect(delimiter=DEFAULT_DELIMITER, excel_tricks=DEFAULT_EXCEL_TRICKS)
