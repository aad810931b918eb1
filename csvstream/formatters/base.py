"""Abstract base formatter.

WHY: The CLI works with any output format generically: it hands the
formatter an iterable of records and a binary output stream.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``write()``
method. The dialect given at construction is the *output* dialect; it
only matters to formatters that write CSV.

RULES:
- Subclasses MUST implement ``name`` and ``write()``
- ``write()`` returns the number of records written
- ``write()`` does not close the output stream
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterable, List, Optional

from csvstream.core.dialect import Dialect


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement write() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    def __init__(self, dialect: Optional[Dialect] = None, encoding: Optional[str] = None) -> None:
        self.dialect = dialect
        self.encoding = encoding

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'JSON'."""

    @abstractmethod
    def write(self, records: Iterable[List[str]], out: BinaryIO) -> int:
        """Write ``records`` to ``out``.

        Args:
            records: Records as produced by RecordReader.
            out: Binary output stream, left open.

        Returns:
            The number of records written.
        """
