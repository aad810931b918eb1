"""Output formatter registry.

WHY: The CLI converts CSV into other representations. A central dict
makes adding a format one new module plus one line here.

HOW: FORMATTERS maps a key to a formatter *class*. Callers instantiate
as needed: ``formatter = FORMATTERS["json"](dialect)``.

RULES:
- Keys are the names accepted by ``csvstream --to``
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from csvstream.formatters.csv_text import CsvFormatter
from csvstream.formatters.json_records import JsonFormatter

if TYPE_CHECKING:
    from csvstream.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "csv": CsvFormatter,
    "json": JsonFormatter,
}
