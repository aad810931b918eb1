"""JSON formatter: a table as an array of arrays of strings.

WHY: Downstream tools (jq, web front-ends) consume JSON far more
readily than CSV. Keeping rows as arrays preserves heterogeneous row
widths; no header interpretation is imposed.

HOW: Records are written as they are consumed, one per line, as UTF-8
JSON. Each record is validated with jsonschema against the ``items``
part of the bundled records.schema.json before it is written, so the
whole document conforms to the schema without holding the table in
memory.

RULES:
- Output is a JSON array; each element is an array of strings
- Non-ASCII characters are written as-is (ensure_ascii=False)
- A record failing validation raises before any of it is written;
  records already written stay in the output
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, List, Optional

import jsonschema

from csvstream.formatters.base import BaseFormatter

SCHEMA_PATH = Path(__file__).resolve().parent / "records.schema.json"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


class JsonFormatter(BaseFormatter):
    """Formatter producing a JSON array of records."""

    @property
    def name(self) -> str:
        return "JSON"

    def write(self, records: Iterable[List[str]], out: BinaryIO) -> int:
        record_schema = _get_schema()["items"]
        count = 0
        for record in records:
            record = list(record)
            jsonschema.validate(instance=record, schema=record_schema)
            out.write(b"[\n  " if count == 0 else b",\n  ")
            out.write(json.dumps(record, ensure_ascii=False).encode("utf-8"))
            count += 1
        out.write(b"\n]\n" if count else b"[]\n")
        return count
