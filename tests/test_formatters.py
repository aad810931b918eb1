"""Unit tests for the output formatters.

WHY: The CLI relies on formatters to turn records into files. A CSV
formatter that loses quoting or a JSON formatter that emits something
other than arrays of strings breaks every downstream consumer.

HOW: Each formatter writes into a BytesIO. JSON output is parsed back
and validated against the bundled records.schema.json.
"""

import io
import json

import jsonschema
import pytest

from conftest import COMMA, EXCEL
from csvstream.core.dialect import Dialect
from csvstream.formatters import FORMATTERS
from csvstream.formatters.base import BaseFormatter
from csvstream.formatters.csv_text import CsvFormatter
from csvstream.formatters.json_records import SCHEMA_PATH, JsonFormatter

RECORDS = [["id", "name"], ["1", "Smith, John", "extra"], []]


def _load_schema():
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


class TestRegistry:
    """FORMATTERS maps CLI names to formatter classes."""

    def test_keys(self):
        assert set(FORMATTERS) == {"csv", "json"}

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_values_are_formatter_classes(self, key):
        cls = FORMATTERS[key]
        assert issubclass(cls, BaseFormatter)
        assert cls().name


class TestCsvFormatter:
    """CsvFormatter re-encodes records in the output dialect."""

    def test_default_comma(self):
        out = io.BytesIO()
        count = CsvFormatter(COMMA).write(iter(RECORDS), out)
        assert count == 3
        assert out.getvalue() == b'id,name\n1,"Smith, John",extra\n\n'

    def test_leaves_stream_open(self):
        out = io.BytesIO()
        CsvFormatter(COMMA).write([["a"]], out)
        assert not out.closed

    def test_output_dialect(self):
        out = io.BytesIO()
        CsvFormatter(Dialect(delimiter=";", excel_tricks=True)).write([["007", "a;b"]], out)
        assert out.getvalue() == b'="007";"a;b"\n'

    def test_output_encoding(self):
        out = io.BytesIO()
        CsvFormatter(COMMA, "latin-1").write([["é"]], out)
        assert out.getvalue() == b"\xe9\n"


class TestJsonFormatter:
    """JsonFormatter writes an array of arrays of strings."""

    def test_output_matches_schema(self):
        out = io.BytesIO()
        count = JsonFormatter().write(RECORDS, out)
        assert count == 3
        data = json.loads(out.getvalue().decode("utf-8"))
        jsonschema.validate(instance=data, schema=_load_schema())
        assert data == RECORDS

    def test_one_record_per_line(self):
        out = io.BytesIO()
        JsonFormatter().write([["a"], ["b", "c"]], out)
        assert out.getvalue().decode("utf-8") == '[\n  ["a"],\n  ["b", "c"]\n]\n'

    def test_empty_table(self):
        out = io.BytesIO()
        assert JsonFormatter().write([], out) == 0
        assert out.getvalue() == b"[]\n"

    def test_non_ascii_kept(self):
        out = io.BytesIO()
        JsonFormatter(EXCEL).write([["東京", "\x00"]], out)
        text = out.getvalue().decode("utf-8")
        assert "東京" in text
        assert json.loads(text) == [["東京", "\x00"]]

    def test_rejects_non_string_fields(self):
        with pytest.raises(jsonschema.ValidationError):
            JsonFormatter().write([["a", 1]], io.BytesIO())

    def test_records_written_as_consumed(self):
        out = io.BytesIO()
        seen_before_next = []

        def records():
            for record in (["a"], ["b", "c"], ["d"]):
                seen_before_next.append(out.getvalue())
                yield record

        assert JsonFormatter().write(records(), out) == 3
        assert seen_before_next[0] == b""
        assert seen_before_next[1] == b'[\n  ["a"]'
        assert seen_before_next[2] == b'[\n  ["a"],\n  ["b", "c"]'
        assert json.loads(out.getvalue()) == [["a"], ["b", "c"], ["d"]]

    def test_invalid_record_stops_before_it_is_written(self):
        out = io.BytesIO()
        with pytest.raises(jsonschema.ValidationError):
            JsonFormatter().write([["ok"], ["a", None], ["never"]], out)
        assert out.getvalue() == b'[\n  ["ok"]'
