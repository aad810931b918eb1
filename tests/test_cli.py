"""Tests for the command-line interface.

WHY: The CLI combines dialect presets, per-option overrides, stdin and
stdout handling and error reporting. Each of those is easy to wire
wrongly without any unit test of the core noticing.

HOW: main() is called with an explicit argv. Files live in tmp_path;
stdin is replaced with monkeypatch; stdout/stderr are read with capsys.
Error paths are checked through SystemExit codes.
"""

import io
import json
import logging

import pytest

from csvstream.cli import _configure_logging, build_parser, main, resolve_dialects
from csvstream.core.dialect import Dialect


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "in.csv"
    path.write_bytes(b'id; name ;zip\n1;"Doe; Jane";01234\n2;x\n')
    return path


class TestParser:
    """build_parser defaults and dialect resolution."""

    def test_defaults(self):
        args = build_parser().parse_args(["in.csv"])
        assert args.input_file == "in.csv"
        assert args.output is None
        assert args.to == "csv"
        assert args.excel_tricks is None
        assert args.out_excel_tricks is None

    def test_output_defaults_to_input_dialect(self):
        args = build_parser().parse_args(["in.csv", "--dialect", "semicolon"])
        dialect_in, dialect_out = resolve_dialects(args)
        assert dialect_in == Dialect(delimiter=";")
        assert dialect_out == dialect_in

    def test_overrides(self):
        args = build_parser().parse_args([
            "in.csv", "--dialect", "excel", "--no-excel-tricks",
            "--out-dialect", "csv", "--out-delimiter", "tab", "--out-excel-tricks",
        ])
        dialect_in, dialect_out = resolve_dialects(args)
        assert dialect_in == Dialect(delimiter=",", excel_tricks=False)
        assert dialect_out == Dialect(delimiter="\t", excel_tricks=True)

    @pytest.mark.parametrize("verbose, level", [(True, logging.INFO), (False, logging.WARNING)])
    def test_verbose_selects_info(self, monkeypatch, verbose, level):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        _configure_logging(verbose)
        assert calls[0]["level"] == level

    def test_unknown_format_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["in.csv", "--to", "xml"])


class TestConvert:
    """Successful conversions."""

    def test_semicolon_to_excel_csv(self, sample, tmp_path, capsys):
        out = tmp_path / "out.csv"
        main([str(sample), "--dialect", "semicolon", "--out-dialect", "excel", "-o", str(out)])
        assert out.read_bytes() == b'id,name,zip\n1,Doe; Jane,="01234"\n2,x\n'
        assert "Wrote 3 record(s) as CSV" in capsys.readouterr().err

    def test_to_json(self, sample, tmp_path):
        out = tmp_path / "out.json"
        main([str(sample), "--delimiter", ";", "--to", "json", "-o", str(out)])
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data == [["id", "name", "zip"], ["1", "Doe; Jane", "01234"], ["2", "x"]]

    def test_stdout(self, sample, capsys):
        main([str(sample), "--delimiter", ";", "--out-delimiter", "|"])
        captured = capsys.readouterr()
        assert captured.out == "id|name|zip\n1|Doe; Jane|01234\n2|x\n"

    def test_stdin(self, monkeypatch, tmp_path):
        stdin = io.TextIOWrapper(io.BytesIO(b"a,b\n"), encoding="utf-8")
        monkeypatch.setattr("sys.stdin", stdin)
        out = tmp_path / "out.csv"
        main(["-", "--dialect", "csv", "--out-delimiter", ";", "-o", str(out)])
        assert out.read_bytes() == b"a;b\n"


class TestErrors:
    """Errors exit with status 1 and a message on stderr."""

    def test_parse_error_reports_position(self, tmp_path, capsys):
        path = tmp_path / "bad.csv"
        path.write_bytes(b'ok\n"bad"x\n')
        with pytest.raises(SystemExit) as info:
            main([str(path), "--dialect", "csv", "-o", str(tmp_path / "out.csv")])
        assert info.value.code == 1
        assert "record 2, field 0" in capsys.readouterr().err

    def test_unknown_dialect(self, sample, capsys):
        with pytest.raises(SystemExit) as info:
            main([str(sample), "--dialect", "nope"])
        assert info.value.code == 1
        assert "unknown dialect 'nope'" in capsys.readouterr().err

    def test_bad_delimiter(self, sample, capsys):
        with pytest.raises(SystemExit) as info:
            main([str(sample), "--delimiter", ";;"])
        assert info.value.code == 1
        assert "single character" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as info:
            main([str(tmp_path / "missing.csv"), "--dialect", "csv"])
        assert info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_delimiter_conflicting_with_excel_tricks(self, sample, capsys):
        with pytest.raises(SystemExit) as info:
            main([str(sample), "--dialect", "excel", "--delimiter", "="])
        assert info.value.code == 1
        assert "conflicts with excel_tricks" in capsys.readouterr().err
