"""Command-line interface: convert CSV between dialects or to JSON.

WHY: Users need a quick way to normalise a CSV file, switch its
delimiter, make it spreadsheet-safe (leading zeros, surrounding spaces)
or turn it into JSON, without writing Python.

HOW: argparse builds the input and output Dialect from a preset name
plus per-option overrides. A RecordReader streams the input (a path or
stdin) record by record into the selected formatter, which writes to
the output file or stdout. Status messages go to stderr.

RULES:
- Positional argument: input CSV path, or "-" for stdin
- Input dialect: --dialect preset (default: CSVSTREAM_* environment),
  then --delimiter and --excel-tricks/--no-excel-tricks override it
- Output dialect: --out-dialect preset (default: the input dialect),
  then --out-delimiter and --out-excel-tricks/--no-out-excel-tricks
- --to selects the formatter (default: csv)
- Exit code 0 on success, 1 on CSV/config/I/O errors, 130 on Ctrl-C
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import BinaryIO, List, Optional

from csvstream.config import DEFAULT_ENCODING, default_dialect, parse_delimiter
from csvstream.core.channels import FileSource
from csvstream.core.dialect import Dialect
from csvstream.core.errors import CsvError
from csvstream.core.reader import RecordReader
from csvstream.formatters import FORMATTERS
from csvstream.presets import DIALECTS, get_dialect

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, so stdout can be piped."""
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _override(base: Dialect, delimiter: Optional[str], excel_tricks: Optional[bool]) -> Dialect:
    """Apply command-line overrides to a dialect.

    RULES:
    - None means "keep the base value"
    - Raises ValueError for an invalid delimiter
    """
    changes = {}
    if delimiter is not None:
        changes["delimiter"] = parse_delimiter(delimiter)
    if excel_tricks is not None:
        changes["excel_tricks"] = excel_tricks
    return dataclasses.replace(base, **changes) if changes else base


def resolve_dialects(args: argparse.Namespace) -> tuple:
    """Build the (input, output) dialects from parsed arguments.

    Raises:
        KeyError: Unknown preset name.
        ValueError: Invalid delimiter.
    """
    base_in = get_dialect(args.dialect) if args.dialect else default_dialect()
    dialect_in = _override(base_in, args.delimiter, args.excel_tricks)
    base_out = get_dialect(args.out_dialect) if args.out_dialect else dialect_in
    dialect_out = _override(base_out, args.out_delimiter, args.out_excel_tricks)
    return dialect_in, dialect_out


def _open_reader(path: str, dialect: Dialect, encoding: str) -> RecordReader:
    if path == "-":
        return RecordReader(FileSource(sys.stdin.buffer, close_file=False),
                            dialect=dialect, encoding=encoding)
    return RecordReader.open(path, dialect=dialect, encoding=encoding)


def convert(args: argparse.Namespace) -> int:
    """Run one conversion; return the number of records written.

    Raises:
        CsvError, OSError, ValueError, KeyError: Reported by main().
    """
    dialect_in, dialect_out = resolve_dialects(args)
    formatter = FORMATTERS[args.to](dialect_out, args.encoding)
    logger.info("Input dialect %s, output dialect %s", dialect_in, dialect_out)

    with _open_reader(args.input_file, dialect_in, args.encoding) as reader:
        if args.output is None:
            out: BinaryIO = sys.stdout.buffer
            count = formatter.write(reader, out)
            out.flush()
        else:
            with open(args.output, "wb") as out:
                count = formatter.write(reader, out)
    return count


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser.
    """
    parser = argparse.ArgumentParser(
        prog="csvstream",
        description="Read a CSV file record by record and write it back in "
                    "another dialect or as JSON.",
    )

    parser.add_argument(
        "input_file",
        help='Path to the CSV file to read, or "-" for standard input.',
    )

    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file (default: standard output).",
    )

    parser.add_argument(
        "--to",
        choices=sorted(FORMATTERS),
        default="csv",
        help="Output format (default: %(default)s).",
    )

    parser.add_argument(
        "--dialect",
        default=None,
        help="Input dialect preset. Available: {}.".format(", ".join(sorted(DIALECTS))),
    )

    parser.add_argument(
        "--delimiter",
        default=None,
        help='Input delimiter, one character ("tab" for a tab).',
    )

    parser.add_argument(
        "--excel-tricks",
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Decode ="..." fields and "0 NUL escapes in the input.',
    )

    parser.add_argument(
        "--out-dialect",
        default=None,
        help="Output dialect preset (default: same as the input).",
    )

    parser.add_argument(
        "--out-delimiter",
        default=None,
        help="Output delimiter, one character.",
    )

    parser.add_argument(
        "--out-excel-tricks",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Protect leading zeros and surrounding spaces for spreadsheets.",
    )

    parser.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help="Text encoding of the input and output (default: %(default)s).",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable informational logging on stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``csvstream`` and ``python -m csvstream``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        count = convert(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (CsvError, OSError, ValueError, KeyError) as e:
        # KeyError's str() adds quotes around the message
        message = e.args[0] if isinstance(e, KeyError) and e.args else e
        print("Error: {}".format(message), file=sys.stderr)
        sys.exit(1)

    _status("Wrote {} record(s) as {}".format(count, FORMATTERS[args.to]().name))


if __name__ == "__main__":
    main()
