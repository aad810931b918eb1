"""Named dialect presets.

WHY: Most files come in a handful of well-known flavours. Naming them
lets the CLI and callers pick one ("excel", "tsv") without spelling out
delimiter and trick settings.

HOW: DIALECTS maps a preset name to a frozen Dialect instance.
get_dialect() looks a name up case-insensitively.

RULES:
- Presets are immutable Dialect values, safe to share
- "excel" enables the spreadsheet tricks with a comma delimiter
"""

from __future__ import annotations

from typing import Dict

from csvstream.core.dialect import Dialect

DIALECTS: Dict[str, Dialect] = {
    "csv": Dialect(delimiter=","),
    "excel": Dialect(delimiter=",", excel_tricks=True),
    "tsv": Dialect(delimiter="\t"),
    "semicolon": Dialect(delimiter=";"),
    "pipe": Dialect(delimiter="|"),
}


def get_dialect(name: str) -> Dialect:
    """Return the preset called ``name``.

    Raises:
        KeyError: Unknown preset; the message lists the known ones.
    """
    try:
        return DIALECTS[name.lower()]
    except KeyError:
        raise KeyError(
            "unknown dialect {!r} (available: {})".format(name, ", ".join(sorted(DIALECTS)))
        ) from None
