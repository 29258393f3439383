"""
Text-level predicates for table rows, shared by the extractor and the parser.
"""
from __future__ import annotations

import re
from typing import Iterable, Sequence

# Labels that mark a header row on Pro-Football-Reference stat tables.
KNOWN_HEADER_LABELS = frozenset({"player", "tm", "player_id"})

_NUMERIC_RE = re.compile(r"^[-+]?(?:\d+(?:,\d{3})*(?:\.\d*)?|\.\d+)%?$")


def clean_text(text: str | None) -> str:
    """Trim a cell and collapse internal whitespace (including non-breaking spaces)."""
    if text is None:
        return ""
    return " ".join(str(text).replace("\xa0", " ").split())


def looks_numeric(text: str | None) -> bool:
    return bool(_NUMERIC_RE.match(clean_text(text)))


def is_blank_row(row: Sequence[str]) -> bool:
    return not any(clean_text(cell) for cell in row)


def is_header_row(row: Sequence[str], known_labels: Iterable[str] = KNOWN_HEADER_LABELS) -> bool:
    """
    A header row has no numeric-looking cells and names at least one known column.
    """
    cells = [clean_text(cell) for cell in row]
    if not any(cells):
        return False
    if any(looks_numeric(cell) for cell in cells if cell):
        return False
    known = {label.lower() for label in known_labels}
    return any(cell.lower() in known for cell in cells)


def is_divider_row(row: Sequence[str], header: Sequence[str]) -> bool:
    """
    Repeated header rows, blank spacer rows and column-group bands
    (e.g. "Passing | Rushing | Receiving") are dividers, not data.
    """
    cells = [clean_text(cell) for cell in row]
    if not any(cells):
        return True
    if cells == [clean_text(cell) for cell in header]:
        return True
    if len(cells) != len(header) and not any(looks_numeric(cell) for cell in cells if cell):
        return True
    return False
