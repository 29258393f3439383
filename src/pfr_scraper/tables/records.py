"""
Turn extracted table text into typed records.

Every cell is coerced on its own: canonical integers become int, decimals
become float, anything else stays a string and empty cells become None. A
column that holds numbers in most rows and a sentinel in a few is therefore
never thrown away as a whole.
"""
from __future__ import annotations

import re
from typing import Dict, List, Sequence

from pfr_scraper.models import Record, StatTable, Value
from pfr_scraper.tables.rows import clean_text

# Columns that identify a player; never coerced even when they look numeric.
IDENTITY_COLUMNS = frozenset({"player", "player_id", "name", "tm", "team", "pos", "position"})

_INT_RE = re.compile(r"^(?:0|-?[1-9]\d*)$")
_FLOAT_RE = re.compile(r"^-?(?:\d+\.\d*|\.\d+)$")


def coerce(text: str | None) -> Value:
    cleaned = clean_text(text)
    if not cleaned:
        return None
    if _INT_RE.match(cleaned):
        return int(cleaned)
    if _FLOAT_RE.match(cleaned):
        return float(cleaned)
    return cleaned


def column_names(header: Sequence[str]) -> List[str]:
    """
    Header labels as column names. A repeated label is numbered by occurrence
    (Yds, Yds_2, Yds_3, ...), so the names do not shift when another table of
    the same category has an extra column. Blank labels are named col, col_2, ...
    """
    names: List[str] = []
    occurrences: Dict[str, int] = {}
    for label in header:
        base = clean_text(label) or "col"
        count = occurrences.get(base, 0) + 1
        occurrences[base] = count
        name = base if count == 1 else f"{base}_{count}"
        while name in names:
            count += 1
            name = f"{base}_{count}"
        names.append(name)
    return names


def parse(table: StatTable) -> List[Record]:
    """One Record per data row of the table; header and divider rows are skipped."""
    if not table.header:
        return []
    columns = column_names(table.header)
    identity = [clean_text(label).lower() in IDENTITY_COLUMNS for label in table.header]

    records: List[Record] = []
    for row in table.data_rows:
        fields = []
        for idx, column in enumerate(columns):
            text = row[idx] if idx < len(row) else ""
            if identity[idx]:
                value: Value = clean_text(text) or None
            else:
                value = coerce(text)
            fields.append((column, value))
        records.append(Record(category=table.category, fields=tuple(fields)))
    return records
