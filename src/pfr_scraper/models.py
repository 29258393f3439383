"""
Data passed between the pipeline stages.

FetchRequest -> RawPage -> StatTable -> Record -> Output
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pfr_scraper.tables.rows import is_divider_row

Value = Union[str, int, float, None]

GAME_MODE = "game"
PLAYER_MODE = "player"


@dataclass(frozen=True)
class FetchRequest:
    """One unit of work: a (year, week) of game logs or one player-index shard."""

    year: Optional[int] = None
    week: Optional[int] = None
    shard: Optional[str] = None

    def __post_init__(self) -> None:
        if self.shard is not None:
            if self.year is not None or self.week is not None:
                raise ValueError("A player shard request cannot also carry a year/week.")
            if len(self.shard) != 1 or not self.shard.isalpha() or not self.shard.isupper():
                raise ValueError(f"Player shards are single upper-case letters, got {self.shard!r}")
            return
        if self.year is None or self.week is None:
            raise ValueError("A game request needs both year and week.")
        if self.year <= 0 or self.week <= 0:
            raise ValueError(f"Year and week must be positive, got {self.year}/{self.week}")

    @classmethod
    def game(cls, year: int, week: int) -> "FetchRequest":
        return cls(year=year, week=week)

    @classmethod
    def players(cls, shard: str) -> "FetchRequest":
        return cls(shard=shard)

    @property
    def mode(self) -> str:
        return PLAYER_MODE if self.shard is not None else GAME_MODE

    @property
    def label(self) -> str:
        if self.mode == PLAYER_MODE:
            return f"players {self.shard}"
        return f"{self.year} week {self.week}"


@dataclass
class RawPage:
    url: str
    status: int
    body: str


@dataclass
class StatTable:
    """
    Raw cell text of one statistical table. rows[0] is the header row; the
    remaining rows may still contain dividers, see data_rows.
    """

    category: str
    rows: List[List[str]]
    source: str = ""

    @property
    def header(self) -> List[str]:
        return self.rows[0] if self.rows else []

    @property
    def data_rows(self) -> List[List[str]]:
        header = self.header
        if not header:
            return []
        return [row for row in self.rows[1:] if not is_divider_row(row, header)]


@dataclass(frozen=True)
class Record:
    """One parsed table row, tagged with its category and kept in column order."""

    category: str
    fields: Tuple[Tuple[str, Value], ...]

    @property
    def columns(self) -> List[str]:
        return [name for name, _ in self.fields]

    def get(self, column: str, default: Any = None) -> Any:
        for name, value in self.fields:
            if name == column:
                return value
        return default

    def as_dict(self) -> Dict[str, Value]:
        return dict(self.fields)


@dataclass
class Output:
    """Rows destined for one CSV file."""

    path: Path
    columns: List[str]
    rows: List[Dict[str, Value]] = field(default_factory=list)
    source: str = ""
