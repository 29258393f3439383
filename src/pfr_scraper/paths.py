from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

PLAYERS_FILE = "players"

_CATEGORY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class OutputTarget:
    """
    Where a table's rows go: (year, week, category) in game mode, or the
    single players file when all fields are empty.
    """

    year: Optional[int] = None
    week: Optional[int] = None
    category: Optional[str] = None

    def __post_init__(self) -> None:
        fields = (self.year, self.week, self.category)
        if all(f is None for f in fields):
            return
        if any(f is None for f in fields):
            raise ValueError("Game output targets need year, week and category.")
        if self.year <= 0 or self.week <= 0:
            raise ValueError(f"Year and week must be positive, got {self.year}/{self.week}")
        if not _CATEGORY_RE.match(self.category):
            raise ValueError(f"Category {self.category!r} is not usable as a file name.")

    @classmethod
    def game(cls, year: int, week: int, category: str) -> "OutputTarget":
        return cls(year=year, week=week, category=category)

    @classmethod
    def players(cls) -> "OutputTarget":
        return cls()

    @property
    def is_players(self) -> bool:
        return self.category is None


def resolve(root: Path | str, target: OutputTarget) -> Path:
    """
    <root>/<year>/<week>/<category> for game tables, <root>/players otherwise.
    """
    base = Path(root)
    if target.is_players:
        return base / PLAYERS_FILE
    return base / str(target.year) / str(target.week) / target.category
