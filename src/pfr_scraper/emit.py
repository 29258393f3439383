"""
CSV output.

A file is replaced atomically the first time a run writes to it; further
writes to the same file in that run append rows under the columns of the
first write. Re-running a scrape therefore overwrites its earlier output
instead of duplicating it.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from pfr_scraper.errors import ConfigError
from pfr_scraper.models import Output

PathLike = Union[str, Path]


def ensure_output_dir(root: PathLike) -> Path:
    """Create the output root if needed and make sure it is writable."""
    path = Path(root)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Cannot create output directory {path}: {exc}") from exc
    if not path.is_dir():
        raise ConfigError(f"Output path {path} is not a directory")
    if not os.access(path, os.W_OK):
        raise ConfigError(f"Output directory {path} is not writable")
    return path


def frame_to_csv(df: pd.DataFrame, header: bool = True) -> str:
    return df.to_csv(index=False, header=header, lineterminator="\n", na_rep="")


def write_csv_atomic(text: str, path: PathLike, encoding: str = "utf-8") -> Path:
    """
    Write text to a temp file in the target directory, then os.replace() it
    onto the destination so readers never see a half-written file.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_name: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", delete=False, dir=target.parent, suffix=".tmp", encoding=encoding, newline=""
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
        os.replace(tmp_name, target)
        return target
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.remove(tmp_name)


class CsvEmitter:
    """Persists Outputs; remembers which files it already started during this run."""

    def __init__(self) -> None:
        self._columns: Dict[Path, List[str]] = {}

    def started(self, path: PathLike) -> bool:
        return Path(path) in self._columns

    def write(self, output: Output) -> int:
        path = Path(output.path)
        columns = self._columns.get(path)
        first = columns is None
        if first:
            columns = list(output.columns)
        else:
            extra = [col for col in output.columns if col not in columns]
            if extra:
                print(f"[pfr] Dropping columns {extra} from {output.source or 'output'}: not in {path}")

        df = pd.DataFrame(output.rows, columns=columns, dtype=object)
        text = frame_to_csv(df, header=first)
        if first:
            write_csv_atomic(text, path)
            self._columns[path] = columns
        else:
            with path.open("a", encoding="utf-8", newline="") as fh:
                fh.write(text)
        print(f"Wrote {len(df)} rows to {path}")
        return len(df)
