"""
Drive the fetch -> extract -> parse -> emit pipeline over a season or the player index.

Failures are contained to the target they happen on (one week schedule, one
box score, one index shard): they are recorded in the RunReport and the run
moves on to the next target.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pfr_scraper import locator
from pfr_scraper.config import PFR_DOMAIN
from pfr_scraper.emit import CsvEmitter
from pfr_scraper.errors import FetchError, NotFoundError, ParseError
from pfr_scraper.models import FetchRequest, Output, RawPage, StatTable
from pfr_scraper.paths import OutputTarget, resolve
from pfr_scraper.stats_fetchers.fetcher import Fetcher
from pfr_scraper.tables import extract, records

GAME_COLUMNS = ["year", "week", "game_id"]


@dataclass
class RunReport:
    succeeded: List[str] = field(default_factory=list)
    not_found: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    empty: List[str] = field(default_factory=list)
    outputs_written: int = 0

    @property
    def all_failed(self) -> bool:
        """True when something was attempted and nothing succeeded or was merely absent."""
        return bool(self.failed) and not (self.succeeded or self.not_found or self.empty)

    def summary(self) -> str:
        lines = [
            f"Succeeded: {len(self.succeeded)} target(s), {self.outputs_written} table(s) written",
            f"Empty: {len(self.empty)}",
            f"Not found: {len(self.not_found)}",
            f"Failed: {len(self.failed)}",
        ]
        lines.extend(f"  not found: {label}" for label in self.not_found)
        lines.extend(f"  failed: {label}: {reason}" for label, reason in self.failed)
        return "\n".join(lines)


def table_output(table: StatTable, path: Path, leading: Optional[dict] = None) -> Output:
    """Parse a table into an Output, prefixing each row with the `leading` columns."""
    leading = leading or {}
    columns = list(leading) + records.column_names(table.header)
    rows = [{**leading, **record.as_dict()} for record in records.parse(table)]
    return Output(path=path, columns=columns, rows=rows, source=table.source)


def box_score_outputs(
    page: RawPage,
    year: int,
    week: int,
    output_dir: Path,
    categories: Sequence[Tuple[str, str, bool]] = extract.CATEGORY_TABLES,
) -> List[Output]:
    """Every category table of one box score, resolved to <root>/<year>/<week>/<Category>."""
    outputs = []
    for table in extract.extract(page, categories):
        path = resolve(output_dir, OutputTarget.game(year, week, table.category))
        leading = {"year": year, "week": week, "game_id": table.source}
        outputs.append(table_output(table, path, leading))
    return outputs


def player_shard_output(page: RawPage, shard: str, output_dir: Path) -> Output:
    table = extract.player_index_table(page, shard)
    return table_output(table, resolve(output_dir, OutputTarget.players()))


class Scraper:
    """One run: a shared fetcher (and its rate limiter), one emitter, one report."""

    def __init__(
        self,
        fetcher: Fetcher,
        output_dir: Path | str,
        emitter: Optional[CsvEmitter] = None,
        base_url: str = PFR_DOMAIN,
        default_season_weeks: int = 18,
        categories: Sequence[Tuple[str, str, bool]] = extract.CATEGORY_TABLES,
    ):
        self.fetcher = fetcher
        self.output_dir = Path(output_dir)
        self.emitter = emitter or CsvEmitter()
        self.base_url = base_url
        self.default_season_weeks = default_season_weeks
        self.categories = categories
        self.report = RunReport()

    # Game mode

    def season_weeks(self, year: int) -> List[int]:
        """Weeks listed on the season page, else 1..default_season_weeks."""
        fallback = list(range(1, self.default_season_weeks + 1))
        try:
            page = self.fetcher.fetch(locator.season_url(year, self.base_url))
        except (FetchError, NotFoundError) as exc:
            print(f"[pfr] Could not read the {year} season page ({exc}); assuming {len(fallback)} weeks")
            return fallback
        weeks = extract.season_week_numbers(page)
        if not weeks:
            print(f"[pfr] No weeks listed for {year}; assuming {len(fallback)} weeks")
            return fallback
        return weeks

    def scrape_season(self, year: int, weeks: Optional[Sequence[int]] = None) -> RunReport:
        print(f"Fetching data for {year}")
        if weeks is None:
            weeks = self.season_weeks(year)
        for request in locator.week_requests(year, weeks):
            self.scrape_week(request.year, request.week)
        return self.report

    def scrape_week(self, year: int, week: int) -> RunReport:
        request = FetchRequest.game(year, week)
        label = f"{request.label} schedule"
        try:
            schedule = self.fetcher.fetch(locator.locate(request, self.base_url)[0])
        except NotFoundError:
            self.report.not_found.append(label)
            return self.report
        except FetchError as exc:
            self.report.failed.append((label, str(exc)))
            return self.report

        urls = locator.box_score_urls(schedule, self.base_url)
        if not urls:
            print(f"[pfr] No completed games for {request.label}")
            self.report.empty.append(request.label)
            return self.report

        for url in urls:
            self._scrape_box_score(request, url)
        print(f"Finished processing {year} week {week}")
        return self.report

    def _scrape_box_score(self, request: FetchRequest, url: str) -> None:
        match = extract.GAME_ID_RE.match(url)
        label = f"{request.label} {match.group(1) if match else url}"
        try:
            page = self.fetcher.fetch(url)
            outputs = box_score_outputs(page, request.year, request.week, self.output_dir, self.categories)
        except NotFoundError:
            self.report.not_found.append(label)
            return
        except (FetchError, ParseError) as exc:
            self.report.failed.append((label, str(exc)))
            return
        self._emit(label, outputs)

    # Player mode

    def scrape_players(self, shards: Sequence[str] = locator.SHARDS) -> RunReport:
        print("Processing player roster")
        for request in locator.shard_requests(shards):
            label = request.label
            try:
                page = self.fetcher.fetch(locator.locate(request, self.base_url)[0])
                output = player_shard_output(page, request.shard, self.output_dir)
            except NotFoundError:
                self.report.not_found.append(label)
                continue
            except (FetchError, ParseError) as exc:
                self.report.failed.append((label, str(exc)))
                continue
            self._emit(label, [output])
        return self.report

    def _emit(self, label: str, outputs: Sequence[Output]) -> None:
        try:
            for output in outputs:
                self.emitter.write(output)
                self.report.outputs_written += 1
        except OSError as exc:
            self.report.failed.append((label, f"write failed: {exc}"))
            return
        self.report.succeeded.append(label)
