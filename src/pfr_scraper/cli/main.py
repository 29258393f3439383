from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Sequence

from pfr_scraper.config import Settings, get_settings
from pfr_scraper.emit import ensure_output_dir
from pfr_scraper.errors import ConfigError
from pfr_scraper.locator import SHARDS
from pfr_scraper.models import GAME_MODE, PLAYER_MODE
from pfr_scraper.pipeline import RunReport, Scraper
from pfr_scraper.stats_fetchers.fetcher import Fetcher, RateLimiter

EXIT_OK = 0
EXIT_ALL_FAILED = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


def parse_weeks(raw: str) -> List[int]:
    """Week selection such as "1-4,6" -> [1, 2, 3, 4, 6]."""
    weeks: List[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_s, end_s = part.split("-", 1)
                start, end = int(start_s), int(end_s)
                if start > end:
                    raise ValueError
                span = range(start, end + 1)
            else:
                span = range(int(part), int(part) + 1)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid week selection {part!r}")
        for week in span:
            if week <= 0:
                raise argparse.ArgumentTypeError(f"weeks start at 1, got {week}")
            if week not in weeks:
                weeks.append(week)
    if not weeks:
        raise argparse.ArgumentTypeError("no weeks selected")
    return weeks


def parse_shards(raw: str) -> List[str]:
    shards = []
    for letter in raw.upper():
        if letter in (",", " "):
            continue
        if letter not in SHARDS:
            raise argparse.ArgumentTypeError(f"player shards are letters A-Z, got {letter!r}")
        if letter not in shards:
            shards.append(letter)
    return shards


def configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-m",
        "--mode",
        type=str.lower,
        choices=[GAME_MODE, PLAYER_MODE],
        default=GAME_MODE,
        help="Download game-level stats (default) or the historical player list.",
    )
    parser.add_argument("-y", "--year", type=int, default=None, help="Season to download game stats for, e.g. 2021")
    parser.add_argument("-o", "--output-dir", type=Path, required=True, help="Directory to write CSV files to")
    parser.add_argument(
        "--weeks",
        type=parse_weeks,
        default=None,
        help="Weeks to download, e.g. 1-4,6 (default: every week listed on the season page).",
    )
    parser.add_argument(
        "--shards",
        type=parse_shards,
        default=None,
        help="Player-index letters to download in player mode (default: A-Z).",
    )
    parser.add_argument(
        "--rate-limit-seconds",
        type=float,
        default=None,
        help="Minimum seconds between request starts (default: PFR_MIN_REQUEST_INTERVAL or 3.0).",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Retries for throttled or failing requests (default: PFR_MAX_RETRIES or 3).",
    )


def build_scraper(args: argparse.Namespace, settings: Settings) -> Scraper:
    interval = settings.min_request_interval if args.rate_limit_seconds is None else args.rate_limit_seconds
    if interval < 0:
        raise ConfigError("--rate-limit-seconds must not be negative")
    fetcher = Fetcher.from_settings(settings, rate_limiter=RateLimiter(interval))
    if args.max_retries is not None:
        if args.max_retries < 0:
            raise ConfigError("--max-retries must not be negative")
        fetcher.max_retries = args.max_retries
    return Scraper(
        fetcher,
        args.output_dir,
        base_url=settings.base_url,
        default_season_weeks=settings.season_weeks,
    )


def main_from_parsed(args: argparse.Namespace, settings: Settings | None = None) -> int:
    if args.mode == GAME_MODE and args.year is None:
        raise ConfigError("--year is required in game mode")
    if args.year is not None and args.year <= 0:
        raise ConfigError(f"--year must be a positive season, got {args.year}")
    settings = settings or get_settings()
    ensure_output_dir(args.output_dir)
    scraper = build_scraper(args, settings)

    try:
        if args.mode == PLAYER_MODE:
            report = scraper.scrape_players(args.shards or SHARDS)
        else:
            report = scraper.scrape_season(args.year, args.weeks)
    except KeyboardInterrupt:
        print("[pfr] Interrupted; tables written so far are complete.")
        print(scraper.report.summary())
        return EXIT_INTERRUPTED

    print(report.summary())
    return exit_code(report)


def exit_code(report: RunReport) -> int:
    return EXIT_ALL_FAILED if report.all_failed else EXIT_OK


def main(args: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Download Pro-Football-Reference box-score stats or the player index as CSV files."
    )
    configure_parser(parser)
    opts = parser.parse_args(args)
    if opts.mode == GAME_MODE and opts.year is None:
        parser.error("--year is required in game mode")
    try:
        return main_from_parsed(opts)
    except ConfigError as exc:
        print(f"[pfr] {exc}")
        return EXIT_CONFIG


if __name__ == "__main__":
    raise SystemExit(main())
