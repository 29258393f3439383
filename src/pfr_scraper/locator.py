"""
Source URLs for each unit of work.

Game mode is a two-stage lookup: the week schedule URL is computed directly,
while the box-score URLs are only known after that schedule page has been
fetched (see box_score_urls).
"""
from __future__ import annotations

import string
from typing import List, Optional, Sequence, Tuple

from pfr_scraper.config import PFR_DOMAIN
from pfr_scraper.models import PLAYER_MODE, FetchRequest, RawPage
from pfr_scraper.tables import extract

SHARDS: Tuple[str, ...] = tuple(string.ascii_uppercase)


def season_url(year: int, base_url: str = PFR_DOMAIN) -> str:
    return f"{base_url}/years/{year}/"


def schedule_url(year: int, week: int, base_url: str = PFR_DOMAIN) -> str:
    return f"{base_url}/years/{year}/week_{week}.htm"


def shard_url(shard: str, base_url: str = PFR_DOMAIN) -> str:
    return f"{base_url}/players/{shard}/"


def parse_week_url(url: str) -> Optional[Tuple[int, int]]:
    """(year, week) encoded in a week schedule URL, or None."""
    match = extract.WEEK_URL_RE.match(url)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def locate(request: FetchRequest, base_url: str = PFR_DOMAIN) -> List[str]:
    """
    First-stage URLs for a request: the week schedule page in game mode, the
    shard's index page in player mode.
    """
    if request.mode == PLAYER_MODE:
        return [shard_url(request.shard, base_url)]
    return [schedule_url(request.year, request.week, base_url)]


def box_score_urls(schedule_page: RawPage, base_url: str = PFR_DOMAIN) -> List[str]:
    """Second stage: box scores linked from a fetched schedule page. Empty for bye/out-of-range weeks."""
    return extract.box_score_links(schedule_page, base_url)


def shard_requests(shards: Sequence[str] = SHARDS) -> List[FetchRequest]:
    return [FetchRequest.players(shard) for shard in shards]


def week_requests(year: int, weeks: Sequence[int]) -> List[FetchRequest]:
    return [FetchRequest.game(year, week) for week in weeks]
