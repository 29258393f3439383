"""
Fakes and page builders shared by the tests. Nothing here touches the network.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pfr_scraper.config import PFR_DOMAIN
from pfr_scraper.errors import NotFoundError
from pfr_scraper.models import RawPage

FIXTURES = Path(__file__).resolve().parent / "fixtures"
BASE = PFR_DOMAIN
CORE_TABLE_IDS = ("player_offense", "player_defense", "returns", "kicking")


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def fixture_page(name: str, url: str) -> RawPage:
    return RawPage(url=url, status=200, body=load_fixture(name))


class FakeClock:
    """Monotonic clock whose sleep() just moves time forward."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", headers: Optional[dict] = None):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}


class FakeSession:
    """Hands out queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses: Sequence[object], clock: Optional[FakeClock] = None):
        self.responses = list(responses)
        self.clock = clock
        self.calls: List[dict] = []
        self.starts: List[float] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.clock is not None:
            self.starts.append(self.clock())
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeFetcher:
    """
    Serves pages from a url -> body map. Unknown URLs are 404s; exception
    values are raised as-is.
    """

    def __init__(self, pages: Dict[str, object]):
        self.pages = dict(pages)
        self.calls: List[str] = []

    def fetch(self, url: str) -> RawPage:
        self.calls.append(url)
        result = self.pages.get(url)
        if result is None:
            raise NotFoundError(url)
        if isinstance(result, BaseException):
            raise result
        return RawPage(url=url, status=200, body=result)


def stat_table_html(table_id: str, players: Sequence[tuple], commented: bool = True) -> str:
    rows = []
    for idx, (pid, name, team) in enumerate(players, start=1):
        rows.append(
            f'<tr><th scope="row" data-append-csv="{pid}" data-stat="player">'
            f'<a href="/players/{pid[0]}/{pid}.htm">{name}</a></th>'
            f'<td data-stat="team">{team}</td><td>{idx}</td><td>{idx * 10}</td><td>0</td></tr>'
        )
    table = (
        f'<div class="table_container" id="div_{table_id}">'
        f'<table class="stats_table" id="{table_id}">'
        "<thead><tr><th>Player</th><th>Tm</th><th>Att</th><th>Yds</th><th>TD</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table></div>"
    )
    if commented:
        return f'<div id="all_{table_id}" class="table_wrapper"><div class="placeholder"></div><!--\n{table}\n--></div>'
    return f'<div id="all_{table_id}" class="table_wrapper">{table}</div>'


def box_score_html(game_id: str, players_per_table: int = 2, table_ids: Sequence[str] = CORE_TABLE_IDS) -> str:
    players = [
        (f"Play{game_id[-3:].title()}{idx:02d}", f"Player {idx} of {game_id}", "HOM" if idx % 2 else "AWY")
        for idx in range(players_per_table)
    ]
    # The first table is rendered in the page, the rest inside comments.
    tables = [stat_table_html(table_id, players, commented=idx > 0) for idx, table_id in enumerate(table_ids)]
    return (
        "<html><head>"
        f'<link rel="canonical" href="{BASE}/boxscores/{game_id}.htm" />'
        f"</head><body><div id=\"content\">{''.join(tables)}</div></body></html>"
    )


def week_html(game_ids: Sequence[str], status: str = "Final") -> str:
    summaries = []
    for gid in game_ids:
        summaries.append(
            '<div class="game_summary expanded nohover"><table class="teams"><tbody>'
            '<tr class="winner"><td><a href="/teams/aaa/2021.htm">Home</a></td><td class="right">21</td>'
            f'<td class="right gamelink"><a href="/boxscores/{gid}.htm">{status}</a></td></tr>'
            '<tr class="loser"><td><a href="/teams/bbb/2021.htm">Away</a></td><td class="right">14</td><td></td></tr>'
            "</tbody></table></div>"
        )
    return f"<html><body><div class=\"game_summaries\">{''.join(summaries)}</div></body></html>"


def shard_html(letter: str, count: int, extra: Sequence[str] = ()) -> str:
    entries = [
        f'<p><a href="/players/{letter}/{letter}ppl{idx:02d}.htm">{letter}. Player{idx}</a> (WR) 2000-2005</p>'
        for idx in range(count)
    ]
    entries.extend(extra)
    return f"<html><body><div id=\"div_players\">{''.join(entries)}</div></body></html>"


def box_score_url(game_id: str) -> str:
    return f"{BASE}/boxscores/{game_id}.htm"


def game_ids(count: int, day: str = "20210912") -> List[str]:
    return [f"{day}{idx:02d}g" for idx in range(count)]
