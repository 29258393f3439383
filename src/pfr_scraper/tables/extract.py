"""
Pull statistical tables and navigation links out of Pro-Football-Reference pages.

Box-score pages render most of their tables inside HTML comments (they are
un-commented client side), so every lookup searches the document itself and
then the parsed contents of each comment.

Tables are found by their id, never by position on the page:

    player_offense      -> Offense
    player_defense      -> Defense
    returns             -> Returns
    kicking             -> Kicking
    passing_advanced    -> AdvPassing    (optional)
    rushing_advanced    -> AdvRushing    (optional)
    receiving_advanced  -> AdvReceiving  (optional)
    defense_advanced    -> AdvDefense    (optional)
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment

from pfr_scraper.config import PFR_DOMAIN
from pfr_scraper.errors import ParseError
from pfr_scraper.models import RawPage, StatTable
from pfr_scraper.tables.rows import KNOWN_HEADER_LABELS, clean_text, is_header_row

# (category label, table id, required on every box score)
CATEGORY_TABLES: Tuple[Tuple[str, str, bool], ...] = (
    ("Offense", "player_offense", True),
    ("Defense", "player_defense", True),
    ("Returns", "returns", True),
    ("Kicking", "kicking", True),
    ("AdvPassing", "passing_advanced", False),
    ("AdvRushing", "rushing_advanced", False),
    ("AdvReceiving", "receiving_advanced", False),
    ("AdvDefense", "defense_advanced", False),
)
PLAYERS_CATEGORY = "Players"
PLAYER_ID_COLUMN = "player_id"
PLAYER_COLUMNS = ["name", "position", "years_active_start", "years_active_end", PLAYER_ID_COLUMN, "active"]

GAME_ID_RE = re.compile(r".*/(\w+)\.htm")
WEEK_URL_RE = re.compile(r".*/(\d{4})/week_(\d{1,2})\.htm")
PLAYER_HREF_RE = re.compile(r"/players/[A-Za-z]/([^/]+)\.htm")
PLAYER_POS_RE = re.compile(r"\(([^)]*)\)")
PLAYER_YEARS_RE = re.compile(r"(\d{4})\s*-\s*(\d{4})")


def page_fragments(body: str) -> List[BeautifulSoup]:
    """The parsed page followed by every HTML comment that contains markup."""
    soup = BeautifulSoup(body, "html.parser")
    fragments = [soup]
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        if "<" in comment:
            fragments.append(BeautifulSoup(str(comment), "html.parser"))
    return fragments


def find_table(fragments: Sequence[BeautifulSoup], table_id: str):
    for fragment in fragments:
        table = fragment.find("table", id=table_id)
        if table is not None:
            return table
    return None


def _row_cells(tr) -> List[str]:
    return [clean_text(cell.get_text(" ", strip=True)) for cell in tr.find_all(["th", "td"], recursive=False)]


def _player_id(tr) -> str:
    cell = tr.find(attrs={"data-append-csv": True})
    if cell is not None:
        return clean_text(cell["data-append-csv"])
    anchor = tr.find("a", href=PLAYER_HREF_RE)
    if anchor is not None:
        return PLAYER_HREF_RE.search(anchor["href"]).group(1)
    return ""


def stat_table_rows(table, known_labels: Iterable[str] = KNOWN_HEADER_LABELS) -> Optional[List[List[str]]]:
    """
    Cell text of a stat table, header row first, with a player_id column
    prepended. Rows before the header (column-group bands) and <tfoot>
    subtotals are dropped. Returns None when no header row can be found.
    """
    trs = [tr for tr in table.find_all("tr") if tr.find_parent("tfoot") is None]
    texts = [_row_cells(tr) for tr in trs]
    header_idx = next((i for i, cells in enumerate(texts) if is_header_row(cells, known_labels)), None)
    if header_idx is None:
        return None

    header = texts[header_idx]
    rows = [[PLAYER_ID_COLUMN] + header]
    for tr, cells in zip(trs[header_idx + 1:], texts[header_idx + 1:]):
        if cells == header:
            # Long tables repeat the header mid-body; keep it recognisable as one.
            rows.append([PLAYER_ID_COLUMN] + cells)
        else:
            rows.append([_player_id(tr)] + cells)
    return rows


def game_id(page: RawPage, fragments: Optional[Sequence[BeautifulSoup]] = None) -> str:
    """Box-score id (e.g. 202109090tam) from the canonical link, else from the page URL."""
    fragments = fragments if fragments is not None else page_fragments(page.body)
    link = fragments[0].find("link", rel="canonical")
    for candidate in ((link.get("href") if link is not None else None), page.url):
        if candidate:
            match = GAME_ID_RE.match(candidate)
            if match:
                return match.group(1)
    return ""


def extract(
    page: RawPage,
    categories: Sequence[Tuple[str, str, bool]] = CATEGORY_TABLES,
) -> List[StatTable]:
    """
    All category tables present on a box-score page, in category order.

    Raises ParseError when the page has none of them at all.
    """
    fragments = page_fragments(page.body)
    source = game_id(page, fragments)
    tables: List[StatTable] = []
    for category, table_id, required in categories:
        table = find_table(fragments, table_id)
        if table is None:
            if required:
                print(f"[pfr] No {category} table (#{table_id}) on {page.url}")
            continue
        rows = stat_table_rows(table)
        if rows is None:
            print(f"[pfr] Skipping #{table_id} on {page.url}: no header row found")
            continue
        tables.append(StatTable(category=category, rows=rows, source=source))
    if not tables:
        raise ParseError(f"No stat tables found on {page.url}")
    return tables


def _links(fragments: Sequence[BeautifulSoup], selector: str) -> list:
    anchors = []
    for fragment in fragments:
        anchors.extend(fragment.select(selector))
    return anchors


def box_score_links(page: RawPage, base_url: str = PFR_DOMAIN) -> List[str]:
    """
    Absolute box-score URLs of the finished games on a week schedule page,
    in page order. Games not yet played link to previews and are ignored.
    """
    urls: List[str] = []
    for anchor in _links(page_fragments(page.body), ".gamelink a"):
        href = anchor.get("href")
        text = clean_text(anchor.get_text())
        if not href or not text.startswith("F"):
            continue
        url = urljoin(base_url + "/", href)
        if url not in urls:
            urls.append(url)
    return urls


def season_week_numbers(page: RawPage) -> List[int]:
    """Week numbers linked from a season page's week index, ascending."""
    weeks = set()
    for anchor in _links(page_fragments(page.body), "#div_week_games a"):
        text = clean_text(anchor.get_text())
        if not text.startswith("Week"):
            continue
        match = WEEK_URL_RE.match(anchor.get("href") or "")
        if match:
            weeks.add(int(match.group(2)))
            continue
        number = text[len("Week"):].strip()
        if number.isdigit():
            weeks.add(int(number))
    return sorted(weeks)


def player_index_table(page: RawPage, shard: str) -> StatTable:
    """
    One player-index shard as a Players table. Each entry looks like
    ``<p><b><a href="/players/A/AbduAm00.htm">Ameer Abdullah</a></b> (RB) 2015-2024</p>``
    where bold marks a player who is still active. Active players have no
    end year: the listed one is only the latest season so far.
    """
    fragments = page_fragments(page.body)
    container = None
    for fragment in fragments:
        container = fragment.find(id="div_players")
        if container is not None:
            break
    if container is None:
        raise ParseError(f"No player index (#div_players) on {page.url}")

    rows = [list(PLAYER_COLUMNS)]
    for entry in container.find_all("p"):
        anchor = entry.find("a", href=True)
        if anchor is None:
            continue
        name = clean_text(anchor.get_text())
        id_match = PLAYER_HREF_RE.search(anchor["href"])
        detail = clean_text(entry.get_text(" ").replace(anchor.get_text(), "", 1))
        pos_match = PLAYER_POS_RE.search(detail)
        years_match = PLAYER_YEARS_RE.search(detail)
        active = entry.find("b") is not None
        rows.append(
            [
                name,
                clean_text(pos_match.group(1)) if pos_match else "",
                years_match.group(1) if years_match else "",
                years_match.group(2) if years_match and not active else "",
                id_match.group(1) if id_match else "",
                "1" if active else "0",
            ]
        )
    return StatTable(category=PLAYERS_CATEGORY, rows=rows, source=shard)
