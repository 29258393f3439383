from __future__ import annotations

from helpers import BASE, fixture_page

from pfr_scraper import locator
from pfr_scraper.models import FetchRequest


def test_season_and_schedule_urls() -> None:
    assert locator.season_url(2021) == f"{BASE}/years/2021/"
    assert locator.schedule_url(2021, 3) == f"{BASE}/years/2021/week_3.htm"
    assert locator.shard_url("Q") == f"{BASE}/players/Q/"


def test_custom_base_url() -> None:
    assert locator.schedule_url(2020, 17, "http://localhost:8000") == "http://localhost:8000/years/2020/week_17.htm"


def test_parse_week_url_round_trips_schedule_url() -> None:
    assert locator.parse_week_url(locator.schedule_url(2021, 12)) == (2021, 12)
    assert locator.parse_week_url(f"{BASE}/years/2021/") is None
    assert locator.parse_week_url(f"{BASE}/boxscores/202109090tam.htm") is None


def test_locate_game_request_points_at_the_week_schedule() -> None:
    assert locator.locate(FetchRequest.game(2021, 1)) == [f"{BASE}/years/2021/week_1.htm"]


def test_locate_player_request_points_at_the_shard_index() -> None:
    assert locator.locate(FetchRequest.players("B")) == [f"{BASE}/players/B/"]


def test_box_score_urls_only_lists_finished_games() -> None:
    page = fixture_page("week_2021_1.html", locator.schedule_url(2021, 1))
    assert locator.box_score_urls(page) == [
        f"{BASE}/boxscores/202109090tam.htm",
        f"{BASE}/boxscores/202109120atl.htm",
        f"{BASE}/boxscores/202109120oti.htm",
    ]


def test_box_score_urls_follow_the_base_url() -> None:
    page = fixture_page("week_2021_1.html", "http://localhost:8000/years/2021/week_1.htm")
    urls = locator.box_score_urls(page, "http://localhost:8000")
    assert urls[0] == "http://localhost:8000/boxscores/202109090tam.htm"


def test_shard_requests_cover_the_alphabet() -> None:
    requests = locator.shard_requests()
    assert len(requests) == 26
    assert requests[0].label == "players A"
    assert requests[-1].shard == "Z"
    assert all(request.mode == "player" for request in requests)


def test_week_requests_keep_the_given_order() -> None:
    requests = locator.week_requests(2021, [3, 1, 2])
    assert [request.week for request in requests] == [3, 1, 2]
    assert requests[0].label == "2021 week 3"
