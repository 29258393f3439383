"""
Rate-limited page fetching for Pro-Football-Reference.

The site starts refusing clients that make more than ~20 requests a minute,
so every request goes through one RateLimiter that spaces request starts by
a minimum interval. Throttled (429) and server-side (5xx) responses are
retried with exponential backoff; a 404 is reported straight away.
"""
from __future__ import annotations

import time
from typing import Callable, Mapping, Optional

import requests

from pfr_scraper.config import Settings
from pfr_scraper.errors import FetchError, NotFoundError
from pfr_scraper.models import RawPage

HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; pfr-scraper/1.0)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


class RateLimiter:
    """
    Enforces a minimum delay between the starts of consecutive requests.

    One instance is shared by every fetch of a run. The clock and sleep
    functions are injectable so tests can run without waiting.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self.last_request_start: Optional[float] = None
        self._clock = clock
        self._sleep = sleep

    def wait(self) -> float:
        """Block until the next request may start, then mark it started. Returns the time slept."""
        slept = 0.0
        if self.last_request_start is not None:
            elapsed = self._clock() - self.last_request_start
            if elapsed < self.min_interval:
                slept = self.min_interval - elapsed
                print(f"[pfr] Waiting {slept:.1f}s before next request")
                self._sleep(slept)
        self.last_request_start = self._clock()
        return slept


def _retry_after_seconds(resp) -> Optional[float]:
    raw = (getattr(resp, "headers", None) or {}).get("Retry-After")
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except (TypeError, ValueError):
        # HTTP-date form; fall back to the computed backoff.
        return None


class Fetcher:
    """Issues GET requests through a RateLimiter with retry-on-failure."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        session: Optional[requests.Session] = None,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.rate_limiter = rate_limiter
        self.session = session or requests.Session()
        self.max_retries = max(0, max_retries)
        self.backoff_factor = backoff_factor
        self.timeout = timeout
        self.headers = dict(headers or HEADERS)
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
    ) -> "Fetcher":
        headers = {**HEADERS, "User-Agent": settings.user_agent}
        return cls(
            rate_limiter or RateLimiter(settings.min_request_interval),
            session=session,
            max_retries=settings.max_retries,
            backoff_factor=settings.backoff_factor,
            timeout=settings.request_timeout,
            headers=headers,
        )

    def backoff_delay(self, attempt: int, retry_after: Optional[float] = None) -> float:
        """
        Delay before retry number `attempt` (1-based). Starts above the politeness
        interval and grows geometrically; a larger Retry-After wins.
        """
        base = max(self.rate_limiter.min_interval, 1.0)
        delay = base * (self.backoff_factor ** attempt)
        if retry_after is not None and retry_after > delay:
            return retry_after
        return delay

    def fetch(self, url: str) -> RawPage:
        attempts = self.max_retries + 1
        last_problem = "no response"
        last_status: Optional[int] = None
        retry_after: Optional[float] = None

        for attempt in range(attempts):
            if attempt:
                delay = self.backoff_delay(attempt, retry_after)
                print(f"[pfr] {last_problem} for {url}; retry {attempt}/{self.max_retries} in {delay:.1f}s")
                self._sleep(delay)

            self.rate_limiter.wait()
            print(f"[pfr] Requesting {url}")
            try:
                resp = self.session.get(url, headers=self.headers, timeout=self.timeout)
            except (
                requests.exceptions.Timeout,
                requests.exceptions.ConnectionError,
                requests.exceptions.ChunkedEncodingError,
            ) as exc:
                last_problem = f"{type(exc).__name__}: {exc}"
                last_status = None
                retry_after = None
                continue
            except requests.exceptions.RequestException as exc:
                raise FetchError(url, f"Request failed: {exc}", attempts=attempt + 1) from exc

            status = resp.status_code
            if status == 404:
                raise NotFoundError(url)
            if status in RETRY_STATUSES or status >= 500:
                last_problem = f"HTTP {status}"
                last_status = status
                retry_after = _retry_after_seconds(resp) if status == 429 else None
                continue
            if status >= 400:
                raise FetchError(url, f"HTTP {status}", status=status, attempts=attempt + 1)
            return RawPage(url=url, status=status, body=resp.text)

        raise FetchError(
            url,
            f"Giving up after {attempts} attempts, last error {last_problem}",
            status=last_status,
            attempts=attempts,
        )
