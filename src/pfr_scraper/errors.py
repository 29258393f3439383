"""
Exceptions raised by the scraper.

Everything derives from ScraperError. NotFoundError is not a
FetchError: a 404 means "nothing published for this target" and callers skip
it instead of counting it as a failure.
"""
from __future__ import annotations

from typing import Optional


class ScraperError(Exception):
    """Base class for scraper errors."""


class ConfigError(ScraperError):
    """Bad arguments, environment values or output directory."""


class FetchError(ScraperError):
    """A page could not be fetched, after any retries were spent."""

    def __init__(self, url: str, message: str, status: Optional[int] = None, attempts: int = 1):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status = status
        self.attempts = attempts


class NotFoundError(ScraperError):
    """The server answered 404 for a page."""

    def __init__(self, url: str):
        super().__init__(f"Page not found: {url}")
        self.url = url
        self.status = 404


class ParseError(ScraperError):
    """A page is missing the structure it was expected to have."""
