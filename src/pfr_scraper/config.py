import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from pfr_scraper.errors import ConfigError

# Load environment variables from a local .env file if present.
# __file__ is src/pfr_scraper/config.py -> parents[2] is the project root.
PROJECT_ENV = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(PROJECT_ENV)

PFR_DOMAIN = "https://www.pro-football-reference.com"


def _env_float(name: str, default: float) -> float:
    """Parse a non-negative float from the environment."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass
class Settings:
    base_url: str = field(default_factory=lambda: os.getenv("PFR_BASE_URL", PFR_DOMAIN).rstrip("/"))
    # Pro-Football-Reference blocks clients making more than 20 requests a minute.
    min_request_interval: float = field(default_factory=lambda: _env_float("PFR_MIN_REQUEST_INTERVAL", 3.0))
    max_retries: int = field(default_factory=lambda: _env_int("PFR_MAX_RETRIES", 3))
    backoff_factor: float = field(default_factory=lambda: _env_float("PFR_BACKOFF_FACTOR", 2.0))
    request_timeout: float = field(default_factory=lambda: _env_float("PFR_REQUEST_TIMEOUT", 30.0))
    user_agent: str = field(
        default_factory=lambda: os.getenv("PFR_USER_AGENT", "Mozilla/5.0 (compatible; pfr-scraper/1.0)")
    )
    season_weeks: int = field(default_factory=lambda: _env_int("PFR_SEASON_WEEKS", 18))

    def __post_init__(self) -> None:
        # The first retry delay has to exceed the politeness interval.
        if self.backoff_factor <= 1:
            raise ConfigError(f"PFR_BACKOFF_FACTOR must be greater than 1, got {self.backoff_factor}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings instance sourced from environment variables."""
    return Settings()
