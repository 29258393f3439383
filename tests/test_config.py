from __future__ import annotations

import pytest

from pfr_scraper.config import PFR_DOMAIN, Settings, get_settings
from pfr_scraper.errors import ConfigError

ENV_VARS = (
    "PFR_BASE_URL",
    "PFR_MIN_REQUEST_INTERVAL",
    "PFR_MAX_RETRIES",
    "PFR_BACKOFF_FACTOR",
    "PFR_REQUEST_TIMEOUT",
    "PFR_USER_AGENT",
    "PFR_SEASON_WEEKS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = Settings()
    assert settings.base_url == PFR_DOMAIN
    assert settings.min_request_interval == 3.0
    assert settings.max_retries == 3
    assert settings.backoff_factor == 2.0
    assert settings.request_timeout == 30.0
    assert settings.season_weeks == 18


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PFR_BASE_URL", "http://localhost:8000/")
    monkeypatch.setenv("PFR_MIN_REQUEST_INTERVAL", "4.5")
    monkeypatch.setenv("PFR_MAX_RETRIES", "5")
    monkeypatch.setenv("PFR_USER_AGENT", "stats-bot/2.0")
    settings = get_settings()
    assert settings.base_url == "http://localhost:8000"
    assert settings.min_request_interval == 4.5
    assert settings.max_retries == 5
    assert settings.user_agent == "stats-bot/2.0"


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PFR_MAX_RETRIES", "  ")
    assert Settings().max_retries == 3


@pytest.mark.parametrize(
    "name, value",
    [
        ("PFR_MIN_REQUEST_INTERVAL", "fast"),
        ("PFR_MIN_REQUEST_INTERVAL", "-1"),
        ("PFR_MAX_RETRIES", "2.5"),
        ("PFR_MAX_RETRIES", "-3"),
        ("PFR_SEASON_WEEKS", "many"),
        ("PFR_BACKOFF_FACTOR", "1"),
        ("PFR_BACKOFF_FACTOR", "0.5"),
    ],
)
def test_bad_values_raise_config_error(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        Settings()
