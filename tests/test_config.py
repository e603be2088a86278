import pytest

import config
from config import load_settings
from data.factory import build_odds_api, build_provider
from data.football_api import ApiFootballProvider
from data.openligadb import OpenLigaDbProvider

ENV_KEYS = (
    "FIXTURE_PROVIDER",
    "ODDS_API_KEY",
    "APIFOOTBALL_KEY",
    "FOOTBALL_DATA_TOKEN",
    "HOME_ADVANTAGE_FACTOR",
    "CACHE_TTL_SECONDS",
    "OPENLIGA_LEAGUE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: None)


def test_missing_keys_are_reported(monkeypatch):
    with pytest.raises(RuntimeError, match="ODDS_API_KEY, APIFOOTBALL_KEY"):
        load_settings()


def test_unknown_provider_rejected(monkeypatch):
    monkeypatch.setenv("FIXTURE_PROVIDER", "sofascore")
    monkeypatch.setenv("ODDS_API_KEY", "x")
    with pytest.raises(RuntimeError, match="Unknown FIXTURE_PROVIDER"):
        load_settings()


def test_openligadb_needs_only_odds_key(monkeypatch):
    monkeypatch.setenv("FIXTURE_PROVIDER", "openligadb")
    monkeypatch.setenv("ODDS_API_KEY", "x")
    monkeypatch.setenv("OPENLIGA_LEAGUE", "bl2")
    monkeypatch.setenv("HOME_ADVANTAGE_FACTOR", "1.1")
    settings = load_settings()
    assert settings.home_advantage == 1.1
    assert settings.cache_ttl_seconds == 120
    provider = build_provider(settings)
    assert isinstance(provider, OpenLigaDbProvider)
    assert provider.league == "bl2"
    provider.close()


def test_factory_builds_api_football_and_odds(monkeypatch):
    monkeypatch.setenv("ODDS_API_KEY", "odds")
    monkeypatch.setenv("APIFOOTBALL_KEY", "foot")
    settings = load_settings()
    provider = build_provider(settings)
    assert isinstance(provider, ApiFootballProvider)
    assert provider.league_id == 135
    odds_api = build_odds_api(settings)
    assert odds_api.sport == "soccer_italy_serie_a"
    assert odds_api.markets == "h2h,totals,btts"
    provider.close()
    odds_api.close()
