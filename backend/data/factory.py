"""Build the configured data clients."""

from __future__ import annotations

from typing import Optional

import httpx

from config import Settings
from data.base import FixtureProvider
from data.cache import Cache
from data.football_api import ApiFootballProvider
from data.football_data import FootballDataProvider
from data.odds_api import OddsAPI
from data.openligadb import OpenLigaDbProvider


def build_provider(
    settings: Settings,
    cache: Optional[Cache] = None,
    http_client: Optional[httpx.Client] = None,
) -> FixtureProvider:
    """Return the fixture provider selected by ``settings.fixture_provider``."""
    ttl = settings.cache_ttl_seconds
    if settings.fixture_provider == "api_football":
        return ApiFootballProvider(
            api_key=settings.api_football_key,
            league_id=settings.api_football_league_id,
            season=settings.api_football_season,
            cache=cache,
            cache_ttl=ttl,
            http_client=http_client,
        )
    if settings.fixture_provider == "football_data":
        return FootballDataProvider(
            token=settings.football_data_token,
            competition=settings.football_data_competition,
            season=settings.football_data_season,
            cache=cache,
            cache_ttl=ttl,
            http_client=http_client,
            base_url=settings.football_data_base_url,
        )
    if settings.fixture_provider == "openligadb":
        return OpenLigaDbProvider(
            league=settings.openliga_league,
            season=settings.openliga_season,
            cache=cache,
            cache_ttl=ttl,
            http_client=http_client,
            base_url=settings.openliga_base_url,
        )
    raise ValueError(f"Unknown fixture provider: {settings.fixture_provider}")


def build_odds_api(
    settings: Settings,
    cache: Optional[Cache] = None,
    http_client: Optional[httpx.Client] = None,
) -> OddsAPI:
    return OddsAPI(
        api_key=settings.odds_api_key,
        sport=settings.odds_api_sport,
        regions=settings.odds_api_region,
        markets=settings.odds_api_markets,
        cache=cache,
        cache_ttl=settings.cache_ttl_seconds,
        http_client=http_client,
    )
