"""Configuration loader for PrematchEdge."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone

from dotenv import load_dotenv

PROVIDERS = ("api_football", "football_data", "openligadb")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    fixture_provider: str
    odds_api_key: str
    api_football_key: str = ""
    api_football_league_id: int = 135
    api_football_season: int = 2025
    football_data_token: str = ""
    football_data_base_url: str = "https://api.football-data.org/v4"
    football_data_competition: str = "SA"
    football_data_season: int = 2025
    openliga_base_url: str = "https://api.openligadb.de"
    openliga_league: str = "bl1"
    openliga_season: int = 2025
    odds_api_region: str = "eu"
    odds_api_sport: str = "soccer_italy_serie_a"
    odds_api_markets: str = "h2h,totals,btts"
    home_advantage: float = 1.08
    cache_ttl_seconds: int = 120


def load_settings() -> Settings:
    """Load environment variables and return settings."""
    load_dotenv()
    current_year = datetime.now(timezone.utc).year
    provider = os.getenv("FIXTURE_PROVIDER", "api_football").strip().lower()
    odds_api_key = os.getenv("ODDS_API_KEY", "").strip()
    api_football_key = os.getenv("APIFOOTBALL_KEY", "").strip()
    football_data_token = os.getenv("FOOTBALL_DATA_TOKEN", "").strip()

    if provider not in PROVIDERS:
        raise RuntimeError(
            f"Unknown FIXTURE_PROVIDER '{provider}', expected one of: " + ", ".join(PROVIDERS)
        )

    missing = []
    if not odds_api_key:
        missing.append("ODDS_API_KEY")
    if provider == "api_football" and not api_football_key:
        missing.append("APIFOOTBALL_KEY")
    if provider == "football_data" and not football_data_token:
        missing.append("FOOTBALL_DATA_TOKEN")
    if missing:
        raise RuntimeError(
            "Missing required environment variables: " + ", ".join(missing)
        )

    return Settings(
        fixture_provider=provider,
        odds_api_key=odds_api_key,
        api_football_key=api_football_key,
        api_football_league_id=int(os.getenv("APIFOOTBALL_LEAGUE_ID", "135")),
        api_football_season=int(os.getenv("APIFOOTBALL_SEASON", str(current_year))),
        football_data_token=football_data_token,
        football_data_base_url=os.getenv(
            "FOOTBALL_DATA_BASE_URL", "https://api.football-data.org/v4"
        ),
        football_data_competition=os.getenv("FOOTBALL_DATA_COMPETITION", "SA"),
        football_data_season=int(os.getenv("FOOTBALL_DATA_SEASON", str(current_year))),
        openliga_base_url=os.getenv("OPENLIGA_BASE_URL", "https://api.openligadb.de"),
        openliga_league=os.getenv("OPENLIGA_LEAGUE", "bl1"),
        openliga_season=int(os.getenv("OPENLIGA_SEASON", str(current_year))),
        odds_api_region=os.getenv("ODDS_API_REGION", "eu"),
        odds_api_sport=os.getenv("ODDS_API_SPORT", "soccer_italy_serie_a"),
        odds_api_markets=os.getenv("ODDS_API_MARKETS", "h2h,totals,btts"),
        home_advantage=float(os.getenv("HOME_ADVANTAGE_FACTOR", "1.08")),
        cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", "120")),
    )


def get_settings() -> Settings:
    """Get cached settings instance."""
    if not hasattr(get_settings, "_settings"):
        get_settings._settings = load_settings()
    return get_settings._settings
