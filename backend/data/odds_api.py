"""The Odds API integration."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from data.base import DEFAULT_TIMEOUT, ProviderError
from data.cache import Cache, TTLCache
from engine.odds_aggregator import market_odds_for_fixture
from engine.schemas import (
    FixtureSummary,
    MarketOdds,
    OddsBookmaker,
    OddsEvent,
    OddsMarket,
    OddsOutcome,
)

BASE_URL = "https://api.the-odds-api.com"


def _to_price(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_events(payload: List[Dict[str, Any]]) -> List[OddsEvent]:
    """Turn the raw ``/odds`` response into immutable feed events."""
    events: List[OddsEvent] = []
    for event in payload:
        bookmakers = tuple(
            OddsBookmaker(
                key=book.get("key", ""),
                title=book.get("title") or book.get("key", ""),
                last_update=book.get("last_update", ""),
                markets=tuple(
                    OddsMarket(
                        key=market.get("key", ""),
                        outcomes=tuple(
                            OddsOutcome(
                                name=str(outcome.get("name", "")),
                                price=_to_price(outcome.get("price")),
                                point=_to_price(outcome.get("point")),
                            )
                            for outcome in market.get("outcomes", [])
                        ),
                    )
                    for market in book.get("markets", [])
                ),
            )
            for book in event.get("bookmakers", [])
        )
        events.append(
            OddsEvent(
                id=str(event.get("id", "")),
                home_team=event.get("home_team", ""),
                away_team=event.get("away_team", ""),
                commence_time=event.get("commence_time", ""),
                bookmakers=bookmakers,
            )
        )
    return events


class OddsAPI:
    """Client for The Odds API, bound to one sport key."""

    name = "The Odds API"

    def __init__(
        self,
        api_key: str,
        sport: str,
        regions: str = "eu",
        markets: str = "h2h,totals,btts",
        cache: Optional[Cache] = None,
        cache_ttl: float = 120.0,
        http_client: Optional[httpx.Client] = None,
        base_url: str = BASE_URL,
    ) -> None:
        self.api_key = api_key
        self.sport = sport
        self.regions = regions
        self.markets = markets
        self.base_url = base_url.rstrip("/")
        self.cache = cache or TTLCache(default_ttl=cache_ttl)
        self.cache_ttl = cache_ttl
        self._http = http_client or httpx.Client(timeout=DEFAULT_TIMEOUT)

    def get_events(self) -> List[OddsEvent]:
        cache_key = f"odds:{self.sport}:{self.regions}:{self.markets}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached
        params = {
            "apiKey": self.api_key,
            "regions": self.regions,
            "markets": self.markets,
            "oddsFormat": "decimal",
            "dateFormat": "iso",
        }
        events = parse_events(self._get(f"/v4/sports/{self.sport}/odds", params))
        logger.info(f"Fetched {len(events)} odds events for {self.sport}")
        self.cache.set(cache_key, events, self.cache_ttl)
        return events

    def get_market_odds_for_fixture(self, fixture: FixtureSummary) -> List[MarketOdds]:
        return market_odds_for_fixture(fixture, self.get_events())

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._http.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise ProviderError(
                self.name, f"{status} {exc.response.reason_phrase}", status
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, str(exc)) from exc
        except ValueError as exc:
            raise ProviderError(self.name, f"invalid JSON body: {exc}") from exc
