"""Common interface for fixture/statistics providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import httpx
from loguru import logger

from data.cache import Cache, TTLCache
from engine.schemas import (
    FixtureSummary,
    MatchResult,
    RecentMatchSummary,
    StandingEntry,
    TeamStatistics,
)

DEFAULT_TIMEOUT: float = 20.0

T = TypeVar("T")


class ProviderError(RuntimeError):
    """Raised when an upstream data provider cannot be reached or answers badly."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{provider} request failed: {message}")
        self.provider = provider
        self.status_code = status_code


def match_result(home_score: int, away_score: int, is_home: bool) -> MatchResult:
    """Result from the perspective of the team we are looking at."""
    if home_score == away_score:
        return "DRAW"
    won = home_score > away_score if is_home else away_score > home_score
    return "WIN" if won else "LOSS"


class FixtureProvider(ABC):
    """One configured competition/season seen through a specific vendor API."""

    name: str = "provider"

    def __init__(
        self,
        base_url: str,
        headers: Optional[Mapping[str, str]] = None,
        cache: Optional[Cache] = None,
        cache_ttl: float = 120.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.cache = cache or TTLCache(default_ttl=cache_ttl)
        self.cache_ttl = cache_ttl
        self._http = http_client or httpx.Client(timeout=DEFAULT_TIMEOUT)
        self._headers = dict(headers or {})

    # -- the five operations ------------------------------------------------

    @abstractmethod
    def get_upcoming_fixtures(self, days: int) -> List[FixtureSummary]:
        ...

    @abstractmethod
    def get_fixture(self, match_id: int) -> Optional[FixtureSummary]:
        ...

    @abstractmethod
    def get_standings(self) -> Dict[int, StandingEntry]:
        ...

    @abstractmethod
    def get_team_statistics(self, team_id: int) -> Optional[TeamStatistics]:
        ...

    @abstractmethod
    def get_recent_matches(self, team_id: int, limit: int = 5) -> List[RecentMatchSummary]:
        ...

    # -- helpers ------------------------------------------------------------

    def close(self) -> None:
        self._http.close()

    def _cached(self, key: str, loader: Callable[[], T]) -> T:
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        value = loader()
        if value is not None:
            self.cache.set(key, value, self.cache_ttl)
        return value

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{self.name} GET {url} {params or {}}")
        try:
            response = self._http.get(url, headers=self._headers, params=params or {})
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
