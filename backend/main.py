"""FastAPI entrypoint for PrematchEdge."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from config import Settings, get_settings
from data.base import FixtureProvider, ProviderError
from data.cache import Cache, TTLCache
from data.factory import build_odds_api, build_provider
from data.odds_api import OddsAPI
from engine.pipeline import compute_fair, detect_value, prematch_odds
from engine.snapshot import FixtureNotFoundError, build_match_snapshot


app = FastAPI(title="PrematchEdge API")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_cache(request: Request, settings: Settings = Depends(get_settings)) -> Cache:
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        cache = TTLCache(default_ttl=settings.cache_ttl_seconds)
        request.app.state.cache = cache
    return cache


def get_provider(
    settings: Settings = Depends(get_settings),
    cache: Cache = Depends(get_cache),
) -> Iterator[FixtureProvider]:
    provider = build_provider(settings, cache)
    try:
        yield provider
    finally:
        provider.close()


def get_odds_api(
    settings: Settings = Depends(get_settings),
    cache: Cache = Depends(get_cache),
) -> Iterator[OddsAPI]:
    odds_api = build_odds_api(settings, cache)
    try:
        yield odds_api
    finally:
        odds_api.close()


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(FixtureNotFoundError)
async def fixture_not_found(request: Request, exc: FixtureNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ProviderError)
async def provider_failed(request: Request, exc: ProviderError) -> JSONResponse:
    logger.warning(f"Upstream failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


class FixturesResponse(BaseModel):
    window_days: int
    fixtures: List[Dict[str, Any]]


@app.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/api/fixtures", response_model=FixturesResponse)
def list_fixtures(
    days: int = Query(3, ge=1, le=10),
    provider: FixtureProvider = Depends(get_provider),
) -> FixturesResponse:
    fixtures = provider.get_upcoming_fixtures(days)
    return FixturesResponse(window_days=days, fixtures=[f.to_dict() for f in fixtures])


@app.get("/api/match/{match_id}/snapshot")
def get_snapshot(
    match_id: int,
    provider: FixtureProvider = Depends(get_provider),
) -> Dict[str, Any]:
    return build_match_snapshot(provider, match_id).to_dict()


@app.get("/api/match/{match_id}/odds")
def get_odds(
    match_id: int,
    provider: FixtureProvider = Depends(get_provider),
    odds_api: OddsAPI = Depends(get_odds_api),
) -> Dict[str, Any]:
    fixture, markets = prematch_odds(provider, odds_api, match_id)
    return {"match": fixture.to_dict(), "markets": [m.to_dict() for m in markets]}


@app.get("/api/match/{match_id}/fair")
def get_fair(
    match_id: int,
    provider: FixtureProvider = Depends(get_provider),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    snapshot, fair = compute_fair(provider, match_id, settings.home_advantage)
    return {"snapshot": snapshot.to_dict(), "fair": fair.to_dict()}


@app.get("/api/match/{match_id}/value")
def get_value(
    match_id: int,
    provider: FixtureProvider = Depends(get_provider),
    odds_api: OddsAPI = Depends(get_odds_api),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    return detect_value(provider, odds_api, match_id, settings.home_advantage).to_dict()
