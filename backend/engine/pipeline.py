"""End-to-end flows: snapshot → fair odds, fixture → quotes, both → value picks."""

from __future__ import annotations

from typing import List, Tuple

from loguru import logger

from data.base import FixtureProvider
from data.odds_api import OddsAPI
from engine.fair_odds import DEFAULT_HOME_ADVANTAGE, compute_fair_odds_from_snapshot
from engine.schemas import FairOddsPayload, FixtureSummary, MarketOdds, MatchSnapshot, ValueDetectionResult
from engine.snapshot import FixtureNotFoundError, build_match_snapshot
from engine.value_detector import detect_value_picks


def compute_fair(
    provider: FixtureProvider,
    match_id: int,
    home_advantage: float = DEFAULT_HOME_ADVANTAGE,
) -> Tuple[MatchSnapshot, FairOddsPayload]:
    snapshot = build_match_snapshot(provider, match_id)
    return snapshot, compute_fair_odds_from_snapshot(snapshot, home_advantage)


def prematch_odds(
    provider: FixtureProvider,
    odds_api: OddsAPI,
    match_id: int,
) -> Tuple[FixtureSummary, List[MarketOdds]]:
    fixture = provider.get_fixture(match_id)
    if fixture is None:
        raise FixtureNotFoundError(match_id, provider.name)
    return fixture, odds_api.get_market_odds_for_fixture(fixture)


def detect_value(
    provider: FixtureProvider,
    odds_api: OddsAPI,
    match_id: int,
    home_advantage: float = DEFAULT_HOME_ADVANTAGE,
) -> ValueDetectionResult:
    """Up to three value picks for *match_id*, with the fair payload and quotes used."""
    snapshot, fair = compute_fair(provider, match_id, home_advantage)
    odds = odds_api.get_market_odds_for_fixture(snapshot.match)
    picks = detect_value_picks(fair, odds, snapshot.home, snapshot.away)
    logger.info(f"Match {match_id}: {len(odds)} priced selections, {len(picks)} value picks")
    return ValueDetectionResult(match_id=match_id, picks=picks, fair=fair, odds=odds)
