"""Match a multi-bookmaker odds feed to a fixture and normalise its quotes."""

from __future__ import annotations

from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from engine.schemas import (
    BookmakerOdds,
    FixtureSummary,
    MarketOdds,
    OddsBookmaker,
    OddsEvent,
    OddsMarket,
    OddsOutcome,
)
from engine.team_names import normalize_team_name
from engine.timeutils import parse_iso

KICKOFF_WINDOW = timedelta(hours=4)
TOTALS_LINE: float = 2.5
BTTS_MARKET_KEYS = ("btts", "both_teams_to_score")


def match_event(fixture: FixtureSummary, events: Iterable[OddsEvent]) -> Optional[OddsEvent]:
    """Return the first event within the kickoff window with the same teams."""
    try:
        kickoff = parse_iso(fixture.kickoff_utc)
    except ValueError:
        logger.warning(f"Fixture {fixture.match_id} has no usable kickoff {fixture.kickoff_utc!r}")
        return None
    target_home = normalize_team_name(fixture.home_team.name)
    target_away = normalize_team_name(fixture.away_team.name)
    for event in events:
        try:
            commence = parse_iso(event.commence_time)
        except ValueError:
            logger.warning(f"Skipping odds event {event.id}: bad commence time {event.commence_time!r}")
            continue
        if abs(commence - kickoff) > KICKOFF_WINDOW:
            continue
        if (
            normalize_team_name(event.home_team) == target_home
            and normalize_team_name(event.away_team) == target_away
        ):
            return event
    return None


def _find_market(book: OddsBookmaker, *keys: str) -> Optional[OddsMarket]:
    for market in book.markets:
        if market.key in keys:
            return market
    return None


def _find_outcome(market: OddsMarket, name: str, point: Optional[float] = None) -> Optional[OddsOutcome]:
    for outcome in market.outcomes:
        if normalize_team_name(outcome.name) != name:
            continue
        if point is not None and (outcome.point is None or float(outcome.point) != point):
            continue
        return outcome
    return None


def aggregate_market_odds(fixture: FixtureSummary, event: OddsEvent) -> List[MarketOdds]:
    """Collect per-selection bookmaker quotes for the 1X2, O/U 2.5 and BTTS markets.

    Quotes keep first-encountered order; selections nobody priced are dropped.
    """
    claimed: Dict[Tuple[str, str], Tuple[Optional[float], List[BookmakerOdds]]] = {}

    def add(
        book: OddsBookmaker,
        market: str,
        selection: str,
        outcome: Optional[OddsOutcome],
        line: Optional[float] = None,
    ) -> None:
        if outcome is None or outcome.price is None or outcome.price <= 0:
            return
        entry = claimed.setdefault((market, selection), (line, []))
        entry[1].append(
            BookmakerOdds(
                book=book.title,
                odds_decimal=float(outcome.price),
                timestamp=book.last_update,
            )
        )

    home_name = normalize_team_name(fixture.home_team.name)
    away_name = normalize_team_name(fixture.away_team.name)

    for book in event.bookmakers:
        h2h = _find_market(book, "h2h")
        if h2h:
            add(book, "1X2", "HOME", _find_outcome(h2h, home_name))
            add(book, "1X2", "DRAW", _find_outcome(h2h, "draw"))
            add(book, "1X2", "AWAY", _find_outcome(h2h, away_name))

        totals = _find_market(book, "totals")
        if totals:
            add(book, "OU_2_5", "OVER_2_5", _find_outcome(totals, "over", TOTALS_LINE), TOTALS_LINE)
            add(book, "OU_2_5", "UNDER_2_5", _find_outcome(totals, "under", TOTALS_LINE), TOTALS_LINE)

        btts = _find_market(book, *BTTS_MARKET_KEYS)
        if btts:
            add(book, "BTTS", "BTTS_YES", _find_outcome(btts, "yes"))
            add(book, "BTTS", "BTTS_NO", _find_outcome(btts, "no"))

    return [
        MarketOdds(market=market, selection=selection, line=line, bookmakers=tuple(quotes))
        for (market, selection), (line, quotes) in claimed.items()
        if quotes
    ]


def market_odds_for_fixture(fixture: FixtureSummary, events: Iterable[OddsEvent]) -> List[MarketOdds]:
    """Normalised quotes for *fixture*, or an empty list when no event matches."""
    event = match_event(fixture, events)
    if event is None:
        logger.warning(
            f"No odds event for {fixture.home_team.name} vs {fixture.away_team.name} "
            f"({fixture.kickoff_utc})"
        )
        return []
    markets = aggregate_market_odds(fixture, event)
    logger.info(f"Matched odds event {event.id}: {len(markets)} priced selections")
    return markets
