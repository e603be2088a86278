"""Value bet detection based on model fair odds and bookmaker quotes."""

from __future__ import annotations

from typing import Iterable, List, Optional

from engine.schemas import BookmakerOdds, FairOddsPayload, MarketOdds, TeamSnapshot, ValuePick

EDGE_THRESHOLD: float = 0.05
MIN_ODDS: float = 1.5
MAX_PICKS: int = 3


def best_quote(quotes: Iterable[BookmakerOdds]) -> Optional[BookmakerOdds]:
    """Highest quote; the first one wins on ties."""
    best: Optional[BookmakerOdds] = None
    for quote in quotes:
        if best is None or quote.odds_decimal > best.odds_decimal:
            best = quote
    return best


def build_rationale(
    selection: str,
    lambda_home: float,
    lambda_away: float,
    home_form: Optional[str] = None,
    away_form: Optional[str] = None,
) -> str:
    notes = []
    if home_form:
        notes.append(f"home form {home_form}")
    if away_form:
        notes.append(f"away form {away_form}")
    rationale = f"{selection} boosted by λ_home={lambda_home:.2f} λ_away={lambda_away:.2f}"
    if notes:
        rationale += f" ({', '.join(notes)})"
    return rationale


def detect_value_picks(
    fair: FairOddsPayload,
    markets: Iterable[MarketOdds],
    home: Optional[TeamSnapshot] = None,
    away: Optional[TeamSnapshot] = None,
    threshold: float = EDGE_THRESHOLD,
    min_odds: float = MIN_ODDS,
    limit: int = MAX_PICKS,
) -> List[ValuePick]:
    """Flag the best quote per selection when it beats fair odds.

    Edge is ``best / fair - 1``; a pick needs ``edge >= threshold`` and
    ``best >= min_odds``. Picks are ranked by descending edge.
    """
    home_form = home.form if home else None
    away_form = away.form if away else None

    picks: List[ValuePick] = []
    for market in markets:
        best = best_quote(market.bookmakers)
        if best is None:
            continue
        fair_odds = fair.fair_odds[market.selection]
        edge = best.odds_decimal / fair_odds - 1.0
        if edge < threshold or best.odds_decimal < min_odds:
            continue
        picks.append(
            ValuePick(
                market=market.market,
                selection=market.selection,
                bookmaker=best.book,
                offered_odds=round(best.odds_decimal, 3),
                fair_odds=fair_odds,
                edge=round(edge, 3),
                rationale=build_rationale(
                    market.selection,
                    fair.lambda_home,
                    fair.lambda_away,
                    home_form,
                    away_form,
                ),
            )
        )
    picks.sort(key=lambda pick: pick.edge, reverse=True)
    return picks[:limit]
