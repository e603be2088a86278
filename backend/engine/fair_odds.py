"""Fair probabilities and odds from team goal averages."""

from __future__ import annotations

from typing import Dict

from loguru import logger

from engine.schemas import FairOddsPayload, MatchSnapshot
from models.poisson import MAX_GOALS, clamp_probability, derive_lambda, run_independent_poisson

DEFAULT_HOME_ADVANTAGE: float = 1.08


def compute_fair_odds(
    match_id: int,
    lambda_home: float,
    lambda_away: float,
    max_goals: int = MAX_GOALS,
) -> FairOddsPayload:
    """Clamp model probabilities and price them as fair decimal odds."""
    output = run_independent_poisson(lambda_home, lambda_away, max_goals)
    probabilities: Dict[str, float] = {
        "HOME": clamp_probability(output.home_win),
        "DRAW": clamp_probability(output.draw),
        "AWAY": clamp_probability(output.away_win),
        "OVER_2_5": clamp_probability(output.over_25),
        "UNDER_2_5": clamp_probability(output.under_25),
        "BTTS_YES": clamp_probability(output.btts_yes),
        "BTTS_NO": clamp_probability(output.btts_no),
    }
    fair_odds = {key: round(1 / value, 3) for key, value in probabilities.items()}
    return FairOddsPayload(
        match_id=match_id,
        lambda_home=round(lambda_home, 3),
        lambda_away=round(lambda_away, 3),
        probabilities=probabilities,
        fair_odds=fair_odds,
    )


def compute_fair_odds_from_snapshot(
    snapshot: MatchSnapshot,
    home_advantage: float = DEFAULT_HOME_ADVANTAGE,
) -> FairOddsPayload:
    """Derive both lambdas from the snapshot and price the three markets.

    Home rate pairs the home attack with the away defence (boosted by
    ``home_advantage``); away rate pairs the away attack with the home
    defence.
    """
    lambda_home = derive_lambda(
        snapshot.home.avg_goals_for,
        snapshot.away.avg_goals_against,
        home_advantage,
    )
    lambda_away = derive_lambda(
        snapshot.away.avg_goals_for,
        snapshot.home.avg_goals_against,
        1.0,
    )
    logger.info(
        f"Fair odds for match {snapshot.match.match_id}: "
        f"λ_home={lambda_home:.3f} λ_away={lambda_away:.3f}"
    )
    return compute_fair_odds(snapshot.match.match_id, lambda_home, lambda_away)
