"""Independent Poisson model for football scorelines."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
from scipy.stats import poisson

MAX_GOALS: int = 8
DEFAULT_GOALS: float = 1.2
MIN_LAMBDA: float = 0.4
PROB_FLOOR: float = 0.01
PROB_CEIL: float = 0.97


@dataclass(frozen=True)
class ScoreMatrix:
    """Score matrix with probabilities for each scoreline."""

    matrix: np.ndarray
    max_goals: int

    def probability(self, home_goals: int, away_goals: int) -> float:
        if home_goals > self.max_goals or away_goals > self.max_goals:
            return 0.0
        return float(self.matrix[home_goals, away_goals])


@dataclass(frozen=True)
class PoissonOutput:
    """Model output for the three supported markets.

    ``home_win``/``draw``/``away_win`` are renormalized over the grid,
    ``over_25`` and ``btts_yes`` are raw truncated-grid mass.
    """

    score_matrix: ScoreMatrix
    expected_home_goals: float
    expected_away_goals: float
    home_win: float
    draw: float
    away_win: float
    over_25: float
    under_25: float
    btts_yes: float
    btts_no: float


def derive_lambda(
    goals_for: Optional[float] = None,
    goals_against: Optional[float] = None,
    adjustment: float = 1.0,
) -> float:
    """Turn average goals for/against into a Poisson scoring rate."""
    if goals_for is None:
        goals_for = DEFAULT_GOALS
    if goals_against is None:
        goals_against = DEFAULT_GOALS
    baseline = (goals_for + goals_against) / 2
    return max(MIN_LAMBDA, baseline * adjustment)


def goal_distribution(lam: float, max_goals: int = MAX_GOALS) -> np.ndarray:
    """Poisson pmf over 0..max_goals. Tail mass is dropped, not redistributed."""
    return poisson.pmf(np.arange(max_goals + 1), lam)


def clamp_probability(
    value: float, lower: float = PROB_FLOOR, upper: float = PROB_CEIL
) -> float:
    if not math.isfinite(value):
        return lower
    return min(upper, max(lower, value))


def build_score_matrix(
    lambda_home: float,
    lambda_away: float,
    max_goals: int = MAX_GOALS,
) -> ScoreMatrix:
    """Joint scoreline probabilities for two independent Poisson sides."""
    matrix = np.outer(
        goal_distribution(lambda_home, max_goals),
        goal_distribution(lambda_away, max_goals),
    )
    return ScoreMatrix(matrix=matrix, max_goals=max_goals)


def summarize_from_matrix(score_matrix: ScoreMatrix) -> Dict[str, float]:
    """Summarize 1X2, totals and BTTS probabilities.

    Only the 1X2 triple is renormalized for the truncated tail. Totals and
    BTTS keep the raw grid mass and their complements are ``1 - x``.
    """
    max_goals = score_matrix.max_goals
    home_win = 0.0
    draw = 0.0
    away_win = 0.0
    over_25 = 0.0
    btts_yes = 0.0
    for home_goals in range(max_goals + 1):
        for away_goals in range(max_goals + 1):
            prob = score_matrix.probability(home_goals, away_goals)
            if home_goals > away_goals:
                home_win += prob
            elif home_goals == away_goals:
                draw += prob
            else:
                away_win += prob
            if home_goals + away_goals >= 3:
                over_25 += prob
            if home_goals > 0 and away_goals > 0:
                btts_yes += prob

    total = home_win + draw + away_win
    if total > 0:
        home_win /= total
        draw /= total
        away_win /= total

    return {
        "home_win": home_win,
        "draw": draw,
        "away_win": away_win,
        "over_25": over_25,
        "under_25": 1.0 - over_25,
        "btts_yes": btts_yes,
        "btts_no": 1.0 - btts_yes,
    }


def run_independent_poisson(
    lambda_home: float,
    lambda_away: float,
    max_goals: int = MAX_GOALS,
) -> PoissonOutput:
    """Run the independent Poisson model and return unclamped probabilities."""
    matrix = build_score_matrix(lambda_home, lambda_away, max_goals)
    summary = summarize_from_matrix(matrix)
    return PoissonOutput(
        score_matrix=matrix,
        expected_home_goals=lambda_home,
        expected_away_goals=lambda_away,
        home_win=summary["home_win"],
        draw=summary["draw"],
        away_win=summary["away_win"],
        over_25=summary["over_25"],
        under_25=summary["under_25"],
        btts_yes=summary["btts_yes"],
        btts_no=summary["btts_no"],
    )
