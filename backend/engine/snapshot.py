"""Assemble a match snapshot from a fixture provider."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Sequence

from loguru import logger

from data.base import FixtureProvider
from engine.schemas import (
    MatchSnapshot,
    RecentMatchSummary,
    StandingEntry,
    TeamSnapshot,
    TeamStatistics,
    TeamSummary,
)

FORM_WINDOW: int = 5


class FixtureNotFoundError(LookupError):
    """The configured provider has no fixture with the requested id."""

    def __init__(self, match_id: int, provider: str) -> None:
        super().__init__(f"Fixture {match_id} not found on {provider}")
        self.match_id = match_id
        self.provider = provider


def derive_form(recent: Sequence[RecentMatchSummary]) -> Optional[str]:
    """Result letters for the latest matches, most recent first (e.g. ``WWDL``)."""
    if not recent:
        return None
    return "".join(match.result[0] for match in recent[:FORM_WINDOW])


def _team_snapshot(
    team: TeamSummary,
    standings: Dict[int, StandingEntry],
    stats: Optional[TeamStatistics],
    recent: Sequence[RecentMatchSummary],
) -> TeamSnapshot:
    standing = standings.get(team.id)
    if stats is None:
        logger.warning(f"No statistics for {team.name}, goal averages left undefined")
    return TeamSnapshot(
        team=team,
        league_position=standing.position if standing else None,
        points=standing.points if standing else None,
        form=derive_form(recent),
        avg_goals_for=stats.avg_goals_for if stats else None,
        avg_goals_against=stats.avg_goals_against if stats else None,
        recent_results=tuple(recent),
    )


def build_match_snapshot(provider: FixtureProvider, match_id: int) -> MatchSnapshot:
    """Fixture, table position, goal averages and recent form for both sides.

    Both teams are fetched in parallel. Statistics complete before recent
    results are requested, so providers that derive both from one upstream
    call hit their cache on the second pass.
    """
    fixture = provider.get_fixture(match_id)
    if fixture is None:
        raise FixtureNotFoundError(match_id, provider.name)
    logger.info(
        f"Building snapshot for {fixture.home_team.name} vs {fixture.away_team.name} "
        f"({match_id})"
    )
    standings = provider.get_standings()
    home_id = fixture.home_team.id
    away_id = fixture.away_team.id
    with ThreadPoolExecutor(max_workers=2) as pool:
        home_stats, away_stats = pool.map(provider.get_team_statistics, (home_id, away_id))
        home_recent, away_recent = pool.map(provider.get_recent_matches, (home_id, away_id))

    home = _team_snapshot(fixture.home_team, standings, home_stats, home_recent)
    away = _team_snapshot(fixture.away_team, standings, away_stats, away_recent)

    return MatchSnapshot(match=fixture, home=home, away=away)
