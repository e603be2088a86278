"""OpenLigaDB integration (no API key required)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx

from data.base import FixtureProvider, match_result
from data.cache import Cache
from engine.schemas import (
    FixtureSummary,
    RecentMatchSummary,
    StandingEntry,
    TeamStatistics,
    TeamSummary,
)
from engine.timeutils import parse_iso

BASE_URL = "https://api.openligadb.de"
FINAL_RESULT_NAME = "Endergebnis"


def _kickoff(match: Dict[str, Any]) -> Optional[str]:
    value = match.get("matchDateTimeUTC") or match.get("matchDateTime")
    if not value:
        return None
    try:
        return parse_iso(value).isoformat()
    except ValueError:
        return None


def final_score(match: Dict[str, Any]) -> Optional[Tuple[int, int]]:
    """Final score from the "Endergebnis" result, the latest result, or the last goal."""
    results = match.get("matchResults") or []
    preferred = next(
        (r for r in results if r.get("resultName") == FINAL_RESULT_NAME), None
    )
    if preferred is None and results:
        preferred = max(results, key=lambda r: r.get("resultOrderID") or 0)
    if (
        preferred
        and isinstance(preferred.get("pointsTeam1"), int)
        and isinstance(preferred.get("pointsTeam2"), int)
    ):
        return preferred["pointsTeam1"], preferred["pointsTeam2"]

    goals = match.get("goals") or []
    if goals:
        last = goals[-1]
        if isinstance(last.get("scoreTeam1"), int) and isinstance(last.get("scoreTeam2"), int):
            return last["scoreTeam1"], last["scoreTeam2"]
    return None


def _map_team(team: Dict[str, Any]) -> TeamSummary:
    return TeamSummary(
        id=int(team["teamId"]),
        name=team.get("teamName", ""),
        short_name=team.get("shortName") or None,
    )


class OpenLigaDbProvider(FixtureProvider):
    """Client for OpenLigaDB, scoped to one league shortcut and season."""

    name = "OpenLigaDB"

    def __init__(
        self,
        league: str,
        season: int,
        cache: Optional[Cache] = None,
        cache_ttl: float = 120.0,
        http_client: Optional[httpx.Client] = None,
        base_url: str = BASE_URL,
    ) -> None:
        super().__init__(base_url, cache=cache, cache_ttl=cache_ttl, http_client=http_client)
        self.league = league
        self.season = season

    def _key(self, prefix: str) -> str:
        return f"{prefix}:{self.league}:{self.season}"

    def _season_matches(self) -> List[Dict[str, Any]]:
        return self._cached(
            self._key("matches"),
            lambda: self._get(f"/getmatchdata/{self.league}/{self.season}"),
        )

    def _map_fixture(self, match: Dict[str, Any]) -> FixtureSummary:
        location = match.get("location") or {}
        return FixtureSummary(
            match_id=int(match["matchID"]),
            league_id=int(match.get("leagueId") or 0),
            season=int(match.get("leagueSeason") or self.season),
            kickoff_utc=_kickoff(match) or "",
            venue=location.get("locationStadium"),
            home_team=_map_team(match["team1"]),
            away_team=_map_team(match["team2"]),
        )

    def _involves(self, match: Dict[str, Any], team_id: int) -> bool:
        return team_id in (match["team1"]["teamId"], match["team2"]["teamId"])

    def get_upcoming_fixtures(self, days: int) -> List[FixtureSummary]:
        now = datetime.now(timezone.utc)
        horizon = now + timedelta(days=days)
        upcoming = []
        for match in self._season_matches():
            kickoff = _kickoff(match)
            if kickoff and now <= parse_iso(kickoff) <= horizon:
                upcoming.append((parse_iso(kickoff), match))
        upcoming.sort(key=lambda pair: pair[0])
        return [self._map_fixture(match) for _, match in upcoming]

    def get_fixture(self, match_id: int) -> Optional[FixtureSummary]:
        for match in self._season_matches():
            if match.get("matchID") == match_id:
                return self._map_fixture(match)
        return None

    def get_standings(self) -> Dict[int, StandingEntry]:
        return self._cached(self._key("table"), self._load_standings)

    def _load_standings(self) -> Dict[int, StandingEntry]:
        rows = self._get(f"/gettable/{self.league}/{self.season}")
        return {
            int(row["teamInfoId"]): StandingEntry(
                position=int(row.get("rank") or position),
                points=int(row.get("points", 0)),
            )
            for position, row in enumerate(rows, start=1)
        }

    def get_team_statistics(self, team_id: int) -> Optional[TeamStatistics]:
        played = 0
        goals_for = 0
        goals_against = 0
        for match in self._season_matches():
            if not match.get("matchIsFinished") or not self._involves(match, team_id):
                continue
            score = final_score(match)
            if score is None:
                continue
            played += 1
            if match["team1"]["teamId"] == team_id:
                goals_for += score[0]
                goals_against += score[1]
            else:
                goals_for += score[1]
                goals_against += score[0]
        if not played:
            return None
        return TeamStatistics(
            avg_goals_for=goals_for / played,
            avg_goals_against=goals_against / played,
        )

    def get_recent_matches(self, team_id: int, limit: int = 5) -> List[RecentMatchSummary]:
        results: List[RecentMatchSummary] = []
        for match in self._season_matches():
            if not match.get("matchIsFinished") or not self._involves(match, team_id):
                continue
            home_score, away_score = final_score(match) or (0, 0)
            results.append(
                RecentMatchSummary(
                    id=int(match["matchID"]),
                    date_utc=_kickoff(match) or "",
                    home=match["team1"]["teamName"],
                    away=match["team2"]["teamName"],
                    score=f"{home_score}-{away_score}",
                    result=match_result(
                        home_score, away_score, match["team1"]["teamId"] == team_id
                    ),
                )
            )
        results.sort(key=lambda r: r.date_utc, reverse=True)
        return results[:limit]
