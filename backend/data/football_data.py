"""football-data.org v4 integration."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

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

BASE_URL = "https://api.football-data.org/v4"
FINISHED = "FINISHED"


def _map_team(team: Dict[str, Any]) -> TeamSummary:
    return TeamSummary(
        id=int(team["id"]),
        name=team.get("name", ""),
        short_name=team.get("shortName") or team.get("tla") or None,
    )


def _full_time(match: Dict[str, Any]) -> tuple[int, int]:
    full_time = match.get("score", {}).get("fullTime", {})
    return full_time.get("home") or 0, full_time.get("away") or 0


class FootballDataProvider(FixtureProvider):
    """Client for football-data.org, scoped to one competition and season."""

    name = "Football-Data.org"

    def __init__(
        self,
        token: str,
        competition: str,
        season: int,
        cache: Optional[Cache] = None,
        cache_ttl: float = 120.0,
        http_client: Optional[httpx.Client] = None,
        base_url: str = BASE_URL,
    ) -> None:
        super().__init__(
            base_url,
            headers={"X-Auth-Token": token},
            cache=cache,
            cache_ttl=cache_ttl,
            http_client=http_client,
        )
        self.competition = competition
        self.season = season

    def _key(self, suffix: str) -> str:
        return f"{suffix}:{self.competition}:{self.season}"

    def _season_matches(self) -> List[Dict[str, Any]]:
        return self._cached(
            self._key("season_matches"),
            lambda: self._get(
                f"/competitions/{self.competition}/matches", {"season": self.season}
            ).get("matches", []),
        )

    def _team_matches(self, team_id: int) -> List[Dict[str, Any]]:
        return self._cached(
            self._key(f"team:{team_id}"),
            lambda: self._get(
                f"/teams/{team_id}/matches",
                {"season": self.season, "competitions": self.competition},
            ).get("matches", []),
        )

    def _map_fixture(self, match: Dict[str, Any]) -> FixtureSummary:
        return FixtureSummary(
            match_id=int(match["id"]),
            league_id=0,
            season=self.season,
            kickoff_utc=match["utcDate"],
            venue=match.get("venue"),
            home_team=_map_team(match["homeTeam"]),
            away_team=_map_team(match["awayTeam"]),
        )

    def get_upcoming_fixtures(self, days: int) -> List[FixtureSummary]:
        now = datetime.now(timezone.utc)
        horizon = now + timedelta(days=days)
        upcoming = [
            match
            for match in self._season_matches()
            if match.get("utcDate")
            and match.get("status") != FINISHED
            and now <= parse_iso(match["utcDate"]) <= horizon
        ]
        upcoming.sort(key=lambda match: parse_iso(match["utcDate"]))
        return [self._map_fixture(match) for match in upcoming]

    def get_fixture(self, match_id: int) -> Optional[FixtureSummary]:
        for match in self._season_matches():
            if match.get("id") == match_id:
                return self._map_fixture(match)
        return None

    def get_standings(self) -> Dict[int, StandingEntry]:
        return self._cached(self._key("standings"), self._load_standings)

    def _load_standings(self) -> Dict[int, StandingEntry]:
        response = self._get(
            f"/competitions/{self.competition}/standings", {"season": self.season}
        )
        table: Dict[int, StandingEntry] = {}
        rows = next(
            (group["table"] for group in response.get("standings", []) if group.get("table")),
            [],
        )
        for row in rows:
            table[int(row["team"]["id"])] = StandingEntry(
                position=int(row.get("position", 0)),
                points=int(row.get("points", 0)),
                form=row.get("form") or None,
            )
        return table

    def get_team_statistics(self, team_id: int) -> Optional[TeamStatistics]:
        played = 0
        goals_for = 0
        goals_against = 0
        for match in self._team_matches(team_id):
            if match.get("status") != FINISHED:
                continue
            home_score, away_score = _full_time(match)
            played += 1
            if match["homeTeam"]["id"] == team_id:
                goals_for += home_score
                goals_against += away_score
            else:
                goals_for += away_score
                goals_against += home_score
        if not played:
            return None
        return TeamStatistics(
            avg_goals_for=goals_for / played,
            avg_goals_against=goals_against / played,
        )

    def get_recent_matches(self, team_id: int, limit: int = 5) -> List[RecentMatchSummary]:
        finished = [m for m in self._team_matches(team_id) if m.get("status") == FINISHED]
        finished.sort(key=lambda match: parse_iso(match["utcDate"]), reverse=True)
        results: List[RecentMatchSummary] = []
        for match in finished[:limit]:
            home_score, away_score = _full_time(match)
            results.append(
                RecentMatchSummary(
                    id=int(match["id"]),
                    date_utc=match["utcDate"],
                    home=match["homeTeam"]["name"],
                    away=match["awayTeam"]["name"],
                    score=f"{home_score}-{away_score}",
                    result=match_result(
                        home_score, away_score, match["homeTeam"]["id"] == team_id
                    ),
                )
            )
        return results
