"""API-Football v3 integration."""

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

BASE_URL = "https://v3.football.api-sports.io"
# Fixture status codes for matches that are over or will not be played.
FINISHED_STATUSES = ("FT", "AET", "PEN", "PST", "CANC", "ABD", "AWD", "WO")


def _map_fixture(item: Dict[str, Any]) -> FixtureSummary:
    fixture = item.get("fixture", {})
    league = item.get("league", {})
    teams = item.get("teams", {})
    venue = fixture.get("venue") or {}
    return FixtureSummary(
        match_id=int(fixture["id"]),
        league_id=int(league.get("id") or 0),
        season=int(league.get("season") or 0),
        kickoff_utc=fixture.get("date", ""),
        venue=venue.get("name"),
        home_team=TeamSummary(id=int(teams["home"]["id"]), name=teams["home"]["name"]),
        away_team=TeamSummary(id=int(teams["away"]["id"]), name=teams["away"]["name"]),
    )


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class ApiFootballProvider(FixtureProvider):
    """Client for API-Football v3."""

    name = "API-Football"

    def __init__(
        self,
        api_key: str,
        league_id: int,
        season: int,
        cache: Optional[Cache] = None,
        cache_ttl: float = 120.0,
        http_client: Optional[httpx.Client] = None,
        base_url: str = BASE_URL,
    ) -> None:
        super().__init__(
            base_url,
            headers={"x-apisports-key": api_key},
            cache=cache,
            cache_ttl=cache_ttl,
            http_client=http_client,
        )
        self.league_id = league_id
        self.season = season

    def get_upcoming_fixtures(self, days: int) -> List[FixtureSummary]:
        now = datetime.now(timezone.utc)
        horizon = now + timedelta(days=days)
        params = {
            "league": self.league_id,
            "season": self.season,
            "from": now.date().isoformat(),
            "to": horizon.date().isoformat(),
        }
        fixtures = [
            _map_fixture(item)
            for item in self._get("/fixtures", params).get("response", [])
            if item.get("fixture", {}).get("date")
            and (item["fixture"].get("status") or {}).get("short") not in FINISHED_STATUSES
        ]
        upcoming = [f for f in fixtures if now <= parse_iso(f.kickoff_utc) <= horizon]
        return sorted(upcoming, key=lambda fixture: parse_iso(fixture.kickoff_utc))

    def get_fixture(self, match_id: int) -> Optional[FixtureSummary]:
        response = self._get("/fixtures", {"id": match_id})
        items = response.get("response", [])
        return _map_fixture(items[0]) if items else None

    def get_standings(self) -> Dict[int, StandingEntry]:
        return self._cached(f"standings:{self.league_id}:{self.season}", self._load_standings)

    def _load_standings(self) -> Dict[int, StandingEntry]:
        response = self._get("/standings", {"league": self.league_id, "season": self.season})
        table: Dict[int, StandingEntry] = {}
        items = response.get("response", [])
        groups = items[0].get("league", {}).get("standings", []) if items else []
        for row in groups[0] if groups else []:
            table[int(row["team"]["id"])] = StandingEntry(
                position=int(row.get("rank", 0)),
                points=int(row.get("points", 0)),
                form=row.get("form") or None,
            )
        return table

    def get_team_statistics(self, team_id: int) -> Optional[TeamStatistics]:
        return self._cached(
            f"stats:{team_id}:{self.league_id}:{self.season}",
            lambda: self._load_team_statistics(team_id),
        )

    def _load_team_statistics(self, team_id: int) -> Optional[TeamStatistics]:
        params = {"team": team_id, "league": self.league_id, "season": self.season}
        payload = self._get("/teams/statistics", params).get("response")
        if not payload:
            return None
        goals = payload.get("goals", {})
        return TeamStatistics(
            avg_goals_for=_to_float(goals.get("for", {}).get("average", {}).get("total")),
            avg_goals_against=_to_float(goals.get("against", {}).get("average", {}).get("total")),
        )

    def get_recent_matches(self, team_id: int, limit: int = 5) -> List[RecentMatchSummary]:
        params = {"team": team_id, "season": self.season, "last": limit}
        results: List[RecentMatchSummary] = []
        for item in self._get("/fixtures", params).get("response", []):
            teams = item.get("teams", {})
            goals = item.get("goals", {})
            home_score = goals.get("home") or 0
            away_score = goals.get("away") or 0
            is_home = teams["home"]["id"] == team_id
            results.append(
                RecentMatchSummary(
                    id=int(item["fixture"]["id"]),
                    date_utc=item["fixture"].get("date", ""),
                    home=teams["home"]["name"],
                    away=teams["away"]["name"],
                    score=f"{home_score}-{away_score}",
                    result=match_result(home_score, away_score, is_home),
                )
            )
        results.sort(key=lambda match: match.date_utc, reverse=True)
        return results
