from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from data.base import FixtureProvider
from engine.odds_aggregator import market_odds_for_fixture
from engine.schemas import (
    FixtureSummary,
    OddsBookmaker,
    OddsEvent,
    OddsMarket,
    OddsOutcome,
    RecentMatchSummary,
    StandingEntry,
    TeamStatistics,
    TeamSummary,
)

KICKOFF = "2025-10-19T18:45:00Z"


def make_fixture(
    home: str = "AC Milan",
    away: str = "SSC Napoli",
    kickoff: str = KICKOFF,
    match_id: int = 1001,
) -> FixtureSummary:
    return FixtureSummary(
        match_id=match_id,
        league_id=135,
        season=2025,
        kickoff_utc=kickoff,
        venue="San Siro",
        home_team=TeamSummary(id=489, name=home),
        away_team=TeamSummary(id=492, name=away),
    )


def make_book(title: str, markets: List[OddsMarket], last_update: str = "2025-10-19T10:00:00Z") -> OddsBookmaker:
    return OddsBookmaker(key=title.lower(), title=title, last_update=last_update, markets=tuple(markets))


def h2h(home: str, home_price, draw_price, away: str, away_price) -> OddsMarket:
    return OddsMarket(
        key="h2h",
        outcomes=(
            OddsOutcome(name=home, price=home_price),
            OddsOutcome(name="Draw", price=draw_price),
            OddsOutcome(name=away, price=away_price),
        ),
    )


def totals(over_price, under_price, point: float = 2.5) -> OddsMarket:
    return OddsMarket(
        key="totals",
        outcomes=(
            OddsOutcome(name="Over", price=over_price, point=point),
            OddsOutcome(name="Under", price=under_price, point=point),
        ),
    )


def btts(yes_price, no_price, key: str = "btts") -> OddsMarket:
    return OddsMarket(
        key=key,
        outcomes=(OddsOutcome(name="Yes", price=yes_price), OddsOutcome(name="No", price=no_price)),
    )


def make_event(
    bookmakers: List[OddsBookmaker],
    home: str = "Milan",
    away: str = "Napoli",
    commence: str = KICKOFF,
    event_id: str = "evt-1",
) -> OddsEvent:
    return OddsEvent(
        id=event_id,
        home_team=home,
        away_team=away,
        commence_time=commence,
        bookmakers=tuple(bookmakers),
    )


def recent(result: str, idx: int) -> RecentMatchSummary:
    return RecentMatchSummary(
        id=idx,
        date_utc=f"2025-10-{10 - idx:02d}T18:00:00Z",
        home="A",
        away="B",
        score="1-0",
        result=result,
    )


class FakeProvider(FixtureProvider):
    """In-memory provider used to drive the snapshot builder and the API."""

    name = "fake"

    def __init__(
        self,
        fixtures: Optional[List[FixtureSummary]] = None,
        standings: Optional[Dict[int, StandingEntry]] = None,
        stats: Optional[Dict[int, TeamStatistics]] = None,
        results: Optional[Dict[int, List[RecentMatchSummary]]] = None,
    ) -> None:
        super().__init__("http://fake.local")
        self.fixtures = {f.match_id: f for f in fixtures or []}
        self.standings = standings or {}
        self.stats = stats or {}
        self.results = results or {}

    def get_upcoming_fixtures(self, days: int) -> List[FixtureSummary]:
        return list(self.fixtures.values())

    def get_fixture(self, match_id: int) -> Optional[FixtureSummary]:
        return self.fixtures.get(match_id)

    def get_standings(self) -> Dict[int, StandingEntry]:
        return self.standings

    def get_team_statistics(self, team_id: int) -> Optional[TeamStatistics]:
        return self.stats.get(team_id)

    def get_recent_matches(self, team_id: int, limit: int = 5) -> List[RecentMatchSummary]:
        return self.results.get(team_id, [])[:limit]


class FakeOddsAPI:
    def __init__(self, events: List[OddsEvent]) -> None:
        self.events = events

    def get_events(self) -> List[OddsEvent]:
        return self.events

    def get_market_odds_for_fixture(self, fixture: FixtureSummary):
        return market_odds_for_fixture(fixture, self.events)

    def close(self) -> None:
        pass


@pytest.fixture
def fixture_summary() -> FixtureSummary:
    return make_fixture()


@pytest.fixture
def fake_provider(fixture_summary: FixtureSummary) -> FakeProvider:
    return FakeProvider(
        fixtures=[fixture_summary],
        standings={
            489: StandingEntry(position=2, points=20, form="WWDWW"),
            492: StandingEntry(position=5, points=15),
        },
        stats={
            489: TeamStatistics(avg_goals_for=1.8, avg_goals_against=0.9),
            492: TeamStatistics(avg_goals_for=1.4, avg_goals_against=1.1),
        },
        results={
            489: [recent("WIN", 1), recent("WIN", 2), recent("DRAW", 3), recent("LOSS", 4)],
            492: [
                recent("LOSS", 1),
                recent("WIN", 2),
                recent("DRAW", 3),
                recent("DRAW", 4),
                recent("WIN", 5),
                recent("WIN", 6),
            ],
        },
    )
