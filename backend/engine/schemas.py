"""Data contracts shared by providers, the model and the API layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

MarketKey = Literal["1X2", "OU_2_5", "BTTS"]
SelectionKey = Literal[
    "HOME", "DRAW", "AWAY", "OVER_2_5", "UNDER_2_5", "BTTS_YES", "BTTS_NO"
]
MatchResult = Literal["WIN", "DRAW", "LOSS"]

SELECTIONS: Tuple[str, ...] = (
    "HOME",
    "DRAW",
    "AWAY",
    "OVER_2_5",
    "UNDER_2_5",
    "BTTS_YES",
    "BTTS_NO",
)


# ---------------------------------------------------------------------------
# Fixtures & teams
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TeamSummary:
    id: int
    name: str
    short_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "shortName": self.short_name}


@dataclass(frozen=True)
class FixtureSummary:
    match_id: int
    league_id: int
    season: int
    kickoff_utc: str
    venue: Optional[str]
    home_team: TeamSummary
    away_team: TeamSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matchId": self.match_id,
            "leagueId": self.league_id,
            "season": self.season,
            "kickoffUtc": self.kickoff_utc,
            "venue": self.venue,
            "homeTeam": self.home_team.to_dict(),
            "awayTeam": self.away_team.to_dict(),
        }


@dataclass(frozen=True)
class RecentMatchSummary:
    id: int
    date_utc: str
    home: str
    away: str
    score: str
    result: MatchResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "dateUtc": self.date_utc,
            "home": self.home,
            "away": self.away,
            "score": self.score,
            "result": self.result,
        }


@dataclass(frozen=True)
class StandingEntry:
    position: int
    points: int
    form: Optional[str] = None


@dataclass(frozen=True)
class TeamStatistics:
    avg_goals_for: float
    avg_goals_against: float


@dataclass(frozen=True)
class TeamSnapshot:
    team: TeamSummary
    league_position: Optional[int] = None
    points: Optional[int] = None
    form: Optional[str] = None
    avg_goals_for: Optional[float] = None
    avg_goals_against: Optional[float] = None
    recent_results: Tuple[RecentMatchSummary, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team": self.team.to_dict(),
            "leaguePosition": self.league_position,
            "points": self.points,
            "form": self.form,
            "avgGoalsFor": self.avg_goals_for,
            "avgGoalsAgainst": self.avg_goals_against,
            "recentResults": [r.to_dict() for r in self.recent_results],
        }


@dataclass(frozen=True)
class MatchSnapshot:
    match: FixtureSummary
    home: TeamSnapshot
    away: TeamSnapshot

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match": self.match.to_dict(),
            "home": self.home.to_dict(),
            "away": self.away.to_dict(),
        }


# ---------------------------------------------------------------------------
# Raw quote feed
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OddsOutcome:
    name: str
    price: Optional[float] = None
    point: Optional[float] = None


@dataclass(frozen=True)
class OddsMarket:
    key: str
    outcomes: Tuple[OddsOutcome, ...] = ()


@dataclass(frozen=True)
class OddsBookmaker:
    key: str
    title: str
    last_update: str
    markets: Tuple[OddsMarket, ...] = ()


@dataclass(frozen=True)
class OddsEvent:
    id: str
    home_team: str
    away_team: str
    commence_time: str
    bookmakers: Tuple[OddsBookmaker, ...] = ()


# ---------------------------------------------------------------------------
# Model outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BookmakerOdds:
    book: str
    odds_decimal: float
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "book": self.book,
            "oddsDecimal": self.odds_decimal,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class MarketOdds:
    market: MarketKey
    selection: SelectionKey
    line: Optional[float] = None
    bookmakers: Tuple[BookmakerOdds, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"market": self.market, "selection": self.selection}
        if self.line is not None:
            data["line"] = self.line
        data["bookmakers"] = [b.to_dict() for b in self.bookmakers]
        return data


@dataclass(frozen=True)
class FairOddsPayload:
    match_id: int
    lambda_home: float
    lambda_away: float
    probabilities: Dict[str, float] = field(default_factory=dict)
    fair_odds: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matchId": self.match_id,
            "lambdaHome": self.lambda_home,
            "lambdaAway": self.lambda_away,
            "probabilities": dict(self.probabilities),
            "fairOdds": dict(self.fair_odds),
        }


@dataclass(frozen=True)
class ValuePick:
    market: MarketKey
    selection: SelectionKey
    bookmaker: str
    offered_odds: float
    fair_odds: float
    edge: float
    rationale: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "market": self.market,
            "selection": self.selection,
            "bookmaker": self.bookmaker,
            "offeredOdds": self.offered_odds,
            "fairOdds": self.fair_odds,
            "edge": self.edge,
            "rationale": self.rationale,
        }


@dataclass(frozen=True)
class ValueDetectionResult:
    match_id: int
    picks: List[ValuePick]
    fair: FairOddsPayload
    odds: List[MarketOdds]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matchId": self.match_id,
            "picks": [p.to_dict() for p in self.picks],
            "fair": self.fair.to_dict(),
            "odds": [o.to_dict() for o in self.odds],
        }
