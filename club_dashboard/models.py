# club_dashboard/models.py
"""
Domain models for the dashboard.

Upstream rows are loosely-typed sheet records. Each entity below is built from a
row with ``from_row``, which tries a short list of column names per field and
parses values leniently (see parsing.py). The original row is kept in ``raw``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Mapping, Optional, Sequence

from .parsing import first_present, parse_datetime, safe_float, safe_str


@dataclass(frozen=True)
class Fixture:
    """An upcoming (or just played) match."""
    team: str
    opponent: str
    when: Optional[datetime]
    venue: str
    league: str
    notes: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any], default_tz: tzinfo = timezone.utc) -> "Fixture":
        return cls(
            team=safe_str(first_present(row, ("Team", "team"))),
            opponent=safe_str(first_present(row, ("Opponent", "opponent"))),
            when=parse_datetime(first_present(row, ("date", "Date")), default_tz),
            venue=safe_str(first_present(row, ("Venue", "venue"))),
            league=safe_str(first_present(row, ("League", "league"))),
            notes=safe_str(first_present(row, ("Notes", "notes"))),
            lat=safe_float(first_present(row, ("lat", "Lat", "latitude"))),
            lng=safe_float(first_present(row, ("lng", "Lng", "lon", "longitude"))),
            raw=row,
        )


@dataclass(frozen=True)
class Standing:
    """A single team row in the league table."""
    team: str
    position: Optional[float]
    played: Optional[float]
    wins: Optional[float]
    losses: Optional[float]
    points: Optional[float]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Standing":
        return cls(
            team=safe_str(first_present(row, ("team", "Team"))),
            position=safe_float(first_present(row, ("position", "Position", "Pos"))),
            played=safe_float(first_present(row, ("played", "Played", "P"))),
            wins=safe_float(first_present(row, ("wins", "Wins", "W"))),
            losses=safe_float(first_present(row, ("losses", "Losses", "L"))),
            points=safe_float(first_present(row, ("points", "Points", "Pts"))),
            raw=row,
        )


@dataclass(frozen=True)
class Hitter:
    """Batting line for one player."""
    player: str
    team: str
    avg: Optional[float]
    obp: Optional[float]
    rbis: Optional[float]
    games: Optional[float]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Hitter":
        return cls(
            player=safe_str(first_present(row, ("player", "Player"))),
            team=safe_str(first_present(row, ("team", "Team"))),
            avg=safe_float(first_present(row, ("avg", "AVG"))),
            obp=safe_float(first_present(row, ("obp", "OBP"))),
            rbis=safe_float(first_present(row, ("rbis", "RBIs", "RBI"))),
            games=safe_float(first_present(row, ("Games Played", "games", "gamesPlayed"))),
            raw=row,
        )


@dataclass(frozen=True)
class Result:
    """A completed match result. club_score is the home club's score."""
    team: str
    opponent: str
    when: Optional[datetime]
    club_score: str
    opponent_score: str
    outcome: str   # "W" | "L" | other upper-cased flag | ""
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def score_line(self) -> str:
        """Club-centric score string, e.g. '7-4'. Empty when both scores are blank."""
        if not self.club_score and not self.opponent_score:
            return ""
        return f"{self.club_score}-{self.opponent_score}"

    @classmethod
    def from_row(cls, row: Dict[str, Any], default_tz: tzinfo = timezone.utc) -> "Result":
        return cls(
            team=safe_str(first_present(row, ("Team", "team"))),
            opponent=safe_str(first_present(row, ("Opponent", "opponent"))),
            when=parse_datetime(first_present(row, ("Date", "date")), default_tz),
            club_score=safe_str(first_present(row, ("NDSC Score", "Club Score", "score"))),
            opponent_score=safe_str(first_present(row, ("Opponent Score", "opponentScore"))),
            outcome=safe_str(first_present(row, ("Result", "result"))).upper(),
            raw=row,
        )


@dataclass(frozen=True)
class HomeRunLeader:
    """Home-run total for one player."""
    player: str
    team: str
    home_runs: Optional[float]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "HomeRunLeader":
        return cls(
            player=safe_str(first_present(row, ("Player", "player"))),
            team=safe_str(first_present(row, ("Team", "team"))),
            home_runs=safe_float(first_present(row, ("Home_Runs", "Home Runs", "HR", "homeRuns"))),
            raw=row,
        )


@dataclass(frozen=True)
class FixtureView:
    """A fixture plus its time-derived display fields."""
    fixture: Fixture
    when_str: str
    countdown: Optional[str]   # "1d 2h 30m" | "Played" | None
    is_played: bool
    progress: int              # 0-100


@dataclass(frozen=True)
class DashboardViewModel:
    """All data needed to render the dashboard."""
    now: datetime
    fixtures: Sequence[FixtureView]
    primary: Optional[FixtureView]
    league_table: Sequence[Standing]
    top_hitters: Sequence[Hitter]
    recent_results: Sequence[Result]
    home_run_leaders: Sequence[HomeRunLeader]

    @property
    def primary_countdown(self) -> Optional[str]:
        return self.primary.countdown if self.primary else None
