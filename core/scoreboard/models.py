"""Data model and error taxonomy for the scoreboard pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pendulum

# Provider-native match payload, field names untouched
RawMatch = dict[str, Any]


class MatchStatus(str, Enum):
    """Canonical match status vocabulary."""

    SCHEDULED = "SCHEDULED"
    LIVE = "LIVE"
    HALFTIME = "HALFTIME"
    FULLTIME = "FULLTIME"
    POSTPONED = "POSTPONED"
    CANCELLED = "CANCELLED"
    SUSPENDED = "SUSPENDED"

    @property
    def in_play(self) -> bool:
        return self in (MatchStatus.LIVE, MatchStatus.HALFTIME)


class Outcome(str, Enum):
    """What a refresh cycle decided to show."""

    FRESH = "fresh"
    REUSED = "reused"
    STALE = "stale"
    EMPTY = "empty"
    MISSING_CREDENTIAL = "missing_credential"


@dataclass(frozen=True)
class Team:
    name: str
    crest: str | None = None


@dataclass(frozen=True)
class Score:
    """Home/away goals; both None means the score is unknown."""

    home: int | None = None
    away: int | None = None

    @property
    def known(self) -> bool:
        return self.home is not None and self.away is not None

    @classmethod
    def unknown(cls) -> "Score":
        return cls()


@dataclass(frozen=True)
class CanonicalMatch:
    id: str
    competition: str
    home_team: Team
    away_team: Team
    score: Score
    status: MatchStatus
    kickoff_time: pendulum.DateTime


@dataclass(frozen=True)
class KnownFacts:
    """Last known score and status for one match."""

    score: Score | None = None
    status: MatchStatus | None = None


@dataclass
class FetchResult:
    """Aggregated output of one fetch batch."""

    matches: list[RawMatch] = field(default_factory=list)
    rate_limited: bool = False


@dataclass(frozen=True)
class CacheEntry:
    matches: tuple[CanonicalMatch, ...]
    fetched_at: pendulum.DateTime
    valid_for_date: str


@dataclass(frozen=True)
class ScoreboardSnapshot:
    """What the renderer shows after a cache decision."""

    matches: tuple[CanonicalMatch, ...]
    fetched_at: pendulum.DateTime | None
    empty: bool
    outcome: Outcome
    day: str
    rate_limited: bool = False


@dataclass(frozen=True)
class TransportResponse:
    """Result of one HTTP GET: status plus JSON body or raw text."""

    status: int
    body: Any = None
    text: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class ScoreboardError(Exception):
    """Base class for scoreboard pipeline errors."""


class MissingCredentialError(ScoreboardError):
    """No API key available; fatal for the session."""


class LeagueError(ScoreboardError):
    """Failure scoped to a single league fetch."""

    def __init__(self, league: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.league = league
        self.status_code = status_code


class RateLimitedError(LeagueError):
    """Provider refused the request because of its rate limit."""


class TransportError(LeagueError):
    """Network failure or unexpected HTTP status for a league."""


class MalformedResponseError(LeagueError):
    """Response body could not be understood."""
