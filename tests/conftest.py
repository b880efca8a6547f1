"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pendulum
import pytest

from core.scoreboard.models import TransportResponse
from core.scoreboard.providers import FootballDataProvider
from core.scoreboard.status import StatusNormalizer

LEAGUES = {"Premier League": "PL", "Bundesliga": "BL1"}


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: pendulum.DateTime):
        self.now = start

    def __call__(self) -> pendulum.DateTime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now.add(**kwargs)


class FakeTransport:
    """Transport answering from a per-league table.

    Values are TransportResponse objects, exceptions to raise, or a list
    of either consumed one call at a time.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list[str] = []

    async def get(self, url: str, headers: dict[str, str]) -> TransportResponse:
        self.calls.append(url)
        league = url.split("/competitions/")[1].split("/")[0]
        response = self.responses.get(league, TransportResponse(200, {"matches": []}))
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, Exception):
            raise response
        return response


class RecordingRenderer:
    """Renderer that remembers every snapshot it was given."""

    def __init__(self):
        self.snapshots = []

    async def __call__(self, snapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def last(self):
        return self.snapshots[-1]


def fd_match(
    match_id=1,
    utc_date="2025-11-24T15:00:00Z",
    status="TIMED",
    home=None,
    away=None,
    competition="Premier League",
    home_team="Arsenal",
    away_team="Chelsea",
):
    """football-data.org match payload."""
    return {
        "id": match_id,
        "utcDate": utc_date,
        "status": status,
        "competition": {"name": competition, "code": "PL"},
        "homeTeam": {
            "id": 57,
            "name": f"{home_team} FC",
            "shortName": home_team,
            "crest": "https://crests.football-data.org/57.png",
        },
        "awayTeam": {
            "id": 61,
            "name": f"{away_team} FC",
            "shortName": away_team,
            "crest": "https://crests.football-data.org/61.png",
        },
        "score": {"fullTime": {"home": home, "away": away}},
    }


def ok(*matches) -> TransportResponse:
    return TransportResponse(200, {"matches": list(matches)})


@pytest.fixture
def clock():
    # 10:00 in Lisbon (UTC+0 in November)
    return FakeClock(pendulum.datetime(2025, 11, 24, 10, 0, tz="UTC"))


@pytest.fixture
def provider():
    return FootballDataProvider()


@pytest.fixture
def normalizer():
    return StatusNormalizer.from_file()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def job_scheduler():
    """Stand-in for an APScheduler scheduler."""
    return MagicMock()
