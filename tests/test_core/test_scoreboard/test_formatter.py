"""Tests for core.scoreboard.formatter module."""

import pendulum

from config.constants import (
    ERROR_MISSING_API_KEY,
    SCOREBOARD_EMPTY,
    SCOREBOARD_LOADING,
    SCOREBOARD_STALE,
)
from core.scoreboard.formatter import (
    format_match_line,
    format_score,
    format_scoreboard,
    format_status,
)
from core.scoreboard.models import (
    CanonicalMatch,
    MatchStatus,
    Outcome,
    Score,
    ScoreboardSnapshot,
    Team,
)

TZ = "Europe/Lisbon"


def make_match(
    match_id="m1",
    competition="Premier League",
    status=MatchStatus.SCHEDULED,
    score=Score.unknown(),
    kickoff=pendulum.datetime(2025, 7, 12, 19, 0, tz="UTC"),
):
    return CanonicalMatch(
        id=match_id,
        competition=competition,
        home_team=Team("Arsenal"),
        away_team=Team("Chelsea"),
        score=score,
        status=status,
        kickoff_time=kickoff,
    )


def make_snapshot(matches=(), outcome=Outcome.FRESH, rate_limited=False):
    return ScoreboardSnapshot(
        matches=tuple(matches),
        fetched_at=pendulum.datetime(2025, 7, 12, 18, 30, 5, tz="UTC"),
        empty=not matches,
        outcome=outcome,
        day="2025-07-12",
        rate_limited=rate_limited,
    )


def test_scheduled_status_shows_local_kickoff():
    """Test that upcoming matches show kickoff in the reference zone."""
    # 19:00 UTC is 20:00 in Lisbon summer time
    assert format_status(make_match(), TZ) == "20:00"


def test_other_statuses_show_label():
    """Test status labels for started or finished matches."""
    assert format_status(make_match(status=MatchStatus.LIVE), TZ) == "🔴 AO VIVO"
    assert format_status(make_match(status=MatchStatus.FULLTIME), TZ) == "FIM"
    assert format_status(make_match(status=MatchStatus.POSTPONED), TZ) == "ADIADO"


def test_format_score():
    """Test known and unknown scores."""
    assert format_score(make_match(score=Score(2, 0))) == "2 – 0"
    assert format_score(make_match()) == "- – -"


def test_match_line():
    """Test a full match line."""
    line = format_match_line(
        make_match(status=MatchStatus.HALFTIME, score=Score(1, 1)), TZ
    )

    assert "Arsenal **1 – 1** Chelsea" in line
    assert "INT" in line


def test_loading_before_first_cycle():
    """Test the placeholder before any snapshot exists."""
    assert format_scoreboard(None, TZ) == SCOREBOARD_LOADING


def test_missing_credential():
    """Test that a missing key shows how to fix it."""
    snapshot = make_snapshot(outcome=Outcome.MISSING_CREDENTIAL)

    assert format_scoreboard(snapshot, TZ) == ERROR_MISSING_API_KEY


def test_empty_day():
    """Test the message for a day without matches."""
    message = format_scoreboard(make_snapshot(outcome=Outcome.EMPTY), TZ)

    assert "2025-07-12" in message
    assert SCOREBOARD_EMPTY in message
    assert "19:30:05" in message


def test_grouped_by_competition_in_kickoff_order():
    """Test that each competition appears once, first kickoff first."""
    matches = [
        make_match("a", "Bundesliga", kickoff=pendulum.datetime(2025, 7, 12, 13, 30)),
        make_match("b", "Premier League", kickoff=pendulum.datetime(2025, 7, 12, 14)),
        make_match("c", "Bundesliga", kickoff=pendulum.datetime(2025, 7, 12, 16, 30)),
    ]

    message = format_scoreboard(make_snapshot(matches), TZ)

    assert message.count("🏆 **Bundesliga**") == 1
    assert message.count("🏆 **Premier League**") == 1
    assert message.index("Bundesliga") < message.index("Premier League")
    lines = message.splitlines()
    bundesliga = lines.index("🏆 **Bundesliga**")
    assert "14:30" in lines[bundesliga + 1]
    assert "17:30" in lines[bundesliga + 2]


def test_stale_rate_limited_warning():
    """Test the notice when cached data is shown after a rate limit."""
    snapshot = make_snapshot([make_match()], Outcome.STALE, rate_limited=True)

    assert SCOREBOARD_STALE in format_scoreboard(snapshot, TZ)


def test_no_warning_when_fresh():
    """Test that fresh data has no stale notice."""
    snapshot = make_snapshot([make_match()], Outcome.FRESH, rate_limited=True)

    assert SCOREBOARD_STALE not in format_scoreboard(snapshot, TZ)
