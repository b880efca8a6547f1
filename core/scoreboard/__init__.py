"""Scoreboard module - today's matches across the followed leagues.

This module provides the pipeline behind the live scoreboard:
- Fetching every configured league from the data provider
- Normalizing provider statuses and reconciling missing scores
- Caching the day's match list within the provider rate limits
- Adapting the polling interval to live and imminent matches
"""

from core.scoreboard.formatter import format_scoreboard
from core.scoreboard.models import (
    CanonicalMatch,
    MatchStatus,
    MissingCredentialError,
    Outcome,
    ScoreboardSnapshot,
)
from core.scoreboard.tracker import ScoreboardTracker

__all__ = [
    "CanonicalMatch",
    "MatchStatus",
    "MissingCredentialError",
    "Outcome",
    "ScoreboardSnapshot",
    "ScoreboardTracker",
    "format_scoreboard",
]
