"""Scoreboard message formatting for Discord."""

import logging
from itertools import groupby

from config.constants import (
    ERROR_MISSING_API_KEY,
    SCOREBOARD_EMPTY,
    SCOREBOARD_LOADING,
    SCOREBOARD_STALE,
    SCOREBOARD_TITLE,
    SCOREBOARD_UPDATED,
    STATUS_LABELS,
    UNKNOWN_SCORE,
)
from core.scoreboard.models import (
    CanonicalMatch,
    MatchStatus,
    Outcome,
    ScoreboardSnapshot,
)
from core.utils.date_parser import format_to_hh_mm, format_to_hh_mm_ss

logger = logging.getLogger(__name__)


def format_status(match: CanonicalMatch, timezone: str) -> str:
    """Status label, or kickoff time for matches not yet started."""
    if match.status is MatchStatus.SCHEDULED:
        return format_to_hh_mm(match.kickoff_time, timezone)
    return STATUS_LABELS[match.status.value]


def format_score(match: CanonicalMatch) -> str:
    if not match.score.known:
        return f"{UNKNOWN_SCORE} – {UNKNOWN_SCORE}"
    return f"{match.score.home} – {match.score.away}"


def format_match_line(match: CanonicalMatch, timezone: str) -> str:
    return (
        f"`{format_status(match, timezone):>9}` "
        f"{match.home_team.name} **{format_score(match)}** "
        f"{match.away_team.name}"
    )


def format_scoreboard(snapshot: ScoreboardSnapshot | None, timezone: str) -> str:
    """Render a snapshot as a Discord message.

    Matches are grouped by competition, in order of each competition's
    first kickoff.

    Args:
        snapshot: Latest tracker snapshot (None before the first cycle).
        timezone: Timezone for kickoff and update times.

    Returns:
        Message text.
    """
    if snapshot is None:
        return SCOREBOARD_LOADING
    if snapshot.outcome is Outcome.MISSING_CREDENTIAL:
        return ERROR_MISSING_API_KEY

    lines = [SCOREBOARD_TITLE.format(day=snapshot.day), ""]

    if snapshot.empty:
        lines.append(SCOREBOARD_EMPTY)
    else:
        order: dict[str, int] = {}
        for match in snapshot.matches:
            order.setdefault(match.competition, len(order))
        by_competition = sorted(
            snapshot.matches, key=lambda m: order[m.competition]
        )
        for competition, matches in groupby(
            by_competition, key=lambda m: m.competition
        ):
            lines.append(f"🏆 **{competition}**")
            lines.extend(format_match_line(m, timezone) for m in matches)
            lines.append("")

    if snapshot.fetched_at is not None:
        updated = format_to_hh_mm_ss(snapshot.fetched_at, timezone)
        lines.append(SCOREBOARD_UPDATED.format(time=updated))
    if snapshot.outcome is Outcome.STALE and snapshot.rate_limited:
        lines.append(SCOREBOARD_STALE)

    return "\n".join(lines).strip()
