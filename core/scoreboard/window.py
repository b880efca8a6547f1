"""Query window calculation in the reference timezone."""

from dataclasses import dataclass

import pendulum


@dataclass(frozen=True)
class QueryWindow:
    """Dates sent to the provider plus the day results are filtered to."""

    start_date: str
    end_date: str
    today: str


def query_window(now: pendulum.DateTime, timezone: str) -> QueryWindow:
    """Compute the provider query window for the current instant.

    The end date is one day after the start so late kickoffs that fall
    on the next UTC day are still returned; results are filtered back
    down to ``today`` afterwards.

    Args:
        now: Current instant (any timezone).
        timezone: Reference timezone defining the day.

    Returns:
        QueryWindow with YYYY-MM-DD strings.
    """
    local = now.in_timezone(timezone)
    today = local.to_date_string()
    return QueryWindow(
        start_date=today,
        end_date=local.add(days=1).to_date_string(),
        today=today,
    )


def match_day(kickoff: pendulum.DateTime, timezone: str) -> str:
    """Calendar day of a kickoff in the reference timezone (YYYY-MM-DD)."""
    return kickoff.in_timezone(timezone).to_date_string()
