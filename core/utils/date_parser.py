"""Date parsing utilities for the scoreboard bot.

Centralizes date parsing so every provider payload is read the same way.
"""

import logging
from datetime import datetime

import pendulum

logger = logging.getLogger(__name__)


def parse_iso_datetime(
    datetime_str: str, timezone: str = "UTC"
) -> pendulum.DateTime:
    """Parse ISO 8601 datetime into pendulum datetime.

    Used by football-data.org (``utcDate``) and API-Football
    (``fixture.date``) payloads.

    Args:
        datetime_str: ISO 8601 string (e.g., "2025-11-29T18:00:00Z")
        timezone: Target timezone (default: UTC)

    Returns:
        Timezone-aware pendulum datetime in specified timezone

    Raises:
        ValueError: If datetime_str is invalid
    """
    try:
        clean_str = datetime_str.replace("Z", "+00:00")
        dt = datetime.fromisoformat(clean_str)
        if dt.tzinfo is None:
            # Naive timestamps from providers are UTC
            return pendulum.instance(dt, tz="UTC").in_timezone(timezone)
        return pendulum.instance(dt).in_timezone(timezone)
    except (ValueError, AttributeError) as e:
        logger.error(f"ISO parse error: '{datetime_str}': {e}")
        raise ValueError(f"Invalid ISO datetime: '{datetime_str}'") from e


def format_to_hh_mm(dt: pendulum.DateTime, timezone: str | None = None) -> str:
    """Format pendulum datetime to HH:mm string.

    Args:
        dt: Pendulum datetime to format
        timezone: Convert to this timezone first if given

    Returns:
        Time string in HH:mm format
    """
    if timezone:
        dt = dt.in_timezone(timezone)
    return dt.format("HH:mm")


def format_to_hh_mm_ss(dt: pendulum.DateTime, timezone: str | None = None) -> str:
    """Format pendulum datetime to HH:mm:ss string."""
    if timezone:
        dt = dt.in_timezone(timezone)
    return dt.format("HH:mm:ss")
