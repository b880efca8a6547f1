"""In-memory cache of the last good match list for the current day."""

import logging
from enum import Enum

import pendulum

from config.constants import CACHE_DURATION
from core.scoreboard.models import CacheEntry, CanonicalMatch

logger = logging.getLogger(__name__)


class CacheState(str, Enum):
    EMPTY = "empty"
    VALID = "valid"
    STALE = "stale"


class MatchCache:
    """Holds at most one entry, valid for a single reference day."""

    def __init__(self, duration: int = CACHE_DURATION):
        self.duration = duration
        self.entry: CacheEntry | None = None

    def clear(self) -> None:
        self.entry = None

    def for_day(self, today: str) -> CacheEntry | None:
        """The cached entry if it holds matches for the given day."""
        if self.entry is None or not self.entry.matches:
            return None
        if self.entry.valid_for_date != today:
            return None
        return self.entry

    def state(self, today: str, now: pendulum.DateTime) -> CacheState:
        entry = self.for_day(today)
        if entry is None:
            return CacheState.EMPTY
        age = (now - entry.fetched_at).total_seconds()
        return CacheState.VALID if age < self.duration else CacheState.STALE

    def can_reuse(self, today: str, now: pendulum.DateTime) -> bool:
        """Whether the entry is fresh enough to skip fetching."""
        return self.state(today, now) is CacheState.VALID

    def store(
        self,
        matches: list[CanonicalMatch],
        fetched_at: pendulum.DateTime,
        today: str,
    ) -> CacheEntry:
        """Replace the entry with a fresh, non-empty match list.

        Raises:
            ValueError: If matches is empty.
        """
        if not matches:
            raise ValueError("Refusing to cache an empty match list")
        self.entry = CacheEntry(
            matches=tuple(matches),
            fetched_at=fetched_at,
            valid_for_date=today,
        )
        logger.debug(f"Cached {len(matches)} match(es) for {today}")
        return self.entry
