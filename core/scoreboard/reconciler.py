"""Turns raw provider matches into canonical matches.

Providers occasionally drop scores or statuses for a single poll. The
reconciler remembers the last known score and status per match id and
uses them to cover those gaps.
"""

import logging
from dataclasses import replace

from core.scoreboard.models import (
    CanonicalMatch,
    KnownFacts,
    MatchStatus,
    RawMatch,
    Score,
)
from core.scoreboard.providers import Provider
from core.scoreboard.status import StatusNormalizer

logger = logging.getLogger(__name__)


def sort_key(match: CanonicalMatch) -> tuple:
    return (match.kickoff_time, match.competition, match.id)


class StateReconciler:
    """Per-match reconciliation against last known facts."""

    def __init__(self, provider: Provider, normalizer: StatusNormalizer):
        self.provider = provider
        self.normalizer = normalizer
        self.last_known: dict[str, KnownFacts] = {}

    def reset(self) -> None:
        self.last_known.clear()

    def reconcile(self, raw: RawMatch) -> CanonicalMatch | None:
        """Build the canonical form of one raw match.

        Args:
            raw: Provider-native match.

        Returns:
            CanonicalMatch, or None if the match has no usable kickoff.
        """
        try:
            kickoff = self.provider.kickoff(raw)
        except ValueError as e:
            logger.warning(f"Skipping match without kickoff: {e}")
            return None

        match_id = self.provider.match_id(raw)
        facts = self.last_known.get(match_id, KnownFacts())

        home_goals, away_goals = self.provider.goals(raw)
        if home_goals is not None and away_goals is not None:
            score = Score(home_goals, away_goals)
            facts = replace(facts, score=score)
        else:
            # Never mix a reported goal with a missing one
            score = facts.score or Score.unknown()

        status = self.normalizer.normalize(
            self.provider.name, self.provider.status_code(raw)
        )
        if status is MatchStatus.SCHEDULED and facts.status is not None:
            status = facts.status
        else:
            facts = replace(facts, status=status)

        self.last_known[match_id] = facts

        home, away = self.provider.teams(raw)
        return CanonicalMatch(
            id=match_id,
            competition=self.provider.competition_name(raw) or "?",
            home_team=home,
            away_team=away,
            score=score,
            status=status,
            kickoff_time=kickoff,
        )

    def reconcile_all(self, raws: list[RawMatch]) -> list[CanonicalMatch]:
        """Reconcile a batch, one canonical match per id, kickoff order."""
        matches: dict[str, CanonicalMatch] = {}
        for raw in raws:
            match = self.reconcile(raw)
            if match is not None:
                matches[match.id] = match
        return sorted(matches.values(), key=sort_key)
