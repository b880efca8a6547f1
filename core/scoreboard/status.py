"""Provider status code normalization.

Status vocabularies differ per provider, so the mapping tables are data
(``config/status_maps.json``) keyed by provider name.
"""

import json
import logging
from pathlib import Path

from config.paths import STATUS_MAPS_FILE
from core.scoreboard.models import MatchStatus

logger = logging.getLogger(__name__)


def load_status_maps(path: Path = STATUS_MAPS_FILE) -> dict[str, dict[str, str]]:
    """Read provider status tables from a JSON file.

    Args:
        path: JSON file mapping provider -> {provider code: canonical}.

    Returns:
        Mapping of provider name to its raw status table.

    Raises:
        ValueError: If a table maps to a value outside the canonical set.
    """
    with open(path, encoding="utf-8") as f:
        tables = json.load(f)

    canonical = {status.value for status in MatchStatus}
    for provider, table in tables.items():
        invalid = set(table.values()) - canonical
        if invalid:
            raise ValueError(
                f"Status table for {provider} has unknown values: "
                f"{sorted(invalid)}"
            )
    logger.debug(f"Loaded status tables for {sorted(tables)}")
    return tables


class StatusNormalizer:
    """Maps provider status codes to the canonical vocabulary."""

    def __init__(self, tables: dict[str, dict[str, str]]):
        self._tables = {
            provider: {
                code.strip().upper(): MatchStatus(value)
                for code, value in table.items()
            }
            for provider, table in tables.items()
        }

    @classmethod
    def from_file(cls, path: Path = STATUS_MAPS_FILE) -> "StatusNormalizer":
        return cls(load_status_maps(path))

    @property
    def providers(self) -> set[str]:
        return set(self._tables)

    def normalize(self, provider: str, code: str | None) -> MatchStatus:
        """Map one provider status code.

        Unknown providers, blank codes and unmapped codes all resolve to
        SCHEDULED.

        Args:
            provider: Provider name the code came from.
            code: Raw provider status code.

        Returns:
            Canonical status.
        """
        if not code:
            return MatchStatus.SCHEDULED
        table = self._tables.get(provider)
        if table is None:
            logger.warning(f"No status table for provider {provider!r}")
            return MatchStatus.SCHEDULED
        status = table.get(str(code).strip().upper())
        if status is None:
            logger.debug(f"Unmapped {provider} status {code!r}")
            return MatchStatus.SCHEDULED
        return status
