"""Upstream data providers.

Each provider knows how to build its request and where its payload keeps
the fields the scoreboard needs. Matches stay provider-native until the
reconciler reads them through these accessors.
"""

import logging
from typing import Any
from urllib.parse import urlencode

import pendulum

from core.scoreboard.models import RawMatch, Team
from core.scoreboard.window import QueryWindow
from core.utils.date_parser import parse_iso_datetime

logger = logging.getLogger(__name__)


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _nested_dicts_ok(raw: RawMatch, *paths: tuple[str, ...]) -> bool:
    """Whether every sub-object at the given paths is absent or a dict."""
    for path in paths:
        value = _dig(raw, *path)
        if value is not None and not isinstance(value, dict):
            return False
    return True


def _as_goals(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class Provider:
    """Base provider. Subclasses fill in URL and payload layout."""

    name: str = ""
    auth_header: str = ""
    NESTED: tuple[tuple[str, ...], ...] = ()

    def build_url(self, league_id: str, window: QueryWindow) -> str:
        raise NotImplementedError

    def headers(self, api_key: str) -> dict[str, str]:
        return {self.auth_header: api_key}

    def extract_matches(self, payload: Any) -> list[RawMatch]:
        """Pull the match list out of a response body.

        Raises:
            ValueError: If the payload does not have the expected shape.
        """
        raise NotImplementedError

    def is_rate_limited(self, payload: Any) -> bool:
        """Whether a successful response actually reports a rate limit."""
        return False

    def native_id(self, raw: RawMatch) -> Any:
        raise NotImplementedError

    def kickoff_str(self, raw: RawMatch) -> str | None:
        raise NotImplementedError

    def status_code(self, raw: RawMatch) -> str | None:
        raise NotImplementedError

    def goals(self, raw: RawMatch) -> tuple[int | None, int | None]:
        raise NotImplementedError

    def team_payloads(self, raw: RawMatch) -> tuple[dict, dict]:
        raise NotImplementedError

    def competition_name(self, raw: RawMatch) -> str | None:
        raise NotImplementedError

    def team(self, payload: dict) -> Team:
        return Team(name=str(payload.get("name") or "?").strip())

    def kickoff(self, raw: RawMatch) -> pendulum.DateTime:
        """Kickoff as a UTC datetime.

        Raises:
            ValueError: If the kickoff is missing or unparseable.
        """
        value = self.kickoff_str(raw)
        if not value:
            raise ValueError("Match has no kickoff time")
        return parse_iso_datetime(value, "UTC")

    def teams(self, raw: RawMatch) -> tuple[Team, Team]:
        home, away = self.team_payloads(raw)
        return self.team(home), self.team(away)

    def match_id(self, raw: RawMatch) -> str:
        """Stable match id, falling back to teams and kickoff day."""
        native = self.native_id(raw)
        if native not in (None, ""):
            return f"{self.name}:{native}"

        home, away = self.team_payloads(raw)
        home_key = home.get("id") or home.get("name") or "?"
        away_key = away.get("id") or away.get("name") or "?"
        day = (self.kickoff_str(raw) or "")[:10]
        return f"{self.name}:{home_key}-{away_key}-{day}"


class FootballDataProvider(Provider):
    """football-data.org v4."""

    name = "football-data"
    auth_header = "X-Auth-Token"
    base_url = "https://api.football-data.org/v4"
    # Sub-objects read through accessors; entries with other shapes are dropped
    NESTED = (
        ("homeTeam",),
        ("awayTeam",),
        ("score",),
        ("score", "fullTime"),
        ("competition",),
    )

    def build_url(self, league_id: str, window: QueryWindow) -> str:
        query = urlencode(
            {"dateFrom": window.start_date, "dateTo": window.end_date}
        )
        return f"{self.base_url}/competitions/{league_id}/matches?{query}"

    def extract_matches(self, payload: Any) -> list[RawMatch]:
        if not isinstance(payload, dict):
            raise ValueError("Response body is not a JSON object")
        matches = payload.get("matches")
        if matches is None:
            return []
        if not isinstance(matches, list):
            raise ValueError("'matches' is not a list")
        return [
            m
            for m in matches
            if isinstance(m, dict) and _nested_dicts_ok(m, *self.NESTED)
        ]

    def native_id(self, raw: RawMatch) -> Any:
        return raw.get("id")

    def kickoff_str(self, raw: RawMatch) -> str | None:
        return raw.get("utcDate")

    def status_code(self, raw: RawMatch) -> str | None:
        return raw.get("status")

    def goals(self, raw: RawMatch) -> tuple[int | None, int | None]:
        full_time = _as_dict(_dig(raw, "score", "fullTime"))
        return _as_goals(full_time.get("home")), _as_goals(full_time.get("away"))

    def team_payloads(self, raw: RawMatch) -> tuple[dict, dict]:
        return _as_dict(raw.get("homeTeam")), _as_dict(raw.get("awayTeam"))

    def competition_name(self, raw: RawMatch) -> str | None:
        return _dig(raw, "competition", "name")

    def team(self, payload: dict) -> Team:
        name = payload.get("shortName") or payload.get("name") or "?"
        return Team(name=str(name).strip(), crest=payload.get("crest") or None)


class ApiFootballProvider(Provider):
    """API-Sports football v3."""

    name = "api-football"
    auth_header = "x-apisports-key"
    base_url = "https://v3.football.api-sports.io"
    NESTED = (
        ("fixture",),
        ("fixture", "status"),
        ("teams",),
        ("teams", "home"),
        ("teams", "away"),
        ("goals",),
        ("league",),
    )

    @staticmethod
    def season_for_date(date_str: str) -> int:
        date = pendulum.parse(date_str).date()
        return date.year if date.month >= 7 else date.year - 1

    def build_url(self, league_id: str, window: QueryWindow) -> str:
        query = urlencode(
            {
                "league": league_id,
                "season": self.season_for_date(window.start_date),
                "from": window.start_date,
                "to": window.end_date,
            }
        )
        return f"{self.base_url}/fixtures?{query}"

    def headers(self, api_key: str) -> dict[str, str]:
        return {
            self.auth_header: api_key,
            "x-rapidapi-host": "v3.football.api-sports.io",
        }

    def is_rate_limited(self, payload: Any) -> bool:
        if not isinstance(payload, dict):
            return False
        errors = payload.get("errors")
        if not errors:
            return False
        text = str(errors).lower()
        return "request limit" in text or "too many requests" in text

    def extract_matches(self, payload: Any) -> list[RawMatch]:
        if not isinstance(payload, dict):
            raise ValueError("Response body is not a JSON object")
        errors = payload.get("errors")
        if errors:
            raise ValueError(f"Provider reported errors: {errors}")
        fixtures = payload.get("response")
        if fixtures is None:
            return []
        if not isinstance(fixtures, list):
            raise ValueError("'response' is not a list")
        return [
            f
            for f in fixtures
            if isinstance(f, dict) and _nested_dicts_ok(f, *self.NESTED)
        ]

    def native_id(self, raw: RawMatch) -> Any:
        return _dig(raw, "fixture", "id")

    def kickoff_str(self, raw: RawMatch) -> str | None:
        return _dig(raw, "fixture", "date")

    def status_code(self, raw: RawMatch) -> str | None:
        return _dig(raw, "fixture", "status", "short")

    def goals(self, raw: RawMatch) -> tuple[int | None, int | None]:
        goals = _as_dict(raw.get("goals"))
        return _as_goals(goals.get("home")), _as_goals(goals.get("away"))

    def team_payloads(self, raw: RawMatch) -> tuple[dict, dict]:
        teams = _as_dict(raw.get("teams"))
        return _as_dict(teams.get("home")), _as_dict(teams.get("away"))

    def competition_name(self, raw: RawMatch) -> str | None:
        return _dig(raw, "league", "name")

    def team(self, payload: dict) -> Team:
        return Team(
            name=str(payload.get("name") or "?").strip(),
            crest=payload.get("logo") or None,
        )


PROVIDERS: dict[str, Provider] = {
    provider.name: provider
    for provider in (FootballDataProvider(), ApiFootballProvider())
}


def get_provider(name: str) -> Provider:
    """Look up a provider by name.

    Raises:
        ValueError: If the provider is not known.
    """
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown provider: {name!r}") from None
