"""Match data sources - one request per configured league.

The orchestrator always returns a FetchResult. Per-league failures are
logged and contained so one league never stops the others.
"""

import argparse
import asyncio
import json
import logging

import aiohttp
import pendulum

from config.constants import MAX_RETRIES, REQUEST_TIMEOUT, RETRY_DELAY
from core.retry import retry_on_failure
from core.scoreboard.models import (
    FetchResult,
    MalformedResponseError,
    RateLimitedError,
    RawMatch,
    TransportError,
    TransportResponse,
)
from core.scoreboard.providers import Provider
from core.scoreboard.window import QueryWindow, match_day

logger = logging.getLogger(__name__)

# Statuses meaning the league will not answer today, whatever we retry
BENCH_STATUSES = (403, 404)


class AiohttpTransport:
    """HTTP GET over aiohttp returning status and decoded body."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT):
        self.timeout = timeout

    @retry_on_failure(
        max_attempts=MAX_RETRIES,
        delay=RETRY_DELAY,
        exceptions=(aiohttp.ClientError, TimeoutError),
    )
    async def get(self, url: str, headers: dict[str, str]) -> TransportResponse:
        """Fetch a URL.

        Network errors are retried; HTTP error statuses are returned as-is.

        Args:
            url: URL to fetch.
            headers: Request headers (auth included).

        Returns:
            TransportResponse with JSON body when the text parses.
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, headers=headers) as response:
                text = await response.text(errors="replace")
                try:
                    body = json.loads(text) if text else None
                except ValueError:
                    body = None
                return TransportResponse(
                    status=response.status,
                    body=body,
                    text=text,
                    headers=dict(response.headers),
                )


class FetchOrchestrator:
    """Fetches every configured league for one query window."""

    def __init__(
        self,
        provider: Provider,
        transport,
        leagues: dict[str, str],
        timezone: str,
    ):
        self.provider = provider
        self.transport = transport
        self.leagues = dict(leagues)
        self.timezone = timezone
        # league id -> day it was benched for
        self._benched: dict[str, str] = {}

    def eligible_leagues(self, today: str) -> dict[str, str]:
        """Leagues that should be requested on the given day."""
        return {
            name: league_id
            for name, league_id in self.leagues.items()
            if self._benched.get(league_id) != today
        }

    def reset(self) -> None:
        """Make every league eligible again."""
        self._benched.clear()

    async def fetch_all(self, api_key: str, window: QueryWindow) -> FetchResult:
        """Fetch all eligible leagues concurrently.

        Args:
            api_key: Provider API key.
            window: Query window; results are filtered to ``window.today``.

        Returns:
            Aggregated raw matches and whether any league was rate limited.
        """
        leagues = self.eligible_leagues(window.today)
        if len(leagues) < len(self.leagues):
            logger.info(
                f"Skipping {len(self.leagues) - len(leagues)} benched "
                f"league(s) for {window.today}"
            )

        results = await asyncio.gather(
            *(
                self._fetch_league_safe(name, league_id, api_key, window)
                for name, league_id in leagues.items()
            )
        )

        result = FetchResult()
        seen: set[str] = set()
        for matches, rate_limited in results:
            result.rate_limited = result.rate_limited or rate_limited
            for raw in matches:
                match_id = self.provider.match_id(raw)
                if match_id in seen:
                    continue
                seen.add(match_id)
                result.matches.append(raw)

        logger.info(
            f"Fetched {len(result.matches)} match(es) from {len(leagues)} "
            f"league(s) (rate_limited={result.rate_limited})",
            extra={"provider": self.provider.name},
        )
        return result

    async def _fetch_league_safe(
        self, name: str, league_id: str, api_key: str, window: QueryWindow
    ) -> tuple[list[RawMatch], bool]:
        extra = {
            "league": league_id,
            "provider": self.provider.name,
        }
        try:
            matches = await self._fetch_league(league_id, api_key, window)
        except RateLimitedError as e:
            logger.warning(
                f"Rate limit reached for {name} ({league_id})",
                extra={**extra, "status_code": e.status_code},
            )
            return [], True
        except MalformedResponseError as e:
            logger.error(
                f"Malformed response for {name} ({league_id}): {e}",
                extra={**extra, "status_code": e.status_code},
            )
            return [], False
        except TransportError as e:
            if e.status_code in BENCH_STATUSES:
                self._benched[league_id] = window.today
                logger.warning(
                    f"{name} ({league_id}) unavailable "
                    f"(HTTP {e.status_code}), skipping until tomorrow",
                    extra={**extra, "status_code": e.status_code},
                )
            else:
                logger.error(
                    f"Failed to fetch {name} ({league_id}): {e}",
                    extra={**extra, "status_code": e.status_code},
                )
            return [], False
        except Exception as e:
            logger.error(
                f"Unexpected error fetching {name} ({league_id}): {e}",
                exc_info=True,
                extra=extra,
            )
            return [], False

        logger.debug(f"{name} ({league_id}): {len(matches)} match(es) today")
        return matches, False

    async def _fetch_league(
        self, league_id: str, api_key: str, window: QueryWindow
    ) -> list[RawMatch]:
        """Fetch one league and keep only matches on the target day.

        Raises:
            RateLimitedError: On HTTP 429 or a rate-limit error body.
            TransportError: On network failure or non-success status.
            MalformedResponseError: If the body cannot be read.
        """
        url = self.provider.build_url(league_id, window)
        try:
            response = await self.transport.get(
                url, self.provider.headers(api_key)
            )
        except (aiohttp.ClientError, TimeoutError, OSError) as e:
            raise TransportError(league_id, f"Request failed: {e}") from e

        if response.status == 429:
            raise RateLimitedError(league_id, "Rate limited", response.status)
        if not response.ok:
            raise TransportError(
                league_id,
                f"HTTP {response.status}: {response.text[:200]}",
                response.status,
            )
        if self.provider.is_rate_limited(response.body):
            raise RateLimitedError(
                league_id, "Rate limit reported in body", response.status
            )
        if response.body is None:
            raise MalformedResponseError(
                league_id, "Response is not JSON", response.status
            )

        try:
            matches = self.provider.extract_matches(response.body)
        except ValueError as e:
            raise MalformedResponseError(
                league_id, str(e), response.status
            ) from e

        return [raw for raw in matches if self._is_on_day(raw, window.today)]

    def _is_on_day(self, raw: RawMatch, today: str) -> bool:
        try:
            kickoff = self.provider.kickoff(raw)
        except ValueError:
            logger.debug(f"Dropping match without usable kickoff: {raw}")
            return False
        return match_day(kickoff, self.timezone) == today


async def _dry_run(provider_name: str, league_id: str) -> None:
    from config import settings
    from core.scoreboard.providers import get_provider
    from core.scoreboard.window import query_window

    settings.load()
    timezone = settings.get_reference_timezone()
    window = query_window(pendulum.now("UTC"), timezone)
    orchestrator = FetchOrchestrator(
        get_provider(provider_name),
        AiohttpTransport(),
        {league_id: league_id},
        timezone,
    )
    result = await orchestrator.fetch_all(settings.get_api_key(), window)
    print(f"Window: {window.start_date} -> {window.end_date} (today {window.today})")
    print(f"Rate limited: {result.rate_limited}")
    print(json.dumps(result.matches, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Fetch today's matches for one league and print them"
    )
    parser.add_argument("league", help="Provider league id (e.g. PL)")
    parser.add_argument("--provider", default="football-data")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(_dry_run(args.provider, args.league))
