"""Scoreboard tracker - owns all refresh state for one session.

One tracker holds the cache, the last known facts, the league bench and
the timers. Everything is mutated from the refresh cycle only, and only
one cycle runs at a time.
"""

import logging
from collections.abc import Awaitable, Callable

import pendulum

from config.constants import (
    BASE_INTERVAL,
    CACHE_DURATION,
    FAST_INTERVAL,
    IMMINENT_WINDOW,
    KICKOFF_DEBOUNCE,
    ROLLOVER_RETRY_DELAY,
)
from core.scoreboard.cache import MatchCache
from core.scoreboard.models import (
    MissingCredentialError,
    Outcome,
    ScoreboardSnapshot,
)
from core.scoreboard.providers import Provider, get_provider
from core.scoreboard.reconciler import StateReconciler
from core.scoreboard.scheduler import AdaptiveScheduler, compute_schedule
from core.scoreboard.sources import AiohttpTransport, FetchOrchestrator
from core.scoreboard.status import StatusNormalizer
from core.scoreboard.window import query_window

logger = logging.getLogger(__name__)

Renderer = Callable[[ScoreboardSnapshot], Awaitable[None]]


def utc_now() -> pendulum.DateTime:
    return pendulum.now("UTC")


class ScoreboardTracker:
    """Fetch, reconcile, cache and schedule today's matches."""

    def __init__(
        self,
        *,
        provider: Provider,
        normalizer: StatusNormalizer,
        transport,
        leagues: dict[str, str],
        credentials: Callable[[], str],
        renderer: Renderer,
        job_scheduler,
        timezone: str,
        clock: Callable[[], pendulum.DateTime] = utc_now,
        cache_duration: int = CACHE_DURATION,
        base_interval: int = BASE_INTERVAL,
        fast_interval: int = FAST_INTERVAL,
        imminent_window: int = IMMINENT_WINDOW,
        kickoff_debounce: int = KICKOFF_DEBOUNCE,
    ):
        self.provider = provider
        self.credentials = credentials
        self.renderer = renderer
        self.timezone = timezone
        self.clock = clock
        self.base_interval = base_interval
        self.fast_interval = fast_interval
        self.imminent_window = imminent_window
        self.kickoff_debounce = kickoff_debounce

        self.orchestrator = FetchOrchestrator(
            provider, transport, leagues, timezone
        )
        self.reconciler = StateReconciler(provider, normalizer)
        self.cache = MatchCache(cache_duration)
        self.scheduler = AdaptiveScheduler(
            job_scheduler, self.tick, self.on_kickoff, timezone
        )

        self.day: str | None = None
        self.last_fetch_at: pendulum.DateTime | None = None
        self._in_flight = False
        self._snapshot: ScoreboardSnapshot | None = None

    @classmethod
    def create(
        cls,
        *,
        provider_name: str,
        leagues: dict[str, str],
        credentials: Callable[[], str],
        renderer: Renderer,
        job_scheduler,
        timezone: str,
        transport=None,
        normalizer: StatusNormalizer | None = None,
        **kwargs,
    ) -> "ScoreboardTracker":
        """Build a tracker with the default transport and status tables."""
        return cls(
            provider=get_provider(provider_name),
            normalizer=normalizer or StatusNormalizer.from_file(),
            transport=transport or AiohttpTransport(),
            leagues=leagues,
            credentials=credentials,
            renderer=renderer,
            job_scheduler=job_scheduler,
            timezone=timezone,
            **kwargs,
        )

    @property
    def snapshot(self) -> ScoreboardSnapshot | None:
        """Latest rendered state, or None before the first cycle."""
        return self._snapshot

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def start(self) -> Outcome | None:
        """Run the first cycle and arm the daily rollover trigger.

        A missing API key is shown on the scoreboard and nothing is
        scheduled for the rest of the session.
        """
        try:
            self._api_key()
        except MissingCredentialError as e:
            logger.error(f"Scoreboard disabled: {e}")
            await self._publish(
                self._empty_snapshot(Outcome.MISSING_CREDENTIAL, self._today())
            )
            return Outcome.MISSING_CREDENTIAL

        self.scheduler.schedule_rollover(self.rollover)
        return await self.tick()

    async def refresh_now(self) -> Outcome | None:
        """Refresh immediately unless a refresh is already running."""
        return await self.tick()

    async def rollover(self) -> Outcome | None:
        """Daily restart of the loop, retried if a cycle is in flight."""
        outcome = await self.tick()
        if outcome is None:
            logger.info(
                f"Rollover found a refresh in flight, retrying in "
                f"{ROLLOVER_RETRY_DELAY}s"
            )
            self.scheduler.retry_rollover(
                self.rollover, self.clock().add(seconds=ROLLOVER_RETRY_DELAY)
            )
        return outcome

    async def tick(self) -> Outcome | None:
        """Run one refresh cycle.

        Returns:
            The cycle outcome, or None if another cycle was in flight.
        """
        if self._in_flight:
            logger.info("Refresh already in progress, skipping")
            return None

        self._in_flight = True
        try:
            return await self._run_cycle()
        finally:
            self._in_flight = False

    async def on_kickoff(self) -> Outcome | None:
        """One-shot refresh at kickoff, skipped right after a fetch."""
        self.scheduler.kickoff_fired()
        now = self.clock()
        if self.last_fetch_at is not None:
            elapsed = (now - self.last_fetch_at).total_seconds()
            if elapsed < self.kickoff_debounce:
                logger.info(
                    f"Kickoff refresh skipped, fetched {elapsed:.0f}s ago"
                )
                return None
        return await self.tick()

    def reset(self) -> None:
        """Forget everything learned about the current day."""
        self.cache.clear()
        self.reconciler.reset()
        self.orchestrator.reset()
        self.scheduler.stop()
        self.last_fetch_at = None
        self.day = None

    def dispose(self) -> None:
        """Reset and remove every timer, including the daily rollover."""
        self.reset()
        self.scheduler.shutdown()
        logger.info("Scoreboard tracker disposed")

    async def _run_cycle(self) -> Outcome:
        now = self.clock()
        window = query_window(now, self.timezone)

        if self.day is not None and window.today != self.day:
            logger.info(f"Day rolled over {self.day} -> {window.today}")
            self.reset()
        self.day = window.today

        try:
            api_key = self._api_key()
        except MissingCredentialError as e:
            logger.error(f"Cannot refresh: {e}")
            self.scheduler.stop()
            snapshot = self._empty_snapshot(
                Outcome.MISSING_CREDENTIAL, window.today
            )
            await self._publish(snapshot)
            return snapshot.outcome

        if self.cache.can_reuse(window.today, now):
            logger.info("Using cached matches")
            snapshot = self._cache_snapshot(Outcome.REUSED, window.today)
        else:
            snapshot = await self._fetch(api_key, window)

        await self._publish(snapshot)
        self._reschedule()
        logger.info(
            f"Refresh cycle finished: {snapshot.outcome.value} "
            f"({len(snapshot.matches)} match(es))",
            extra={"outcome": snapshot.outcome.value},
        )
        return snapshot.outcome

    async def _fetch(self, api_key: str, window) -> ScoreboardSnapshot:
        result = await self.orchestrator.fetch_all(api_key, window)
        fetched_at = self.clock()
        self.last_fetch_at = fetched_at
        matches = self.reconciler.reconcile_all(result.matches)

        if matches:
            self.cache.store(matches, fetched_at, window.today)
            return self._cache_snapshot(
                Outcome.FRESH, window.today, result.rate_limited
            )

        if self.cache.for_day(window.today) is not None:
            if result.rate_limited:
                logger.warning("Rate limited, serving cached matches")
            else:
                logger.warning("Fetch returned no matches, serving cache")
            return self._cache_snapshot(
                Outcome.STALE, window.today, result.rate_limited
            )

        logger.info(f"No matches available for {window.today}")
        return self._empty_snapshot(
            Outcome.EMPTY, window.today, result.rate_limited
        )

    def _reschedule(self) -> None:
        entry = self.cache.for_day(self.day)
        if entry is None:
            self.scheduler.stop()
            return
        self.scheduler.apply(
            compute_schedule(
                entry.matches,
                self.clock(),
                base_interval=self.base_interval,
                fast_interval=self.fast_interval,
                imminent_window=self.imminent_window,
            )
        )

    def _api_key(self) -> str:
        key = (self.credentials() or "").strip()
        if not key:
            raise MissingCredentialError("No API key configured")
        return key

    def _today(self) -> str:
        return query_window(self.clock(), self.timezone).today

    def _cache_snapshot(
        self, outcome: Outcome, today: str, rate_limited: bool = False
    ) -> ScoreboardSnapshot:
        entry = self.cache.for_day(today)
        return ScoreboardSnapshot(
            matches=entry.matches,
            fetched_at=entry.fetched_at,
            empty=False,
            outcome=outcome,
            day=today,
            rate_limited=rate_limited,
        )

    def _empty_snapshot(
        self, outcome: Outcome, today: str, rate_limited: bool = False
    ) -> ScoreboardSnapshot:
        return ScoreboardSnapshot(
            matches=(),
            fetched_at=self.last_fetch_at,
            empty=True,
            outcome=outcome,
            day=today,
            rate_limited=rate_limited,
        )

    async def _publish(self, snapshot: ScoreboardSnapshot) -> None:
        self._snapshot = snapshot
        try:
            await self.renderer(snapshot)
        except Exception as e:
            logger.error(f"Failed to render scoreboard: {e}", exc_info=True)
