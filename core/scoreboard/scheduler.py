"""Adaptive refresh scheduling.

The whole timer state is one ``Schedule`` value, recomputed from the
cached matches after every cycle and applied to an APScheduler instance.
Applying the same value twice changes nothing.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

import pendulum
from apscheduler.jobstores.base import JobLookupError
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from config.constants import (
    BASE_INTERVAL,
    FAST_INTERVAL,
    IMMINENT_WINDOW,
    ROLLOVER_HOUR,
    ROLLOVER_MINUTE,
    ROLLOVER_MISFIRE_GRACE,
)
from core.scoreboard.models import CanonicalMatch, MatchStatus

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "scoreboard-refresh"
KICKOFF_JOB_ID = "scoreboard-kickoff"
ROLLOVER_JOB_ID = "scoreboard-rollover"
ROLLOVER_RETRY_JOB_ID = "scoreboard-rollover-retry"


@dataclass(frozen=True)
class Schedule:
    """Recurring interval (None when stopped) plus optional kickoff shot."""

    interval: int | None = None
    kickoff_at: pendulum.DateTime | None = None

    @property
    def stopped(self) -> bool:
        return self.interval is None


STOPPED = Schedule()


def compute_schedule(
    matches: Iterable[CanonicalMatch],
    now: pendulum.DateTime,
    base_interval: int = BASE_INTERVAL,
    fast_interval: int = FAST_INTERVAL,
    imminent_window: int = IMMINENT_WINDOW,
) -> Schedule:
    """Derive the schedule for the current match list.

    Args:
        matches: Cached canonical matches for today.
        now: Current instant.
        base_interval: Seconds between polls when nothing is happening.
        fast_interval: Seconds between polls with live or imminent games.
        imminent_window: Seconds ahead that count as imminent kickoff.

    Returns:
        STOPPED when there are no matches, otherwise the interval and
        the earliest imminent kickoff (if any).
    """
    matches = list(matches)
    if not matches:
        return STOPPED

    live = False
    imminent = []
    upcoming = []
    for match in matches:
        if match.status.in_play:
            live = True
        elif match.status is MatchStatus.SCHEDULED:
            seconds = (match.kickoff_time - now).total_seconds()
            if 0 <= seconds <= imminent_window:
                imminent.append(match.kickoff_time)
                if seconds > 0:
                    upcoming.append(match.kickoff_time)

    interval = fast_interval if live or imminent else base_interval
    return Schedule(
        interval=interval,
        kickoff_at=min(upcoming) if upcoming else None,
    )


class AdaptiveScheduler:
    """Applies Schedule values to an APScheduler scheduler."""

    def __init__(
        self,
        scheduler,
        on_tick: Callable[[], Awaitable],
        on_kickoff: Callable[[], Awaitable],
        timezone: str,
    ):
        self.scheduler = scheduler
        self.on_tick = on_tick
        self.on_kickoff = on_kickoff
        self.timezone = timezone
        self.current = STOPPED

    def apply(self, schedule: Schedule) -> None:
        """Move the timers to a new schedule, touching only what changed."""
        if schedule == self.current:
            return

        if schedule.interval != self.current.interval:
            self._remove(REFRESH_JOB_ID)
            if schedule.interval is not None:
                self.scheduler.add_job(
                    self.on_tick,
                    IntervalTrigger(
                        seconds=schedule.interval, timezone=self.timezone
                    ),
                    id=REFRESH_JOB_ID,
                    replace_existing=True,
                    max_instances=1,
                    coalesce=True,
                )
                logger.info(f"Refresh interval set to {schedule.interval}s")
            else:
                logger.info("Refresh loop stopped")

        if schedule.kickoff_at != self.current.kickoff_at:
            self._remove(KICKOFF_JOB_ID)
            if schedule.kickoff_at is not None:
                self.scheduler.add_job(
                    self.on_kickoff,
                    DateTrigger(
                        run_date=schedule.kickoff_at.in_timezone("UTC")
                    ),
                    id=KICKOFF_JOB_ID,
                    replace_existing=True,
                )
                logger.info(
                    f"Kickoff refresh at {schedule.kickoff_at.to_iso8601_string()}"
                )

        self.current = schedule

    def kickoff_fired(self) -> None:
        """Forget the one-shot after APScheduler has consumed it."""
        self.current = Schedule(self.current.interval, None)

    def stop(self) -> None:
        """Cancel the recurring and kickoff timers together."""
        self._remove(REFRESH_JOB_ID)
        self._remove(KICKOFF_JOB_ID)
        if not self.current.stopped:
            logger.info("Refresh loop stopped")
        self.current = STOPPED

    def schedule_rollover(self, callback: Callable[[], Awaitable]) -> None:
        """Trigger a refresh shortly after midnight every reference day."""
        self.scheduler.add_job(
            callback,
            CronTrigger(
                hour=ROLLOVER_HOUR,
                minute=ROLLOVER_MINUTE,
                timezone=self.timezone,
            ),
            id=ROLLOVER_JOB_ID,
            replace_existing=True,
            misfire_grace_time=ROLLOVER_MISFIRE_GRACE,
            coalesce=True,
        )

    def retry_rollover(
        self, callback: Callable[[], Awaitable], run_at: pendulum.DateTime
    ) -> None:
        """Run a rollover that found a cycle in flight once more later."""
        self.scheduler.add_job(
            callback,
            DateTrigger(run_date=run_at.in_timezone("UTC")),
            id=ROLLOVER_RETRY_JOB_ID,
            replace_existing=True,
            misfire_grace_time=ROLLOVER_MISFIRE_GRACE,
        )
        logger.info(f"Rollover retry at {run_at.to_iso8601_string()}")

    def shutdown(self) -> None:
        self.stop()
        self._remove(ROLLOVER_JOB_ID)
        self._remove(ROLLOVER_RETRY_JOB_ID)

    def _remove(self, job_id: str) -> None:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            pass
