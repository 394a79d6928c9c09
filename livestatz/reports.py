"""
Weekly fan report for the signed-in creator.

Three counters over the current calendar week, each an independent query:
new fans, distinct fans who attended, and new RSVPs on the creator's events.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Awaitable, Callable

import sentry_sdk

from livestatz.config import get_week_start_day
from livestatz.database import get_connection
from livestatz.queries import reports as report_queries
from livestatz.results import Result, error_message
from livestatz.users import CurrentUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeeklyFanReport:
    new_fans_this_week: int
    fans_attended_this_week: int
    rsvps_growth_this_week: int


def week_window(now: datetime, week_start: int = 0) -> tuple[datetime, datetime]:
    """
    Calendar week containing `now`, as inclusive UTC bounds.

    The week starts at 00:00:00 on `week_start` (Monday=0) in now's own
    timezone (naive is UTC) and ends on the last microsecond of its
    seventh day, i.e. 23:59:59.999999.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    days_since_start = (now.weekday() - week_start) % 7
    first_day = now.date() - timedelta(days=days_since_start)
    start = datetime.combine(first_day, time.min, tzinfo=now.tzinfo)
    end = datetime.combine(
        first_day + timedelta(days=6), time.max, tzinfo=now.tzinfo
    )
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeeklyFanReporter:
    """
    Computes WeeklyFanReport for one user.

    An unresolved user (or, for RSVP growth, a user without an email)
    counts as zero without querying the database.
    """

    def __init__(
        self,
        user: CurrentUser | None,
        clock: Callable[[], datetime] = _utcnow,
        week_start: int | None = None,
    ):
        self.user = user
        self._clock = clock
        self.week_start = week_start if week_start is not None else get_week_start_day()
        self.error: str | None = None

    def current_window(self) -> tuple[datetime, datetime]:
        return week_window(self._clock(), self.week_start)

    async def _count_new_fans(self, start: datetime, end: datetime) -> int:
        if self.user is None:
            return 0
        async with get_connection() as conn:
            return await report_queries.count_new_fans(conn, self.user.id, start, end)

    async def _count_fans_attended(self, start: datetime, end: datetime) -> int:
        if self.user is None:
            return 0
        async with get_connection() as conn:
            return await report_queries.count_fans_attended(
                conn, self.user.id, start, end
            )

    async def _count_rsvps_growth(self, start: datetime, end: datetime) -> int:
        if self.user is None or not self.user.email:
            return 0
        async with get_connection() as conn:
            return await report_queries.count_rsvps_created(
                conn, self.user.email, start, end
            )

    async def _run_counter(
        self,
        counter: Callable[[datetime, datetime], Awaitable[int]],
        fallback: str,
    ) -> Result[int]:
        start, end = self.current_window()
        try:
            count = await counter(start, end)
        except Exception as e:
            message = error_message(e, fallback)
            logger.error(f"{fallback}: {e}")
            sentry_sdk.capture_exception(e)
            self.error = message
            return Result(error=message)
        self.error = None
        return Result(data=count)

    async def get_new_fans_this_week(self) -> Result[int]:
        return await self._run_counter(self._count_new_fans, "Failed to fetch new fans")

    async def get_fans_attended_this_week(self) -> Result[int]:
        return await self._run_counter(
            self._count_fans_attended, "Failed to fetch fans attended"
        )

    async def get_rsvps_growth_this_week(self) -> Result[int]:
        return await self._run_counter(
            self._count_rsvps_growth, "Failed to fetch RSVPs growth"
        )

    async def get_weekly_report(self) -> Result[WeeklyFanReport]:
        """
        Run all three counters concurrently and combine them.

        If any counter fails the whole report fails; partial counts are
        discarded.
        """
        start, end = self.current_window()
        # All three counters finish before the report returns
        results = await asyncio.gather(
            self._count_new_fans(start, end),
            self._count_fans_attended(start, end),
            self._count_rsvps_growth(start, end),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            for failure in failures:
                logger.error(f"Error fetching weekly report: {failure}")
                sentry_sdk.capture_exception(failure)
            message = error_message(failures[0], "Failed to fetch weekly report")
            self.error = message
            return Result(error=message)

        new_fans, fans_attended, rsvps_growth = results
        self.error = None
        return Result(
            data=WeeklyFanReport(
                new_fans_this_week=new_fans,
                fans_attended_this_week=fans_attended,
                rsvps_growth_this_week=rsvps_growth,
            )
        )
