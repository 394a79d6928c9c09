"""
RSVP store with an explicit in-memory mirror.

The database is the source of truth. RsvpCache mirrors the unfiltered RSVP
list for one client session: writes are applied to it optimistically and
invalidate it, so the next list call refetches. A mirror nobody has written
to is trusted for `max_age`; within that window it may miss changes made by
other sessions.

Uniqueness of (event, fan) is enforced by the rsvps_event_fan_unique
constraint. Callers can still look up an existing RSVP first to show a
friendlier message, but a concurrent duplicate create now fails instead of
inserting a second row.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import sentry_sdk
from sqlalchemy.exc import IntegrityError

from livestatz.config import get_rsvp_cache_max_age
from livestatz.database import get_connection, get_transaction
from livestatz.enums import RSVPStatus
from livestatz.queries import rsvps as rsvp_queries
from livestatz.results import Result, error_message
from livestatz.users import CurrentUser

logger = logging.getLogger(__name__)

REMINDER_COLUMNS = {30: "reminder_sent_30", 10: "reminder_sent_10"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg: "duplicate key value violates unique constraint", sqlite: "UNIQUE constraint failed"
    return "unique" in str(exc.orig).lower()


class RsvpCache:
    """Session-local mirror of the RSVP list."""

    def __init__(
        self,
        max_age: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.max_age = max_age if max_age is not None else get_rsvp_cache_max_age()
        self._clock = clock
        self.rows: list[dict] = []
        self._fetched_at: datetime | None = None

    def is_fresh(self) -> bool:
        if self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at <= self.max_age

    def invalidate(self) -> None:
        self._fetched_at = None

    def replace_all(self, rows: list[dict]) -> None:
        self.rows = list(rows)
        self._fetched_at = self._clock()

    def prepend(self, row: dict) -> None:
        self.rows = [row, *self.rows]
        self.invalidate()

    def replace(self, row: dict) -> None:
        self.rows = [row if r["id"] == row["id"] else r for r in self.rows]
        self.invalidate()

    def remove(self, rsvp_id: UUID) -> None:
        self.rows = [r for r in self.rows if r["id"] != rsvp_id]
        self.invalidate()

    def clear(self) -> None:
        self.rows = []
        self.invalidate()


class RsvpStore:
    """
    RSVP operations for the signed-in creator.

    No method raises on a database failure: the error is logged, stored in
    `self.error` and returned as `Result(error=...)`.
    """

    def __init__(
        self,
        user: CurrentUser | None,
        cache: RsvpCache | None = None,
    ):
        self.user = user
        self.cache = cache if cache is not None else RsvpCache()
        self.error: str | None = None

    def _fail(self, exc: Exception, operation: str, fallback: str) -> Result:
        message = error_message(exc, fallback)
        logger.error(f"Error {operation}: {exc}")
        sentry_sdk.capture_exception(exc)
        self.error = message
        return Result(error=message)

    def _succeed(self, data) -> Result:
        self.error = None
        return Result(data=data)

    @property
    def rsvps(self) -> list[dict]:
        """Current mirror contents (possibly stale)."""
        return self.cache.rows

    async def list_rsvps(
        self,
        event_id: UUID | None = None,
        refresh: bool = False,
    ) -> Result[list[dict]]:
        """
        List RSVPs, newest first.

        The unfiltered list is served from the mirror while it is fresh.
        Per-event lists always hit the database and don't touch the mirror.
        """
        if self.user is None:
            self.cache.clear()
            return Result(data=[])

        if event_id is None and not refresh and self.cache.is_fresh():
            return Result(data=list(self.cache.rows))

        try:
            async with get_connection() as conn:
                rows = await rsvp_queries.list_rsvps(conn, event_id=event_id)
        except Exception as e:
            return self._fail(e, "fetching RSVPs", "Failed to fetch RSVPs")

        if event_id is None:
            self.cache.replace_all(rows)
        return self._succeed(rows)

    async def get_rsvp_by_event_and_fan(
        self,
        event_id: UUID,
        fan_id: UUID,
    ) -> Result[dict]:
        """Look up the RSVP for a pair. No row is Result(data=None), not an error."""
        try:
            async with get_connection() as conn:
                row = await rsvp_queries.get_rsvp_by_event_and_fan(
                    conn, event_id=event_id, fan_id=fan_id
                )
        except Exception as e:
            return self._fail(e, "fetching RSVP", "Failed to fetch RSVP")
        return self._succeed(row)

    async def create_rsvp(
        self,
        event_id: UUID,
        fan_id: UUID,
        status: str = RSVPStatus.confirmed.value,
        added_to_calendar: bool = False,
    ) -> Result[dict]:
        if self.user is None:
            self.error = "User not authenticated"
            return Result(error=self.error)

        try:
            async with get_transaction() as conn:
                row = await rsvp_queries.create_rsvp(
                    conn,
                    event_id=event_id,
                    fan_id=fan_id,
                    status=status,
                    added_to_calendar=added_to_calendar,
                )
        except IntegrityError as e:
            if not _is_unique_violation(e):
                return self._fail(e, "creating RSVP", "Failed to create RSVP")
            logger.info(f"Duplicate RSVP for event {event_id}, fan {fan_id}")
            self.error = "RSVP already exists for this event and fan"
            return Result(error=self.error)
        except Exception as e:
            return self._fail(e, "creating RSVP", "Failed to create RSVP")

        self.cache.prepend(row)
        return self._succeed(row)

    async def update_rsvp(self, rsvp_id: UUID, **updates) -> Result[dict]:
        try:
            async with get_transaction() as conn:
                row = await rsvp_queries.update_rsvp(conn, rsvp_id, **updates)
        except Exception as e:
            return self._fail(e, "updating RSVP", "Failed to update RSVP")

        if row is None:
            self.error = "RSVP not found"
            return Result(error=self.error)

        self.cache.replace(row)
        return self._succeed(row)

    async def delete_rsvp(self, rsvp_id: UUID) -> Result[bool]:
        try:
            async with get_transaction() as conn:
                await rsvp_queries.delete_rsvp(conn, rsvp_id)
        except Exception as e:
            return self._fail(e, "deleting RSVP", "Failed to delete RSVP")

        self.cache.remove(rsvp_id)
        return self._succeed(True)

    async def count_rsvps_for_my_events(self) -> Result[int]:
        """RSVPs across every event the current user owns."""
        if self.user is None or not self.user.email:
            return Result(data=0)

        try:
            async with get_connection() as conn:
                count = await rsvp_queries.count_rsvps_for_owner(conn, self.user.email)
        except Exception as e:
            return self._fail(e, "counting RSVPs", "Failed to count RSVPs")
        return self._succeed(count)

    async def mark_added_to_calendar(self, rsvp_id: UUID) -> Result[dict]:
        return await self.update_rsvp(rsvp_id, added_to_calendar=True)

    async def mark_reminder_sent(self, rsvp_id: UUID, minutes: int) -> Result[dict]:
        """Record that the N-minute reminder went out (N is 30 or 10)."""
        column = REMINDER_COLUMNS.get(minutes)
        if column is None:
            self.error = f"No reminder milestone for {minutes} minutes"
            return Result(error=self.error)
        return await self.update_rsvp(rsvp_id, **{column: True})
