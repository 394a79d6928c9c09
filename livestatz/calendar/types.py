"""Value types for calendar documents and links."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

DEFAULT_DURATION = timedelta(hours=1)


@dataclass(frozen=True)
class Organizer:
    name: str
    email: str


@dataclass(frozen=True)
class CalendarEvent:
    """
    An event as seen by calendar readers.

    Instants should be timezone-aware; naive datetimes are treated as UTC.
    `end_time` is not checked against `start_time`.
    """

    title: str
    start_time: datetime
    description: str | None = None
    location: str | None = None
    end_time: datetime | None = None
    url: str | None = None
    organizer: Organizer | None = None

    @property
    def effective_end_time(self) -> datetime:
        """End time, defaulting to one hour after the start."""
        if self.end_time is not None:
            return self.end_time
        return self.start_time + DEFAULT_DURATION


def to_utc(dt: datetime) -> datetime:
    """Convert to an aware UTC datetime; naive input is taken as UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso_string(dt: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-03-04T18:00:00.000Z."""
    utc = to_utc(dt)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
