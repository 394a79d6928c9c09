"""Calendar document (.ics) generation using iCalendar format."""

import base64
import random
import re
import string
import time
from datetime import datetime, timedelta, timezone

from icalendar import Alarm, Calendar, Event, vCalAddress, vText
from icalendar.parser import Parameters

from livestatz.config import get_calendar_domain

from .types import CalendarEvent, to_utc

PRODUCT_ID = "-//LiveStatz//Event Calendar//EN"
REMINDER_OFFSET = timedelta(hours=-1)
REMINDER_TEXT = "Reminder: Event starts in 1 hour"

_UID_ALPHABET = string.digits + string.ascii_lowercase
_UNESCAPE_PATTERN = re.compile(r"\\([\\;,nN])")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def escape_ical_text(text: str) -> str:
    """
    Escape a TEXT value: backslash, semicolon, comma and newline.

    Backslashes are replaced first so the escapes added afterwards are not
    escaped again.
    """
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def unescape_ical_text(text: str) -> str:
    """Inverse of escape_ical_text."""

    def _replace(match: re.Match) -> str:
        char = match.group(1)
        return "\n" if char in "nN" else char

    return _UNESCAPE_PATTERN.sub(_replace, text)


class _EscapedText(vText):
    """vText serialized with escape_ical_text rather than icalendar's own escaping."""

    def to_ical(self) -> bytes:
        return escape_ical_text(str(self)).encode("utf-8")


class _EscapedParameters(Parameters):
    """Property parameters written escaped and unquoted, e.g. CN=Doe\\, Jane."""

    def to_ical(self, sorted: bool = True) -> bytes:
        items = list(self.items())
        if sorted:
            items.sort()
        return b";".join(
            f"{key.upper()}={escape_ical_text(str(value))}".encode("utf-8")
            for key, value in items
        )


def format_ical_date(dt: datetime) -> str:
    """Format an instant as YYYYMMDDTHHMMSSZ (UTC)."""
    return to_utc(dt).strftime("%Y%m%dT%H%M%SZ")


def generate_uid() -> str:
    """Unique event identifier: <epoch millis>-<7 random chars>@<domain>."""
    suffix = "".join(random.choices(_UID_ALPHABET, k=7))
    return f"{int(time.time() * 1000)}-{suffix}@{get_calendar_domain()}"


def generate_ics(event: CalendarEvent) -> str:
    """
    Build an iCalendar document (METHOD:REQUEST) for a single event.

    Every call produces a new UID and DTSTAMP; everything else is a pure
    function of the event. Optional fields that are empty are left out
    entirely. A one-hour-before-start display alarm is always included.

    Returns:
        CRLF-joined document text, starting with BEGIN:VCALENDAR and
        ending with END:VCALENDAR
    """
    cal = Calendar()
    cal.add("version", "2.0")
    cal.add("prodid", PRODUCT_ID)
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "REQUEST")  # This makes it an invite, not just an event

    vevent = Event()
    vevent.add("uid", generate_uid())
    vevent.add("dtstamp", datetime.now(timezone.utc).replace(microsecond=0))
    vevent.add("dtstart", to_utc(event.start_time))
    vevent.add("dtend", to_utc(event.effective_end_time))
    vevent.add("summary", _EscapedText(event.title or ""))

    if event.description:
        vevent.add("description", _EscapedText(event.description))

    if event.location:
        vevent.add("location", _EscapedText(event.location))

    if event.url:
        vevent.add("url", event.url)

    if event.organizer:
        organizer = vCalAddress(f"mailto:{event.organizer.email}")
        organizer.params = _EscapedParameters(cn=event.organizer.name)
        vevent.add("organizer", organizer)

    vevent.add("status", "CONFIRMED")
    vevent.add("sequence", 0)

    alarm = Alarm()
    alarm.add("trigger", REMINDER_OFFSET)
    alarm.add("action", "DISPLAY")
    alarm.add("description", REMINDER_TEXT)
    vevent.add_component(alarm)

    cal.add_component(vevent)
    # Keep insertion order; icalendar sorts properties by default
    return cal.to_ical(sorted=False).decode("utf-8").removesuffix("\r\n")


def ics_filename(title: str) -> str:
    """Download filename for an event, e.g. "Live Q&A" -> "live-q&a.ics"."""
    return f"{_WHITESPACE_PATTERN.sub('-', title).lower()}.ics"


def ics_data_url(ics_content: str) -> str:
    """data: URL for a calendar document (used for email attachments)."""
    encoded = base64.b64encode(ics_content.encode("utf-8")).decode("ascii")
    return f"data:text/calendar;base64,{encoded}"
