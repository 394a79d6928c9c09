"""Calendar documents (.ics) and provider deep links for events."""

from .ics import (
    escape_ical_text,
    format_ical_date,
    generate_ics,
    generate_uid,
    ics_data_url,
    ics_filename,
    unescape_ical_text,
)
from .links import ProviderLinkSet, generate_calendar_links
from .types import CalendarEvent, Organizer, to_iso_string, to_utc

__all__ = [
    "CalendarEvent",
    "Organizer",
    "ProviderLinkSet",
    "escape_ical_text",
    "unescape_ical_text",
    "format_ical_date",
    "generate_uid",
    "generate_ics",
    "ics_filename",
    "ics_data_url",
    "generate_calendar_links",
    "to_iso_string",
    "to_utc",
]
