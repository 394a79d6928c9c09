"""'Add to calendar' deep links for the major calendar providers."""

from dataclasses import asdict, dataclass
from urllib.parse import quote, urlencode

from livestatz.config import get_calendar_domain

from .ics import format_ical_date
from .types import CalendarEvent, to_iso_string

GOOGLE_BASE_URL = "https://calendar.google.com/calendar/render"
OUTLOOK_BASE_URL = "https://outlook.live.com/calendar/0/deeplink/compose"
OFFICE365_BASE_URL = "https://outlook.office.com/calendar/0/deeplink/compose"
YAHOO_BASE_URL = "https://calendar.yahoo.com/"

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class ProviderLinkSet:
    google: str
    outlook: str
    office365: str
    yahoo: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


def _encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def generate_calendar_links(event: CalendarEvent) -> ProviderLinkSet:
    """
    Build one pre-filled "add event" URL per provider.

    Google and Yahoo take iCalendar-style UTC timestamps, Outlook and
    Office 365 take ISO-8601. Missing description/location become empty
    strings. No length limits are checked.
    """
    start = format_ical_date(event.start_time)
    end = format_ical_date(event.effective_end_time)
    description = event.description or ""
    location = event.location or ""

    google_params = urlencode(
        {
            "action": "TEMPLATE",
            "text": event.title,
            "dates": f"{start}/{end}",
            "details": description,
            "location": location,
            "sprop": f"website:{get_calendar_domain()}",
        }
    )

    outlook_params = urlencode(
        {
            "path": "/calendar/action/compose",
            "rru": "addevent",
            "subject": event.title,
            "startdt": to_iso_string(event.start_time),
            "enddt": to_iso_string(event.effective_end_time),
            "body": description,
            "location": location,
        }
    )

    yahoo_url = (
        f"{YAHOO_BASE_URL}?v=60&view=d&type=20"
        f"&title={_encode_component(event.title)}"
        f"&st={start}&et={end}"
        f"&desc={_encode_component(description)}"
        f"&in_loc={_encode_component(location)}"
    )

    return ProviderLinkSet(
        google=f"{GOOGLE_BASE_URL}?{google_params}",
        outlook=f"{OUTLOOK_BASE_URL}?{outlook_params}",
        office365=f"{OFFICE365_BASE_URL}?{outlook_params}",
        yahoo=yahoo_url,
    )
