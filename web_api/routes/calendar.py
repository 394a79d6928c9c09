"""
Calendar API routes.

Endpoints:
- POST /api/calendar/ics - Download an event's .ics file
- POST /api/calendar/links - Get "add to calendar" links for each provider
"""

from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel

from livestatz.calendar import (
    CalendarEvent,
    Organizer,
    generate_calendar_links,
    generate_ics,
    ics_filename,
)

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


# --- Pydantic models ---


class OrganizerRequest(BaseModel):
    name: str
    email: str


class CalendarEventRequest(BaseModel):
    """Event fields as sent by the frontend."""

    title: str
    startTime: datetime
    endTime: datetime | None = None
    description: str | None = None
    location: str | None = None
    url: str | None = None
    organizer: OrganizerRequest | None = None

    def to_event(self) -> CalendarEvent:
        return CalendarEvent(
            title=self.title,
            start_time=self.startTime,
            end_time=self.endTime,
            description=self.description,
            location=self.location,
            url=self.url,
            organizer=(
                Organizer(name=self.organizer.name, email=self.organizer.email)
                if self.organizer
                else None
            ),
        )


class CalendarLinksResponse(BaseModel):
    google: str
    outlook: str
    office365: str
    yahoo: str


# --- Helpers ---


def _header_safe(filename: str) -> str:
    """Content-Disposition headers are latin-1; keep the ASCII part of the name."""
    safe = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    return safe if safe != ".ics" else "event.ics"


# --- Routes ---


@router.post("/ics")
async def download_ics(body: CalendarEventRequest) -> Response:
    """Return the event's calendar document as a file attachment."""
    event = body.to_event()
    filename = _header_safe(ics_filename(event.title))
    return Response(
        content=generate_ics(event),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/links", response_model=CalendarLinksResponse)
async def calendar_links(body: CalendarEventRequest) -> CalendarLinksResponse:
    links = generate_calendar_links(body.to_event())
    return CalendarLinksResponse(**links.as_dict())
