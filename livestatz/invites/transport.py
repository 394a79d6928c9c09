"""
Boundaries used by invite delivery: the outbound transport and the file save.

Email delivery itself happens in a hosted function; this module only knows
how to hand it a request and read back success or an error message.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from livestatz.calendar import CalendarEvent, to_iso_string
from livestatz.config import (
    get_invite_function_key,
    get_invite_function_url,
    get_invite_sender_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InviteRequest:
    """Everything the transport needs to email one calendar invite."""

    to: str
    event_title: str
    start_time: str
    ics_content: str
    event_description: str | None = None
    event_location: str | None = None
    end_time: str | None = None
    fan_name: str | None = None
    sender_name: str | None = None
    event_url: str | None = None

    @classmethod
    def for_event(
        cls,
        event: CalendarEvent,
        *,
        to: str,
        ics_content: str,
        fan_name: str | None = None,
    ) -> "InviteRequest":
        return cls(
            to=to,
            event_title=event.title,
            event_description=event.description,
            event_location=event.location,
            start_time=to_iso_string(event.start_time),
            end_time=to_iso_string(event.end_time) if event.end_time else None,
            ics_content=ics_content,
            fan_name=fan_name,
            sender_name=get_invite_sender_name(),
            event_url=event.url,
        )

    def to_payload(self) -> dict:
        """JSON body in the shape the invite function expects."""
        return {
            "to": self.to,
            "eventTitle": self.event_title,
            "eventDescription": self.event_description,
            "eventLocation": self.event_location,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "icsContent": self.ics_content,
            "fanName": self.fan_name,
            "senderName": self.sender_name,
            "eventUrl": self.event_url,
        }


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> "DeliveryResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str | None) -> "DeliveryResult":
        return cls(ok=False, error=error)


class InviteTransport(Protocol):
    async def __call__(self, request: InviteRequest) -> DeliveryResult: ...


class FileSaver(Protocol):
    def save(self, content: str, filename: str) -> None: ...


class HttpInviteTransport:
    """Invokes the hosted invite function over HTTP. One attempt, no retries."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float = 30.0,
    ):
        self.url = url or get_invite_function_url()
        self.api_key = api_key or get_invite_function_key()
        self.timeout = timeout

    async def __call__(self, request: InviteRequest) -> DeliveryResult:
        if not self.url:
            return DeliveryResult.failure(
                "Invite delivery not configured (INVITE_FUNCTION_URL not set)"
            )

        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.url, json=request.to_payload(), headers=headers
                )
        except httpx.HTTPError as e:
            logger.error(f"Invite function request failed: {e}")
            return DeliveryResult.failure(str(e) or None)

        if response.status_code >= 400:
            return DeliveryResult.failure(_extract_error(response))

        return DeliveryResult.success()


def _extract_error(response: httpx.Response) -> str:
    """Pull the function's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Invite function returned HTTP {response.status_code}"


class DirectoryFileSaver:
    """Saves calendar files into a local directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def save(self, content: str, filename: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / Path(filename).name
        path.write_text(content, encoding="utf-8", newline="")
        logger.info(f"Saved calendar file {path}")
