"""Calendar invite delivery after an RSVP."""

import logging
from dataclasses import dataclass
from typing import Callable

import sentry_sdk

from livestatz.calendar import CalendarEvent, generate_ics, ics_filename
from livestatz.enums import CalendarOption, InviteState, NoticeVariant
from livestatz.results import error_message

from .transport import FileSaver, InviteRequest, InviteTransport

logger = logging.getLogger(__name__)

FALLBACK_ERROR = "Please try again"


class InviteDeliveryError(Exception):
    """The transport reported a failure."""


@dataclass(frozen=True)
class Notice:
    """A dismissable user-facing notification."""

    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.default


@dataclass(frozen=True)
class InviteOutcome:
    state: InviteState
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.state is InviteState.sent


class CalendarInviteSender:
    """
    Sends one event's calendar invite to one fan.

    State per invocation: idle -> sending -> sent | failed. A missing
    recipient leaves the state at idle without touching the transport.
    Concurrent calls for the same request are not guarded against; callers
    must not invoke send() twice at once.
    """

    def __init__(
        self,
        event: CalendarEvent,
        transport: InviteTransport,
        *,
        fan_email: str | None = None,
        fan_name: str | None = None,
        calendar_option: CalendarOption = CalendarOption.ask,
        notify: Callable[[Notice], None] | None = None,
    ):
        self.event = event
        self.transport = transport
        self.fan_email = fan_email
        self.fan_name = fan_name
        self.calendar_option = CalendarOption(calendar_option)
        self._notify = notify

        self.state = InviteState.idle
        self.is_sending = False
        self.show_dialog = False
        self.last_error: str | None = None

    def _emit(self, notice: Notice) -> None:
        if self._notify is not None:
            self._notify(notice)

    async def send(self) -> InviteOutcome:
        """
        Build the calendar document and hand it to the transport once.

        Never raises: transport errors (returned or thrown) end in the
        failed state with the transport's message, or a generic fallback.
        """
        if not self.fan_email:
            logger.info("No email provided, skipping calendar invite")
            return InviteOutcome(state=self.state)

        self.is_sending = True
        self.state = InviteState.sending
        try:
            ics_content = generate_ics(self.event)
            request = InviteRequest.for_event(
                self.event,
                to=self.fan_email,
                ics_content=ics_content,
                fan_name=self.fan_name,
            )
            result = await self.transport(request)
            if not result.ok:
                raise InviteDeliveryError(result.error or "")
        except Exception as e:
            message = error_message(e, FALLBACK_ERROR)
            logger.error(f"Error sending calendar invite to {self.fan_email}: {e}")
            if not isinstance(e, InviteDeliveryError):
                sentry_sdk.capture_exception(e)
            self.state = InviteState.failed
            self.last_error = message
            self._emit(
                Notice(
                    title="Failed to send calendar invite",
                    description=message,
                    variant=NoticeVariant.destructive,
                )
            )
            return InviteOutcome(state=self.state, error=message)
        finally:
            self.is_sending = False

        self.state = InviteState.sent
        self.last_error = None
        self._emit(
            Notice(
                title="Calendar invite sent!",
                description="Check your email for the calendar file",
            )
        )
        return InviteOutcome(state=self.state)

    async def handle_calendar_invite(self) -> InviteOutcome | None:
        """
        Apply the event's calendar option after an RSVP.

        auto sends right away, ask raises `show_dialog` for the caller to
        confirm, none does nothing.
        """
        option = self.calendar_option
        if option is CalendarOption.auto:
            return await self.send()
        elif option is CalendarOption.ask:
            self.show_dialog = True
            return None
        elif option is CalendarOption.none:
            logger.info("Calendar invites disabled")
            return None
        raise ValueError(f"Unhandled calendar option: {option!r}")

    def download_ics(self, saver: FileSaver) -> str:
        """Hand the calendar document to a file-save boundary. Returns the filename."""
        filename = ics_filename(self.event.title)
        saver.save(generate_ics(self.event), filename)
        self._emit(
            Notice(
                title="Calendar file downloaded",
                description="Open the file to add the event to your calendar",
            )
        )
        return filename
