"""Enum definitions shared by the calendar, invite and RSVP code."""

import enum


class RSVPStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"


class CalendarOption(str, enum.Enum):
    """Per-event policy for calendar invites after an RSVP."""

    auto = "auto"  # send immediately
    ask = "ask"  # show the invite dialog
    none = "none"  # never send


class InviteState(str, enum.Enum):
    idle = "idle"
    sending = "sending"
    sent = "sent"
    failed = "failed"


class NoticeVariant(str, enum.Enum):
    default = "default"
    destructive = "destructive"
