"""Calendar invite delivery: orchestration plus transport and file-save boundaries."""

from .sender import (
    CalendarInviteSender,
    InviteDeliveryError,
    InviteOutcome,
    Notice,
)
from .transport import (
    DeliveryResult,
    DirectoryFileSaver,
    FileSaver,
    HttpInviteTransport,
    InviteRequest,
    InviteTransport,
)

__all__ = [
    "CalendarInviteSender",
    "InviteDeliveryError",
    "InviteOutcome",
    "Notice",
    "DeliveryResult",
    "DirectoryFileSaver",
    "FileSaver",
    "HttpInviteTransport",
    "InviteRequest",
    "InviteTransport",
]
