"""Identity of the signed-in creator, as resolved by the session layer."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class CurrentUser:
    id: UUID
    email: str | None = None
