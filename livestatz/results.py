"""Result values returned by store and reporting operations instead of raising."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a boundary call: `data` on success, `error` message on failure.

    A successful call may still carry `data=None` (e.g. a lookup with no rows).
    """

    data: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def error_message(exc: BaseException, fallback: str) -> str:
    """Human-readable message for a caught exception."""
    message = str(exc).strip()
    return message or fallback
