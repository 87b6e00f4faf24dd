"""Domain error codes for the exhibitions module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_EVENT_DATA = "INVALID_EVENT_DATA"
    FORBIDDEN = "FORBIDDEN"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidEventDataError(DomainError):
    """Raised when event fields break a data invariant."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_EVENT_DATA, message=message)


class ForbiddenError(DomainError):
    """Raised when the caller may not act on the event."""

    def __init__(self, message: str = "Unauthorized access to this event") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class PreconditionFailedError(DomainError):
    """Raised when a lifecycle guard is unmet."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PRECONDITION_FAILED, message=message)


class InvariantViolationError(DomainError):
    """Raised when cached stall counters disagree with recomputed scores.

    Internal only: this is a bug report, never a user-facing response.
    """

    def __init__(self, stall_ids: tuple[str, ...]) -> None:
        super().__init__(
            code=ErrorCode.INVARIANT_VIOLATION,
            message=f"Stored stall counters diverge from rankings for {len(stall_ids)} stall(s)",
        )
        self.stall_ids = stall_ids
