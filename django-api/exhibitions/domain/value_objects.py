"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self
from uuid import UUID


MAX_PRICE = Decimal("100000")
MAX_CAPACITY = 100_000


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"
    CANCELLED = "CANCELLED"


class EventType(str, Enum):
    FREE = "FREE"
    PAID = "PAID"


class Role(str, Enum):
    ADMIN = "ADMIN"
    EVENT_MANAGER = "EVENT_MANAGER"


class CheckType(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Positive attendee limit; ``None`` elsewhere means unlimited."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Capacity must be a positive number")
        if self.value > MAX_CAPACITY:
            raise ValueError(f"Capacity cannot exceed {MAX_CAPACITY:,}")


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a core operation."""

    id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class EventFilter:
    """Typed, already-validated filters for event listings.

    Each populated field becomes one predicate; empty fields add nothing.
    """

    status: EventStatus | None = None
    event_type: EventType | None = None
    manager_id: UUID | None = None
