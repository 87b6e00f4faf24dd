"""Domain models representing persisted state.

These are pure domain objects with no API input rules; the invariants every
stored event must satisfy live in check_event_fields.
Django ORM models are in exhibitions/models.py (persistence layer).
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from exhibitions.domain.errors import InvalidEventDataError
from exhibitions.domain.value_objects import (
    MAX_CAPACITY,
    MAX_PRICE,
    Capacity,
    CheckType,
    EventId,
    EventStatus,
    EventType,
    Money,
)


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    code: str
    description: str
    venue: str
    event_type: EventType
    price: Money
    currency: str
    max_capacity: Capacity | None
    start_date: datetime
    end_date: datetime
    registration_start_date: datetime
    registration_end_date: datetime
    banner_image_url: str | None
    image_url: str | None
    created_by_id: UUID
    status: EventStatus
    approved_by_id: UUID | None
    approved_at: datetime | None
    rejection_reason: str | None
    rejected_at: datetime | None
    created_at: datetime
    updated_at: datetime

    def is_owned_by(self, manager_id: UUID) -> bool:
        return self.created_by_id == manager_id

    def editable_fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "venue": self.venue,
            "event_type": self.event_type,
            "price": self.price.amount,
            "currency": self.currency,
            "max_capacity": self.max_capacity.value if self.max_capacity else None,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "registration_start_date": self.registration_start_date,
            "registration_end_date": self.registration_end_date,
            "banner_image_url": self.banner_image_url,
            "image_url": self.image_url,
        }


@dataclass(frozen=True)
class StallInfo:
    """Descriptive stall fields plus its cached vote counters."""

    id: UUID
    stall_number: int
    name: str
    school_id: UUID | None
    school_name: str | None
    is_active: bool
    image_url: str | None = None
    location: str = ""
    rank_1_votes: int = 0
    rank_2_votes: int = 0
    rank_3_votes: int = 0
    weighted_score: int = 0


@dataclass(frozen=True)
class RankingVote:
    """One student's rank for one stall, joined with both schools."""

    student_id: UUID
    stall_id: UUID
    rank: int
    student_school_id: UUID | None = None
    stall_school_id: UUID | None = None
    percentage: Decimal | None = None


@dataclass(frozen=True)
class School:
    id: UUID
    name: str


@dataclass(frozen=True)
class Scan:
    """A single badge read at a stall."""

    id: UUID
    student_id: UUID
    stall_id: UUID
    volunteer_id: UUID | None
    check_type: CheckType
    scanned_at: datetime


@dataclass(frozen=True)
class VolunteerInfo:
    id: UUID
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class RegistrationCounts:
    total: int = 0
    paid: int = 0
    attended: int = 0


@dataclass(frozen=True)
class RatingCounts:
    """Number of feedback entries per star value (1-5)."""

    counts: dict[int, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())


@dataclass(frozen=True)
class ApprovalPreview:
    """What an admin reviews before approving an event."""

    event: Event
    stalls: tuple[StallInfo, ...]
    volunteers: tuple[VolunteerInfo, ...]


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a lifecycle command.

    ``replayed`` is set when the command was already applied earlier and the
    current record is returned unchanged.
    """

    event: Event
    previous_status: EventStatus
    replayed: bool = False


@dataclass(frozen=True)
class ManagerAccount:
    id: UUID
    full_name: str
    is_approved_by_admin: bool
    is_active: bool


EVENT_CODE_PATTERN = re.compile(r"^[A-Z0-9_-]+$")


def check_event_fields(fields: Mapping[str, Any]) -> None:
    """Validate a complete set of event fields against the event invariants.

    Raises:
        InvalidEventDataError: On the first broken rule.
    """
    code = fields.get("code")
    if code is not None and not EVENT_CODE_PATTERN.match(code):
        raise InvalidEventDataError(
            "Event code must contain only uppercase letters, numbers, hyphens, and underscores"
        )

    price = Decimal(fields.get("price") or 0)
    if fields["event_type"] is EventType.PAID:
        if price <= 0:
            raise InvalidEventDataError("Paid events must have a price greater than 0")
        if price > MAX_PRICE:
            raise InvalidEventDataError(f"Price cannot exceed {MAX_PRICE:,}")
    elif price != 0:
        raise InvalidEventDataError("Free events cannot have a price")

    capacity = fields.get("max_capacity")
    if capacity is not None and not 1 <= capacity <= MAX_CAPACITY:
        raise InvalidEventDataError(
            f"Max capacity must be between 1 and {MAX_CAPACITY:,}, or empty for unlimited"
        )

    if fields["start_date"] >= fields["end_date"]:
        raise InvalidEventDataError("Event start date must be before end date")
    if fields["registration_start_date"] >= fields["registration_end_date"]:
        raise InvalidEventDataError(
            "Registration start date must be before registration end date"
        )
    if fields["registration_end_date"] > fields["start_date"]:
        raise InvalidEventDataError("Registration must close before event starts")
