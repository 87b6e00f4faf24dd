"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from decimal import Decimal
from typing import Any
from uuid import UUID

from exhibitions.domain import Actor, Event, EventFilter, EventId, EventStatus, Scan, StallInfo
from exhibitions.domain.models import (
    ManagerAccount,
    RankingVote,
    RatingCounts,
    RegistrationCounts,
    School,
    VolunteerInfo,
)
from exhibitions.domain.scoring import RankCounts


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self, filters: EventFilter) -> list[Event]:
        """Return events matching every populated filter, newest start first."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def get_manager(self, manager_id: UUID) -> ManagerAccount | None:
        ...

    @abstractmethod
    def code_exists(self, code: str) -> bool:
        ...

    @abstractmethod
    def create_event(self, manager_id: UUID, fields: Mapping[str, Any]) -> Event:
        """Insert a new event in DRAFT status."""
        ...

    @abstractmethod
    def update_event(
        self, event_id: EventId, expected_status: EventStatus, changes: Mapping[str, Any]
    ) -> bool:
        """Apply ``changes`` only if the stored status still equals ``expected_status``.

        Returns False when no row matched.
        """
        ...

    @abstractmethod
    def transition(
        self,
        event_id: EventId,
        sources: frozenset[EventStatus],
        target: EventStatus,
        changes: Mapping[str, Any],
    ) -> bool:
        """Atomically move the event to ``target`` if its status is in ``sources``.

        Returns False when the status no longer matched, leaving the row as is.
        """
        ...

    @abstractmethod
    def count_active_stalls(self, event_id: EventId) -> int:
        ...

    @abstractmethod
    def count_volunteers(self, event_id: EventId) -> int:
        ...

    @abstractmethod
    def list_stalls(self, event_id: EventId, active_only: bool = False) -> list[StallInfo]:
        """Return stalls ordered by stall number ascending."""
        ...

    @abstractmethod
    def list_volunteers(self, event_id: EventId) -> list[VolunteerInfo]:
        """Return volunteers assigned to the event, ordered by name."""
        ...


class AnalyticsStore(ABC):
    """Read-only aggregate queries feeding the analytics report."""

    @abstractmethod
    def rankings(self, event_id: EventId) -> list[RankingVote]:
        """Return ranking rows joined with voter and stall schools."""
        ...

    @abstractmethod
    def schools(self, event_id: EventId) -> list[School]:
        """Return schools owning a stall or a voting student in the event."""
        ...

    @abstractmethod
    def scans(self, event_id: EventId) -> list[Scan]:
        ...

    @abstractmethod
    def registration_counts(self, event_id: EventId) -> RegistrationCounts:
        ...

    @abstractmethod
    def revenue(self, event_id: EventId) -> Decimal:
        """Sum of amounts paid on completed payments."""
        ...

    @abstractmethod
    def rating_counts(self, event_id: EventId) -> RatingCounts:
        ...

    @abstractmethod
    def stall_rating_counts(self, event_id: EventId) -> dict[UUID, RatingCounts]:
        ...

    @abstractmethod
    def write_stall_counters(self, counters: Mapping[UUID, tuple[RankCounts, int]]) -> int:
        """Overwrite cached vote counters and scores; return rows changed.

        The only write on this interface, used to repair the counter cache.
        """
        ...


class AuditSink(ABC):
    """Fire-and-forget destination for audit records."""

    @abstractmethod
    def record(
        self,
        event_type: str,
        actor: Actor,
        resource_id: str,
        metadata: Mapping[str, Any],
        resource_type: str = "EVENT",
    ) -> None:
        ...
