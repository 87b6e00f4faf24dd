"""Django ORM implementations of the store interfaces."""

import logging
from collections import defaultdict
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from django.db import DatabaseError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from exhibitions import cache, models
from exhibitions.domain import (
    Actor,
    Capacity,
    Event,
    EventFilter,
    EventId,
    EventStatus,
    EventType,
    Money,
    Scan,
    StallInfo,
)
from exhibitions.domain.models import (
    ManagerAccount,
    RankingVote,
    RatingCounts,
    RegistrationCounts,
    School,
    VolunteerInfo,
)
from exhibitions.domain.scoring import RankCounts
from exhibitions.domain.value_objects import CheckType
from exhibitions.stores.interfaces import AnalyticsStore, AuditSink, EventStore

logger = logging.getLogger(__name__)

# Domain field name -> ORM column, where they differ.
_EVENT_COLUMNS = {
    "name": "event_name",
    "code": "event_code",
    "approved_by_id": "approved_by_admin_id",
    "approved_at": "admin_approved_at",
    "rejection_reason": "admin_rejection_reason",
    "rejected_at": "admin_rejected_at",
}


def _to_columns(fields: Mapping[str, Any]) -> dict[str, Any]:
    columns = {}
    for name, value in fields.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, Money):
            value = value.amount
        elif isinstance(value, Capacity):
            value = value.value
        columns[_EVENT_COLUMNS.get(name, name)] = value
    return columns


def _filter_predicates(filters: EventFilter) -> Q:
    """Compose one predicate per populated filter field."""
    predicate = Q()
    if filters.status is not None:
        predicate &= Q(status=filters.status.value)
    if filters.event_type is not None:
        predicate &= Q(event_type=filters.event_type.value)
    if filters.manager_id is not None:
        predicate &= Q(created_by_manager_id=filters.manager_id)
    return predicate


def _to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.event_name,
        code=row.event_code,
        description=row.description,
        venue=row.venue,
        event_type=EventType(row.event_type),
        price=Money(Decimal(row.price)),
        currency=row.currency,
        max_capacity=Capacity(row.max_capacity) if row.max_capacity else None,
        start_date=row.start_date,
        end_date=row.end_date,
        registration_start_date=row.registration_start_date,
        registration_end_date=row.registration_end_date,
        banner_image_url=row.banner_image_url or None,
        image_url=row.image_url or None,
        created_by_id=row.created_by_manager_id,
        status=EventStatus(row.status),
        approved_by_id=row.approved_by_admin_id,
        approved_at=row.admin_approved_at,
        rejection_reason=row.admin_rejection_reason,
        rejected_at=row.admin_rejected_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_stall(row: models.Stall) -> StallInfo:
    return StallInfo(
        id=row.id,
        stall_number=row.stall_number,
        name=row.stall_name,
        school_id=row.school_id,
        school_name=row.school.school_name if row.school else None,
        is_active=row.is_active,
        image_url=row.image_url or None,
        location=row.location,
        rank_1_votes=row.rank_1_votes,
        rank_2_votes=row.rank_2_votes,
        rank_3_votes=row.rank_3_votes,
        weighted_score=row.weighted_score,
    )


class DjangoEventStore(EventStore):
    """Relational event store using Django ORM."""

    def list_events(self, filters: EventFilter) -> list[Event]:
        rows = models.Event.objects.filter(_filter_predicates(filters))
        return [_to_event(row) for row in rows]

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return _to_event(row) if row else None

    def get_manager(self, manager_id: UUID) -> ManagerAccount | None:
        row = models.EventManager.objects.filter(pk=manager_id).first()
        if row is None:
            return None
        return ManagerAccount(
            id=row.id,
            full_name=row.full_name,
            is_approved_by_admin=row.is_approved_by_admin,
            is_active=row.is_active,
        )

    def code_exists(self, code: str) -> bool:
        return models.Event.objects.filter(event_code=code).exists()

    def create_event(self, manager_id: UUID, fields: Mapping[str, Any]) -> Event:
        row = models.Event.objects.create(
            created_by_manager_id=manager_id,
            status=EventStatus.DRAFT.value,
            **_to_columns(fields),
        )
        return _to_event(row)

    def update_event(
        self, event_id: EventId, expected_status: EventStatus, changes: Mapping[str, Any]
    ) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, status=expected_status.value
        ).update(updated_at=timezone.now(), **_to_columns(changes))
        if updated:
            cache.invalidate_event(event_id.value)
        return updated == 1

    def transition(
        self,
        event_id: EventId,
        sources: frozenset[EventStatus],
        target: EventStatus,
        changes: Mapping[str, Any],
    ) -> bool:
        # Single conditional UPDATE: the status check and the write cannot interleave
        # with a concurrent transition on the same row.
        updated = models.Event.objects.filter(
            pk=event_id.value, status__in=[status.value for status in sources]
        ).update(status=target.value, updated_at=timezone.now(), **_to_columns(changes))
        if updated:
            cache.invalidate_event(event_id.value)
        return updated == 1

    def count_active_stalls(self, event_id: EventId) -> int:
        return models.Stall.objects.filter(event_id=event_id.value, is_active=True).count()

    def count_volunteers(self, event_id: EventId) -> int:
        return models.EventVolunteer.objects.filter(event_id=event_id.value).count()

    def list_stalls(self, event_id: EventId, active_only: bool = False) -> list[StallInfo]:
        rows = models.Stall.objects.filter(event_id=event_id.value).select_related("school")
        if active_only:
            rows = rows.filter(is_active=True)
        return [_to_stall(row) for row in rows.order_by("stall_number")]

    def list_volunteers(self, event_id: EventId) -> list[VolunteerInfo]:
        rows = models.Volunteer.objects.filter(
            event_assignments__event_id=event_id.value
        ).order_by("full_name")
        return [
            VolunteerInfo(id=row.id, name=row.full_name, email=row.email, phone=row.phone)
            for row in rows
        ]


class DjangoAnalyticsStore(AnalyticsStore):
    """Aggregate reads for one event's analytics."""

    def rankings(self, event_id: EventId) -> list[RankingVote]:
        rows = models.Ranking.objects.filter(event_id=event_id.value).values(
            "student_id", "stall_id", "rank", "percentage", "student__school_id", "stall__school_id"
        )
        return [
            RankingVote(
                student_id=row["student_id"],
                stall_id=row["stall_id"],
                rank=row["rank"],
                student_school_id=row["student__school_id"],
                stall_school_id=row["stall__school_id"],
                percentage=row["percentage"],
            )
            for row in rows
        ]

    def schools(self, event_id: EventId) -> list[School]:
        rows = models.School.objects.filter(
            Q(stalls__event_id=event_id.value) | Q(students__rankings__event_id=event_id.value)
        ).distinct()
        return [School(id=row.id, name=row.school_name) for row in rows]

    def scans(self, event_id: EventId) -> list[Scan]:
        rows = models.CheckInOut.objects.filter(event_id=event_id.value).values(
            "id", "student_id", "stall_id", "scanned_by_volunteer_id", "check_type", "check_time"
        )
        return [
            Scan(
                id=row["id"],
                student_id=row["student_id"],
                stall_id=row["stall_id"],
                volunteer_id=row["scanned_by_volunteer_id"],
                check_type=CheckType(row["check_type"]),
                scanned_at=row["check_time"],
            )
            for row in rows
        ]

    def registration_counts(self, event_id: EventId) -> RegistrationCounts:
        totals = models.Registration.objects.filter(event_id=event_id.value).aggregate(
            total=Count("id"),
            paid=Count("id", filter=Q(payment_status="COMPLETED")),
            attended=Count("id", filter=Q(attendance_status="PRESENT")),
        )
        return RegistrationCounts(
            total=totals["total"] or 0,
            paid=totals["paid"] or 0,
            attended=totals["attended"] or 0,
        )

    def revenue(self, event_id: EventId) -> Decimal:
        totals = models.Registration.objects.filter(
            event_id=event_id.value, payment_status="COMPLETED"
        ).aggregate(total=Sum("amount_paid"))
        return Decimal(totals["total"] or 0)

    def rating_counts(self, event_id: EventId) -> RatingCounts:
        rows = (
            models.Feedback.objects.filter(event_id=event_id.value)
            .values("overall_rating")
            .annotate(n=Count("id"))
        )
        return RatingCounts({row["overall_rating"]: row["n"] for row in rows})

    def stall_rating_counts(self, event_id: EventId) -> dict[UUID, RatingCounts]:
        rows = (
            models.Feedback.objects.filter(event_id=event_id.value)
            .values("stall_id", "overall_rating")
            .annotate(n=Count("id"))
        )
        grouped: dict[UUID, dict[int, int]] = defaultdict(dict)
        for row in rows:
            grouped[row["stall_id"]][row["overall_rating"]] = row["n"]
        return {stall_id: RatingCounts(counts) for stall_id, counts in grouped.items()}

    def write_stall_counters(self, counters: Mapping[UUID, tuple[RankCounts, int]]) -> int:
        changed = 0
        with transaction.atomic():
            for stall_id, (votes, score) in counters.items():
                changed += models.Stall.objects.filter(pk=stall_id).update(
                    rank_1_votes=votes.rank_1_votes,
                    rank_2_votes=votes.rank_2_votes,
                    rank_3_votes=votes.rank_3_votes,
                    weighted_score=score,
                )
        return changed


class DjangoAuditSink(AuditSink):
    """Writes audit rows; a failed write is logged and dropped."""

    def record(
        self,
        event_type: str,
        actor: Actor,
        resource_id: str,
        metadata: Mapping[str, Any],
        resource_type: str = "EVENT",
    ) -> None:
        try:
            with transaction.atomic():
                models.AuditLog.objects.create(
                    event_type=event_type,
                    actor_id=actor.id,
                    actor_role=actor.role.value,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    metadata=dict(metadata),
                )
        except DatabaseError:
            logger.exception("Dropped audit record %s for %s %s", event_type, resource_type, resource_id)
