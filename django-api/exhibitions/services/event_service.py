"""Event service - lifecycle business logic lives here.

Services:
- Depend only on interfaces (stores, audit sink)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from exhibitions.config import CoreConfig
from exhibitions.domain import Actor, Event, EventFilter, EventId, EventStatus, TransitionResult
from exhibitions.domain.errors import (
    EventNotFoundError,
    ForbiddenError,
    InvalidEventDataError,
    InvalidEventIdError,
    PreconditionFailedError,
)
from exhibitions.domain.lifecycle import EventLifecycle, GuardContext, LifecycleAction
from exhibitions.domain.models import ApprovalPreview, check_event_fields
from exhibitions.stores.interfaces import AuditSink, EventStore

logger = logging.getLogger(__name__)

EVENT_CREATED = "EVENT_CREATED"
EVENT_UPDATED = "EVENT_UPDATED"
EVENT_STATUS_CHANGED = "EVENT_STATUS_CHANGED"
EVENT_CANCELLED = "EVENT_CANCELLED"

_ADMIN_ONLY = frozenset(
    {LifecycleAction.APPROVE, LifecycleAction.REJECT, LifecycleAction.ARCHIVE}
)
_MANAGER_ONLY = frozenset({LifecycleAction.SUBMIT})

# A conditional write can lose to a concurrent transition at most this many
# times before the command gives up.
_MAX_ATTEMPTS = 2


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except (ValueError, TypeError, AttributeError):
        raise InvalidEventIdError() from None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventService:
    """Service for event management and the approval workflow."""

    def __init__(
        self,
        store: EventStore,
        audit: AuditSink,
        config: CoreConfig | None = None,
        lifecycle: EventLifecycle | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._audit = audit
        self._config = config or CoreConfig()
        self._lifecycle = lifecycle or EventLifecycle()
        self._clock = clock

    # Queries

    def list_events(self, actor: Actor, filters: EventFilter) -> list[Event]:
        """Return events visible to the caller; managers only see their own."""
        if not actor.is_admin:
            filters = EventFilter(
                status=filters.status, event_type=filters.event_type, manager_id=actor.id
            )
        return self._store.list_events(filters)

    def list_pending(self, actor: Actor) -> list[Event]:
        self._require_admin(actor)
        events = self._store.list_events(EventFilter(status=EventStatus.PENDING_APPROVAL))
        return sorted(events, key=lambda event: event.created_at)

    def get_event(self, actor: Actor, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ForbiddenError: If a manager asks for another manager's event.
        """
        return self._load(actor, parse_event_id(event_id))

    def get_approval_preview(self, actor: Actor, event_id: str) -> ApprovalPreview:
        self._require_admin(actor)
        event = self._load(actor, parse_event_id(event_id))
        return ApprovalPreview(
            event=event,
            stalls=tuple(self._store.list_stalls(event.id, active_only=True)),
            volunteers=tuple(self._store.list_volunteers(event.id)),
        )

    # Commands

    def create_event(self, actor: Actor, fields: Mapping[str, Any]) -> Event:
        """Create a DRAFT event owned by the calling manager.

        Raises:
            ForbiddenError: If the caller is not an approved, active manager.
            InvalidEventDataError: If the fields break an event invariant or
                the code is taken.
        """
        if actor.is_admin:
            raise ForbiddenError("Only event managers can create events")
        manager = self._store.get_manager(actor.id)
        if manager is None or not manager.is_approved_by_admin:
            raise ForbiddenError(
                "Your account is not approved by admin. You cannot create events yet."
            )
        if not manager.is_active:
            raise ForbiddenError("Your account is deactivated. Contact admin to reactivate.")

        check_event_fields(fields)
        if self._store.code_exists(fields["code"]):
            raise InvalidEventDataError("Event code already exists")

        event = self._store.create_event(actor.id, fields)
        logger.info("Event %s (%s) created by manager %s", event.id, event.code, actor.id)
        self._audit.record(
            EVENT_CREATED,
            actor,
            str(event.id),
            {
                "event_name": event.name,
                "event_code": event.code,
                "event_type": event.event_type.value,
                "status": event.status.value,
                "has_banner": bool(event.banner_image_url),
            },
        )
        return event

    def update_event(self, actor: Actor, event_id: str, changes: Mapping[str, Any]) -> Event:
        """Change event fields while the status still allows edits.

        Raises:
            PreconditionFailedError: If the status locks the requested fields,
                or the status changed while the update was in flight.
            InvalidEventDataError: If the merged fields break an invariant.
        """
        event = self._load(actor, parse_event_id(event_id))
        if not changes:
            return event
        self._lifecycle.ensure_editable(event.status, changes.keys())

        merged = {**event.editable_fields(), **changes}
        check_event_fields(merged)
        if "code" in changes and changes["code"] != event.code and self._store.code_exists(changes["code"]):
            raise InvalidEventDataError("Event code already exists")

        if not self._store.update_event(event.id, event.status, changes):
            current = self._reload(event.id)
            raise PreconditionFailedError(
                f"Event status changed during update. Current status: {current.status.value}"
            )

        updated = self._reload(event.id)
        self._audit.record(
            EVENT_UPDATED,
            actor,
            str(event.id),
            {"updated_fields": sorted(changes), "event_name": updated.name},
        )
        return updated

    def submit_for_approval(self, actor: Actor, event_id: str) -> TransitionResult:
        return self._apply(actor, event_id, LifecycleAction.SUBMIT)

    def approve(self, actor: Actor, event_id: str) -> TransitionResult:
        return self._apply(actor, event_id, LifecycleAction.APPROVE)

    def reject(self, actor: Actor, event_id: str, reason: str | None) -> TransitionResult:
        return self._apply(actor, event_id, LifecycleAction.REJECT, reason=reason)

    def activate(self, actor: Actor, event_id: str) -> TransitionResult:
        return self._apply(actor, event_id, LifecycleAction.ACTIVATE)

    def complete(self, actor: Actor, event_id: str) -> TransitionResult:
        return self._apply(actor, event_id, LifecycleAction.COMPLETE)

    def archive(self, actor: Actor, event_id: str) -> TransitionResult:
        return self._apply(actor, event_id, LifecycleAction.ARCHIVE)

    def cancel(self, actor: Actor, event_id: str) -> TransitionResult:
        return self._apply(actor, event_id, LifecycleAction.CANCEL)

    def perform(
        self, actor: Actor, event_id: str, action: LifecycleAction, reason: str | None = None
    ) -> TransitionResult:
        """Dispatch a lifecycle command by action name."""
        return self._apply(actor, event_id, action, reason=reason)

    # Internals

    def _apply(
        self,
        actor: Actor,
        event_id: str,
        action: LifecycleAction,
        reason: str | None = None,
    ) -> TransitionResult:
        if action in _ADMIN_ONLY:
            self._require_admin(actor)
        if action in _MANAGER_ONLY and actor.is_admin:
            raise ForbiddenError("Only the event manager can submit an event for approval")
        event = self._load(actor, parse_event_id(event_id))

        for _ in range(_MAX_ATTEMPTS):
            ctx = self._guard_context(event, action, reason)
            try:
                transition = self._lifecycle.plan(ctx, action)
            except PreconditionFailedError as exc:
                logger.warning("Refused %s on event %s: %s", action.value, event.id, exc.message)
                raise

            if transition.replay:
                logger.info("Replayed %s on event %s; already %s", action.value, event.id, event.status.value)
                return TransitionResult(event=event, previous_status=event.status, replayed=True)

            changes = self._changes_for(action, actor, event, reason)
            if self._store.transition(event.id, frozenset({event.status}), transition.target, changes):
                updated = self._reload(event.id)
                logger.info(
                    "Event %s moved %s -> %s by %s %s",
                    event.id, event.status.value, updated.status.value, actor.role.value, actor.id,
                )
                self._audit_transition(actor, action, event, updated, ctx)
                return TransitionResult(event=updated, previous_status=event.status)

            # Lost the conditional write; re-plan against the status that won.
            event = self._reload(event.id)

        raise PreconditionFailedError(
            f"Event status changed concurrently. Current status: {event.status.value}"
        )

    def _guard_context(
        self, event: Event, action: LifecycleAction, reason: str | None
    ) -> GuardContext:
        stalls = volunteers = 0
        if action is LifecycleAction.SUBMIT:
            stalls = self._store.count_active_stalls(event.id)
            volunteers = self._store.count_volunteers(event.id)
        return GuardContext(
            event=event,
            active_stall_count=stalls,
            volunteer_count=volunteers,
            rejection_reason=reason,
            min_rejection_reason_length=self._config.min_rejection_reason_length,
        )

    def _changes_for(
        self, action: LifecycleAction, actor: Actor, event: Event, reason: str | None
    ) -> dict[str, Any]:
        now = self._clock()
        if action is LifecycleAction.SUBMIT and event.status is EventStatus.REJECTED:
            return {"rejection_reason": None}
        if action is LifecycleAction.APPROVE:
            return {"approved_by_id": actor.id, "approved_at": now}
        if action is LifecycleAction.REJECT:
            return {
                "approved_by_id": actor.id,
                "rejection_reason": (reason or "").strip(),
                "rejected_at": now,
            }
        return {}

    def _audit_transition(
        self,
        actor: Actor,
        action: LifecycleAction,
        before: Event,
        after: Event,
        ctx: GuardContext,
    ) -> None:
        metadata: dict[str, Any] = {
            "action": action.value,
            "old_status": before.status.value,
            "new_status": after.status.value,
            "event_name": after.name,
        }
        if action is LifecycleAction.SUBMIT:
            metadata["stall_count"] = ctx.active_stall_count
            metadata["volunteer_count"] = ctx.volunteer_count
        if action is LifecycleAction.REJECT:
            metadata["rejection_reason"] = after.rejection_reason
        event_type = EVENT_CANCELLED if action is LifecycleAction.CANCEL else EVENT_STATUS_CHANGED
        self._audit.record(event_type, actor, str(after.id), metadata)

    def _load(self, actor: Actor, event_id: EventId) -> Event:
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        if not actor.is_admin and not event.is_owned_by(actor.id):
            raise ForbiddenError()
        return event

    def _reload(self, event_id: EventId) -> Event:
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise ForbiddenError("Admin access required")
