"""Event lifecycle state machine.

Every allowed move lives in ``TRANSITIONS``: one entry per (current status,
action) with the target status and the guards that must all pass. A status
change is legal only if the table has an entry for it.

    DRAFT -> PENDING_APPROVAL -> APPROVED -> ACTIVE -> COMPLETED -> ARCHIVED
                   |    ^
                   v    |
                  REJECTED

CANCELLED is reachable from every non-terminal status except ACTIVE.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from exhibitions.domain.errors import PreconditionFailedError
from exhibitions.domain.models import Event
from exhibitions.domain.value_objects import EventStatus

DEFAULT_MIN_REJECTION_REASON_LENGTH = 10


class LifecycleAction(str, Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    ACTIVATE = "activate"
    COMPLETE = "complete"
    ARCHIVE = "archive"
    CANCEL = "cancel"


@dataclass(frozen=True)
class GuardContext:
    """Facts about an event gathered before a transition is attempted."""

    event: Event
    active_stall_count: int = 0
    volunteer_count: int = 0
    rejection_reason: str | None = None
    min_rejection_reason_length: int = DEFAULT_MIN_REJECTION_REASON_LENGTH


# A guard returns a failure message, or None when it holds.
Guard = Callable[[GuardContext], str | None]


def has_banner(ctx: GuardContext) -> str | None:
    if not ctx.event.banner_image_url:
        return "Event must have a banner image before submission"
    return None


def has_active_stall(ctx: GuardContext) -> str | None:
    if ctx.active_stall_count < 1:
        return "Event must have at least one stall before submission"
    return None


def has_volunteer(ctx: GuardContext) -> str | None:
    if ctx.volunteer_count < 1:
        return "Event must have at least one volunteer before submission"
    return None


def has_rejection_reason(ctx: GuardContext) -> str | None:
    reason = (ctx.rejection_reason or "").strip()
    if len(reason) < ctx.min_rejection_reason_length:
        return (
            f"Rejection reason must be at least "
            f"{ctx.min_rejection_reason_length} characters"
        )
    return None


@dataclass(frozen=True)
class Transition:
    """Target status plus guards; ``replay`` marks an idempotent repeat."""

    target: EventStatus
    guards: tuple[Guard, ...] = ()
    replay: bool = False


_SUBMIT = Transition(EventStatus.PENDING_APPROVAL, (has_banner, has_active_stall, has_volunteer))
_REJECT = Transition(EventStatus.REJECTED, (has_rejection_reason,))
_CANCEL = Transition(EventStatus.CANCELLED)

TRANSITIONS: dict[tuple[EventStatus, LifecycleAction], Transition] = {
    (EventStatus.DRAFT, LifecycleAction.SUBMIT): _SUBMIT,
    (EventStatus.REJECTED, LifecycleAction.SUBMIT): _SUBMIT,
    (EventStatus.PENDING_APPROVAL, LifecycleAction.APPROVE): Transition(EventStatus.APPROVED),
    (EventStatus.APPROVED, LifecycleAction.APPROVE): Transition(EventStatus.APPROVED, replay=True),
    (EventStatus.PENDING_APPROVAL, LifecycleAction.REJECT): _REJECT,
    (EventStatus.REJECTED, LifecycleAction.REJECT): Transition(
        EventStatus.REJECTED, (has_rejection_reason,), replay=True
    ),
    (EventStatus.APPROVED, LifecycleAction.ACTIVATE): Transition(EventStatus.ACTIVE),
    (EventStatus.ACTIVE, LifecycleAction.COMPLETE): Transition(EventStatus.COMPLETED),
    (EventStatus.COMPLETED, LifecycleAction.ARCHIVE): Transition(EventStatus.ARCHIVED),
    (EventStatus.DRAFT, LifecycleAction.CANCEL): _CANCEL,
    (EventStatus.PENDING_APPROVAL, LifecycleAction.CANCEL): _CANCEL,
    (EventStatus.REJECTED, LifecycleAction.CANCEL): _CANCEL,
    (EventStatus.APPROVED, LifecycleAction.CANCEL): _CANCEL,
    (EventStatus.COMPLETED, LifecycleAction.CANCEL): _CANCEL,
}

_BLOCKED_MESSAGES: dict[tuple[EventStatus, LifecycleAction], str] = {
    (EventStatus.ACTIVE, LifecycleAction.CANCEL): (
        "Cannot cancel an active event. Please deactivate or reassign it first."
    ),
}

TERMINAL_STATES = frozenset({EventStatus.ARCHIVED, EventStatus.CANCELLED})

# Any field may change in these states.
EDITABLE_STATES = frozenset({EventStatus.DRAFT, EventStatus.REJECTED})

# While awaiting review only presentation details may be adjusted.
PENDING_ADJUSTABLE_FIELDS = frozenset(
    {"description", "venue", "banner_image_url", "image_url", "max_capacity"}
)

ANALYTICS_STATES = frozenset(
    {EventStatus.APPROVED, EventStatus.ACTIVE, EventStatus.COMPLETED}
)


class EventLifecycle:
    """Resolves lifecycle commands against the transition table."""

    def __init__(
        self,
        transitions: dict[tuple[EventStatus, LifecycleAction], Transition] | None = None,
    ) -> None:
        self._transitions = TRANSITIONS if transitions is None else transitions

    def resolve(self, status: EventStatus, action: LifecycleAction) -> Transition:
        transition = self._transitions.get((status, action))
        if transition is None:
            message = _BLOCKED_MESSAGES.get(
                (status, action),
                f"Event cannot be {_past_tense(action)}. Current status: {status.value}",
            )
            raise PreconditionFailedError(message)
        return transition

    def plan(self, ctx: GuardContext, action: LifecycleAction) -> Transition:
        """Return the transition for ``action`` once every guard holds.

        Raises:
            PreconditionFailedError: If no transition exists from the current
                status or a guard fails.
        """
        transition = self.resolve(ctx.event.status, action)
        for guard in transition.guards:
            failure = guard(ctx)
            if failure is not None:
                raise PreconditionFailedError(failure)
        return transition

    def ensure_editable(self, status: EventStatus, fields: Iterable[str]) -> None:
        if status in EDITABLE_STATES:
            return
        if status is EventStatus.PENDING_APPROVAL:
            locked = sorted(set(fields) - PENDING_ADJUSTABLE_FIELDS)
            if not locked:
                return
            raise PreconditionFailedError(
                f"Fields cannot be changed while pending approval: {', '.join(locked)}"
            )
        raise PreconditionFailedError(
            f"Cannot update event in status {status.value}"
        )

    def ensure_analytics_available(self, status: EventStatus) -> None:
        if status not in ANALYTICS_STATES:
            raise PreconditionFailedError(
                "Analytics are only available for approved events"
            )


def _past_tense(action: LifecycleAction) -> str:
    return {
        LifecycleAction.SUBMIT: "submitted",
        LifecycleAction.APPROVE: "approved",
        LifecycleAction.REJECT: "rejected",
        LifecycleAction.ACTIVATE: "activated",
        LifecycleAction.COMPLETE: "completed",
        LifecycleAction.ARCHIVE: "archived",
        LifecycleAction.CANCEL: "cancelled",
    }[action]
