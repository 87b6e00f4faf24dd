"""Unit tests for the event lifecycle state machine.

Run with: pytest tests/test_lifecycle.py -v
"""

import pytest

from exhibitions.domain import EventLifecycle, EventStatus, LifecycleAction
from exhibitions.domain.errors import PreconditionFailedError
from exhibitions.domain.lifecycle import TERMINAL_STATES, TRANSITIONS, GuardContext


@pytest.fixture
def lifecycle() -> EventLifecycle:
    return EventLifecycle()


def _ready_to_submit(event, **overrides):
    values = dict(event=event, active_stall_count=1, volunteer_count=1)
    values.update(overrides)
    return GuardContext(**values)


class TestTransitionTable:
    """Tests for which (status, action) pairs are legal."""

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATES))
    @pytest.mark.parametrize("action", list(LifecycleAction))
    def test_terminal_states_allow_nothing(self, lifecycle, status, action):
        with pytest.raises(PreconditionFailedError):
            lifecycle.resolve(status, action)

    @pytest.mark.parametrize(
        "status,action,target",
        [
            (EventStatus.DRAFT, LifecycleAction.SUBMIT, EventStatus.PENDING_APPROVAL),
            (EventStatus.REJECTED, LifecycleAction.SUBMIT, EventStatus.PENDING_APPROVAL),
            (EventStatus.PENDING_APPROVAL, LifecycleAction.APPROVE, EventStatus.APPROVED),
            (EventStatus.PENDING_APPROVAL, LifecycleAction.REJECT, EventStatus.REJECTED),
            (EventStatus.APPROVED, LifecycleAction.ACTIVATE, EventStatus.ACTIVE),
            (EventStatus.ACTIVE, LifecycleAction.COMPLETE, EventStatus.COMPLETED),
            (EventStatus.COMPLETED, LifecycleAction.ARCHIVE, EventStatus.ARCHIVED),
            (EventStatus.APPROVED, LifecycleAction.CANCEL, EventStatus.CANCELLED),
        ],
    )
    def test_forward_moves(self, lifecycle, status, action, target):
        transition = lifecycle.resolve(status, action)
        assert transition.target is target
        assert not transition.replay

    def test_every_non_replay_entry_changes_status(self):
        for (status, _), transition in TRANSITIONS.items():
            if not transition.replay:
                assert transition.target is not status

    def test_cannot_approve_draft(self, lifecycle):
        with pytest.raises(PreconditionFailedError, match="cannot be approved. Current status: DRAFT"):
            lifecycle.resolve(EventStatus.DRAFT, LifecycleAction.APPROVE)

    def test_active_event_cannot_be_cancelled(self, lifecycle):
        with pytest.raises(PreconditionFailedError, match="Cannot cancel an active event"):
            lifecycle.resolve(EventStatus.ACTIVE, LifecycleAction.CANCEL)

    def test_approve_is_replayed_on_approved(self, lifecycle):
        """Approving an already approved event is a no-op, not an error."""
        transition = lifecycle.resolve(EventStatus.APPROVED, LifecycleAction.APPROVE)
        assert transition.replay

    def test_reject_is_replayed_on_rejected(self, lifecycle):
        transition = lifecycle.resolve(EventStatus.REJECTED, LifecycleAction.REJECT)
        assert transition.replay


class TestSubmitGuards:
    """Tests for the submission preconditions."""

    def test_submit_passes_with_banner_stall_and_volunteer(self, lifecycle, make_domain_event):
        ctx = _ready_to_submit(make_domain_event())
        assert lifecycle.plan(ctx, LifecycleAction.SUBMIT).target is EventStatus.PENDING_APPROVAL

    def test_submit_requires_banner(self, lifecycle, make_domain_event):
        ctx = _ready_to_submit(make_domain_event(banner_image_url=None))
        with pytest.raises(PreconditionFailedError, match="banner"):
            lifecycle.plan(ctx, LifecycleAction.SUBMIT)

    def test_submit_requires_active_stall(self, lifecycle, make_domain_event):
        ctx = _ready_to_submit(make_domain_event(), active_stall_count=0)
        with pytest.raises(PreconditionFailedError, match="at least one stall"):
            lifecycle.plan(ctx, LifecycleAction.SUBMIT)

    def test_submit_requires_volunteer(self, lifecycle, make_domain_event):
        ctx = _ready_to_submit(make_domain_event(), volunteer_count=0)
        with pytest.raises(PreconditionFailedError, match="at least one volunteer"):
            lifecycle.plan(ctx, LifecycleAction.SUBMIT)

    def test_guards_checked_in_order(self, lifecycle, make_domain_event):
        """With every guard failing, the banner message is reported first."""
        ctx = GuardContext(event=make_domain_event(banner_image_url=""))
        with pytest.raises(PreconditionFailedError, match="banner"):
            lifecycle.plan(ctx, LifecycleAction.SUBMIT)


class TestRejectGuard:
    """Tests for the rejection reason requirement."""

    @pytest.mark.parametrize("reason", [None, "", "too short", "   short    "])
    def test_short_reason_refused(self, lifecycle, make_domain_event, reason):
        ctx = GuardContext(
            event=make_domain_event(status=EventStatus.PENDING_APPROVAL), rejection_reason=reason
        )
        with pytest.raises(PreconditionFailedError, match="at least 10 characters"):
            lifecycle.plan(ctx, LifecycleAction.REJECT)

    def test_ten_characters_after_trim_accepted(self, lifecycle, make_domain_event):
        ctx = GuardContext(
            event=make_domain_event(status=EventStatus.PENDING_APPROVAL),
            rejection_reason="  0123456789  ",
        )
        assert lifecycle.plan(ctx, LifecycleAction.REJECT).target is EventStatus.REJECTED

    def test_minimum_length_is_configurable(self, lifecycle, make_domain_event):
        ctx = GuardContext(
            event=make_domain_event(status=EventStatus.PENDING_APPROVAL),
            rejection_reason="nope",
            min_rejection_reason_length=3,
        )
        assert lifecycle.plan(ctx, LifecycleAction.REJECT).target is EventStatus.REJECTED


class TestEditing:
    """Tests for which fields may change in which status."""

    @pytest.mark.parametrize("status", [EventStatus.DRAFT, EventStatus.REJECTED])
    def test_any_field_editable_before_submission(self, lifecycle, status):
        lifecycle.ensure_editable(status, ["name", "code", "start_date"])

    def test_pending_allows_presentation_fields(self, lifecycle):
        lifecycle.ensure_editable(EventStatus.PENDING_APPROVAL, ["venue", "banner_image_url"])

    def test_pending_locks_core_fields(self, lifecycle):
        with pytest.raises(PreconditionFailedError, match="code, name"):
            lifecycle.ensure_editable(EventStatus.PENDING_APPROVAL, ["name", "venue", "code"])

    @pytest.mark.parametrize(
        "status", [EventStatus.APPROVED, EventStatus.ACTIVE, EventStatus.CANCELLED]
    )
    def test_later_states_locked(self, lifecycle, status):
        with pytest.raises(PreconditionFailedError, match="Cannot update event"):
            lifecycle.ensure_editable(status, ["venue"])


class TestAnalyticsGate:
    @pytest.mark.parametrize(
        "status", [EventStatus.APPROVED, EventStatus.ACTIVE, EventStatus.COMPLETED]
    )
    def test_open_for_approved_states(self, lifecycle, status):
        lifecycle.ensure_analytics_available(status)

    @pytest.mark.parametrize(
        "status",
        [EventStatus.DRAFT, EventStatus.PENDING_APPROVAL, EventStatus.REJECTED, EventStatus.ARCHIVED],
    )
    def test_closed_otherwise(self, lifecycle, status):
        with pytest.raises(PreconditionFailedError, match="only available for approved events"):
            lifecycle.ensure_analytics_available(status)
