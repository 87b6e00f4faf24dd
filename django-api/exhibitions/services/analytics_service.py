"""Analytics aggregation: one read-only report per event.

Combines registration and feedback counts with the scoring engine's
leaderboards and the session reconstructor's attendance metrics. Nothing
here writes, except ``reconcile_counters`` which repairs the stall counter
cache.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from exhibitions.config import CoreConfig
from exhibitions.domain import Actor, Event, EventId, ScoringEngine, SessionReconstructor, StallInfo
from exhibitions.domain.errors import EventNotFoundError, ForbiddenError, InvariantViolationError
from exhibitions.domain.lifecycle import EventLifecycle
from exhibitions.domain.models import RankingVote, RatingCounts, RegistrationCounts
from exhibitions.domain.scoring import RankCounts, RankingOverview, SchoolStanding, StallStanding
from exhibitions.domain.sessions import AttendanceStats, Session, VolunteerProductivity
from exhibitions.services.event_service import parse_event_id
from exhibitions.stores.interfaces import AnalyticsStore, EventStore

logger = logging.getLogger(__name__)

STARS = (5, 4, 3, 2, 1)


@dataclass(frozen=True)
class FeedbackSummary:
    total_feedbacks: int
    average_rating: float
    rating_distribution: dict[int, int]

    @classmethod
    def from_counts(cls, counts: RatingCounts) -> "FeedbackSummary":
        distribution = {star: counts.counts.get(star, 0) for star in STARS}
        total = sum(distribution.values())
        average = 0.0
        if total:
            average = round(sum(star * n for star, n in distribution.items()) / total, 2)
        return cls(total_feedbacks=total, average_rating=average, rating_distribution=distribution)


@dataclass(frozen=True)
class StallBreakdown:
    stall: StallInfo
    feedback: FeedbackSummary
    ranking_position: int | None
    votes: RankCounts
    weighted_score: int


@dataclass(frozen=True)
class StallLeaderboard:
    standings: list[StallStanding]
    overview: RankingOverview


@dataclass(frozen=True)
class AnalyticsReport:
    event: Event
    registrations: RegistrationCounts
    revenue: Decimal
    feedback: FeedbackSummary
    top_stalls: list[StallStanding]
    top_schools: list[SchoolStanding]
    stalls: list[StallBreakdown]
    volunteers: list[VolunteerProductivity]
    check_in_out: AttendanceStats


class AnalyticsService:
    """Builds analytics projections for events the caller may see."""

    def __init__(
        self,
        events: EventStore,
        analytics: AnalyticsStore,
        config: CoreConfig | None = None,
        lifecycle: EventLifecycle | None = None,
    ) -> None:
        self._events = events
        self._analytics = analytics
        self._config = config or CoreConfig()
        self._lifecycle = lifecycle or EventLifecycle()
        self._scoring = ScoringEngine(self._config.rank_points)
        self._sessions = SessionReconstructor()

    def event_report(self, actor: Actor, event_id: str) -> AnalyticsReport:
        """Return the full analytics report for an approved event.

        Raises:
            See ``authorize``.
        """
        return self.build_report(self.authorize(actor, event_id))

    def authorize(self, actor: Actor, event_id: str) -> Event:
        """Load an event whose analytics the caller may read.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ForbiddenError: If a manager asks about another manager's event.
            PreconditionFailedError: If the event is not APPROVED, ACTIVE or COMPLETED.
        """
        parsed = parse_event_id(event_id)
        event = self._events.get_event(parsed)
        if event is None:
            raise EventNotFoundError(event_id)
        if not actor.is_admin and not event.is_owned_by(actor.id):
            raise ForbiddenError()
        self._lifecycle.ensure_analytics_available(event.status)
        return event

    def build_report(self, event: Event) -> AnalyticsReport:
        """Assemble the report for an already authorized event."""
        stalls = self._events.list_stalls(event.id)
        rankings = self._analytics.rankings(event.id)
        scans = self._analytics.scans(event.id)

        self._warn_on_counter_drift(event.id, stalls, rankings)

        leaderboard = self._scoring.stall_leaderboard(stalls, rankings)
        positions = {standing.stall.id: standing.position for standing in leaderboard}
        tallies = self._scoring.tally(rankings)
        stall_ratings = self._analytics.stall_rating_counts(event.id)

        breakdown = []
        for stall in stalls:
            if not stall.is_active:
                continue
            votes = tallies.get(stall.id, RankCounts())
            breakdown.append(
                StallBreakdown(
                    stall=stall,
                    feedback=FeedbackSummary.from_counts(stall_ratings.get(stall.id, RatingCounts({}))),
                    ranking_position=positions.get(stall.id),
                    votes=votes,
                    weighted_score=self._scoring.weighted_score(votes),
                )
            )

        return AnalyticsReport(
            event=event,
            registrations=self._analytics.registration_counts(event.id),
            revenue=self._analytics.revenue(event.id),
            feedback=FeedbackSummary.from_counts(self._analytics.rating_counts(event.id)),
            top_stalls=leaderboard[: self._config.top_stalls_limit],
            top_schools=self._scoring.school_leaderboard(
                self._analytics.schools(event.id), rankings, self._config.top_schools_limit
            ),
            stalls=breakdown,
            volunteers=self._sessions.productivity(self._events.list_volunteers(event.id), scans),
            check_in_out=self._sessions.attendance(scans),
        )

    def stall_leaderboard(
        self, actor: Actor, event_id: str, limit: int | None = None
    ) -> StallLeaderboard:
        event = self.authorize(actor, event_id)
        rankings = self._analytics.rankings(event.id)
        standings = self._scoring.stall_leaderboard(
            self._events.list_stalls(event.id), rankings, limit or self._config.top_stalls_limit
        )
        return StallLeaderboard(standings=standings, overview=self._scoring.overview(rankings))

    def school_leaderboard(
        self, actor: Actor, event_id: str, limit: int | None = None
    ) -> list[SchoolStanding]:
        event = self.authorize(actor, event_id)
        return self._scoring.school_leaderboard(
            self._analytics.schools(event.id),
            self._analytics.rankings(event.id),
            limit or self._config.top_schools_limit,
        )

    def attendance(self, actor: Actor, event_id: str) -> AttendanceStats:
        return self.build_attendance(self.authorize(actor, event_id))

    def build_attendance(self, event: Event) -> AttendanceStats:
        """Check-in/out statistics for an already authorized event."""
        return self._sessions.attendance(self._analytics.scans(event.id))

    def active_sessions(self, actor: Actor, event_id: str) -> list[Session]:
        event = self.authorize(actor, event_id)
        sessions = self._sessions.open_sessions(self._analytics.scans(event.id))
        return sorted(sessions, key=lambda session: session.check_in_at)

    def verify_counters(self, event_id: EventId) -> None:
        """Raise InvariantViolationError if cached counters diverge from rankings."""
        mismatches = self._scoring.find_counter_mismatches(
            self._events.list_stalls(event_id), self._analytics.rankings(event_id)
        )
        if mismatches:
            raise InvariantViolationError(tuple(str(m.stall_id) for m in mismatches))

    def reconcile_counters(self, event_id: EventId) -> int:
        """Rewrite drifted stall counters from ranking rows; return stalls fixed."""
        mismatches = self._scoring.find_counter_mismatches(
            self._events.list_stalls(event_id), self._analytics.rankings(event_id)
        )
        if not mismatches:
            return 0
        return self._analytics.write_stall_counters(
            {m.stall_id: (m.recomputed, m.recomputed_score) for m in mismatches}
        )

    def _warn_on_counter_drift(
        self, event_id: EventId, stalls: list[StallInfo], rankings: list[RankingVote]
    ) -> None:
        mismatches = self._scoring.find_counter_mismatches(stalls, rankings)
        if mismatches:
            error = InvariantViolationError(tuple(str(m.stall_id) for m in mismatches))
            logger.error("Event %s: %s; report uses recomputed scores", event_id, error)

