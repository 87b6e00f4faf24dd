"""Stall and school leaderboards from student rankings.

Everything here is a pure aggregation over the rows handed in. No rows means
empty leaderboards, never an error.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from uuid import UUID

from exhibitions.domain.models import RankingVote, School, StallInfo

DEFAULT_RANK_POINTS: Mapping[int, int] = MappingProxyType({1: 5, 2: 3, 3: 1})


@dataclass(frozen=True)
class RankCounts:
    rank_1_votes: int = 0
    rank_2_votes: int = 0
    rank_3_votes: int = 0

    @property
    def total_votes(self) -> int:
        return self.rank_1_votes + self.rank_2_votes + self.rank_3_votes

    def add(self, rank: int) -> "RankCounts":
        return RankCounts(
            rank_1_votes=self.rank_1_votes + (rank == 1),
            rank_2_votes=self.rank_2_votes + (rank == 2),
            rank_3_votes=self.rank_3_votes + (rank == 3),
        )


@dataclass(frozen=True)
class StallStanding:
    position: int
    stall: StallInfo
    votes: RankCounts
    weighted_score: int


@dataclass(frozen=True)
class SchoolStanding:
    position: int
    school_id: UUID
    school_name: str
    score: int
    votes: RankCounts
    students_participated: int
    stalls_ranked: int


@dataclass(frozen=True)
class RankingOverview:
    total_stalls_ranked: int
    total_students_voted: int
    votes: RankCounts


@dataclass(frozen=True)
class CounterMismatch:
    stall_id: UUID
    cached: RankCounts
    cached_score: int
    recomputed: RankCounts
    recomputed_score: int


class ScoringEngine:
    """Converts rank votes into weighted scores."""

    def __init__(self, rank_points: Mapping[int, int] = DEFAULT_RANK_POINTS) -> None:
        self._points = dict(rank_points)

    def points_for(self, rank: int) -> int:
        return self._points.get(rank, 0)

    def weighted_score(self, votes: RankCounts) -> int:
        return (
            self.points_for(1) * votes.rank_1_votes
            + self.points_for(2) * votes.rank_2_votes
            + self.points_for(3) * votes.rank_3_votes
        )

    def tally(self, rankings: Iterable[RankingVote]) -> dict[UUID, RankCounts]:
        """Count votes per rank for every stall that received any."""
        counts: dict[UUID, RankCounts] = defaultdict(RankCounts)
        for vote in rankings:
            counts[vote.stall_id] = counts[vote.stall_id].add(vote.rank)
        return dict(counts)

    def stall_leaderboard(
        self,
        stalls: Iterable[StallInfo],
        rankings: Iterable[RankingVote],
        limit: int | None = None,
    ) -> list[StallStanding]:
        """Rank stalls with at least one vote.

        Order: weighted score desc, rank-1 votes desc, stall number asc.
        """
        counts = self.tally(rankings)
        scored = []
        for stall in stalls:
            votes = counts.get(stall.id, RankCounts())
            if votes.total_votes == 0:
                continue
            scored.append((stall, votes, self.weighted_score(votes)))

        scored.sort(key=lambda row: (-row[2], -row[1].rank_1_votes, row[0].stall_number))
        if limit is not None:
            scored = scored[:limit]
        return [
            StallStanding(position=index, stall=stall, votes=votes, weighted_score=score)
            for index, (stall, votes, score) in enumerate(scored, start=1)
        ]

    def school_leaderboard(
        self,
        schools: Iterable[School],
        rankings: Iterable[RankingVote],
        limit: int | None = None,
    ) -> list[SchoolStanding]:
        """Rank schools by votes their own students gave their own stalls.

        A vote counts only when the voter's school owns the stall. Schools
        scoring 0 are left out. Order: score desc, participating students
        desc, school id asc.
        """
        names = {school.id: school.name for school in schools}
        score: dict[UUID, int] = defaultdict(int)
        votes: dict[UUID, RankCounts] = defaultdict(RankCounts)
        students: dict[UUID, set[UUID]] = defaultdict(set)
        stalls: dict[UUID, set[UUID]] = defaultdict(set)

        for vote in rankings:
            school_id = vote.student_school_id
            if school_id is None:
                continue
            students[school_id].add(vote.student_id)
            if vote.stall_school_id != school_id:
                continue
            score[school_id] += self.points_for(vote.rank)
            votes[school_id] = votes[school_id].add(vote.rank)
            stalls[school_id].add(vote.stall_id)

        ranked = sorted(
            (school_id for school_id, total in score.items() if total > 0),
            key=lambda school_id: (-score[school_id], -len(students[school_id]), str(school_id)),
        )
        if limit is not None:
            ranked = ranked[:limit]
        return [
            SchoolStanding(
                position=index,
                school_id=school_id,
                school_name=names.get(school_id, ""),
                score=score[school_id],
                votes=votes[school_id],
                students_participated=len(students[school_id]),
                stalls_ranked=len(stalls[school_id]),
            )
            for index, school_id in enumerate(ranked, start=1)
        ]

    def overview(self, rankings: Iterable[RankingVote]) -> RankingOverview:
        stalls: set[UUID] = set()
        students: set[UUID] = set()
        votes = RankCounts()
        for vote in rankings:
            stalls.add(vote.stall_id)
            students.add(vote.student_id)
            votes = votes.add(vote.rank)
        return RankingOverview(
            total_stalls_ranked=len(stalls),
            total_students_voted=len(students),
            votes=votes,
        )

    def find_counter_mismatches(
        self,
        stalls: Iterable[StallInfo],
        rankings: Iterable[RankingVote],
    ) -> list[CounterMismatch]:
        """Compare each stall's cached counters against a fresh tally."""
        counts = self.tally(rankings)
        mismatches = []
        for stall in stalls:
            cached = RankCounts(stall.rank_1_votes, stall.rank_2_votes, stall.rank_3_votes)
            recomputed = counts.get(stall.id, RankCounts())
            recomputed_score = self.weighted_score(recomputed)
            if cached != recomputed or stall.weighted_score != recomputed_score:
                mismatches.append(
                    CounterMismatch(
                        stall_id=stall.id,
                        cached=cached,
                        cached_score=stall.weighted_score,
                        recomputed=recomputed,
                        recomputed_score=recomputed_score,
                    )
                )
        return mismatches
