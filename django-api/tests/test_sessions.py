"""Unit tests for session reconstruction and volunteer productivity.

Run with: pytest tests/test_sessions.py -v
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from exhibitions.domain import Scan, SessionReconstructor
from exhibitions.domain.models import VolunteerInfo
from exhibitions.domain.value_objects import CheckType

T0 = datetime(2026, 11, 20, 10, 0, tzinfo=timezone.utc)
STUDENT = uuid4()
STALL = uuid4()


@pytest.fixture
def reconstructor() -> SessionReconstructor:
    return SessionReconstructor()


def _scan(check_type, minutes, student=STUDENT, stall=STALL, volunteer=None, scan_id=None) -> Scan:
    return Scan(
        id=scan_id or uuid4(),
        student_id=student,
        stall_id=stall,
        volunteer_id=volunteer,
        check_type=check_type,
        scanned_at=T0 + timedelta(minutes=minutes),
    )


def check_in(minutes, **kwargs) -> Scan:
    return _scan(CheckType.CHECK_IN, minutes, **kwargs)


def check_out(minutes, **kwargs) -> Scan:
    return _scan(CheckType.CHECK_OUT, minutes, **kwargs)


def _volunteer(value: int) -> VolunteerInfo:
    return VolunteerInfo(id=UUID(int=value), name=f"V{value}", email=f"v{value}@example.com", phone="")


class TestSessions:
    """Tests for pairing scans into sessions."""

    def test_pairs_check_in_with_later_check_out(self, reconstructor):
        (session,) = reconstructor.sessions([check_in(0), check_out(30)])
        assert session.check_in_at == T0
        assert session.check_out_at == T0 + timedelta(minutes=30)
        assert session.duration_minutes == 30

    def test_out_of_order_input_is_sorted(self, reconstructor):
        (session,) = reconstructor.sessions([check_out(30), check_in(0)])
        assert not session.is_open

    def test_duplicate_check_in_joins_open_session(self, reconstructor):
        """A repeated CHECK_IN keeps the original start time."""
        (session,) = reconstructor.sessions([check_in(0), check_in(5), check_out(20)])
        assert session.duration_minutes == 20

    def test_unmatched_check_out_ignored(self, reconstructor):
        assert reconstructor.sessions([check_out(10)]) == []

    def test_check_out_at_same_instant_does_not_close(self, reconstructor):
        (session,) = reconstructor.sessions([check_in(0), check_out(0)])
        assert session.is_open

    @pytest.mark.parametrize("check_in_id, check_out_id", [(200, 300), (300, 200)])
    def test_equal_time_check_in_pairs_before_check_out(self, reconstructor, check_in_id, check_out_id):
        """Equal-time scans pair the same way whatever their ids."""
        scans = [
            check_in(0, scan_id=UUID(int=100)),
            check_in(5, scan_id=UUID(int=check_in_id)),
            check_out(5, scan_id=UUID(int=check_out_id)),
        ]
        (session,) = reconstructor.sessions(scans)
        assert session.check_in_at == T0
        assert session.check_out_at == T0 + timedelta(minutes=5)
        assert reconstructor.attendance(scans).active_check_ins == 0

    def test_sessions_are_per_student_and_stall(self, reconstructor):
        other_stall = uuid4()
        scans = [check_in(0), check_in(1, stall=other_stall), check_out(10)]
        sessions = reconstructor.sessions(scans)
        assert len(sessions) == 2
        assert [s.is_open for s in sessions if s.stall_id == other_stall] == [True]

    def test_repeat_visit_makes_second_session(self, reconstructor):
        scans = [check_in(0), check_out(10), check_in(20), check_out(50)]
        assert [s.duration_minutes for s in reconstructor.sessions(scans)] == [10, 30]

    def test_check_in_out_in_yields_one_closed_one_open(self, reconstructor):
        sessions = reconstructor.sessions([check_in(0), check_out(12), check_in(40)])
        closed = [s for s in sessions if not s.is_open]
        opened = [s for s in sessions if s.is_open]
        assert [s.duration_minutes for s in closed] == [12]
        assert [s.check_in_at for s in opened] == [T0 + timedelta(minutes=40)]
        assert reconstructor.attendance([check_in(0), check_out(12), check_in(40)]).active_check_ins == 1

    def test_open_sessions(self, reconstructor):
        scans = [check_in(0), check_out(10), check_in(20)]
        (session,) = reconstructor.open_sessions(scans)
        assert session.check_in_at == T0 + timedelta(minutes=20)


class TestAttendance:
    """Tests for check-in/out statistics."""

    def test_counts_and_average(self, reconstructor):
        other = uuid4()
        scans = [
            check_in(0),
            check_out(10),
            check_in(0, student=other),
            check_out(21, student=other),
            check_in(30, student=uuid4()),
        ]
        stats = reconstructor.attendance(scans)
        assert stats.total_scans == 5
        assert stats.total_check_ins == 3
        assert stats.total_check_outs == 2
        assert stats.active_check_ins == 1
        assert stats.completed_check_ins == 2
        assert stats.average_duration_minutes == 15.5

    def test_duplicates_count_as_raw_scans(self, reconstructor):
        stats = reconstructor.attendance([check_in(0), check_in(1)])
        assert stats.total_check_ins == 2
        assert stats.active_check_ins == 1

    def test_average_rounded_to_two_places(self, reconstructor):
        scans = [check_in(0), _scan(CheckType.CHECK_OUT, 10 + 1 / 3)]
        assert reconstructor.attendance(scans).average_duration_minutes == 10.33

    def test_no_scans(self, reconstructor):
        stats = reconstructor.attendance([])
        assert stats.total_scans == 0
        assert stats.average_duration_minutes == 0.0


class TestProductivity:
    """Tests for volunteer scan throughput."""

    def test_metrics_for_busy_volunteer(self, reconstructor):
        volunteer = _volunteer(1)
        scans = [
            check_in(0, volunteer=volunteer.id),
            check_out(30, volunteer=volunteer.id),
            check_in(90, volunteer=volunteer.id, student=uuid4()),
        ]
        (row,) = reconstructor.productivity([volunteer], scans)
        assert row.total_scans == 3
        assert row.total_checkins == 2
        assert row.total_checkouts == 1
        assert row.first_scan_time == T0
        assert row.last_scan_time == T0 + timedelta(minutes=90)
        assert row.active_hours == 1.5
        assert row.average_scans_per_hour == 2.0

    def test_single_scan_has_no_rate(self, reconstructor):
        volunteer = _volunteer(1)
        (row,) = reconstructor.productivity([volunteer], [check_in(0, volunteer=volunteer.id)])
        assert row.active_hours == 0
        assert row.average_scans_per_hour == 0

    def test_idle_volunteers_listed_last(self, reconstructor):
        idle, busy = _volunteer(1), _volunteer(2)
        rows = reconstructor.productivity([idle, busy], [check_in(0, volunteer=busy.id)])
        assert [row.volunteer for row in rows] == [busy, idle]
        assert rows[1].total_scans == 0
        assert rows[1].first_scan_time is None

    def test_equal_counts_ordered_by_id(self, reconstructor):
        second, first = _volunteer(2), _volunteer(1)
        rows = reconstructor.productivity([second, first], [])
        assert [row.volunteer for row in rows] == [first, second]

    def test_scans_without_volunteer_ignored(self, reconstructor):
        volunteer = _volunteer(1)
        (row,) = reconstructor.productivity([volunteer], [check_in(0)])
        assert row.total_scans == 0
