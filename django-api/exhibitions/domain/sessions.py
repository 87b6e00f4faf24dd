"""Visit sessions and volunteer productivity from raw badge scans.

Scans may arrive duplicated or out of order. Pairing rules, applied per
(student, stall) in time order:

* scans sharing a timestamp are ordered CHECK_IN before CHECK_OUT;
* a CHECK_IN opens a session unless one is already open (a repeated
  CHECK_IN joins the open session);
* a CHECK_OUT strictly later than the open CHECK_IN closes it;
* any other CHECK_OUT is unmatched and only counts in the raw totals.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from exhibitions.domain.models import Scan, VolunteerInfo
from exhibitions.domain.value_objects import CheckType


@dataclass(frozen=True)
class Session:
    student_id: UUID
    stall_id: UUID
    check_in_at: datetime
    check_out_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.check_out_at is None

    @property
    def duration_minutes(self) -> float:
        if self.check_out_at is None:
            return 0.0
        return (self.check_out_at - self.check_in_at).total_seconds() / 60


@dataclass(frozen=True)
class AttendanceStats:
    total_scans: int = 0
    total_check_ins: int = 0
    total_check_outs: int = 0
    active_check_ins: int = 0
    completed_check_ins: int = 0
    average_duration_minutes: float = 0.0


@dataclass(frozen=True)
class VolunteerProductivity:
    volunteer: VolunteerInfo
    total_scans: int = 0
    total_checkins: int = 0
    total_checkouts: int = 0
    first_scan_time: datetime | None = None
    last_scan_time: datetime | None = None
    active_hours: float = 0.0
    average_scans_per_hour: float = 0.0


def _chronological(scans: Iterable[Scan]) -> list[Scan]:
    # At equal timestamps CHECK_INs come first; the scan id only keeps the
    # order stable among scans of the same type.
    return sorted(
        scans,
        key=lambda scan: (scan.scanned_at, scan.check_type is CheckType.CHECK_OUT, str(scan.id)),
    )


class SessionReconstructor:
    """Rebuilds sessions and derived metrics from a scan stream."""

    def sessions(self, scans: Iterable[Scan]) -> list[Session]:
        """Pair scans into sessions, grouped per (student, stall)."""
        streams: dict[tuple[UUID, UUID], list[Scan]] = defaultdict(list)
        for scan in _chronological(scans):
            streams[(scan.student_id, scan.stall_id)].append(scan)

        result: list[Session] = []
        for (student_id, stall_id), stream in streams.items():
            opened: Scan | None = None
            for scan in stream:
                if scan.check_type is CheckType.CHECK_IN:
                    if opened is None:
                        opened = scan
                    continue
                if opened is not None and scan.scanned_at > opened.scanned_at:
                    result.append(
                        Session(student_id, stall_id, opened.scanned_at, scan.scanned_at)
                    )
                    opened = None
            if opened is not None:
                result.append(Session(student_id, stall_id, opened.scanned_at))
        return result

    def open_sessions(self, scans: Iterable[Scan]) -> list[Session]:
        return [session for session in self.sessions(scans) if session.is_open]

    def attendance(self, scans: Iterable[Scan]) -> AttendanceStats:
        scans = list(scans)
        sessions = self.sessions(scans)
        completed = [session for session in sessions if not session.is_open]
        check_ins = sum(1 for scan in scans if scan.check_type is CheckType.CHECK_IN)

        average = 0.0
        if completed:
            average = sum(session.duration_minutes for session in completed) / len(completed)

        return AttendanceStats(
            total_scans=len(scans),
            total_check_ins=check_ins,
            total_check_outs=len(scans) - check_ins,
            active_check_ins=len(sessions) - len(completed),
            completed_check_ins=len(completed),
            average_duration_minutes=round(average, 2),
        )

    def productivity(
        self,
        volunteers: Iterable[VolunteerInfo],
        scans: Iterable[Scan],
    ) -> list[VolunteerProductivity]:
        """Scan throughput per volunteer, busiest first.

        Volunteers without scans are included with zeroed metrics. Scans
        without a volunteer are ignored here.
        """
        by_volunteer: dict[UUID, list[Scan]] = defaultdict(list)
        for scan in _chronological(scans):
            if scan.volunteer_id is not None:
                by_volunteer[scan.volunteer_id].append(scan)

        result = [
            self._volunteer_metrics(volunteer, by_volunteer.get(volunteer.id, []))
            for volunteer in volunteers
        ]
        result.sort(key=lambda row: (-row.total_scans, str(row.volunteer.id)))
        return result

    def _volunteer_metrics(
        self, volunteer: VolunteerInfo, scans: list[Scan]
    ) -> VolunteerProductivity:
        if not scans:
            return VolunteerProductivity(volunteer=volunteer)

        first, last = scans[0].scanned_at, scans[-1].scanned_at
        hours = 0.0
        if len(scans) >= 2:
            hours = (last - first).total_seconds() / 3600
        per_hour = len(scans) / hours if hours > 0 else 0.0
        check_ins = sum(1 for scan in scans if scan.check_type is CheckType.CHECK_IN)

        return VolunteerProductivity(
            volunteer=volunteer,
            total_scans=len(scans),
            total_checkins=check_ins,
            total_checkouts=len(scans) - check_ins,
            first_scan_time=first,
            last_scan_time=last,
            active_hours=round(hours, 2),
            average_scans_per_hour=round(per_hour, 2),
        )
