from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Trạng thái điểm danh của một học sinh trong một buổi học."""

    ABSENT = "absent"
    PRESENT = "present"
    LATE = "late"
    EARLY_LEAVE = "earlyLeave"

    def next_status(self) -> "AttendanceStatus":
        """Successor on the tap cycle: absent -> present -> late -> earlyLeave -> absent."""
        return _NEXT_STATUS[self]

    @property
    def counts_as_attended(self) -> bool:
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


_NEXT_STATUS = {
    AttendanceStatus.ABSENT: AttendanceStatus.PRESENT,
    AttendanceStatus.PRESENT: AttendanceStatus.LATE,
    AttendanceStatus.LATE: AttendanceStatus.EARLY_LEAVE,
    AttendanceStatus.EARLY_LEAVE: AttendanceStatus.ABSENT,
}


class SessionPhase(str, Enum):
    """Vòng đời của một phiên điểm danh."""

    NEW = "NEW"
    OPEN = "OPEN"
    LOCKED = "LOCKED"
    SUBMITTED = "SUBMITTED"
