from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..roster.model import Roster
from .model import AttendanceRecord


@dataclass(frozen=True)
class Summary:
    """Per-student attendance over every stored session. Recomputed on demand."""

    total_sessions: int
    attendance_count_of: Mapping[str, int] = field(default_factory=dict)

    def attendance_rate(self, student: str) -> float:
        if self.total_sessions == 0:
            return 0.0
        return self.attendance_count_of.get(student, 0) / self.total_sessions

    def attendance_percent(self, student: str) -> str:
        return f"{self.attendance_rate(student) * 100:.1f}"

    def rows(self) -> list[dict]:
        return [
            {
                "student": student,
                "attended": count,
                "rate": self.attendance_rate(student),
                "percent": self.attendance_percent(student),
            }
            for student, count in self.attendance_count_of.items()
        ]


def summarize(records: Iterable[AttendanceRecord], roster: Roster) -> Summary:
    """Count, per roster student, the sessions they attended (present or late).

    Names in a record that are not on the roster are ignored; a roster student
    missing from a record simply did not attend it.
    """
    counts = {student: 0 for student in roster}
    total = 0
    for record in records:
        total += 1
        for student in set(record.present).union(record.late):
            if student in counts:
                counts[student] += 1
    return Summary(total_sessions=total, attendance_count_of=counts)
