from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterator, Mapping, Optional

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): kết quả điểm danh đã chốt của một ngày."""

    date: date
    present: tuple[str, ...] = ()
    late: tuple[str, ...] = ()
    early_leave: tuple[str, ...] = ()
    absent: tuple[str, ...] = ()

    def __post_init__(self):
        seen: set[str] = set()
        for _, names in self._groups():
            overlap = seen.intersection(names)
            if overlap:
                raise ValidationError(f"Student listed under more than one status: {sorted(overlap)}")
            seen.update(names)

    def _groups(self) -> Iterator[tuple[AttendanceStatus, tuple[str, ...]]]:
        yield AttendanceStatus.PRESENT, self.present
        yield AttendanceStatus.LATE, self.late
        yield AttendanceStatus.EARLY_LEAVE, self.early_leave
        yield AttendanceStatus.ABSENT, self.absent

    def status_of(self, student: str) -> Optional[AttendanceStatus]:
        for status, names in self._groups():
            if student in names:
                return status
        return None

    def students(self) -> list[str]:
        return [name for _, names in self._groups() for name in names]

    def counts(self) -> dict[str, int]:
        return {status.value: len(names) for status, names in self._groups()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": format_iso_date(self.date),
            "present": list(self.present),
            "late": list(self.late),
            "earlyLeave": list(self.early_leave),
            "absent": list(self.absent),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceRecord":
        return cls(
            date=parse_iso_date(str(data["date"])),
            present=tuple(data.get("present") or ()),
            late=tuple(data.get("late") or ()),
            early_leave=tuple(data.get("earlyLeave") or ()),
            absent=tuple(data.get("absent") or ()),
        )
