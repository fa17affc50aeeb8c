from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRecordRepository(Protocol):
    def load_all(self) -> Sequence[AttendanceRecord]:
        """All stored records in insertion order; empty on first run."""

        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> Sequence[AttendanceRecord]:
        """Replace any record with the same date, append ``record`` and persist.

        Returns the collection as written.
        """

        raise NotImplementedError
