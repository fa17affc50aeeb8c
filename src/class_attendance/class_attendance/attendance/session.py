from __future__ import annotations

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..core.constants import DEFAULT_SESSION_MINUTES
from ..core.enums import AttendanceStatus, SessionPhase
from ..core.exceptions import ValidationError
from ..roster.model import Roster
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


class AttendanceSession:
    """State machine for one bounded marking window.

    A session is started once with a roster, accepts toggles while open, locks
    when its time budget elapses and is finalized by ``submit``. Statuses live in
    a list indexed by roster id so partitioning is a single pass in roster order.

    Toggling is silently ignored once the session is locked or submitted. By
    default a locked session may still be submitted (lock only blocks toggles);
    pass ``strict_lock=True`` to reject that as well.
    """

    def __init__(self, *, duration_minutes: int = DEFAULT_SESSION_MINUTES, strict_lock: bool = False):
        self._duration = timedelta(minutes=int(duration_minutes))
        self._strict_lock = bool(strict_lock)
        self._mutex = threading.RLock()

        self._roster: Optional[Roster] = None
        self._statuses: list[AttendanceStatus] = []
        self._locked = False
        self._submitted = False
        self._started_at: Optional[datetime] = None
        self._record: Optional[AttendanceRecord] = None

    # ---- read side ----

    @property
    def roster(self) -> Roster:
        if self._roster is None:
            raise ValidationError("Session has not been started")
        return self._roster

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def submitted(self) -> bool:
        return self._submitted

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def expires_at(self) -> Optional[datetime]:
        if self._started_at is None:
            return None
        return self._started_at + self._duration

    @property
    def record(self) -> Optional[AttendanceRecord]:
        """The record produced by a successful submit, if any."""
        return self._record

    @property
    def phase(self) -> SessionPhase:
        if self._roster is None:
            return SessionPhase.NEW
        if self._submitted:
            return SessionPhase.SUBMITTED
        if self._locked:
            return SessionPhase.LOCKED
        return SessionPhase.OPEN

    def status_of(self, student: str) -> Optional[AttendanceStatus]:
        with self._mutex:
            if self._roster is None:
                return None
            idx = self._roster.index_of(student)
            if idx is None:
                return None
            return self._statuses[idx]

    def statuses(self) -> list[tuple[str, AttendanceStatus]]:
        """(name, status) pairs in roster order."""
        with self._mutex:
            if self._roster is None:
                return []
            return list(zip(self._roster.names, self._statuses))

    def seconds_remaining(self, now: datetime) -> int:
        expires_at = self.expires_at
        if expires_at is None or self._locked:
            return 0
        return max(0, int((expires_at - now).total_seconds()))

    # ---- transitions ----

    def start(self, roster: Roster, *, now: datetime) -> None:
        with self._mutex:
            if self._roster is not None:
                raise ValidationError("Session already started; create a new session instead")
            self._roster = roster
            self._statuses = [AttendanceStatus.ABSENT] * len(roster)
            self._locked = False
            self._submitted = False
            self._started_at = now
        logger.info("Attendance session started for %d students, expires at %s", len(roster), self.expires_at)

    def toggle_status(self, student: str) -> bool:
        """Advance one student along the status cycle.

        Returns False (and changes nothing) when the session is not open or the
        student is not on the roster.
        """
        with self._mutex:
            if self._roster is None or self._locked or self._submitted:
                logger.debug("Toggle ignored for %r: session is %s", student, self.phase.value)
                return False
            idx = self._roster.index_of(student)
            if idx is None:
                logger.debug("Toggle ignored for %r: not on roster", student)
                return False
            self._statuses[idx] = self._statuses[idx].next_status()
            return True

    def expire(self) -> None:
        with self._mutex:
            if self._submitted or self._locked:
                return
            self._locked = True
        logger.info("Attendance session locked: marking window elapsed")

    def expire_if_due(self, now: datetime) -> bool:
        expires_at = self.expires_at
        if expires_at is None or now < expires_at:
            return False
        self.expire()
        return self._locked

    def build_record(self, on_date: date) -> AttendanceRecord:
        with self._mutex:
            roster = self.roster
            groups: dict[AttendanceStatus, list[str]] = {status: [] for status in AttendanceStatus}
            for name, status in zip(roster.names, self._statuses):
                groups[status].append(name)
            return AttendanceRecord(
                date=on_date,
                present=tuple(groups[AttendanceStatus.PRESENT]),
                late=tuple(groups[AttendanceStatus.LATE]),
                early_leave=tuple(groups[AttendanceStatus.EARLY_LEAVE]),
                absent=tuple(groups[AttendanceStatus.ABSENT]),
            )

    def submit(
        self,
        on_date: date,
        *,
        persist: Optional[Callable[[AttendanceRecord], object]] = None,
    ) -> AttendanceRecord:
        """Finalize the session and return its record.

        ``persist`` runs before the session is marked submitted; if it raises,
        the session stays open for a retry.
        """
        with self._mutex:
            if self._submitted:
                raise ValidationError("Attendance already submitted")
            if self._strict_lock and self._locked:
                raise ValidationError("Marking window has closed; attendance can no longer be submitted")

            record = self.build_record(on_date)
            if persist is not None:
                persist(record)

            self._submitted = True
            self._record = record

        logger.info("Attendance submitted for %s: %s", on_date.isoformat(), record.counts())
        return record
