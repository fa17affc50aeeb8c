from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_positive
from ..core.constants import DEFAULT_SESSION_MINUTES
from ..core.exceptions import ValidationError
from ..roster.model import Roster
from .model import AttendanceRecord
from .repository import AttendanceRecordRepository
from .session import AttendanceSession
from .summary import Summary, summarize
from .timer import ExpiryTimer

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], ExpiryTimer]


class AttendanceService:
    """Owns the single in-progress marking session of the local operator."""

    def __init__(
        self,
        records: AttendanceRecordRepository,
        roster: Roster,
        *,
        session_minutes: int = DEFAULT_SESSION_MINUTES,
        strict_lock: bool = False,
        timer_factory: Optional[TimerFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._records = records
        self._roster = roster
        self._session_minutes = require_positive(session_minutes, "session_minutes")
        self._strict_lock = bool(strict_lock)
        self._timer_factory = timer_factory
        self._clock = clock

        self._session: Optional[AttendanceSession] = None
        self._timer: Optional[ExpiryTimer] = None

    @property
    def roster(self) -> Roster:
        return self._roster

    def start_session(self) -> AttendanceSession:
        self.exit_session()

        session = AttendanceSession(duration_minutes=self._session_minutes, strict_lock=self._strict_lock)
        session.start(self._roster, now=self._clock())
        self._session = session

        if self._timer_factory is not None:
            self._timer = self._timer_factory(self._session_minutes * 60, session.expire)
            self._timer.start()
        return session

    def current_session(self) -> AttendanceSession:
        session = self._session
        if session is None:
            raise ValidationError("No attendance session in progress")
        session.expire_if_due(self._clock())
        return session

    def has_session(self) -> bool:
        return self._session is not None

    def toggle(self, student: str) -> bool:
        return self.current_session().toggle_status(student)

    def submit(self) -> AttendanceRecord:
        session = self.current_session()
        record = session.submit(self._clock().date(), persist=self._records.upsert)
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        return record

    def exit_session(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._session is not None:
            logger.info("Attendance session discarded (phase=%s)", self._session.phase.value)
        self._session = None

    def session_view(self) -> dict:
        session = self.current_session()
        now = self._clock()
        return {
            "phase": session.phase.value,
            "locked": session.locked,
            "submitted": session.submitted,
            "started_at": session.started_at.isoformat() if session.started_at else None,
            "expires_at": session.expires_at.isoformat() if session.expires_at else None,
            "seconds_remaining": session.seconds_remaining(now),
            "students": [{"student": name, "status": status.value} for name, status in session.statuses()],
        }


class AttendanceReportService:
    """Read models for the previous-report listing and the dashboard."""

    def __init__(self, records: AttendanceRecordRepository, roster: Roster):
        self._records = records
        self._roster = roster

    def previous_records(self) -> list[AttendanceRecord]:
        records = list(self._records.load_all())
        records.sort(key=lambda r: r.date, reverse=True)
        return records

    def summary(self) -> Summary:
        return summarize(self._records.load_all(), self._roster)

    def dashboard(self) -> dict:
        summary = self.summary()
        return {
            "total_classes": summary.total_sessions,
            "students": summary.rows(),
        }

    def previous_report(self) -> list[dict]:
        return [{**r.to_dict(), "counts": r.counts()} for r in self.previous_records()]
