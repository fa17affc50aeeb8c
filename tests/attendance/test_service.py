from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord
from src.class_attendance.class_attendance.attendance.service import AttendanceReportService, AttendanceService
from src.class_attendance.class_attendance.core.enums import AttendanceStatus, SessionPhase
from src.class_attendance.class_attendance.core.exceptions import PersistenceError, ValidationError
from src.class_attendance.class_attendance.roster.model import Roster


class InMemoryRecords:
    def __init__(self):
        self._records: list[AttendanceRecord] = []
        self.fail_next = False

    def load_all(self):
        return list(self._records)

    def upsert(self, record: AttendanceRecord):
        if self.fail_next:
            self.fail_next = False
            raise PersistenceError("storage unavailable")
        self._records = [r for r in self._records if r.date != record.date]
        self._records.append(record)
        return list(self._records)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeTimer:
    def __init__(self, seconds: float, on_expire):
        self.seconds = seconds
        self.on_expire = on_expire
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.on_expire()


class TimerRecorder:
    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, seconds, on_expire):
        timer = FakeTimer(seconds, on_expire)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> Optional[FakeTimer]:
        return self.timers[-1] if self.timers else None


def _service(records=None, clock=None, timers=None, **kwargs) -> AttendanceService:
    return AttendanceService(
        records or InMemoryRecords(),
        Roster.from_names(["A", "B"]),
        clock=clock or FakeClock(datetime(2024, 5, 1, 9, 0)),
        timer_factory=timers,
        **kwargs,
    )


def test_full_flow_stores_record_and_summarizes():
    records = InMemoryRecords()
    svc = _service(records)

    svc.start_session()
    svc.toggle("A")
    svc.toggle("B")
    svc.toggle("B")
    record = svc.submit()

    assert record.date == date(2024, 5, 1)
    assert records.load_all() == [record]

    reports = AttendanceReportService(records, svc.roster)
    summary = reports.summary()
    assert summary.total_sessions == 1
    assert dict(summary.attendance_count_of) == {"A": 1, "B": 1}
    assert [row["percent"] for row in reports.dashboard()["students"]] == ["100.0", "100.0"]


def test_resubmitting_same_date_in_new_session_replaces_record():
    records = InMemoryRecords()
    svc = _service(records)

    svc.start_session()
    svc.toggle("A")
    svc.submit()

    svc.start_session()
    svc.toggle("B")
    second = svc.submit()

    assert records.load_all() == [second]
    assert second.present == ("B",)
    assert second.absent == ("A",)


def test_operations_without_session_are_rejected():
    svc = _service()
    with pytest.raises(ValidationError):
        svc.toggle("A")
    with pytest.raises(ValidationError):
        svc.submit()
    with pytest.raises(ValidationError):
        svc.session_view()


def test_double_submit_keeps_single_record():
    records = InMemoryRecords()
    svc = _service(records)
    svc.start_session()
    svc.submit()

    with pytest.raises(ValidationError):
        svc.submit()
    assert len(records.load_all()) == 1


def test_persistence_failure_keeps_session_state_for_retry():
    records = InMemoryRecords()
    svc = _service(records)
    svc.start_session()
    svc.toggle("A")

    records.fail_next = True
    with pytest.raises(PersistenceError):
        svc.submit()

    session = svc.current_session()
    assert session.phase == SessionPhase.OPEN
    assert session.status_of("A") == AttendanceStatus.PRESENT
    assert records.load_all() == []

    record = svc.submit()
    assert records.load_all() == [record]


def test_clock_past_window_locks_session():
    clock = FakeClock(datetime(2024, 5, 1, 9, 0))
    svc = _service(clock=clock)
    svc.start_session()
    svc.toggle("A")

    clock.now += timedelta(minutes=10, seconds=1)

    assert svc.toggle("A") is False
    view = svc.session_view()
    assert view["phase"] == "LOCKED"
    assert view["seconds_remaining"] == 0
    assert view["students"] == [
        {"student": "A", "status": "present"},
        {"student": "B", "status": "absent"},
    ]


def test_timer_is_armed_and_fires_expire():
    timers = TimerRecorder()
    svc = _service(timers=timers, session_minutes=5)
    session = svc.start_session()

    assert timers.last.started is True
    assert timers.last.seconds == 300

    timers.last.fire()
    assert session.locked is True


def test_exit_cancels_timer_so_discarded_session_never_locks():
    timers = TimerRecorder()
    svc = _service(timers=timers)
    session = svc.start_session()

    svc.exit_session()
    timers.last.fire()

    assert timers.last.cancelled is True
    assert session.locked is False
    assert svc.has_session() is False


def test_starting_new_session_cancels_previous_timer():
    timers = TimerRecorder()
    svc = _service(timers=timers)
    svc.start_session()
    svc.start_session()

    assert timers.timers[0].cancelled is True
    assert timers.timers[1].cancelled is False


def test_strict_lock_setting_is_passed_to_sessions():
    clock = FakeClock(datetime(2024, 5, 1, 9, 0))
    svc = _service(clock=clock, strict_lock=True)
    svc.start_session()
    clock.now += timedelta(minutes=11)

    with pytest.raises(ValidationError):
        svc.submit()


def test_invalid_session_minutes_rejected():
    with pytest.raises(ValidationError):
        _service(session_minutes=0)


def test_previous_report_lists_latest_first():
    records = InMemoryRecords()
    records.upsert(AttendanceRecord(date=date(2024, 5, 1), present=("A",), absent=("B",)))
    records.upsert(AttendanceRecord(date=date(2024, 5, 3), late=("A", "B")))
    records.upsert(AttendanceRecord(date=date(2024, 5, 2), absent=("A", "B")))

    report = AttendanceReportService(records, Roster.from_names(["A", "B"])).previous_report()

    assert [r["date"] for r in report] == ["2024-05-03", "2024-05-02", "2024-05-01"]
    assert report[0]["counts"] == {"present": 0, "late": 2, "earlyLeave": 0, "absent": 0}
