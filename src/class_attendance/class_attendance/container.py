from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .attendance.json_record_repository import JsonAttendanceRecordRepository
from .attendance.mysql_record_repository import MySQLAttendanceRecordRepository
from .attendance.repository import AttendanceRecordRepository
from .attendance.service import AttendanceReportService, AttendanceService, TimerFactory
from .attendance.timer import threading_timer_factory
from .core.constants import DEFAULT_SESSION_MINUTES, DEFAULT_STORAGE_PATH
from .core.exceptions import ValidationError
from .database.connection import DatabaseConnection, DBConfig
from .roster.model import Roster


@dataclass(frozen=True)
class Container:
    roster: Roster
    records_repo: AttendanceRecordRepository

    attendance_service: AttendanceService
    report_service: AttendanceReportService


def build_records_repo(*, record_store: str, storage_path: str, db_config: Optional[dict] = None) -> AttendanceRecordRepository:
    kind = (record_store or "json").strip().lower()
    if kind == "json":
        return JsonAttendanceRecordRepository(storage_path)
    if kind == "mysql":
        if not db_config:
            raise ValidationError("RECORD_STORE=mysql requires DB_CONFIG")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        return MySQLAttendanceRecordRepository(conn)
    raise ValidationError(f"Unknown record store: {record_store!r}")


def build_container(
    *,
    roster: Iterable[str],
    record_store: str = "json",
    storage_path: str = DEFAULT_STORAGE_PATH,
    db_config: Optional[dict] = None,
    session_minutes: int = DEFAULT_SESSION_MINUTES,
    strict_lock: bool = False,
    timer_factory: Optional[TimerFactory] = threading_timer_factory,
    records_repo: Optional[AttendanceRecordRepository] = None,
) -> Container:
    roster_obj = Roster.from_names(roster)
    records = records_repo or build_records_repo(
        record_store=record_store,
        storage_path=storage_path,
        db_config=db_config,
    )

    attendance_service = AttendanceService(
        records,
        roster_obj,
        session_minutes=session_minutes,
        strict_lock=strict_lock,
        timer_factory=timer_factory,
    )
    report_service = AttendanceReportService(records, roster_obj)

    return Container(
        roster=roster_obj,
        records_repo=records,
        attendance_service=attendance_service,
        report_service=report_service,
    )
