from __future__ import annotations

import json
from datetime import date, datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord
from src.class_attendance.class_attendance.attendance.mysql_record_repository import MySQLAttendanceRecordRepository
from src.class_attendance.class_attendance.attendance.service import AttendanceService
from src.class_attendance.class_attendance.core.exceptions import PersistenceError
from src.class_attendance.class_attendance.roster.model import Roster


class FakeDatabase:
    """Tiny stand-in for the attendance_records table with commit/rollback."""

    def __init__(self, *, table_exists: bool = True):
        self.table_exists = table_exists
        self.rows: list[dict] = []
        self.next_seq = 1
        self.fail_on: str | None = None
        self.statements: list[str] = []

    def connect(self):
        return FakeConnection(self)


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self.db = db
        self.rows = [dict(r) for r in db.rows]
        self.next_seq = db.next_seq
        self.table_exists = db.table_exists
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.db.rows = self.rows
        self.db.next_seq = self.next_seq
        self.db.table_exists = self.table_exists

    def rollback(self):
        self.rows = [dict(r) for r in self.db.rows]

    def close(self):
        self.closed = True


class FakeCursor:
    def __init__(self, conn: FakeConnection):
        self.conn = conn
        self._result: list[dict] = []

    def execute(self, sql, params=()):
        stmt = " ".join(sql.split())
        self.conn.db.statements.append(stmt)
        verb = stmt.split(" ", 1)[0].upper()
        if self.conn.db.fail_on == verb:
            raise mysql.connector.Error(msg="connection lost", errno=2013)

        if verb == "CREATE":
            self.conn.table_exists = True
            return
        if not self.conn.table_exists:
            raise mysql.connector.Error(msg="Table doesn't exist", errno=errorcode.ER_NO_SUCH_TABLE)

        if verb == "SELECT":
            self._result = [
                {k: v for k, v in r.items() if k != "seq"}
                for r in sorted(self.conn.rows, key=lambda r: r["seq"])
            ]
        elif verb == "DELETE":
            self.conn.rows = [r for r in self.conn.rows if r["work_date"] != params[0]]
        elif verb == "INSERT":
            work_date, present, late, early_leave, absent = params
            self.conn.rows.append(
                {
                    "seq": self.conn.next_seq,
                    "work_date": work_date,
                    "present": present,
                    "late": late,
                    "early_leave": early_leave,
                    "absent": absent.encode("utf-8"),
                }
            )
            self.conn.next_seq += 1

    def fetchall(self):
        return self._result

    def close(self):
        pass


def test_missing_table_loads_empty():
    repo = MySQLAttendanceRecordRepository(FakeDatabase(table_exists=False))
    assert list(repo.load_all()) == []


def test_ensure_schema_creates_table():
    db = FakeDatabase(table_exists=False)
    repo = MySQLAttendanceRecordRepository(db)

    repo.ensure_schema()

    assert db.table_exists is True
    assert db.statements[0].startswith("CREATE TABLE IF NOT EXISTS attendance_records")


def test_upsert_replaces_same_date_and_keeps_insertion_order():
    db = FakeDatabase()
    repo = MySQLAttendanceRecordRepository(db)
    first = AttendanceRecord(date=date(2024, 5, 1), present=("A",), late=("B",))
    other_day = AttendanceRecord(date=date(2024, 5, 2), absent=("A", "B"))
    second = AttendanceRecord(date=date(2024, 5, 1), early_leave=("A",), absent=("B",))

    repo.upsert(first)
    repo.upsert(other_day)
    result = repo.upsert(second)

    assert list(result) == [other_day, second]
    assert list(repo.load_all()) == [other_day, second]
    assert json.loads(db.rows[-1]["early_leave"]) == ["A"]


def test_failed_insert_rolls_back_delete():
    db = FakeDatabase()
    repo = MySQLAttendanceRecordRepository(db)
    original = AttendanceRecord(date=date(2024, 5, 1), present=("A",))
    repo.upsert(original)

    db.fail_on = "INSERT"
    with pytest.raises(PersistenceError):
        repo.upsert(AttendanceRecord(date=date(2024, 5, 1), absent=("A",)))

    db.fail_on = None
    assert list(repo.load_all()) == [original]


def test_unreadable_store_raises_persistence_error():
    db = FakeDatabase()
    db.fail_on = "SELECT"

    with pytest.raises(PersistenceError):
        MySQLAttendanceRecordRepository(db).load_all()


def test_failed_read_back_rolls_back_the_write():
    db = FakeDatabase()
    repo = MySQLAttendanceRecordRepository(db)
    original = AttendanceRecord(date=date(2024, 5, 1), present=("A",))
    repo.upsert(original)

    db.fail_on = "SELECT"
    with pytest.raises(PersistenceError):
        repo.upsert(AttendanceRecord(date=date(2024, 5, 2), absent=("A",)))

    db.fail_on = None
    assert list(repo.load_all()) == [original]


def test_failed_save_leaves_session_open_and_store_unchanged():
    db = FakeDatabase()
    repo = MySQLAttendanceRecordRepository(db)
    svc = AttendanceService(
        repo,
        Roster.from_names(["A", "B"]),
        clock=lambda: datetime(2024, 5, 1, 9, 0),
    )
    svc.start_session()
    svc.toggle("A")

    db.fail_on = "SELECT"
    with pytest.raises(PersistenceError):
        svc.submit()

    assert db.rows == []
    assert svc.current_session().submitted is False

    db.fail_on = None
    record = svc.submit()
    assert list(repo.load_all()) == [record]
    assert svc.current_session().submitted is True
