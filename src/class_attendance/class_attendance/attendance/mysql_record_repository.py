from __future__ import annotations

import json
import logging
import threading
from typing import Any, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import RECORDS_TABLE
from ..core.exceptions import PersistenceError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRecordRepository

logger = logging.getLogger(__name__)

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {RECORDS_TABLE} (
    seq INT AUTO_INCREMENT PRIMARY KEY,
    work_date DATE NOT NULL,
    present JSON NOT NULL,
    late JSON NOT NULL,
    early_leave JSON NOT NULL,
    absent JSON NOT NULL,
    submitted_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE KEY uq_{RECORDS_TABLE}_work_date (work_date)
)
"""

_SELECT_ALL = f"""
SELECT work_date, present, late, early_leave, absent
FROM {RECORDS_TABLE}
ORDER BY seq
"""


def _json_list(value: Any) -> tuple[str, ...]:
    # mysql-connector returns JSON columns as str, bytes or bytearray depending on version.
    if value is None:
        return ()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return tuple(str(v) for v in value)


def _row_to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        date=row["work_date"],
        present=_json_list(row.get("present")),
        late=_json_list(row.get("late")),
        early_leave=_json_list(row.get("early_leave")),
        absent=_json_list(row.get("absent")),
    )


class MySQLAttendanceRecordRepository(AttendanceRecordRepository):
    """One row per date; ``seq`` keeps insertion order so a replaced date moves to the end."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._write_lock = threading.Lock()

    def ensure_schema(self) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(SCHEMA_SQL)
        except mysql.connector.Error as e:
            logger.exception("Failed to create %s table", RECORDS_TABLE)
            raise PersistenceError(f"Cannot prepare attendance store: {e}") from e

    def load_all(self) -> Sequence[AttendanceRecord]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(_SELECT_ALL)
                rows = fetchall(cur)
        except mysql.connector.Error as e:
            if getattr(e, "errno", None) == errorcode.ER_NO_SUCH_TABLE:
                return []
            logger.exception("Failed to read attendance records")
            raise PersistenceError(f"Cannot read attendance records: {e}") from e
        return self._to_records(rows)

    def upsert(self, record: AttendanceRecord) -> Sequence[AttendanceRecord]:
        if not self._write_lock.acquire(blocking=False):
            raise PersistenceError("Another save is in progress")
        try:
            # Read back inside the same transaction so a failed read rolls the write back.
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {RECORDS_TABLE} WHERE work_date=%s", (record.date,))
                cur.execute(
                    f"""
                    INSERT INTO {RECORDS_TABLE} (work_date, present, late, early_leave, absent)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (
                        record.date,
                        json.dumps(list(record.present), ensure_ascii=False),
                        json.dumps(list(record.late), ensure_ascii=False),
                        json.dumps(list(record.early_leave), ensure_ascii=False),
                        json.dumps(list(record.absent), ensure_ascii=False),
                    ),
                )
                cur.execute(_SELECT_ALL)
                return self._to_records(fetchall(cur))
        except mysql.connector.Error as e:
            logger.exception("Failed to save attendance record for %s", record.date)
            raise PersistenceError(f"Cannot save attendance records: {e}") from e
        finally:
            self._write_lock.release()

    @staticmethod
    def _to_records(rows: list[dict]) -> list[AttendanceRecord]:
        try:
            return [_row_to_record(r) for r in rows]
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.exception("Corrupt attendance row in %s", RECORDS_TABLE)
            raise PersistenceError(f"Corrupt attendance store: {e}") from e
