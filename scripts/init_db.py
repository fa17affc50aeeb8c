from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.attendance.mysql_record_repository import MySQLAttendanceRecordRepository
from src.class_attendance.class_attendance.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    repo = MySQLAttendanceRecordRepository(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))
    repo.ensure_schema()
    print(
        "OK: attendance_records table ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(records={len(repo.load_all())})"
    )


if __name__ == "__main__":
    main()
