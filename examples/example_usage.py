"""Example: drive the service layer directly (without Flask).

Controllers are a thin layer; the session rules live in the services.
"""

import importlib

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        roster=settings.ROSTER,
        record_store=settings.RECORD_STORE,
        storage_path=settings.STORAGE_PATH,
        db_config=settings.DB_CONFIG,
        timer_factory=None,
    )

    attendance = container.attendance_service
    attendance.start_session()
    for name in container.roster.names[:3]:
        attendance.toggle(name)
    record = attendance.submit()
    attendance.exit_session()

    print(record.counts())
    print(container.report_service.dashboard())


if __name__ == "__main__":
    main()
