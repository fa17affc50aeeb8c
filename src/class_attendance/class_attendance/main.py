from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendance.mysql_record_repository import MySQLAttendanceRecordRepository
from .container import Container, build_container

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        container = build_container(
            roster=getattr(settings, "ROSTER"),
            record_store=getattr(settings, "RECORD_STORE", "json"),
            storage_path=getattr(settings, "STORAGE_PATH"),
            db_config=getattr(settings, "DB_CONFIG", None),
            session_minutes=int(getattr(settings, "SESSION_MINUTES", 10)),
            strict_lock=bool(getattr(settings, "STRICT_LOCK", False)),
        )
        if isinstance(container.records_repo, MySQLAttendanceRecordRepository) and getattr(settings, "AUTO_INIT_DB", False):
            container.records_repo.ensure_schema()

    logger.info(
        "[class-attendance] settings=%s store=%s roster=%d students",
        settings_module,
        type(container.records_repo).__name__,
        len(container.roster),
    )

    register_attendance(app, container)
    app.extensions["class_attendance"] = container

    return app
