import os

from config import roster_from_env

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

ROSTER = roster_from_env()

SESSION_MINUTES = int(os.getenv("SESSION_MINUTES", "10"))
STRICT_LOCK = bool(int(os.getenv("STRICT_LOCK", "0")))

RECORD_STORE = os.getenv("RECORD_STORE", "json")
STORAGE_PATH = os.getenv("STORAGE_PATH", "data/attendance_records.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
}

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
