import os

from config import roster_from_env

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ROSTER = roster_from_env()

SESSION_MINUTES = 10
STRICT_LOCK = False

RECORD_STORE = "json"
STORAGE_PATH = os.getenv("STORAGE_PATH", "data/test_attendance_records.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance_test"),
}

AUTO_INIT_DB = False
