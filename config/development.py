import os

from config import roster_from_env

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

ROSTER = roster_from_env()

# Marking window in minutes; toggles are rejected once it elapses
SESSION_MINUTES = int(os.getenv("SESSION_MINUTES", "10"))
# If enabled, a locked session can no longer be submitted either
STRICT_LOCK = bool(int(os.getenv("STRICT_LOCK", "0")))

# "json" (single file) or "mysql"
RECORD_STORE = os.getenv("RECORD_STORE", "json")
STORAGE_PATH = os.getenv("STORAGE_PATH", "data/attendance_records.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
}

# If enabled, the attendance_records table is created on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
