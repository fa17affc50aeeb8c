"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_MINUTES = 10
DEFAULT_STORAGE_PATH = "data/attendance_records.json"
RECORDS_TABLE = "attendance_records"
