from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Sequence

from ..core.exceptions import PersistenceError, ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRecordRepository

logger = logging.getLogger(__name__)


class JsonAttendanceRecordRepository(AttendanceRecordRepository):
    """Stores the whole record collection as one JSON array in a single file."""

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path)
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> Sequence[AttendanceRecord]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.exception("Failed to read attendance records from %s", self._path)
            raise PersistenceError(f"Cannot read attendance records: {e}") from e

        if not isinstance(raw, list):
            raise PersistenceError(f"Corrupt attendance store {self._path}: expected a list")
        try:
            return [AttendanceRecord.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.exception("Corrupt attendance record in %s", self._path)
            raise PersistenceError(f"Corrupt attendance store {self._path}: {e}") from e

    def upsert(self, record: AttendanceRecord) -> Sequence[AttendanceRecord]:
        if not self._write_lock.acquire(blocking=False):
            raise PersistenceError("Another save is in progress")
        try:
            existing = self.load_all()
            updated = [r for r in existing if r.date != record.date]
            updated.append(record)
            self._write(updated)
            return updated
        finally:
            self._write_lock.release()

    def _write(self, records: Sequence[AttendanceRecord]) -> None:
        payload = [r.to_dict() for r in records]
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".attendance-", suffix=".json", dir=str(self._path.parent))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=4)
            os.replace(tmp_name, self._path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            logger.exception("Failed to write attendance records to %s", self._path)
            raise PersistenceError(f"Cannot save attendance records: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)
