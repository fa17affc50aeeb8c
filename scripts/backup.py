"""Backup attendance records.

Note: Dumps the configured record store (json or mysql) into a timestamped JSON
file under backups/, in the same layout as the JSON store.
"""

from __future__ import annotations

import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_records_repo


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    repo = build_records_repo(
        record_store=getattr(settings, "RECORD_STORE", "json"),
        storage_path=settings.STORAGE_PATH,
        db_config=getattr(settings, "DB_CONFIG", None),
    )
    records = repo.load_all()

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"attendance_records_{ts}.json"
    with out_file.open("w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in records], f, ensure_ascii=False, indent=4)
    print(f"OK: Backup created: {out_file} ({len(records)} records)")


if __name__ == "__main__":
    main()
