from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List

@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back on any error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
