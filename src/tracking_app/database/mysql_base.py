from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
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


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def where_clause(clauses: List[str]) -> str:
    return " AND ".join(clauses) if clauses else "1=1"


def add_range(clauses: List[str], params: List[object], column: str, date_range) -> None:
    """Append an inclusive ``BETWEEN`` filter when a range is given."""
    if date_range is None:
        return
    clauses.append(f"{column} BETWEEN %s AND %s")
    params.extend([date_range[0], date_range[1]])
