from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OfficeLocation
from .repository import OfficeRepository

_COLUMNS = "office_id, name, latitude, longitude, radius, is_active, created_at"
_UPDATABLE = {"name", "latitude", "longitude", "radius", "is_active"}


def _to_office(r: dict) -> OfficeLocation:
    return OfficeLocation(
        office_id=int(r["office_id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius=float(r["radius"]),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLOfficeRepository(OfficeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, office_id: int) -> Optional[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM office_locations WHERE office_id=%s", (int(office_id),))
            r = fetchone(cur)
            return _to_office(r) if r else None

    def list_active(self) -> Sequence[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM office_locations WHERE is_active=1 ORDER BY office_id ASC")
            return [_to_office(r) for r in fetchall(cur)]

    def create(self, *, name: str, latitude: float, longitude: float, radius: float) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO office_locations(name, latitude, longitude, radius, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (name, latitude, longitude, radius),
            )
            return int(cur.lastrowid)

    def update(self, office_id: int, fields: dict) -> bool:
        sets = [f"{k}=%s" for k in fields if k in _UPDATABLE]
        if not sets:
            return self.get_by_id(office_id) is not None
        params = [fields[k] for k in fields if k in _UPDATABLE]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE office_locations SET {', '.join(sets)} WHERE office_id=%s",
                (*params, int(office_id)),
            )
            return cur.rowcount > 0
