from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceType, GeofenceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import add_range, db_cursor, fetchall, fetchone, where_clause
from ..offices.model import OfficeLocation
from ..users.model import UserSummary
from .model import AttendanceEntry, AttendanceRecord
from .repository import AttendanceRepository, DateRange

_SELECT = """
    SELECT ar.attendance_id, ar.user_id, ar.office_id, ar.attendance_type,
           ar.latitude, ar.longitude, ar.status, ar.timestamp,
           o.name AS office_name, o.latitude AS office_latitude, o.longitude AS office_longitude,
           o.radius AS office_radius, o.is_active AS office_is_active, o.created_at AS office_created_at,
           u.email, u.first_name, u.last_name
    FROM attendance_records ar
    LEFT JOIN office_locations o ON o.office_id = ar.office_id
    JOIN users u ON u.user_id = ar.user_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        office_id=int(r["office_id"]),
        attendance_type=AttendanceType(r["attendance_type"]),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        status=GeofenceStatus(r["status"]),
        timestamp=r["timestamp"],
    )


def _to_entry(r: dict) -> AttendanceEntry:
    office = None
    if r.get("office_name") is not None:
        office = OfficeLocation(
            office_id=int(r["office_id"]),
            name=r["office_name"],
            latitude=float(r["office_latitude"]),
            longitude=float(r["office_longitude"]),
            radius=float(r["office_radius"]),
            is_active=bool(r.get("office_is_active", True)),
            created_at=r.get("office_created_at"),
        )
    user = UserSummary(
        user_id=int(r["user_id"]),
        email=r["email"],
        first_name=r["first_name"],
        last_name=r["last_name"],
    )
    return AttendanceEntry(record=_to_record(r), office=office, user=user)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        office_id: int,
        attendance_type: AttendanceType,
        latitude: float,
        longitude: float,
        status: GeofenceStatus,
        timestamp: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, office_id, attendance_type, latitude, longitude, status, timestamp
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(office_id),
                    attendance_type.value,
                    latitude,
                    longitude,
                    status.value,
                    timestamp,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, office_id, attendance_type, latitude, longitude, status, timestamp
                FROM attendance_records
                WHERE attendance_id=%s
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def _list(self, clauses: list, params: list) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where_clause(clauses)} ORDER BY ar.timestamp DESC, ar.attendance_id DESC",
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int, *, time_range: Optional[DateRange] = None) -> Sequence[AttendanceEntry]:
        clauses = ["ar.user_id=%s"]
        params: list[object] = [int(user_id)]
        add_range(clauses, params, "ar.timestamp", time_range)
        return self._list(clauses, params)

    def list_for_report(self, *, date_range: Optional[DateRange] = None) -> Sequence[AttendanceEntry]:
        clauses: list[str] = []
        params: list[object] = []
        add_range(clauses, params, "ar.timestamp", date_range)
        return self._list(clauses, params)

    def count(self, *, date_range: Optional[DateRange] = None) -> int:
        clauses: list[str] = []
        params: list[object] = []
        add_range(clauses, params, "timestamp", date_range)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS total FROM attendance_records WHERE {where_clause(clauses)}",
                tuple(params),
            )
            return int(fetchone(cur)["total"])
