from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestKind, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import add_range, db_cursor, fetchall, fetchone, where_clause
from ..users.model import UserSummary
from .model import LeaveRequest, MissionRequest, RequestEntry, StaffRequest
from .repository import DateRange, RequestRepository

_TABLES = {
    RequestKind.LEAVE: "leave_requests",
    RequestKind.MISSION: "mission_requests",
}

_COLUMNS = {
    RequestKind.LEAVE: "request_id, user_id, start_date, end_date, reason, status, created_at, approved_by, approved_at",
    RequestKind.MISSION: (
        "request_id, user_id, title, description, start_date, end_date, status, created_at, approved_by, approved_at"
    ),
}

_UPDATABLE = {
    RequestKind.LEAVE: {"start_date", "end_date", "reason"},
    RequestKind.MISSION: {"title", "description", "start_date", "end_date"},
}


def _to_request(kind: RequestKind, r: dict) -> StaffRequest:
    common = dict(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
    )
    if kind == RequestKind.LEAVE:
        return LeaveRequest(reason=r["reason"], **common)
    return MissionRequest(title=r["title"], description=r["description"], **common)


def _to_entry(kind: RequestKind, r: dict) -> RequestEntry:
    return RequestEntry(
        request=_to_request(kind, r),
        user=UserSummary(
            user_id=int(r["user_id"]),
            email=r["email"],
            first_name=r["first_name"],
            last_name=r["last_name"],
        ),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_leave(self, *, user_id: int, start_date: date, end_date: date, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, reason, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def create_mission(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        start_date: date,
        end_date: date,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO mission_requests(user_id, title, description, start_date, end_date, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), title, description, start_date, end_date, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, kind: RequestKind, request_id: int) -> Optional[StaffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS[kind]} FROM {_TABLES[kind]} WHERE request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(kind, r) if r else None

    def list_for_user(self, kind: RequestKind, user_id: int) -> Sequence[StaffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS[kind]} FROM {_TABLES[kind]}
                WHERE user_id=%s
                ORDER BY created_at DESC, request_id DESC
                """,
                (int(user_id),),
            )
            return [_to_request(kind, r) for r in fetchall(cur)]

    def _list_joined(self, kind: RequestKind, clauses: list, params: list) -> Sequence[RequestEntry]:
        columns = ", ".join(f"r.{c.strip()}" for c in _COLUMNS[kind].split(","))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {columns}, u.email, u.first_name, u.last_name
                FROM {_TABLES[kind]} r
                JOIN users u ON u.user_id = r.user_id
                WHERE {where_clause(clauses)}
                ORDER BY r.created_at DESC, r.request_id DESC
                """,
                tuple(params),
            )
            return [_to_entry(kind, r) for r in fetchall(cur)]

    def list_by_status(self, kind: RequestKind, status: RequestStatus) -> Sequence[RequestEntry]:
        return self._list_joined(kind, ["r.status=%s"], [status.value])

    def list_for_report(self, kind: RequestKind, *, date_range: Optional[DateRange] = None) -> Sequence[RequestEntry]:
        clauses: list[str] = []
        params: list[object] = []
        add_range(clauses, params, "r.created_at", date_range)
        return self._list_joined(kind, clauses, params)

    def count(self, kind: RequestKind, *, date_range: Optional[DateRange] = None) -> int:
        clauses: list[str] = []
        params: list[object] = []
        add_range(clauses, params, "created_at", date_range)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS total FROM {_TABLES[kind]} WHERE {where_clause(clauses)}",
                tuple(params),
            )
            return int(fetchone(cur)["total"])

    def update_pending(self, kind: RequestKind, request_id: int, fields: dict) -> bool:
        keys = [k for k in fields if k in _UPDATABLE[kind]]
        if not keys:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {_TABLES[kind]}
                SET {', '.join(f'{k}=%s' for k in keys)}
                WHERE request_id=%s AND status=%s
                """,
                (*[fields[k] for k in keys], int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_pending(self, kind: RequestKind, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM {_TABLES[kind]} WHERE request_id=%s AND status=%s",
                (int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def decide(
        self,
        kind: RequestKind,
        request_id: int,
        *,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {_TABLES[kind]}
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
