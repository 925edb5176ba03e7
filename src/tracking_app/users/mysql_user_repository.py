from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RequestStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, email, password_hash, first_name, last_name, role,
    position, department, is_active, approval_status, registered_at
"""
_UPDATABLE = {
    "password_hash",
    "first_name",
    "last_name",
    "role",
    "position",
    "department",
    "is_active",
    "approval_status",
}


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        role=Role(row["role"]),
        position=row.get("position"),
        department=row.get("department"),
        is_active=bool(row.get("is_active", False)),
        approval_status=RequestStatus(row.get("approval_status") or RequestStatus.PENDING.value),
        registered_at=row.get("registered_at"),
    )


def _db_value(value):
    if isinstance(value, (Role, RequestStatus)):
        return value.value
    return value


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: Role,
        position: Optional[str],
        department: Optional[str],
        is_active: bool,
        approval_status: RequestStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, password_hash, first_name, last_name, role,
                                  position, department, is_active, approval_status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    email,
                    password_hash,
                    first_name,
                    last_name,
                    role.value,
                    position,
                    department,
                    int(bool(is_active)),
                    approval_status.value,
                ),
            )
            return int(cur.lastrowid)

    def update(self, user_id: int, fields: dict) -> bool:
        keys = [k for k in fields if k in _UPDATABLE]
        if not keys:
            return self.get_by_id(user_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {', '.join(f'{k}=%s' for k in keys)} WHERE user_id=%s",
                (*[_db_value(fields[k]) for k in keys], int(user_id)),
            )
            return cur.rowcount > 0

    def decide_registration(
        self,
        user_id: int,
        *,
        approval_status: RequestStatus,
        role: Role,
        is_active: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET approval_status=%s, role=%s, is_active=%s
                WHERE user_id=%s AND approval_status=%s AND is_active=0
                """,
                (
                    approval_status.value,
                    role.value,
                    int(bool(is_active)),
                    int(user_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_pending(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM users
                WHERE is_active=0 AND approval_status=%s
                ORDER BY registered_at DESC, user_id DESC
                """,
                (RequestStatus.PENDING.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_users(self, *, role: Optional[Role] = None, is_active: Optional[bool] = None) -> Sequence[User]:
        clauses: list[str] = []
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(int(bool(is_active)))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {where_clause(clauses)} ORDER BY registered_at DESC, user_id DESC",
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users WHERE is_active=1")
            return int(fetchone(cur)["total"])
