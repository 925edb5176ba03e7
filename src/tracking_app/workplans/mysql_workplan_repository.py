from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from ..core.enums import Role, WorkPlanStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import add_range, db_cursor, fetchall, fetchone, where_clause
from ..users.model import UserSummary
from .model import WorkPlan, WorkPlanComment, WorkPlanEntry
from .repository import DateRange, WorkPlanRepository

_COLUMNS = (
    "w.plan_id, w.user_id, w.title, w.description, w.due_date, w.status, w.progress, "
    "w.achievement, w.output, w.submitted_at, w.created_at, w.updated_at"
)

_UPDATABLE = {
    "title",
    "description",
    "due_date",
    "status",
    "progress",
    "achievement",
    "output",
    "submitted_at",
    "updated_at",
}


def _db_value(value):
    return value.value if isinstance(value, WorkPlanStatus) else value


def _to_comment(r: dict) -> WorkPlanComment:
    return WorkPlanComment(
        comment_id=int(r["comment_id"]),
        plan_id=int(r["plan_id"]),
        author_id=int(r["author_id"]),
        author_role=Role(r["author_role"]),
        text=r["text"],
        created_at=r["created_at"],
    )


def _to_plan(r: dict, comments: List[WorkPlanComment]) -> WorkPlan:
    return WorkPlan(
        plan_id=int(r["plan_id"]),
        user_id=int(r["user_id"]),
        title=r["title"],
        description=r["description"],
        due_date=r["due_date"],
        status=WorkPlanStatus(r["status"]),
        progress=int(r.get("progress") or 0),
        achievement=r.get("achievement"),
        output=r.get("output"),
        submitted_at=r.get("submitted_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        comments=tuple(comments),
    )


class MySQLWorkPlanRepository(WorkPlanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _comments_for(cur, plan_ids: List[int]) -> Dict[int, List[WorkPlanComment]]:
        grouped: Dict[int, List[WorkPlanComment]] = defaultdict(list)
        if not plan_ids:
            return grouped
        placeholders = ", ".join(["%s"] * len(plan_ids))
        cur.execute(
            f"""
            SELECT comment_id, plan_id, author_id, author_role, text, created_at
            FROM work_plan_comments
            WHERE plan_id IN ({placeholders})
            ORDER BY created_at ASC, comment_id ASC
            """,
            tuple(plan_ids),
        )
        for r in fetchall(cur):
            grouped[int(r["plan_id"])].append(_to_comment(r))
        return grouped

    def create(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        due_date: date,
        status: WorkPlanStatus,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_plans(user_id, title, description, due_date, status, progress, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,0,%s,%s)
                """,
                (int(user_id), title, description, due_date, status.value, created_at, created_at),
            )
            return int(cur.lastrowid)

    def get(self, plan_id: int) -> Optional[WorkPlan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_plans w WHERE w.plan_id=%s", (int(plan_id),))
            r = fetchone(cur)
            if not r:
                return None
            comments = self._comments_for(cur, [int(r["plan_id"])])
            return _to_plan(r, comments[int(r["plan_id"])])

    def update(self, plan_id: int, fields: dict) -> bool:
        keys = [k for k in fields if k in _UPDATABLE]
        if not keys:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE work_plans SET {', '.join(f'{k}=%s' for k in keys)} WHERE plan_id=%s",
                (*[_db_value(fields[k]) for k in keys], int(plan_id)),
            )
            return cur.rowcount > 0

    def delete(self, plan_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_plans WHERE plan_id=%s", (int(plan_id),))
            return cur.rowcount > 0

    def add_comment(
        self,
        plan_id: int,
        *,
        author_id: int,
        author_role: Role,
        text: str,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_plan_comments(plan_id, author_id, author_role, text, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(plan_id), int(author_id), author_role.value, text, created_at),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int, *, status: Optional[WorkPlanStatus] = None) -> Sequence[WorkPlan]:
        clauses = ["w.user_id=%s"]
        params: List[object] = [int(user_id)]
        if status is not None:
            clauses.append("w.status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM work_plans w
                WHERE {where_clause(clauses)}
                ORDER BY w.created_at DESC, w.plan_id DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            comments = self._comments_for(cur, [int(r["plan_id"]) for r in rows])
            return [_to_plan(r, comments[int(r["plan_id"])]) for r in rows]

    def list_all(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[WorkPlanStatus] = None,
        date_range: Optional[DateRange] = None,
    ) -> Sequence[WorkPlanEntry]:
        clauses: List[str] = []
        params: List[object] = []
        if user_id is not None:
            clauses.append("w.user_id=%s")
            params.append(int(user_id))
        if status is not None:
            clauses.append("w.status=%s")
            params.append(status.value)
        add_range(clauses, params, "w.created_at", date_range)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.email, u.first_name, u.last_name
                FROM work_plans w
                JOIN users u ON u.user_id = w.user_id
                WHERE {where_clause(clauses)}
                ORDER BY w.created_at DESC, w.plan_id DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            comments = self._comments_for(cur, [int(r["plan_id"]) for r in rows])
            return [
                WorkPlanEntry(
                    plan=_to_plan(r, comments[int(r["plan_id"])]),
                    user=UserSummary(
                        user_id=int(r["user_id"]),
                        email=r["email"],
                        first_name=r["first_name"],
                        last_name=r["last_name"],
                    ),
                )
                for r in rows
            ]

    def count(self, *, date_range: Optional[DateRange] = None) -> int:
        clauses: List[str] = []
        params: List[object] = []
        add_range(clauses, params, "created_at", date_range)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS total FROM work_plans WHERE {where_clause(clauses)}",
                tuple(params),
            )
            return int(fetchone(cur)["total"])
