from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.enums import RequestStatus, Role
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


DEMO_USERS = (
    # email, password, first name, last name, role, position, department
    ("admin@tracking.com", "admin123", "Admin", "User", Role.ADMIN, "System Administrator", "IT"),
    ("staff1@tracking.com", "staff123", "Sokha", "Chan", Role.STAFF, "Project Officer", "Operations"),
    ("staff2@tracking.com", "staff123", "Dara", "Kem", Role.STAFF, "Field Coordinator", "Programs"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes, skips '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, sql: str) -> None:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(_strip_create_db_and_use(sql)):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, Path(schema_path).read_text(encoding="utf-8"))
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, Path(seed_path).read_text(encoding="utf-8"))
    logger.info("Applied seed %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        for email, password, first_name, last_name, role, position, department in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET password_hash=%s, role=%s, is_active=1, approval_status=%s
                    WHERE email=%s
                    """,
                    (password_hash, role.value, RequestStatus.APPROVED.value, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users(email, password_hash, first_name, last_name, role,
                                      position, department, is_active, approval_status)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,1,%s)
                    """,
                    (
                        email,
                        password_hash,
                        first_name,
                        last_name,
                        role.value,
                        position,
                        department,
                        RequestStatus.APPROVED.value,
                    ),
                )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
