from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator, Mapping

from ..common.validators import require_min_length
from ..core.constants import DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_FULL_NAME, DEFAULT_ADMIN_USERNAME, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..students.qr import make_qr_code
from ..users.service import hash_password
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")


def _factory(db_config: Mapping) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_mapping(db_config))


def split_sql_statements(sql: str) -> Iterator[str]:
    """Split a SQL script on ';' outside of quoted strings."""

    buf: list[str] = []
    quote = None
    escaped = False

    for ch in sql:
        buf.append(ch)
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: Mapping, path: str | Path) -> None:
    # Keep scripts usable regardless of the configured DB name.
    sql = _CREATE_DB_OR_USE.sub("", Path(path).read_text(encoding="utf-8"))
    with closing(_factory(db_config).connect()) as conn:
        cur = conn.cursor()
        for stmt in split_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()


def ensure_database_exists(db_config: Mapping) -> None:
    factory = _factory(db_config)
    with closing(factory.connect(with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)
    logger.info("Applied seed %s", seed_path)


def ensure_default_admin(db_config: Mapping, *, password: str) -> None:
    """Create the default admin account, or reactivate it and reset its password."""

    password_hash = hash_password(require_min_length(password, "Default admin password", MIN_PASSWORD_LENGTH))
    with closing(_factory(db_config).connect()) as conn:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT user_id FROM users WHERE username=%s", (DEFAULT_ADMIN_USERNAME,))
        existing = cur.fetchone()
        if existing:
            cur.execute(
                "UPDATE users SET password_hash=%s, is_active=1 WHERE user_id=%s",
                (password_hash, int(existing["user_id"])),
            )
            logger.info("Default admin account updated")
        else:
            cur.execute(
                """
                INSERT INTO users(username, password_hash, role, full_name, email, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (DEFAULT_ADMIN_USERNAME, password_hash, Role.ADMIN.value, DEFAULT_ADMIN_FULL_NAME, DEFAULT_ADMIN_EMAIL),
            )
            logger.info("Default admin account created")
        conn.commit()


def list_tables(db_config: Mapping) -> list[str]:
    with closing(_factory(db_config).connect()) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def sync_student_qr_codes(db_config: Mapping) -> int:
    """Regenerate ``qr_code`` from the NISN wherever the two disagree.

    Returns the number of students updated.
    """

    with closing(_factory(db_config).connect()) as conn:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT student_id, nisn, qr_code FROM students")
        stale = [
            (make_qr_code(row["nisn"]), int(row["student_id"]))
            for row in cur.fetchall()
            if row["qr_code"] != make_qr_code(row["nisn"])
        ]
        for qr_code, student_id in stale:
            cur.execute("UPDATE students SET qr_code=%s WHERE student_id=%s", (qr_code, student_id))
        conn.commit()

    if stale:
        logger.info("Regenerated QR codes for %d student(s)", len(stale))
    return len(stale)
