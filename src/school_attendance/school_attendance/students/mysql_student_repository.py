from __future__ import annotations

from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Student
from .repository import StudentRepository


def _to_student(r: Dict[str, Any]) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        nisn=r["nisn"],
        name=r["name"],
        class_name=r["class_name"],
        qr_code=r["qr_code"],
        user_id=r.get("user_id"),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, nisn, name, class_name, qr_code, user_id, is_active
                FROM students
                WHERE student_id=%s
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_qr_code(self, qr_code: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, nisn, name, class_name, qr_code, user_id, is_active
                FROM students
                WHERE qr_code=%s
                """,
                (qr_code,),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None
