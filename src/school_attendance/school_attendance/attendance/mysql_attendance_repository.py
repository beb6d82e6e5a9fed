from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, work_date, check_in_time, check_out_time, status, recorded_by, note"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        recorded_by=int(r["recorded_by"]),
        note=r.get("note"),
    )


def _select_by_id(cur, attendance_id: int) -> Optional[AttendanceRecord]:
    cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
    r = fetchone(cur)
    return _to_record(r) if r else None


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND work_date=%s
                """,
                (int(student_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _select_by_id(cur, attendance_id)

    def create_record(
        self,
        *,
        student_id: int,
        work_date: date,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
        recorded_by: int,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        student_id, work_date, check_in_time, check_out_time, status, recorded_by, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(student_id), work_date, check_in_time, check_out_time, status.value, int(recorded_by), note),
                )
                attendance_id = int(cur.lastrowid)
        except IntegrityError as exc:
            # uq_attendance_student_date
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError(f"Attendance for student {student_id} on {work_date} already exists") from exc
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=int(student_id),
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            recorded_by=int(recorded_by),
            note=note,
        )

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, note=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, status.value, note, int(attendance_id)),
            )
            if cur.rowcount <= 0:
                return None
            return _select_by_id(cur, attendance_id)

    def update_record(
        self,
        *,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
        recorded_by: int,
        note: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, recorded_by=%s, note=%s
                WHERE attendance_id=%s
                """,
                (check_in_time, check_out_time, status.value, int(recorded_by), note, int(attendance_id)),
            )
            # rowcount is 0 when nothing changed, so re-read instead of trusting it.
            return _select_by_id(cur, attendance_id)
