from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance ledger. At most one record per (student_id, work_date)."""

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert a new record.

        Raises ConflictError when a record for (student_id, work_date) already exists.
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        """Set the checkout only if it is still empty.

        Returns None when the record is missing or already checked out.
        """

        raise NotImplementedError

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
        """Admin override of every mutable field. Returns None when the record is missing."""

        raise NotImplementedError
