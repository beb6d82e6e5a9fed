from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..class_schedules.repository import ClassScheduleRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_checkout_after_checkin, require_same_day
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    ConflictError,
    DuplicateScanError,
    InactiveError,
    NotFoundError,
    ValidationError,
)
from ..students.model import Student
from ..students.repository import StudentRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_UNSET = object()


def _join_notes(*notes: Optional[str]) -> Optional[str]:
    return "; ".join(n for n in notes if n) or None


class AttendanceService:
    """Use cases: QR check-in/checkout, manual entry and correction.

    Per (student, date) a scan moves the record through
    no record -> checked in -> completed; a scan on a completed record is
    rejected with DuplicateScanError and leaves the record untouched.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        schedules: ClassScheduleRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._attendance = attendance
        self._students = students
        self._schedules = schedules
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock or now_local

    def handle_qr_scan(self, code: str, recorded_by: int, *, now: datetime | None = None) -> AttendanceRecord:
        code = (code or "").strip()
        if not code:
            raise ValidationError("QR code must not be empty")

        now = now or self._clock()
        student = self._resolve_student(code)
        work_date = now.date()

        record = self._attendance.get_for_student_and_date(student.student_id, work_date)
        if record is None:
            try:
                return self._check_in(student, now=now, recorded_by=recorded_by)
            except ConflictError:
                # Another scan inserted first; its record is our check-in.
                record = self._attendance.get_for_student_and_date(student.student_id, work_date)
                if record is None:
                    raise
                logger.info("Concurrent check-in for student %s on %s, treating scan as checkout", student.student_id, work_date)

        if record.is_completed:
            logger.info("Duplicate scan for student %s on %s", student.student_id, work_date)
            raise DuplicateScanError(f"{student.name} has already checked in and out on {work_date}")

        return self._check_out(student, record, now=now)

    def record_manual_attendance(
        self,
        student_id: int,
        work_date: date,
        status: AttendanceStatus,
        *,
        recorded_by: int,
        check_in_time: Optional[datetime] = None,
        check_out_time: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Write the day's record directly, bypassing the two-scan protocol.

        An existing record for (student, date) is overwritten in place.
        """

        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")
        require_checkout_after_checkin(check_in_time, check_out_time)
        require_same_day(work_date, check_in_time, check_out_time)
        note = optional_text(note, "note")

        existing = self._attendance.get_for_student_and_date(student_id, work_date)
        if existing:
            updated = self._attendance.update_record(
                attendance_id=existing.attendance_id,
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                status=status,
                recorded_by=recorded_by,
                note=note,
            )
            if updated is None:
                raise ConflictError("Attendance record disappeared while updating")
            logger.info("Manual attendance updated: student=%s date=%s status=%s by=%s", student_id, work_date, status.value, recorded_by)
            return updated

        created = self._attendance.create_record(
            student_id=student_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            recorded_by=recorded_by,
            note=note,
        )
        logger.info("Manual attendance created: student=%s date=%s status=%s by=%s", student_id, work_date, status.value, recorded_by)
        return created

    def correct_attendance(
        self,
        attendance_id: int,
        *,
        recorded_by: int,
        check_in_time=_UNSET,
        check_out_time=_UNSET,
        status=_UNSET,
        note=_UNSET,
    ) -> AttendanceRecord:
        """Patch an existing record. Omitted fields keep their current value."""

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        new_check_in = record.check_in_time if check_in_time is _UNSET else check_in_time
        new_check_out = record.check_out_time if check_out_time is _UNSET else check_out_time
        new_status = record.status if status is _UNSET else AttendanceStatus(status)
        new_note = record.note if note is _UNSET else optional_text(note, "note")

        require_checkout_after_checkin(new_check_in, new_check_out)
        require_same_day(record.work_date, new_check_in, new_check_out)

        updated = self._attendance.update_record(
            attendance_id=record.attendance_id,
            check_in_time=new_check_in,
            check_out_time=new_check_out,
            status=new_status,
            recorded_by=recorded_by,
            note=new_note,
        )
        if updated is None:
            raise NotFoundError("Attendance record not found")
        return updated

    def get_record(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_student_and_date(student_id, work_date)

    def _resolve_student(self, code: str) -> Student:
        student = self._students.get_by_qr_code(code)
        if not student:
            logger.warning("Scan rejected: unknown QR code %r", code)
            raise NotFoundError("No student is registered for this QR code")
        if not student.is_active:
            logger.warning("Scan rejected: student %s is inactive", student.student_id)
            raise InactiveError(f"Student {student.name} is no longer active")
        return student

    def _check_in(self, student: Student, *, now: datetime, recorded_by: int) -> AttendanceRecord:
        schedule = self._schedules.get_by_class_name(student.class_name)
        decision = self._factory.decide_checkin(scan_at=now, schedule=schedule)

        record = self._attendance.create_record(
            student_id=student.student_id,
            work_date=now.date(),
            check_in_time=decision.effective_time,
            check_out_time=None,
            status=decision.status,
            recorded_by=recorded_by,
            note=decision.note,
        )
        logger.info(
            "Check-in: student=%s class=%s at=%s status=%s%s",
            student.student_id,
            student.class_name,
            now.strftime("%H:%M:%S"),
            decision.status.value,
            "" if schedule else " (no schedule)",
        )
        return record

    def _check_out(self, student: Student, record: AttendanceRecord, *, now: datetime) -> AttendanceRecord:
        schedule = self._schedules.get_by_class_name(student.class_name)
        decision = self._factory.decide_checkout(scan_at=now, schedule=schedule, current=record.status)

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=decision.effective_time,
            status=decision.status,
            note=_join_notes(record.note, decision.note),
        )
        if updated is None:
            raise DuplicateScanError(f"{student.name} has already checked out on {record.work_date}")

        logger.info(
            "Checkout: student=%s at=%s status=%s",
            student.student_id,
            now.strftime("%H:%M:%S"),
            decision.status.value,
        )
        return updated
