from __future__ import annotations

from datetime import date, datetime

import pytest

from src.school_attendance.school_attendance.core.enums import AttendanceStatus
from src.school_attendance.school_attendance.core.exceptions import NotFoundError, ValidationError

ADMIN_ID = 1
WORK_DATE = date(2026, 2, 2)


def test_manual_entry_creates_record(attendance_service):
    rec = attendance_service.record_manual_attendance(
        1,
        WORK_DATE,
        AttendanceStatus.SICK,
        recorded_by=ADMIN_ID,
        note="  Demam  ",
    )

    assert rec.status == AttendanceStatus.SICK
    assert rec.check_in_time is None
    assert rec.check_out_time is None
    assert rec.note == "Demam"
    assert rec.recorded_by == ADMIN_ID


def test_manual_entry_overwrites_existing_record_in_place(attendance_service, attendance_repo):
    scanned = attendance_service.handle_qr_scan("QR_0051234567", 2)

    rec = attendance_service.record_manual_attendance(
        1,
        scanned.work_date,
        AttendanceStatus.PERMITTED,
        recorded_by=ADMIN_ID,
        check_in_time=datetime(2026, 2, 2, 7, 0),
        check_out_time=datetime(2026, 2, 2, 10, 0),
        note="Family event",
    )

    assert rec.attendance_id == scanned.attendance_id
    assert rec.status == AttendanceStatus.PERMITTED
    assert rec.check_out_time == datetime(2026, 2, 2, 10, 0)
    assert rec.recorded_by == ADMIN_ID
    assert len(attendance_repo.all()) == 1


def test_manual_entry_allows_inactive_student(attendance_service):
    rec = attendance_service.record_manual_attendance(3, WORK_DATE, AttendanceStatus.ABSENT, recorded_by=ADMIN_ID)

    assert rec.student_id == 3


def test_manual_entry_unknown_student(attendance_service):
    with pytest.raises(NotFoundError):
        attendance_service.record_manual_attendance(42, WORK_DATE, AttendanceStatus.ABSENT, recorded_by=ADMIN_ID)


def test_manual_entry_checkout_before_checkin_is_rejected(attendance_service, attendance_repo):
    with pytest.raises(ValidationError):
        attendance_service.record_manual_attendance(
            1,
            WORK_DATE,
            AttendanceStatus.PRESENT,
            recorded_by=ADMIN_ID,
            check_in_time=datetime(2026, 2, 2, 10, 0),
            check_out_time=datetime(2026, 2, 2, 9, 0),
        )

    assert attendance_repo.all() == []


def test_scan_after_manual_absent_checks_out(attendance_service, clock):
    attendance_service.record_manual_attendance(1, WORK_DATE, AttendanceStatus.ABSENT, recorded_by=ADMIN_ID)

    clock.now = datetime(2026, 2, 2, 14, 15)
    rec = attendance_service.handle_qr_scan("QR_0051234567", 2)

    assert rec.check_out_time == datetime(2026, 2, 2, 14, 15)
    assert rec.status == AttendanceStatus.ABSENT


def test_correct_attendance_patches_only_given_fields(attendance_service, clock):
    clock.now = datetime(2026, 2, 2, 7, 30)
    scanned = attendance_service.handle_qr_scan("QR_0051234567", 2)
    assert scanned.status == AttendanceStatus.LATE

    fixed = attendance_service.correct_attendance(
        scanned.attendance_id,
        recorded_by=ADMIN_ID,
        status=AttendanceStatus.PRESENT,
        note="Bus was late",
    )

    assert fixed.status == AttendanceStatus.PRESENT
    assert fixed.note == "Bus was late"
    assert fixed.check_in_time == scanned.check_in_time
    assert fixed.check_out_time is None
    assert fixed.recorded_by == ADMIN_ID


def test_correct_attendance_can_clear_checkout(attendance_service, clock):
    attendance_service.handle_qr_scan("QR_0051234567", 2)
    clock.now = datetime(2026, 2, 2, 14, 5)
    done = attendance_service.handle_qr_scan("QR_0051234567", 2)

    reopened = attendance_service.correct_attendance(done.attendance_id, recorded_by=ADMIN_ID, check_out_time=None)

    assert reopened.check_out_time is None
    assert not reopened.is_completed


def test_correct_attendance_validates_merged_times(attendance_service):
    rec = attendance_service.handle_qr_scan("QR_0051234567", 2)

    with pytest.raises(ValidationError):
        attendance_service.correct_attendance(
            rec.attendance_id,
            recorded_by=ADMIN_ID,
            check_out_time=datetime(2026, 2, 2, 6, 0),
        )


def test_correct_attendance_unknown_record(attendance_service):
    with pytest.raises(NotFoundError):
        attendance_service.correct_attendance(999, recorded_by=ADMIN_ID, status=AttendanceStatus.SICK)


def test_get_record(attendance_service, fixed_now):
    assert attendance_service.get_record(1, fixed_now.date()) is None

    rec = attendance_service.handle_qr_scan("QR_0051234567", 2)

    assert attendance_service.get_record(1, fixed_now.date()) == rec


@pytest.mark.parametrize(
    "check_in, check_out",
    [
        (datetime(2026, 3, 9, 7, 0), None),
        (None, datetime(2026, 2, 3, 0, 30)),
        (datetime(2026, 2, 2, 7, 0), datetime(2026, 2, 3, 14, 0)),
    ],
)
def test_manual_entry_times_must_fall_on_the_record_date(attendance_service, attendance_repo, check_in, check_out):
    with pytest.raises(ValidationError):
        attendance_service.record_manual_attendance(
            1,
            WORK_DATE,
            AttendanceStatus.PRESENT,
            recorded_by=ADMIN_ID,
            check_in_time=check_in,
            check_out_time=check_out,
        )

    assert attendance_repo.all() == []


def test_correct_attendance_times_must_fall_on_the_record_date(attendance_service, attendance_repo):
    rec = attendance_service.handle_qr_scan("QR_0051234567", 2)

    with pytest.raises(ValidationError):
        attendance_service.correct_attendance(
            rec.attendance_id,
            recorded_by=ADMIN_ID,
            check_out_time=datetime(2026, 2, 3, 14, 0),
        )

    assert attendance_repo.get_by_id(rec.attendance_id) == rec


@pytest.mark.parametrize("note", [42, ["flu"], {"reason": "flu"}])
def test_note_must_be_text(attendance_service, note):
    with pytest.raises(ValidationError):
        attendance_service.record_manual_attendance(1, WORK_DATE, AttendanceStatus.SICK, recorded_by=ADMIN_ID, note=note)


def test_blank_note_is_stored_as_none(attendance_service):
    rec = attendance_service.record_manual_attendance(1, WORK_DATE, AttendanceStatus.SICK, recorded_by=ADMIN_ID, note="   ")

    assert rec.note is None
