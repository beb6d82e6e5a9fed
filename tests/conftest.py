from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.attendance.service import AttendanceService
from src.school_attendance.school_attendance.class_schedules.model import ClassSchedule
from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import ConflictError
from src.school_attendance.school_attendance.students.model import Student
from src.school_attendance.school_attendance.users.model import User

PASSWORD = "secret123"


@dataclass
class InMemoryStudents:
    students: dict[int, Student] = field(default_factory=dict)

    def add(self, student: Student) -> Student:
        self.students[student.student_id] = student
        return student

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.students.get(student_id)

    def get_by_qr_code(self, qr_code: str) -> Optional[Student]:
        for s in self.students.values():
            if s.qr_code == qr_code:
                return s
        return None


@dataclass
class InMemorySchedules:
    schedules: dict[str, ClassSchedule] = field(default_factory=dict)

    def get_by_class_name(self, class_name: str) -> Optional[ClassSchedule]:
        sc = self.schedules.get(class_name)
        if sc and sc.is_active:
            return sc
        return None


class InMemoryAttendance:
    """Enforces one record per (student, date) like the unique key in MySQL.

    Set ``hide_next_lookup`` to make the next read miss an existing record,
    which is what a concurrent insert looks like to the loser of the race.
    """

    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.hide_next_lookup = False

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        if self.hide_next_lookup:
            self.hide_next_lookup = False
            return None
        for r in self._by_id.values():
            if r.student_id == student_id and r.work_date == work_date:
                return r
        return None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_id.values())

    def create_record(self, *, student_id, work_date, check_in_time, check_out_time, status, recorded_by, note=None):
        if any(r.student_id == student_id and r.work_date == work_date for r in self._by_id.values()):
            raise ConflictError("Duplicate attendance record")
        self._id += 1
        rec = AttendanceRecord(
            attendance_id=self._id,
            student_id=student_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            recorded_by=recorded_by,
            note=note,
        )
        self._by_id[self._id] = rec
        return rec

    def update_checkout(self, *, attendance_id, check_out_time, status, note=None):
        rec = self._by_id.get(attendance_id)
        if rec is None or rec.check_out_time is not None:
            return None
        rec = replace(rec, check_out_time=check_out_time, status=status, note=note)
        self._by_id[attendance_id] = rec
        return rec

    def update_record(self, *, attendance_id, check_in_time, check_out_time, status, recorded_by, note=None):
        rec = self._by_id.get(attendance_id)
        if rec is None:
            return None
        rec = replace(
            rec,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            recorded_by=recorded_by,
            note=note,
        )
        self._by_id[attendance_id] = rec
        return rec


@dataclass
class InMemoryUsers:
    users: dict[int, User] = field(default_factory=dict)

    def add(self, user: User) -> User:
        self.users[user.user_id] = user
        return user

    def deactivate(self, user_id: int) -> None:
        self.users[user_id] = replace(self.users[user_id], is_active=False)

    def delete(self, user_id: int) -> None:
        del self.users[user_id]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        for u in self.users.values():
            if u.username == username:
                return u
        return None


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now():
    return datetime(2026, 2, 2, 7, 5, 0)


@pytest.fixture
def schedule_7a():
    return ClassSchedule(
        schedule_id=1,
        class_name="7A",
        check_in_time=time(7, 0),
        late_tolerance_minutes=15,
        min_checkout_time=time(14, 0),
    )


@pytest.fixture
def students():
    repo = InMemoryStudents()
    repo.add(Student(student_id=1, nisn="0051234567", name="Ahmad Fauzi", class_name="7A", qr_code="QR_0051234567"))
    repo.add(Student(student_id=2, nisn="0051234568", name="Siti Aminah", class_name="9C", qr_code="QR_0051234568"))
    repo.add(
        Student(
            student_id=3,
            nisn="0051234569",
            name="Budi Santoso",
            class_name="7A",
            qr_code="QR_0051234569",
            is_active=False,
        )
    )
    return repo


@pytest.fixture
def schedules(schedule_7a):
    return InMemorySchedules({"7A": schedule_7a})


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def clock(fixed_now):
    return FakeClock(fixed_now)


@pytest.fixture
def attendance_service(attendance_repo, students, schedules, clock):
    return AttendanceService(attendance_repo, students, schedules, clock=clock)


@pytest.fixture
def users():
    repo = InMemoryUsers()
    pw = generate_password_hash(PASSWORD)
    repo.add(User(user_id=1, username="admin", password_hash=pw, role=Role.ADMIN, full_name="Administrator"))
    repo.add(User(user_id=2, username="guru", password_hash=pw, role=Role.TEACHER, full_name="Ibu Guru"))
    repo.add(User(user_id=3, username="murid", password_hash=pw, role=Role.STUDENT, full_name="Ahmad Fauzi"))
    repo.add(
        User(
            user_id=4,
            username="mantan",
            password_hash=pw,
            role=Role.TEACHER,
            full_name="Pak Mantan",
            is_active=False,
        )
    )
    return repo


@pytest.fixture
def password():
    return PASSWORD
