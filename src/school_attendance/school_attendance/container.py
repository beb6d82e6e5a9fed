from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .class_schedules.mysql_class_schedule_repository import MySQLClassScheduleRepository
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_TOKEN_TTL_HOURS
from .core.enums import TokenSigning
from .database.connection import DBConfig, DatabaseConnection
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    students_repo: StudentRepository

    auth_service: AuthService
    attendance_service: AttendanceService

    # Institution timezone for client timestamps; None means server local time.
    timezone: Optional[str] = None


def build_container(
    *,
    db_config: dict,
    token_secret: str,
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
    token_signing: str = TokenSigning.HMAC.value,
    timezone: Optional[str] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    users_repo = MySQLUserRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    schedules_repo = MySQLClassScheduleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    tokens = TokenService(
        users_repo,
        secret=token_secret,
        ttl_hours=token_ttl_hours,
        signing=TokenSigning(token_signing),
    )
    auth_service = AuthService(users_repo, tokens)
    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        schedules_repo,
        strategy_factory=AttendanceStrategyFactory(),
        clock=lambda: now_local(timezone),
    )

    return Container(
        students_repo=students_repo,
        auth_service=auth_service,
        attendance_service=attendance_service,
        timezone=timezone,
    )
