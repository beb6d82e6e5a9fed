from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    PERMITTED = "permitted"
    SICK = "sick"
    EARLY_LEAVE = "early_leave"


class TokenSigning(str, Enum):
    """How the second segment of a session token is produced."""

    HMAC = "hmac"
    LEGACY = "legacy"
