from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one calendar date."""

    attendance_id: int
    student_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    recorded_by: int
    note: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.check_out_time is not None
