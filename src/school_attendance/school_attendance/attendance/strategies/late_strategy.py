from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...class_schedules.model import ClassSchedule
from ...common.datetime_utils import format_hhmm, time_of_day_offset
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, DecisionOutcome


class LateStrategy(AttendanceStrategy):
    """Check-in after the tolerance window."""

    def decide_checkin(self, *, scan_at: datetime, schedule: Optional[ClassSchedule]) -> DecisionOutcome:
        note = None
        if schedule:
            late = time_of_day_offset(scan_at.time()) - time_of_day_offset(schedule.check_in_time)
            note = f"Late {int(late.total_seconds() // 60)} min after {format_hhmm(schedule.check_in_time)}"
        return DecisionOutcome(status=AttendanceStatus.LATE, effective_time=scan_at, note=note)
