from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...class_schedules.model import ClassSchedule
from ...common.datetime_utils import format_hhmm
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, DecisionOutcome


class EarlyLeaveStrategy(AttendanceStrategy):
    """Checkout before the class's minimum checkout time, whatever the check-in status was."""

    def decide_checkout(
        self,
        *,
        scan_at: datetime,
        schedule: Optional[ClassSchedule],
        current: AttendanceStatus,
    ) -> DecisionOutcome:
        note = f"Left before {format_hhmm(schedule.min_checkout_time)}" if schedule else None
        return DecisionOutcome(status=AttendanceStatus.EARLY_LEAVE, effective_time=scan_at, note=note)
