from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...class_schedules.model import ClassSchedule
from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class DecisionOutcome:
    status: AttendanceStatus
    effective_time: datetime
    note: Optional[str] = None


class AttendanceStrategy:
    """Strategy Pattern: encapsulate how we decide an attendance status.

    The base behaviour is the normal case: a check-in is PRESENT and a
    checkout keeps whatever status the check-in produced.
    """

    def decide_checkin(self, *, scan_at: datetime, schedule: Optional[ClassSchedule]) -> DecisionOutcome:
        return DecisionOutcome(status=AttendanceStatus.PRESENT, effective_time=scan_at)

    def decide_checkout(
        self,
        *,
        scan_at: datetime,
        schedule: Optional[ClassSchedule],
        current: AttendanceStatus,
    ) -> DecisionOutcome:
        return DecisionOutcome(status=current, effective_time=scan_at)
