from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..class_schedules.model import ClassSchedule
from ..common.datetime_utils import time_of_day_offset
from ..core.enums import AttendanceStatus
from .strategies.base import AttendanceStrategy, DecisionOutcome
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Pure functions of (scan time, schedule): the ledger is never consulted
    here. Only the time-of-day of ``scan_at`` matters; its date is ignored.
    """

    def for_checkin(self, *, scan_at: datetime, schedule: Optional[ClassSchedule]) -> AttendanceStrategy:
        if not schedule:
            return NormalStrategy()

        deadline = time_of_day_offset(schedule.check_in_time) + timedelta(
            minutes=schedule.late_tolerance_minutes
        )
        if time_of_day_offset(scan_at.time()) <= deadline:
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(self, *, scan_at: datetime, schedule: Optional[ClassSchedule]) -> AttendanceStrategy:
        if not schedule:
            return NormalStrategy()

        if scan_at.time() < schedule.min_checkout_time:
            return EarlyLeaveStrategy()
        return NormalStrategy()

    def decide_checkin(self, *, scan_at: datetime, schedule: Optional[ClassSchedule]) -> DecisionOutcome:
        strategy = self.for_checkin(scan_at=scan_at, schedule=schedule)
        return strategy.decide_checkin(scan_at=scan_at, schedule=schedule)

    def decide_checkout(
        self,
        *,
        scan_at: datetime,
        schedule: Optional[ClassSchedule],
        current: AttendanceStatus,
    ) -> DecisionOutcome:
        strategy = self.for_checkout(scan_at=scan_at, schedule=schedule)
        return strategy.decide_checkout(scan_at=scan_at, schedule=schedule, current=current)
