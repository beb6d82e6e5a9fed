from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class ClassSchedule:
    """Domain entity: attendance policy for one class.

    - ``check_in_time``: scans at or before this time are PRESENT.
    - ``late_tolerance_minutes``: grace period after ``check_in_time`` that
      still counts as PRESENT.
    - ``min_checkout_time``: checkouts before this time are EARLY_LEAVE.
    """

    schedule_id: int
    class_name: str
    check_in_time: time
    late_tolerance_minutes: int
    min_checkout_time: time
    is_active: bool = True
