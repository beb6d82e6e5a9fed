from __future__ import annotations

from .base import AttendanceStrategy


class NormalStrategy(AttendanceStrategy):
    """On-time (or within tolerance) check-in, normal checkout."""
