from __future__ import annotations

from typing import Optional, Protocol

from .model import ClassSchedule


class ClassScheduleRepository(Protocol):
    def get_by_class_name(self, class_name: str) -> Optional[ClassSchedule]:
        """Return the active schedule for ``class_name``, or None."""

        raise NotImplementedError
