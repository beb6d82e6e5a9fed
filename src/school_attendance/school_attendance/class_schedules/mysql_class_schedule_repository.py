from __future__ import annotations

from typing import Optional

from ..common.validators import require_non_negative
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import ClassSchedule
from .repository import ClassScheduleRepository


class MySQLClassScheduleRepository(ClassScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_class_name(self, class_name: str) -> Optional[ClassSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, class_name, check_in_time, late_tolerance_minutes,
                       min_checkout_time, is_active
                FROM class_schedules
                WHERE class_name=%s AND is_active=1
                """,
                (class_name,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ClassSchedule(
                schedule_id=int(r["schedule_id"]),
                class_name=r["class_name"],
                check_in_time=normalize_mysql_time(r["check_in_time"]),
                late_tolerance_minutes=require_non_negative(r.get("late_tolerance_minutes") or 0, "late_tolerance_minutes"),
                min_checkout_time=normalize_mysql_time(r["min_checkout_time"]),
                is_active=bool(r.get("is_active", True)),
            )
