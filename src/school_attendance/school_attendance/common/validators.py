from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_non_negative(value: int, field_name: str) -> int:
    if int(value) < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return int(value)


def require_checkout_after_checkin(check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
    if check_in and check_out and check_out < check_in:
        raise ValidationError("Check-out time cannot be earlier than check-in time")


def require_same_day(work_date: date, check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
    for label, value in (("Check-in", check_in), ("Check-out", check_out)):
        if value and value.date() != work_date:
            raise ValidationError(f"{label} time must fall on {work_date.isoformat()}")


def optional_text(value, field_name: str) -> Optional[str]:
    """Strip a free-text field; blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value.strip() or None
