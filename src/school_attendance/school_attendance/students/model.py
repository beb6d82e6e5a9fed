from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student as seen by the scanner.

    ``qr_code`` is the scan token printed on the student card. It is derived
    from the NISN (see ``students.qr.make_qr_code``).
    """

    student_id: int
    nisn: str
    name: str
    class_name: str
    qr_code: str
    user_id: Optional[int] = None
    is_active: bool = True
