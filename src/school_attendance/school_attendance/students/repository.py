from __future__ import annotations

from typing import Optional, Protocol

from .model import Student


class StudentRepository(Protocol):
    """Directory lookup used by the attendance workflow.

    Returns students regardless of ``is_active``; callers decide what an
    inactive student means for them.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_qr_code(self, qr_code: str) -> Optional[Student]:
        raise NotImplementedError
