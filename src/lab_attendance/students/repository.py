from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def touch_last_login(self, student_id: str, at: datetime) -> None:
        raise NotImplementedError
