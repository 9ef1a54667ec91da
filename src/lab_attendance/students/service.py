from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from werkzeug.security import check_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import StudentRepository


@dataclass(frozen=True)
class SessionStudent:
    """What we store into Flask session after login."""

    student_id: str
    name: str
    role: Role
    team_id: Optional[str]


class AuthService:
    """Use case: authenticate a student (login)."""

    def __init__(self, students: StudentRepository, *, clock: Callable[[], datetime] | None = None):
        self._students = students
        self._clock = clock or now_local

    def authenticate(self, student_id: str, password: str) -> SessionStudent:
        student_id = require_non_empty(student_id, "Student ID")

        student = self._students.get_by_id(student_id)
        if not student:
            raise AuthenticationError("Wrong student ID or password")

        try:
            ok = check_password_hash(student.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            raise AuthenticationError("Wrong student ID or password")

        self._students.touch_last_login(student.student_id, self._clock().replace(microsecond=0))
        return SessionStudent(
            student_id=student.student_id,
            name=student.name,
            role=student.role,
            team_id=student.team_id,
        )
