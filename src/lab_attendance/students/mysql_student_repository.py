from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, team_id, name, password_hash, role
                FROM students
                WHERE student_id=%s
                """,
                (student_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Student(
                student_id=str(r["student_id"]),
                name=r["name"],
                password_hash=r["password_hash"],
                role=Role(r["role"]),
                team_id=r.get("team_id"),
            )

    def touch_last_login(self, student_id: str, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE students SET last_login=%s WHERE student_id=%s", (at, student_id))
