from __future__ import annotations

from datetime import date, datetime
from typing import Iterator, Optional, Sequence

from ..core.constants import DEFAULT_SWEEP_BATCH_SIZE
from ..core.enums import SessionState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, student_id, work_date, clock_in, clock_out, state, work_minutes, overtime_minutes"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        student_id=str(r["student_id"]),
        work_date=r["work_date"],
        clock_in=r["clock_in"],
        clock_out=r.get("clock_out"),
        state=SessionState(r["state"]),
        work_minutes=r.get("work_minutes"),
        overtime_minutes=r.get("overtime_minutes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_open_session(self, *, student_id: str, work_date: date, clock_in: datetime) -> int:
        # uq_attendance_open_guard rejects a second OPEN row -> ConflictError
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, work_date, clock_in, state)
                VALUES(%s,%s,%s,%s)
                """,
                (student_id, work_date, clock_in, SessionState.OPEN.value),
            )
            return int(cur.lastrowid)

    def find_open_session(self, student_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND state=%s
                ORDER BY work_date DESC, clock_in DESC
                LIMIT 1
                """,
                (student_id, SessionState.OPEN.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def close_session(
        self,
        *,
        record_id: int,
        clock_out: datetime,
        work_minutes: int,
        overtime_minutes: Optional[int] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out=%s, work_minutes=%s, overtime_minutes=%s, state=%s
                WHERE record_id=%s AND state IN (%s, %s)
                """,
                (
                    clock_out,
                    int(work_minutes),
                    overtime_minutes,
                    SessionState.CLOSED.value,
                    int(record_id),
                    SessionState.OPEN.value,
                    SessionState.ABANDONED.value,
                ),
            )
            return cur.rowcount > 0

    def mark_abandoned(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET state=%s
                WHERE record_id=%s AND state=%s
                """,
                (SessionState.ABANDONED.value, int(record_id), SessionState.OPEN.value),
            )
            return cur.rowcount > 0

    def find_record(self, record_id: int, student_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE record_id=%s AND student_id=%s
                """,
                (int(record_id), student_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def scan_open_older_than(
        self, cutoff: datetime, *, batch_size: int = DEFAULT_SWEEP_BATCH_SIZE
    ) -> Iterator[AttendanceRecord]:
        # Keyset pagination; each page uses its own short connection so callers
        # can update rows between pages.
        last_id = 0
        while True:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_records
                    WHERE state=%s AND clock_in < %s AND record_id > %s
                    ORDER BY record_id ASC
                    LIMIT %s
                    """,
                    (SessionState.OPEN.value, cutoff, last_id, int(batch_size)),
                )
                rows = fetchall(cur)

            if not rows:
                return
            for r in rows:
                yield _to_record(r)
            last_id = int(rows[-1]["record_id"])
            if len(rows) < batch_size:
                return

    def get_latest_for_student(self, student_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s
                ORDER BY work_date DESC, clock_in DESC
                LIMIT 1
                """,
                (student_id,),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_abandoned_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND state=%s
                ORDER BY work_date DESC, clock_in DESC
                """,
                (student_id, SessionState.ABANDONED.value),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student(
        self,
        student_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["student_id=%s"]
        params: list[object] = [student_id]

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, clock_in DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
