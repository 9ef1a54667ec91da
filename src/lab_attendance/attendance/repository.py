from __future__ import annotations

from datetime import date, datetime
from typing import Iterator, Optional, Protocol, Sequence

from ..core.constants import DEFAULT_SWEEP_BATCH_SIZE
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Store interface for attendance records.

    Implementations must enforce "at most one OPEN record per student"
    atomically with creation and raise ``ConflictError`` when violated.
    """

    def create_open_session(self, *, student_id: str, work_date: date, clock_in: datetime) -> int:
        raise NotImplementedError

    def find_open_session(self, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def close_session(
        self,
        *,
        record_id: int,
        clock_out: datetime,
        work_minutes: int,
        overtime_minutes: Optional[int] = None,
    ) -> bool:
        """Close an OPEN or ABANDONED record; False if it was already closed."""

        raise NotImplementedError

    def mark_abandoned(self, record_id: int) -> bool:
        """Flag an OPEN record as abandoned; False if it was not OPEN."""

        raise NotImplementedError

    def find_record(self, record_id: int, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def scan_open_older_than(
        self, cutoff: datetime, *, batch_size: int = DEFAULT_SWEEP_BATCH_SIZE
    ) -> Iterator[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_for_student(self, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_abandoned_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(
        self,
        student_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
