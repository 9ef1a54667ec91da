from __future__ import annotations

import logging
from datetime import datetime

from ..core.exceptions import (
    AlreadyClosedError,
    FutureClockOutError,
    InvalidOrderError,
    NotFoundError,
    OutOfWindowError,
)
from ..overtime.time_window import retroactive_window
from .model import AttendanceRecord, CloseResult
from .repository import AttendanceRepository
from .service import AttendanceService

logger = logging.getLogger(__name__)


def validate_retroactive_clock_out(record: AttendanceRecord, clock_out: datetime, *, now: datetime) -> None:
    """Raise if ``clock_out`` cannot close ``record``.

    Checks run in a fixed order so each failure keeps its own error type.
    A clock-out may be in the past only: the session must really have ended.
    """

    if record.is_closed:
        raise AlreadyClosedError("This attendance record is already closed")

    if clock_out <= record.clock_in:
        raise InvalidOrderError("Clock-out time must be later than the clock-in time")

    start, end = retroactive_window(record.work_date)
    if not (start <= clock_out < end):
        raise OutOfWindowError(
            f"Clock-out must be between {start:%Y-%m-%d %H:%M} and {end:%Y-%m-%d %H:%M} (exclusive)"
        )

    if clock_out > now:
        raise FutureClockOutError(f"Clock-out cannot be later than now ({now:%Y-%m-%d %H:%M})")


class RetroactiveCloseService:
    """Lets a student supply the missing clock-out of an abandoned session."""

    def __init__(self, attendance: AttendanceRepository, sessions: AttendanceService):
        self._attendance = attendance
        self._sessions = sessions

    def retroactive_close(self, record_id: int, student_id: str, clock_out: datetime) -> CloseResult:
        record = self._attendance.find_record(record_id, student_id)
        if record is None:
            raise NotFoundError("Attendance record not found")

        clock_out = clock_out.replace(microsecond=0)
        validate_retroactive_clock_out(record, clock_out, now=self._sessions.now())

        result = self._sessions.close_record(record, clock_out)
        logger.info(
            "student %s retroactively closed record %s at %s",
            student_id,
            record_id,
            clock_out.isoformat(),
        )
        return result
