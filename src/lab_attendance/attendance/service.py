from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import ClockAction, SessionState
from ..core.exceptions import AlreadyClosedError, ConflictError, InvalidOrderError
from ..overtime.calculator.base import OvertimeCalculator
from ..overtime.calculator.standard_calculator import StandardOvertimeCalculator
from .model import AttendanceRecord, ClockResult, CloseResult, CurrentStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
AchievementChecker = Callable[[str], Sequence[int]]


class AttendanceService:
    """Session state machine: NoSession -> OPEN -> CLOSED, ABANDONED -> CLOSED.

    One-button clocking: a clock action closes the student's OPEN session if
    there is one (whatever its work date), otherwise it opens a new one.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: OvertimeCalculator | None = None,
        clock: Clock | None = None,
        achievement_checker: AchievementChecker | None = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardOvertimeCalculator()
        self._clock = clock or now_local
        self._achievement_checker = achievement_checker

    @property
    def calculator(self) -> OvertimeCalculator:
        return self._calculator

    def now(self) -> datetime:
        # DATETIME columns keep whole seconds only
        return self._clock().replace(microsecond=0)

    def clock_action(self, student_id: str) -> ClockResult:
        now = self.now()

        record = self._attendance.find_open_session(student_id)
        if record is None:
            try:
                record_id = self._attendance.create_open_session(
                    student_id=student_id,
                    work_date=now.date(),
                    clock_in=now,
                )
            except ConflictError:
                # Another request opened a session in between; treat this one as the close.
                record = self._attendance.find_open_session(student_id)
                if record is None:
                    raise
            else:
                logger.info("student %s clocked in (record=%s)", student_id, record_id)
                opened = AttendanceRecord(
                    record_id=record_id,
                    student_id=student_id,
                    work_date=now.date(),
                    clock_in=now,
                    clock_out=None,
                    state=SessionState.OPEN,
                )
                return ClockResult(action=ClockAction.CLOCK_IN, record=opened)

        if now <= record.clock_in:
            raise InvalidOrderError("Clock-out must be later than clock-in, please try again")

        closed = self.close_record(record, now)
        return ClockResult(
            action=ClockAction.CLOCK_OUT,
            record=closed.record,
            work_minutes=closed.record.work_minutes,
            overtime_minutes=closed.overtime_minutes,
            new_achievements=closed.new_achievements,
        )

    def close_record(self, record: AttendanceRecord, clock_out: datetime) -> CloseResult:
        """Close an OPEN or ABANDONED record at ``clock_out``.

        Callers validate ``clock_out > record.clock_in`` first. Overtime uses the
        record's own work date, not the clock-out date.
        """

        work_minutes = self._calculator.work_minutes(record.clock_in, clock_out)
        overtime_minutes = self._calculator.overtime_minutes(record.clock_in, clock_out, record.work_date)

        updated = self._attendance.close_session(
            record_id=record.record_id,
            clock_out=clock_out,
            work_minutes=work_minutes,
            overtime_minutes=overtime_minutes,
        )
        if not updated:
            raise AlreadyClosedError("This attendance record is already closed")

        logger.info(
            "student %s clocked out (record=%s, work=%d min, overtime=%d min)",
            record.student_id,
            record.record_id,
            work_minutes,
            overtime_minutes,
        )
        closed = replace(
            record,
            clock_out=clock_out,
            state=SessionState.CLOSED,
            work_minutes=work_minutes,
            overtime_minutes=overtime_minutes,
        )
        return CloseResult(
            record=closed,
            overtime_minutes=overtime_minutes,
            new_achievements=self._check_achievements(record.student_id),
        )

    def _check_achievements(self, student_id: str) -> tuple[int, ...]:
        if self._achievement_checker is None:
            return ()
        try:
            return tuple(self._achievement_checker(student_id) or ())
        except Exception:
            # Granting is best-effort; the close above is already committed.
            logger.exception("achievement check failed for student %s", student_id)
            return ()

    def overtime_for(self, record: AttendanceRecord) -> Optional[int]:
        """Overtime under the current policy, or None while the record is not closed."""

        if record.clock_out is None:
            return None
        return self._calculator.overtime_minutes(record.clock_in, record.clock_out, record.work_date)

    def get_open_or_latest(self, student_id: str) -> CurrentStatus:
        today = self.now().date()

        open_record = self._attendance.find_open_session(student_id)
        record = open_record or self._attendance.get_latest_for_student(student_id)
        pending = tuple(self._attendance.list_abandoned_for_student(student_id))

        work_total = 0
        overtime_total = 0
        for r in self._attendance.list_for_student(student_id, start_date=today, end_date=today):
            if r.is_closed:
                work_total += int(r.work_minutes or 0)
                overtime_total += self.overtime_for(r) or 0

        return CurrentStatus(
            today=today,
            is_clocked_in=open_record is not None,
            record=record,
            pending_close=pending,
            today_work_minutes=work_total,
            today_overtime_minutes=overtime_total,
        )
