from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ClockAction, SessionState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one clock-in session.

    ``overtime_minutes`` is a cache written on close; readers recompute it
    with the overtime calculator.
    """

    record_id: int
    student_id: str
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime]
    state: SessionState
    work_minutes: Optional[int] = None
    overtime_minutes: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.state == SessionState.OPEN

    @property
    def is_abandoned(self) -> bool:
        return self.state == SessionState.ABANDONED

    @property
    def is_closed(self) -> bool:
        return self.state == SessionState.CLOSED


@dataclass(frozen=True)
class ClockResult:
    action: ClockAction
    record: AttendanceRecord
    work_minutes: Optional[int] = None
    overtime_minutes: Optional[int] = None
    new_achievements: tuple[int, ...] = ()


@dataclass(frozen=True)
class CloseResult:
    record: AttendanceRecord
    overtime_minutes: int
    new_achievements: tuple[int, ...] = ()


@dataclass(frozen=True)
class CurrentStatus:
    """Read model for the "today" panel."""

    today: date
    is_clocked_in: bool
    record: Optional[AttendanceRecord]
    pending_close: tuple[AttendanceRecord, ...] = field(default_factory=tuple)
    today_work_minutes: int = 0
    today_overtime_minutes: int = 0


@dataclass(frozen=True)
class SweepResult:
    processed_count: int
    failed_count: int = 0
