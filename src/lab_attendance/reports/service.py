from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import to_instant
from ..core.constants import DEFAULT_TIMEZONE
from ..overtime.calculator.base import OvertimeCalculator
from ..overtime.calculator.standard_calculator import StandardOvertimeCalculator
from ..overtime.time_window import is_overnight, is_weekend


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class OvertimeReportService:
    """Per-student history with overtime recomputed under the current policy."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[OvertimeCalculator] = None,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardOvertimeCalculator()
        self._tz_name = tz_name

    def build_student_report(
        self,
        student_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ReportData:
        records = self._attendance.list_for_student(student_id, start_date=start, end_date=end)

        out_rows: list[dict] = []
        total_work = 0
        total_overtime = 0
        closed_count = 0
        pending_count = 0

        for r in records:
            overtime: Optional[int] = None
            if r.is_closed and r.clock_out is not None:
                overtime = self._calculator.overtime_minutes(r.clock_in, r.clock_out, r.work_date)
                closed_count += 1
                total_work += int(r.work_minutes or 0)
                total_overtime += overtime
            elif r.is_abandoned:
                pending_count += 1

            out_rows.append(
                {
                    "record_id": r.record_id,
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "clock_in": to_instant(r.clock_in, self._tz_name),
                    "clock_out": to_instant(r.clock_out, self._tz_name),
                    "state": r.state.value,
                    "work_minutes": r.work_minutes,
                    "overtime_minutes": overtime,
                    "is_weekend": is_weekend(r.work_date),
                    "is_overnight": is_overnight(r.clock_in, r.clock_out),
                }
            )

        summary = {
            "student_id": student_id,
            "sessions": closed_count,
            "pending_close": pending_count,
            "total_work_minutes": total_work,
            "total_overtime_minutes": total_overtime,
            "total_work_hours": format_minutes(total_work),
            "total_overtime_hours": format_minutes(total_overtime),
        }
        return ReportData(rows=out_rows, summary=summary)
