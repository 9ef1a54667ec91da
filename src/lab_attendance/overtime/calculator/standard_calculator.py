from __future__ import annotations

from datetime import date, datetime

from ..time_window import is_weekend, standard_window
from .base import OvertimeCalculator, floor_minutes


class StandardOvertimeCalculator(OvertimeCalculator):
    """Standard rule.

    Weekend: every minute worked is overtime.
    Weekday: minutes before 10:00 plus minutes after 20:00 of the work date.
    The late part uses plain timestamp subtraction, so a clock-out after
    midnight keeps accruing overtime.
    """

    def overtime_minutes(self, clock_in: datetime, clock_out: datetime, work_date: date) -> int:
        if is_weekend(work_date):
            return self.work_minutes(clock_in, clock_out)

        start, end = standard_window(work_date)
        minutes = 0

        if clock_in < start:
            minutes += max(floor_minutes(clock_in, min(clock_out, start)), 0)

        if clock_out > end:
            minutes += max(floor_minutes(max(clock_in, end), clock_out), 0)

        return minutes


_standard = StandardOvertimeCalculator()


def compute_work_minutes(clock_in: datetime, clock_out: datetime) -> int:
    return _standard.work_minutes(clock_in, clock_out)


def compute_overtime_minutes(clock_in: datetime, clock_out: datetime, work_date: date) -> int:
    return _standard.overtime_minutes(clock_in, clock_out, work_date)
