from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime


def floor_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded down."""
    return int((end - start).total_seconds() // 60)


class OvertimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for overtime policy).

    Callers guarantee ``clock_out > clock_in``; the result for any other
    input is unspecified and must not be persisted.
    """

    def work_minutes(self, clock_in: datetime, clock_out: datetime) -> int:
        return floor_minutes(clock_in, clock_out)

    @abstractmethod
    def overtime_minutes(self, clock_in: datetime, clock_out: datetime, work_date: date) -> int:
        raise NotImplementedError
