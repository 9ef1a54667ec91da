"""Standard work window and calendar helpers.

All values are organization wall-clock datetimes (naive); no timezone
conversion happens here.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.constants import (
    RETROACTIVE_WINDOW_END,
    RETROACTIVE_WINDOW_START,
    STANDARD_WORK_END,
    STANDARD_WORK_START,
)


def is_weekend(work_date: date) -> bool:
    return work_date.isoweekday() in (6, 7)


def standard_window(work_date: date) -> tuple[datetime, datetime]:
    return (
        datetime.combine(work_date, STANDARD_WORK_START),
        datetime.combine(work_date, STANDARD_WORK_END),
    )


def retroactive_window(work_date: date) -> tuple[datetime, datetime]:
    """Half-open range [work_date 20:00, next day 05:00) for late clock-outs."""
    return (
        datetime.combine(work_date, RETROACTIVE_WINDOW_START),
        datetime.combine(work_date + timedelta(days=1), RETROACTIVE_WINDOW_END),
    )


def is_overnight(clock_in: datetime, clock_out: datetime | None) -> bool:
    if clock_out is None:
        return False
    return clock_out.date() > clock_in.date()
