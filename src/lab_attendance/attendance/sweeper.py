from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SWEEP_BATCH_SIZE, DEFAULT_SWEEP_GRACE_MINUTES
from ..core.exceptions import StoreUnavailableError
from .model import SweepResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class DailyResetSweeper:
    """Marks sessions left open past the grace period as ABANDONED.

    Only OPEN rows whose clock-in predates ``now - grace`` are touched and
    ``clock_out`` is never written, so the student can close them
    retroactively. Re-running finds nothing new and is a no-op.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], datetime] | None = None,
        grace_minutes: int = DEFAULT_SWEEP_GRACE_MINUTES,
        batch_size: int = DEFAULT_SWEEP_BATCH_SIZE,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._attendance = attendance
        self._clock = clock or now_local
        self._grace = timedelta(minutes=int(grace_minutes))
        self._batch_size = int(batch_size)

    def run_daily_sweep(self) -> SweepResult:
        cutoff = self._clock().replace(microsecond=0) - self._grace
        logger.info("daily reset started (clock_in before %s)", cutoff.isoformat(sep=" "))

        processed = 0
        failed = 0
        for record in self._attendance.scan_open_older_than(cutoff, batch_size=self._batch_size):
            try:
                marked = self._attendance.mark_abandoned(record.record_id)
            except StoreUnavailableError:
                failed += 1
                logger.exception("could not mark record %s abandoned", record.record_id)
                continue

            if marked:
                processed += 1
                logger.info(
                    "record %s abandoned (student=%s, work_date=%s, clock_in=%s)",
                    record.record_id,
                    record.student_id,
                    record.work_date.isoformat(),
                    record.clock_in.isoformat(sep=" "),
                )

        logger.info("daily reset finished: %d abandoned, %d failed", processed, failed)
        return SweepResult(processed_count=processed, failed_count=failed)
