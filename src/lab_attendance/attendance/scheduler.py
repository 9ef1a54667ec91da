from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from .sweeper import DailyResetSweeper

logger = logging.getLogger(__name__)

DAILY_RESET_JOB_ID = "daily_reset"


def build_scheduler(sweeper: DailyResetSweeper, *, hour: int, tz_name: str) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(
        timezone=tz_name,
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 3600,  # a late start within the hour still sweeps
        },
    )
    scheduler.add_job(
        sweeper.run_daily_sweep,
        "cron",
        hour=int(hour),
        minute=0,
        id=DAILY_RESET_JOB_ID,
        replace_existing=True,
    )
    return scheduler


def start_daily_reset_job(sweeper: DailyResetSweeper, *, hour: int, tz_name: str) -> BackgroundScheduler:
    scheduler = build_scheduler(sweeper, hour=hour, tz_name=tz_name)
    scheduler.start()
    logger.info("daily reset job scheduled at %02d:00 (%s)", int(hour), tz_name)
    return scheduler
