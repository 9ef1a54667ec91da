"""Run the daily reset sweep once, outside the web process (e.g. from cron)."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from lab_attendance.common.logging import setup_logging
from lab_attendance.config import get_settings_module
from lab_attendance.container import build_container


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        tz_name=settings.TIMEZONE,
        sweep_grace_minutes=int(settings.SWEEP_GRACE_MINUTES),
        sweep_batch_size=int(settings.SWEEP_BATCH_SIZE),
    )
    result = container.daily_reset_sweeper.run_daily_sweep()
    print(f"OK: abandoned={result.processed_count} failed={result.failed_count}")
    return 1 if result.failed_count else 0


if __name__ == "__main__":
    sys.exit(main())
