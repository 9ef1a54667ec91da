"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_TIMEZONE = "Asia/Taipei"

# Standard work window; minutes outside it on weekdays are overtime.
STANDARD_WORK_START = time(10, 0)
STANDARD_WORK_END = time(20, 0)

# Retroactive clock-out is accepted in [work_date 20:00, work_date+1 05:00).
RETROACTIVE_WINDOW_START = time(20, 0)
RETROACTIVE_WINDOW_END = time(5, 0)

DEFAULT_RESET_HOUR = 5
DEFAULT_SWEEP_GRACE_MINUTES = 60
DEFAULT_SWEEP_BATCH_SIZE = 100
DEFAULT_HISTORY_LIMIT = 30
