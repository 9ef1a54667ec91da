"""Load the eight achievement definitions, plus the demo admin and student accounts."""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from lab_attendance.common.logging import setup_logging
from lab_attendance.config import get_settings_module
from lab_attendance.database.bootstrap import apply_seed_sql, ensure_demo_students


def main(*, with_demo_students: bool) -> None:
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    # seed.sql upserts, so re-running refreshes titles and levels in place
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    if with_demo_students:
        ensure_demo_students(db_config)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed rewards and demo accounts")
    parser.add_argument("--no-demo", action="store_true", help="only load rewards, skip demo accounts")
    args = parser.parse_args()

    main(with_demo_students=not args.no_demo)
