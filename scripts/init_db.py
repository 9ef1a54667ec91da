"""Create the attendance tables (and optionally the reward catalogue) in the configured database."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from lab_attendance.common.logging import setup_logging
from lab_attendance.config import get_settings_module
from lab_attendance.database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_students, list_tables

logger = logging.getLogger("init_db")

REQUIRED_TABLES = {"students", "attendance_records", "rewards", "student_rewards"}


def main(*, seed: bool) -> int:
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    if seed:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_students(db_config)

    missing = REQUIRED_TABLES - {t.lower() for t in list_tables(db_config)}
    if missing:
        logger.error("schema incomplete in %s, missing tables: %s", db_config.get("database"), sorted(missing))
        return 1

    logger.info("database %s ready for clocking", db_config.get("database"))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Apply database/schema.sql to the database named in DB_CONFIG")
    parser.add_argument("--seed", action="store_true", help="also load rewards and demo students")
    args = parser.parse_args()

    sys.exit(main(seed=args.seed))
