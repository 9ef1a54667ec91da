from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from .achievements.controller import register as register_achievements
from .attendance.controller import register as register_attendance
from .attendance.scheduler import start_daily_reset_job
from .common.logging import setup_logging
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_students, list_tables
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(*, container: Container | None = None, settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")
    tz_name = getattr(settings, "TIMEZONE", "Asia/Taipei")

    logger.info(
        "settings=%s db=%s@%s:%s/%s tz=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        tz_name,
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_students(db_config)

        container = build_container(
            db_config=db_config,
            tz_name=tz_name,
            sweep_grace_minutes=int(getattr(settings, "SWEEP_GRACE_MINUTES", 60)),
            sweep_batch_size=int(getattr(settings, "SWEEP_BATCH_SIZE", 100)),
        )
        if not container.conn.ping():
            logger.warning("database is not reachable; requests will fail until it is")

    register_error_handlers(app)
    register_students(app, container)
    register_attendance(app, container)
    register_achievements(app, container)

    # The debug reloader imports the app twice; only the serving child schedules.
    reloader_parent = app.config["DEBUG"] and os.environ.get("WERKZEUG_RUN_MAIN") != "true"
    if bool(getattr(settings, "ENABLE_SCHEDULER", False)) and not reloader_parent:
        app.extensions["daily_reset_scheduler"] = start_daily_reset_job(
            container.daily_reset_sweeper,
            hour=int(getattr(settings, "DAILY_RESET_HOUR", 5)),
            tz_name=tz_name,
        )

    return app
