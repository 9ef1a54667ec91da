import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lab_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Organization calendar: every stored timestamp is wall-clock time in this zone
TIMEZONE = os.getenv("TIMEZONE", "Asia/Taipei")

DAILY_RESET_HOUR = int(os.getenv("DAILY_RESET_HOUR", "5"))
SWEEP_GRACE_MINUTES = int(os.getenv("SWEEP_GRACE_MINUTES", "60"))
SWEEP_BATCH_SIZE = int(os.getenv("SWEEP_BATCH_SIZE", "100"))
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed rewards and demo students on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
