import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lab_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Taipei")

DAILY_RESET_HOUR = int(os.getenv("DAILY_RESET_HOUR", "5"))
SWEEP_GRACE_MINUTES = int(os.getenv("SWEEP_GRACE_MINUTES", "60"))
SWEEP_BATCH_SIZE = int(os.getenv("SWEEP_BATCH_SIZE", "100"))
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
