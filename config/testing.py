import os

from config import pto_approvers as PTO_APPROVERS  # noqa: F401

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_ops_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SCHEDULER_ENABLED = False
SCHEDULER_TIMEZONE = "America/New_York"
CRON_SECRET = "test-cron-secret"

EMAIL_ENABLED = False
PORTAL_URL = "http://localhost:5000"
TRAINING_URL = "http://localhost:5000/training"
HIRE_TEMP_PASSWORD = "Test2026!"

REQUIRED_WINTER_DAYS = 5
PTO_ENFORCE_APPROVER_ROUTING = False
