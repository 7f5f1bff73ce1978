import os

from config import pto_approvers as PTO_APPROVERS  # noqa: F401

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_ops"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "America/New_York")
# Empty secret disables the /api/cron endpoints.
CRON_SECRET = os.getenv("CRON_SECRET", "")

EMAIL_ENABLED = bool(int(os.getenv("EMAIL_ENABLED", "1")))
PORTAL_URL = os.getenv("PORTAL_URL", "https://portal.example.com")
TRAINING_URL = os.getenv("TRAINING_URL", "https://portal.example.com/training")
HIRE_TEMP_PASSWORD = os.getenv("HIRE_TEMP_PASSWORD", "please-set-HIRE_TEMP_PASSWORD")

REQUIRED_WINTER_DAYS = float(os.getenv("REQUIRED_WINTER_DAYS", "5"))
PTO_ENFORCE_APPROVER_ROUTING = bool(int(os.getenv("PTO_ENFORCE_APPROVER_ROUTING", "0")))
