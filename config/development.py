import os

from config import pto_approvers as PTO_APPROVERS  # noqa: F401

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_ops"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the admin account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "0")))
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "America/New_York")
CRON_SECRET = os.getenv("CRON_SECRET", "dev-cron-secret")

EMAIL_ENABLED = bool(int(os.getenv("EMAIL_ENABLED", "1")))
PORTAL_URL = os.getenv("PORTAL_URL", "http://localhost:5000")
TRAINING_URL = os.getenv("TRAINING_URL", "http://localhost:5000/training")
HIRE_TEMP_PASSWORD = os.getenv("HIRE_TEMP_PASSWORD", "Welcome2026!")

REQUIRED_WINTER_DAYS = float(os.getenv("REQUIRED_WINTER_DAYS", "5"))
PTO_ENFORCE_APPROVER_ROUTING = bool(int(os.getenv("PTO_ENFORCE_APPROVER_ROUTING", "0")))
