from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .common.datetime_utils import DEFAULT_TIMEZONE, set_local_timezone
from .common.http import register_error_handlers
from .common.log import configure_logging, get_logger
from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin_user, list_tables
from .jobs.controller import register as register_cron
from .jobs.scheduler import start_scheduler
from .notifications.controller import register as register_notifications
from .onboarding.controller import register as register_onboarding
from .pto.controller import register as register_pto
from .recruiting.controller import register as register_recruiting
from .users.controller import register as register_users
from .workflows.controller import register as register_workflows

logger = get_logger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    set_local_timezone(getattr(settings, "SCHEDULER_TIMEZONE", DEFAULT_TIMEZONE))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", "")

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if getattr(settings, "AUTO_SEED_DB", False):
        seed_path = DATABASE_DIR / "seed.sql"
        if seed_path.exists():
            apply_seed_sql(db_config, seed_path=seed_path)
        ensure_admin_user(
            db_config,
            email=getattr(settings, "ADMIN_EMAIL", "admin@example.com"),
            password=getattr(settings, "ADMIN_PASSWORD", "admin123"),
        )
        logger.info("Admin seed ready")

    container = build_container(db_config=db_config, settings=settings)

    register_error_handlers(app)
    register_users(app, container)
    register_pto(app, container)
    register_notifications(app, container)
    register_recruiting(app, container)
    register_onboarding(app, container)
    register_workflows(app, container)
    register_cron(app, container)

    # the debug reloader imports the app twice; only the child process schedules
    reloader_parent = app.config["DEBUG"] and os.environ.get("WERKZEUG_RUN_MAIN") != "true"
    if getattr(settings, "SCHEDULER_ENABLED", False) and not app.config["TESTING"] and not reloader_parent:
        app.extensions["scheduler"] = start_scheduler(settings, container.jobs)

    return app
