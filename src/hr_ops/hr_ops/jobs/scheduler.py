from __future__ import annotations

import atexit
from types import ModuleType
from typing import Mapping

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from ..common.datetime_utils import DEFAULT_TIMEZONE
from ..common.log import get_logger
from .guard import GuardedJob
from .registry import INTERVIEW_OVERDUE, ONBOARDING_OVERDUE, PTO_REMINDERS, WORKFLOW_DELAYED_STEPS

logger = get_logger(__name__)

DAILY_SCHEDULE = (
    (PTO_REMINDERS, 21, 0, "PTO reminders daily at 9pm"),
    (ONBOARDING_OVERDUE, 9, 0, "Onboarding overdue check daily at 9am"),
    (INTERVIEW_OVERDUE, 10, 0, "Interview overdue check daily at 10am"),
)


def build_scheduler(settings: ModuleType, jobs: Mapping[str, GuardedJob]) -> BackgroundScheduler:
    tz = pytz.timezone(getattr(settings, "SCHEDULER_TIMEZONE", DEFAULT_TIMEZONE))
    scheduler = BackgroundScheduler(daemon=True, timezone=tz)

    for name, hour, minute, label in DAILY_SCHEDULE:
        scheduler.add_job(
            func=jobs[name],
            trigger=CronTrigger(hour=hour, minute=minute, timezone=tz),
            id=name,
            name=label,
            replace_existing=True,
        )

    delayed = jobs[WORKFLOW_DELAYED_STEPS]
    scheduler.add_job(
        func=delayed,
        trigger=IntervalTrigger(minutes=1, timezone=tz),
        id=WORKFLOW_DELAYED_STEPS,
        name="Workflow delayed steps every minute",
        replace_existing=True,
    )
    # catch up on anything that came due while the process was down
    scheduler.add_job(func=delayed, id=f"{WORKFLOW_DELAYED_STEPS}-startup", name="Workflow delayed steps at startup")
    return scheduler


def start_scheduler(settings: ModuleType, jobs: Mapping[str, GuardedJob]) -> BackgroundScheduler:
    scheduler = build_scheduler(settings, jobs)
    scheduler.start()
    logger.info("Scheduler started with %d jobs", len(scheduler.get_jobs()))
    atexit.register(lambda: scheduler.shutdown(wait=False))
    return scheduler
