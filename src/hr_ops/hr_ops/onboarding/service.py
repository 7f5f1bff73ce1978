from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..core.constants import OVERDUE_NOTIFICATION_COOLDOWN_HOURS
from ..core.enums import EmploymentType, NotificationType, RequirementStatus, TaskStatus
from ..core.exceptions import NotFoundError
from ..notifications import templates
from ..notifications.outbox import EmailOutbox
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import OnboardingTask
from .repository import OnboardingRequirementRepository, OnboardingTaskRepository
from .requirements import (
    completion_percentage,
    default_requirements,
    is_requirement_overdue,
    requirements_by_category,
)

logger = get_logger(__name__)


def days_overdue(due_date: date, now: datetime) -> int:
    """Whole days (rounded up) since the start of the due date; never negative."""
    elapsed = now - datetime.combine(due_date, time.min)
    return max(0, math.ceil(elapsed.total_seconds() / 86400))


class OnboardingService:
    """Employee-facing onboarding checklist."""

    def __init__(self, tasks: OnboardingTaskRepository, requirements: OnboardingRequirementRepository):
        self._tasks = tasks
        self._requirements = requirements

    def list_tasks(self, employee_id: int):
        return self._tasks.list_for_employee(int(employee_id))

    def get_task(self, task_id: int) -> OnboardingTask:
        task = self._tasks.get_by_id(int(task_id))
        if not task:
            raise NotFoundError("Onboarding task not found")
        return task

    def set_task_status(self, task_id: int, status: TaskStatus, *, now: Optional[datetime] = None) -> OnboardingTask:
        task = self.get_task(task_id)
        completed_at = (now or now_local()) if status == TaskStatus.COMPLETED else None
        self._tasks.update_status(task.task_id, status=status, completed_at=completed_at)
        return self.get_task(task_id)

    def create_requirements(self, employee_id: int, employment_type: EmploymentType, *, start: date) -> int:
        created = self._requirements.create_many(int(employee_id), default_requirements(employment_type), start=start)
        logger.info("Created %d onboarding requirements for employee %s", created, employee_id)
        return created

    def set_requirement_status(self, requirement_id: int, status: RequirementStatus) -> None:
        if not self._requirements.update_status(int(requirement_id), status=status, changed_at=now_local()):
            raise NotFoundError("Onboarding requirement not found")

    def requirements_overview(self, employee_id: int, *, today: date) -> dict:
        requirements = self._requirements.list_for_employee(int(employee_id))
        return {
            "completionPercentage": completion_percentage(requirements),
            "overdue": [r.requirement_id for r in requirements if is_requirement_overdue(r, today=today)],
            "byCategory": {
                category: [r.to_dict() for r in items]
                for category, items in requirements_by_category(requirements).items()
            },
        }


class OnboardingOverdueService:
    """Daily nag for pending onboarding tasks past their due date."""

    def __init__(
        self,
        tasks: OnboardingTaskRepository,
        users: UserRepository,
        *,
        notifications: NotificationService,
        outbox: EmailOutbox,
    ):
        self._tasks = tasks
        self._users = users
        self._notifications = notifications
        self._outbox = outbox

    def run(self, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        cooldown = timedelta(hours=OVERDUE_NOTIFICATION_COOLDOWN_HOURS)
        counts = {"checked": 0, "notified": 0, "skipped": 0, "errors": 0}

        for task in self._tasks.list_pending_due_on_or_before(now.date()):
            if task.due_date is None or datetime.combine(task.due_date, time.min) >= now:
                continue
            counts["checked"] += 1
            ref_key = f"task:{task.task_id}"
            try:
                if self._notifications.was_sent_recently(
                    type=NotificationType.TASK_OVERDUE,
                    ref_key=ref_key,
                    within=cooldown,
                    user_id=task.employee_id,
                    now=now,
                ):
                    counts["skipped"] += 1
                    continue
                self._notify(task, days_overdue(task.due_date, now), ref_key)
                counts["notified"] += 1
            except Exception:
                counts["errors"] += 1
                logger.exception("Overdue notification failed for onboarding task %s", task.task_id)

        logger.info(
            "Onboarding overdue check: %(checked)d overdue, %(notified)d notified, %(skipped)d skipped, %(errors)d errors",
            counts,
        )
        return counts

    def _notify(self, task: OnboardingTask, overdue: int, ref_key: str) -> None:
        employee = self._users.get_by_id(task.employee_id)
        if not employee:
            raise LookupError(f"Employee {task.employee_id} not found")
        self._notifications.notify(
            user_id=employee.user_id,
            type=NotificationType.TASK_OVERDUE,
            title="Overdue Onboarding Task",
            message=f'Your task "{task.task_name}" is {overdue} day(s) overdue. Please complete it as soon as possible.',
            link="/onboarding",
            ref_key=ref_key,
        )
        self._outbox.send(
            templates.task_overdue(
                to=employee.email,
                first_name=employee.first_name,
                task_name=task.task_name,
                due_date=task.due_date,
                days_overdue=overdue,
            )
        )


class OnboardingReminderService:
    """One digest email per employee listing every pending task due by today."""

    def __init__(self, tasks: OnboardingTaskRepository, users: UserRepository, *, outbox: EmailOutbox):
        self._tasks = tasks
        self._users = users
        self._outbox = outbox

    def send_due(self, today: Optional[date] = None) -> dict:
        today = today or now_local().date()
        by_employee = defaultdict(list)
        for task in self._tasks.list_pending_due_on_or_before(today):
            by_employee[task.employee_id].append(task)

        counts = {"employees": len(by_employee), "tasks": sum(len(v) for v in by_employee.values()), "sent": 0, "errors": 0}
        for employee_id, tasks in by_employee.items():
            try:
                employee = self._users.get_by_id(employee_id)
                if not employee or not employee.is_active:
                    continue
                self._outbox.send(
                    templates.onboarding_digest(
                        to=employee.email,
                        first_name=employee.first_name,
                        tasks=[(t.task_name, t.due_date) for t in tasks],
                    )
                )
                counts["sent"] += 1
            except Exception:
                counts["errors"] += 1
                logger.exception("Onboarding reminder failed for employee %s", employee_id)
        logger.info("Onboarding reminders: %s", counts)
        return counts
