from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..core.constants import PTO_REMINDER_COOLDOWN_HOURS, PTO_REMINDER_WINDOWS, REMINDER_ROLES
from ..core.enums import NotificationType, PtoStatus
from ..notifications import templates
from ..notifications.outbox import EmailOutbox
from ..notifications.service import NotificationService
from ..users.model import User
from ..users.repository import UserRepository
from .model import PtoRequest
from .repository import PtoRequestRepository

logger = get_logger(__name__)


class PtoReminderService:
    """Reminds employees and their managers 30, 7 and 1 day before approved PTO."""

    def __init__(
        self,
        requests: PtoRequestRepository,
        users: UserRepository,
        *,
        notifications: NotificationService,
        outbox: EmailOutbox,
        windows: Sequence[int] = PTO_REMINDER_WINDOWS,
    ):
        self._requests = requests
        self._users = users
        self._notifications = notifications
        self._outbox = outbox
        self._windows = tuple(windows)

    def send_reminders(self, today: Optional[date] = None, *, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        today = today or now.date()
        cooldown = timedelta(hours=PTO_REMINDER_COOLDOWN_HOURS)
        counts = {f"sent_{days}_day": 0 for days in self._windows}
        counts["errors"] = 0
        skipped = 0

        managers: Optional[Sequence[User]] = None
        for days in self._windows:
            target = today + timedelta(days=days)
            for request in self._requests.list_starting_on(target, status=PtoStatus.APPROVED):
                ref_key = f"pto:{request.request_id}:{days}"
                try:
                    if self._notifications.was_sent_recently(
                        type=NotificationType.PTO_REMINDER, ref_key=ref_key, within=cooldown, now=now
                    ):
                        skipped += 1
                        continue
                    if managers is None:
                        managers = self._users.list_active(roles=REMINDER_ROLES)
                    self._remind(request, days, managers, ref_key)
                    counts[f"sent_{days}_day"] += 1
                except Exception:
                    counts["errors"] += 1
                    logger.exception("PTO reminder failed for request %s (%s-day)", request.request_id, days)

        logger.info("PTO reminders sent: %s (already sent: %d)", counts, skipped)
        return counts

    def _remind(self, request: PtoRequest, days: int, managers: Sequence[User], ref_key: str) -> None:
        employee = self._users.get_by_id(request.employee_id)
        if not employee or not employee.is_active:
            raise LookupError(f"Employee {request.employee_id} not found or inactive")

        self._outbox.send(
            templates.pto_reminder_employee(
                to=employee.email,
                first_name=employee.first_name,
                start_date=request.start_date,
                end_date=request.end_date,
                days_until=days,
            )
        )
        when = "tomorrow" if days == 1 else f"in {days} days"
        self._notifications.notify(
            user_id=employee.user_id,
            type=NotificationType.PTO_REMINDER,
            title="Upcoming PTO",
            message=f"Your PTO starts {when} ({request.start_date.isoformat()} to {request.end_date.isoformat()})",
            link="/hr/pto",
            ref_key=ref_key,
        )
        for manager in managers:
            if manager.user_id == employee.user_id:
                continue
            self._outbox.send(
                templates.pto_reminder_manager(
                    to=manager.email,
                    employee_name=employee.full_name,
                    start_date=request.start_date,
                    end_date=request.end_date,
                    days_until=days,
                )
            )
