from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import List, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..common.validators import normalize_email, require_id, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_REQUIRED_WINTER_DAYS, EXEMPT_ROLES, MANAGER_ROLES
from ..core.enums import NotificationType, PtoStatus, PtoType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications import templates
from ..notifications.outbox import EmailOutbox
from ..notifications.service import NotificationService
from ..users.model import User
from ..users.repository import UserRepository
from .approvers import ApprovalRouting
from .balance import PtoBalanceService
from .calendar_rules import company_holidays, count_business_days, winter_requirement_status, winter_warning
from .model import CreatedRequest, PtoRequest, WinterStatus
from .repository import PtoPolicyRepository, PtoRequestRepository
from .validation import PtoRequestValidator

logger = get_logger(__name__)


def parse_status(value: Optional[str]) -> PtoStatus:
    try:
        return PtoStatus(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("Invalid status. Must be APPROVED, DENIED, or PENDING")


def parse_type(value: Optional[str]) -> PtoType:
    if not value:
        return PtoType.VACATION
    try:
        return PtoType(str(value).strip().upper())
    except ValueError:
        raise ValidationError("Invalid PTO type. Must be VACATION, SICK, or PERSONAL")


class PtoService:
    """PTO request lifecycle: filing, review and reporting."""

    def __init__(
        self,
        requests: PtoRequestRepository,
        policies: PtoPolicyRepository,
        users: UserRepository,
        *,
        validator: PtoRequestValidator,
        balances: PtoBalanceService,
        routing: ApprovalRouting,
        notifications: NotificationService,
        outbox: EmailOutbox,
        required_winter_days: float = DEFAULT_REQUIRED_WINTER_DAYS,
        enforce_routing: bool = False,
    ):
        self._requests = requests
        self._policies = policies
        self._users = users
        self._validator = validator
        self._balances = balances
        self._routing = routing
        self._notifications = notifications
        self._outbox = outbox
        self._required_winter_days = required_winter_days
        self._enforce_routing = enforce_routing

    # ---- filing ----
    def create_request(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        start_date: date,
        end_date: date,
        reason: str,
        pto_type: PtoType = PtoType.VACATION,
        employee_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> CreatedRequest:
        target_id = require_id(employee_id, "employeeId") if employee_id not in (None, "") else int(current_user_id)
        if target_id != int(current_user_id) and current_role not in MANAGER_ROLES:
            raise AuthorizationError("Only managers can create PTO requests for other employees")

        reason = require_non_empty(reason, "reason")
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        today = today or now_local().date()
        employee = self._validator.validate_request(target_id, start_date, end_date, today=today)

        holidays = company_holidays(self._policies.get_company_policy())
        days = count_business_days(start_date, end_date, holidays)
        if days <= 0:
            raise ValidationError("PTO request must include at least one business day")
        logger.info("PTO request: %s business days (%s to %s) for employee %s", days, start_date, end_date, target_id)

        request_id = self._requests.create(
            employee_id=target_id,
            start_date=start_date,
            end_date=end_date,
            days=float(days),
            pto_type=pto_type,
            reason=reason,
        )
        created = self._requests.get_by_id(request_id)
        if created is None:
            raise NotFoundError("PTO request not found after creation")

        status = self.winter_status(target_id, year=start_date.year)
        warning = winter_warning(start_date, end_date, status)
        notified = self._notify_approvers(employee, created)
        return CreatedRequest(request=created, winter_warning=warning, notified_approvers=tuple(notified))

    def _notify_approvers(self, employee: User, request: PtoRequest) -> List[str]:
        try:
            approvers = self.approver_users(employee)
            for approver in approvers:
                self._notifications.notify(
                    user_id=approver.user_id,
                    type=NotificationType.PTO_REQUEST,
                    title="New PTO Request",
                    message=(
                        f"{employee.full_name} requested {request.days:g} day(s) of "
                        f"{request.pto_type.value.lower()} PTO from {request.start_date.isoformat()} "
                        f"to {request.end_date.isoformat()}"
                    ),
                    link="/hr/pto",
                    ref_key=f"pto:{request.request_id}",
                )
            return [a.email for a in approvers]
        except Exception:
            logger.exception("Failed to notify approvers of PTO request %s", request.request_id)
            return []

    # ---- review ----
    def update_status(
        self,
        *,
        reviewer_id: int,
        reviewer_role: Role,
        request_id: int,
        status: str,
        is_exempt: Optional[bool] = None,
        review_notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PtoRequest:
        if reviewer_role not in MANAGER_ROLES:
            raise AuthorizationError("Insufficient permissions")
        new_status = parse_status(status)
        if is_exempt and reviewer_role not in EXEMPT_ROLES:
            raise AuthorizationError("Only administrators and general managers can mark PTO as exempt")

        previous = self._requests.get_by_id(int(request_id))
        if not previous:
            raise NotFoundError("PTO request not found")

        employee = self._users.get_by_id(previous.employee_id)
        if self._enforce_routing and new_status != PtoStatus.PENDING and reviewer_role not in EXEMPT_ROLES:
            reviewer = self._users.get_by_id(int(reviewer_id))
            if not reviewer or not employee or not self._routing.can_approve(
                reviewer.email, employee.email, employee.department
            ):
                raise AuthorizationError("You are not an authorized approver for this request")

        now = now or now_local()
        notes = (review_notes or "").strip() or None
        updated = replace(
            previous,
            status=new_status,
            is_exempt=previous.is_exempt if is_exempt is None else bool(is_exempt),
            reviewed_by=int(reviewer_id),
            reviewed_at=now,
            review_notes=notes,
        )
        self._requests.update_review(
            request_id=updated.request_id,
            status=updated.status,
            is_exempt=updated.is_exempt,
            reviewed_by=int(reviewer_id),
            reviewed_at=now,
            review_notes=notes,
        )
        logger.info(
            "PTO request %s: %s -> %s by user %s (exempt=%s)",
            request_id, previous.status.value, new_status.value, reviewer_id, updated.is_exempt,
        )

        try:
            self._balances.apply_transition(previous, updated, changed_by=int(reviewer_id))
        except Exception:
            logger.exception("PTO balance update failed for request %s", request_id)

        if employee and new_status != previous.status and new_status in (PtoStatus.APPROVED, PtoStatus.DENIED):
            self._notify_employee(employee, updated)
        return updated

    def _notify_employee(self, employee: User, request: PtoRequest) -> None:
        approved = request.status == PtoStatus.APPROVED
        verdict = "approved" if approved else "denied"
        try:
            self._notifications.notify(
                user_id=employee.user_id,
                type=NotificationType.PTO_APPROVED if approved else NotificationType.PTO_DENIED,
                title=f"PTO Request {verdict.capitalize()}",
                message=(
                    f"Your PTO request for {request.start_date.isoformat()} to "
                    f"{request.end_date.isoformat()} was {verdict}"
                ),
                link="/hr/pto",
                ref_key=f"pto:{request.request_id}",
            )
        except Exception:
            logger.exception("Failed to create PTO decision notification for request %s", request.request_id)
        try:
            self._outbox.send(
                templates.pto_decision(
                    to=employee.email,
                    first_name=employee.first_name,
                    approved=approved,
                    start_date=request.start_date,
                    end_date=request.end_date,
                    days=request.days,
                    review_notes=request.review_notes,
                )
            )
        except Exception:
            logger.exception("Failed to send PTO decision email for request %s", request.request_id)

    # ---- queries ----
    def list_requests(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        status: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[PtoRequest]:
        status_filter = parse_status(status) if status else None
        if current_role not in MANAGER_ROLES:
            employee_id = int(current_user_id)
        return self._requests.list_requests(employee_id=employee_id, status=status_filter, limit=DEFAULT_LIST_LIMIT)

    def approver_emails(self, employee_id: int) -> List[str]:
        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return self._routing.approvers_for(employee.email, employee.department)

    def approver_users(self, employee: User) -> Sequence[User]:
        return self._users.list_active_by_emails(self._routing.approvers_for(employee.email, employee.department))

    def can_user_approve(self, approver_email: str, employee_id: int) -> bool:
        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            return False
        return self._routing.can_approve(normalize_email(approver_email), employee.email, employee.department)

    def winter_status(self, employee_id: int, *, year: int) -> WinterStatus:
        requests = self._requests.list_for_employee(int(employee_id), statuses=[PtoStatus.APPROVED])
        return winter_requirement_status(requests, year=int(year), required=self._required_winter_days)

    def balance(self, employee_id: int, *, year: int) -> dict:
        policy = self._balances.get_balance(int(employee_id))
        return {
            "policy": policy.to_dict() if policy else None,
            "byType": [
                {"type": b.pto_type.value, "allowed": b.allowed, "used": b.used, "remaining": b.remaining}
                for b in self._balances.typed_balance(int(employee_id), int(year))
            ],
            "winter": self.winter_status(int(employee_id), year=int(year)).to_dict(),
        }

    def analytics_overview(self, *, year: int) -> dict:
        requests = self._requests.list_starting_in_year(int(year))
        by_type = {t.value: 0.0 for t in PtoType}
        total_used = 0.0
        for r in requests:
            if r.status == PtoStatus.APPROVED and not r.is_exempt:
                total_used += r.days
                by_type[r.pto_type.value] += r.days
        return {
            "year": int(year),
            "totalUsedDays": total_used,
            "byType": by_type,
            "requestCount": len(requests),
            "pendingCount": sum(1 for r in requests if r.status == PtoStatus.PENDING),
        }

    def usage_by_employee(self, *, year: int) -> List[dict]:
        used = defaultdict(float)
        for r in self._requests.list_starting_in_year(int(year)):
            if r.status == PtoStatus.APPROVED and not r.is_exempt:
                used[r.employee_id] += r.days

        rows = []
        for employee_id, days in used.items():
            user = self._users.get_by_id(employee_id)
            rows.append(
                {
                    "employeeId": employee_id,
                    "name": user.full_name if user else f"Employee #{employee_id}",
                    "department": user.department if user else None,
                    "usedDays": days,
                }
            )
        rows.sort(key=lambda row: row["usedDays"], reverse=True)
        return rows
