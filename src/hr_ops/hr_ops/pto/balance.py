from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..core.enums import BalanceChangeReason, PtoStatus, PtoType
from .model import BalanceChange, PtoPolicy, PtoRequest, TypedBalance
from .policy import DEFAULT_COMPANY_POLICY, Allocation, new_policy
from .repository import PtoPolicyRepository, PtoRequestRepository

logger = get_logger(__name__)


class PtoBalanceService:
    """Keeps ``pto_policies.used_days/remaining_days`` in step with request decisions."""

    def __init__(self, policies: PtoPolicyRepository, requests: PtoRequestRepository):
        self._policies = policies
        self._requests = requests

    def get_balance(self, employee_id: int) -> Optional[PtoPolicy]:
        return self._policies.get_for_employee(int(employee_id))

    def deduct(
        self,
        *,
        employee_id: int,
        days: float,
        request_id: int,
        is_exempt: bool = False,
        changed_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[BalanceChange]:
        if is_exempt or days <= 0:
            return None

        now = now or now_local()
        policy = self._policies.get_for_employee(int(employee_id))
        if policy is None:
            company = self._policies.get_company_policy() or DEFAULT_COMPANY_POLICY
            allocation = Allocation(company.vacation_days, company.sick_days, company.personal_days, "Auto-created on first PTO use")
            policy = new_policy(employee_id, allocation, used_days=float(days))
            self._policies.create(policy)
            change = BalanceChange(
                employee_id=int(employee_id),
                request_id=int(request_id),
                previous_used=0.0,
                new_used=policy.used_days,
                previous_remaining=policy.total_days,
                new_remaining=policy.remaining_days,
                change_amount=-float(days),
                reason=BalanceChangeReason.APPROVED,
                changed_by=changed_by,
                timestamp=now,
            )
        else:
            new_used = policy.used_days + float(days)
            new_remaining = max(0.0, policy.total_days - new_used)
            self._policies.update_usage(employee_id=policy.employee_id, used_days=new_used, remaining_days=new_remaining)
            change = BalanceChange(
                employee_id=policy.employee_id,
                request_id=int(request_id),
                previous_used=policy.used_days,
                new_used=new_used,
                previous_remaining=policy.remaining_days,
                new_remaining=new_remaining,
                change_amount=-float(days),
                reason=BalanceChangeReason.APPROVED,
                changed_by=changed_by,
                timestamp=now,
            )

        self._policies.log_balance_change(change)
        logger.info(
            "Deducted %s PTO days from employee %s (request %s): remaining %s -> %s",
            days, employee_id, request_id, change.previous_remaining, change.new_remaining,
        )
        return change

    def restore(
        self,
        *,
        employee_id: int,
        days: float,
        request_id: int,
        reason: BalanceChangeReason,
        is_exempt: bool = False,
        changed_by: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[BalanceChange]:
        if is_exempt or days <= 0:
            return None

        policy = self._policies.get_for_employee(int(employee_id))
        if policy is None:
            logger.warning("No PTO policy for employee %s; nothing to restore for request %s", employee_id, request_id)
            return None

        new_used = max(0.0, policy.used_days - float(days))
        new_remaining = policy.total_days - new_used
        self._policies.update_usage(employee_id=policy.employee_id, used_days=new_used, remaining_days=new_remaining)
        change = BalanceChange(
            employee_id=policy.employee_id,
            request_id=int(request_id),
            previous_used=policy.used_days,
            new_used=new_used,
            previous_remaining=policy.remaining_days,
            new_remaining=new_remaining,
            change_amount=float(days),
            reason=reason,
            changed_by=changed_by,
            timestamp=now or now_local(),
        )
        self._policies.log_balance_change(change)
        logger.info(
            "Restored %s PTO days to employee %s (request %s, %s)",
            days, employee_id, request_id, reason.value,
        )
        return change

    def apply_transition(
        self,
        previous: PtoRequest,
        updated: PtoRequest,
        *,
        changed_by: Optional[int] = None,
    ) -> Optional[BalanceChange]:
        """Balance effect of a status and/or exempt change on one request.

        * anything -> APPROVED deducts (unless exempt)
        * APPROVED -> DENIED restores as DENIED
        * APPROVED -> PENDING restores as CANCELLED
        * APPROVED -> APPROVED restores when it became exempt, deducts when it stopped being exempt
        """
        days = float(previous.days)
        common = dict(employee_id=previous.employee_id, days=days, request_id=previous.request_id, changed_by=changed_by)

        if previous.status != PtoStatus.APPROVED and updated.status == PtoStatus.APPROVED:
            return self.deduct(is_exempt=updated.is_exempt, **common)

        if previous.status == PtoStatus.APPROVED and updated.status == PtoStatus.DENIED:
            return self.restore(reason=BalanceChangeReason.DENIED, is_exempt=previous.is_exempt, **common)

        if previous.status == PtoStatus.APPROVED and updated.status == PtoStatus.PENDING:
            return self.restore(reason=BalanceChangeReason.CANCELLED, is_exempt=previous.is_exempt, **common)

        if previous.status == PtoStatus.APPROVED and updated.status == PtoStatus.APPROVED:
            if not previous.is_exempt and updated.is_exempt:
                return self.restore(reason=BalanceChangeReason.CANCELLED, is_exempt=False, **common)
            if previous.is_exempt and not updated.is_exempt:
                return self.deduct(is_exempt=False, **common)

        return None

    def recalculate(self, employee_id: int, year: int) -> Optional[PtoPolicy]:
        """Rebuild ``used_days`` from approved, non-exempt requests starting in ``year``."""
        policy = self._policies.get_for_employee(int(employee_id))
        if policy is None:
            return None

        used = sum(
            float(r.days)
            for r in self._requests.list_for_employee(int(employee_id), statuses=[PtoStatus.APPROVED])
            if not r.is_exempt and r.start_date.year == int(year)
        )
        remaining = max(0.0, policy.total_days - used)
        self._policies.update_usage(employee_id=policy.employee_id, used_days=used, remaining_days=remaining)
        logger.info("Recalculated PTO for employee %s (%s): used=%s remaining=%s", employee_id, year, used, remaining)
        return replace(policy, used_days=used, remaining_days=remaining)

    def typed_balance(self, employee_id: int, year: int) -> List[TypedBalance]:
        policy = self._policies.get_for_employee(int(employee_id))
        allowed = {
            PtoType.VACATION: policy.vacation_days if policy else 0.0,
            PtoType.SICK: policy.sick_days if policy else 0.0,
            PtoType.PERSONAL: policy.personal_days if policy else 0.0,
        }
        used = {t: 0.0 for t in PtoType}
        for request in self._requests.list_for_employee(int(employee_id), statuses=[PtoStatus.APPROVED]):
            if request.is_exempt or request.start_date.year != int(year):
                continue
            used[request.pto_type] += float(request.days)
        return [TypedBalance(pto_type=t, allowed=allowed[t], used=used[t]) for t in PtoType]
