from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence

from ..common.log import get_logger
from ..core.constants import DEFAULT_PERSONAL_DAYS, DEFAULT_SICK_DAYS, DEFAULT_VACATION_DAYS
from ..core.enums import EmploymentType, PolicyLevel
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import CompanyPolicy, Holiday, PtoPolicy
from .repository import PtoPolicyRepository

logger = get_logger(__name__)

NON_PTO_EMPLOYMENT = frozenset({EmploymentType.TEN99, EmploymentType.CONTRACTOR, EmploymentType.SUB_CONTRACTOR})

DEFAULT_COMPANY_POLICY = CompanyPolicy(
    vacation_days=DEFAULT_VACATION_DAYS,
    sick_days=DEFAULT_SICK_DAYS,
    personal_days=DEFAULT_PERSONAL_DAYS,
)


@dataclass(frozen=True)
class Allocation:
    vacation_days: float
    sick_days: float
    personal_days: float
    notes: str

    @property
    def total_days(self) -> float:
        return self.vacation_days + self.sick_days + self.personal_days


def is_sales_role(*values: Optional[str]) -> bool:
    return any(v and "sales" in v.lower() for v in values)


def allocation_for(
    employment_type: EmploymentType | str,
    *,
    department: Optional[str] = None,
    position: Optional[str] = None,
    role: Optional[str] = None,
    company: Optional[CompanyPolicy] = None,
) -> Allocation:
    """PTO a new or reset employee is entitled to.

    W2 employees outside sales get the company allocation (10/5/2 by default);
    1099s, contractors and anyone in sales get nothing.
    """
    employment = EmploymentType(employment_type)
    if employment in NON_PTO_EMPLOYMENT:
        note = "1099 contractor - no PTO" if employment == EmploymentType.TEN99 else "Contractor - no PTO"
        return Allocation(0.0, 0.0, 0.0, note)
    if is_sales_role(position, department, role):
        return Allocation(0.0, 0.0, 0.0, "Sales role - no PTO")

    base = company or DEFAULT_COMPANY_POLICY
    return Allocation(base.vacation_days, base.sick_days, base.personal_days, "Standard W2 PTO policy")


def new_policy(employee_id: int, allocation: Allocation, *, used_days: float = 0.0) -> PtoPolicy:
    total = allocation.total_days
    return PtoPolicy(
        employee_id=int(employee_id),
        policy_level=PolicyLevel.COMPANY,
        vacation_days=allocation.vacation_days,
        sick_days=allocation.sick_days,
        personal_days=allocation.personal_days,
        base_days=total,
        additional_days=0.0,
        total_days=total,
        used_days=used_days,
        remaining_days=max(0.0, total - used_days),
        notes=allocation.notes,
    )


class PtoPolicyService:
    """Company defaults, per-employee policies and bulk re-allocation."""

    def __init__(self, policies: PtoPolicyRepository, users: UserRepository):
        self._policies = policies
        self._users = users

    def company_policy(self) -> CompanyPolicy:
        return self._policies.get_company_policy() or DEFAULT_COMPANY_POLICY

    def update_company_policy(
        self,
        *,
        vacation_days: float,
        sick_days: float,
        personal_days: float,
        holidays: Optional[Sequence[Holiday]] = None,
        notes: Optional[str] = None,
        updated_by: Optional[int] = None,
    ) -> CompanyPolicy:
        for name, value in (("vacationDays", vacation_days), ("sickDays", sick_days), ("personalDays", personal_days)):
            if value is None or float(value) < 0:
                raise ValidationError(f"{name} must be a non-negative number")

        current = self.company_policy()
        policy = CompanyPolicy(
            vacation_days=float(vacation_days),
            sick_days=float(sick_days),
            personal_days=float(personal_days),
            holidays=tuple(holidays) if holidays is not None else current.holidays,
            notes=notes if notes is not None else current.notes,
        )
        self._policies.save_company_policy(policy, updated_by=updated_by)

        # Employees inheriting from the company follow the new base, keeping their extra days.
        updated = 0
        for existing in self._policies.list_policies(level=PolicyLevel.COMPANY):
            total = policy.total_days + existing.additional_days
            self._policies.save(
                replace(
                    existing,
                    vacation_days=policy.vacation_days + existing.additional_days,
                    sick_days=policy.sick_days,
                    personal_days=policy.personal_days,
                    base_days=policy.total_days,
                    total_days=total,
                    remaining_days=total - existing.used_days,
                )
            )
            updated += 1
        logger.info("Company PTO policy updated (total=%s, propagated=%d)", policy.total_days, updated)
        return policy

    def employee_policy(self, employee_id: int) -> PtoPolicy:
        policy = self._policies.get_for_employee(int(employee_id))
        if policy:
            return policy
        company = self.company_policy()
        return PtoPolicy(
            employee_id=int(employee_id),
            policy_level=PolicyLevel.COMPANY,
            vacation_days=company.vacation_days,
            sick_days=company.sick_days,
            personal_days=company.personal_days,
            base_days=company.total_days,
            additional_days=0.0,
            total_days=company.total_days,
            used_days=0.0,
            remaining_days=company.total_days,
        )

    def list_policies(self) -> Sequence[PtoPolicy]:
        return self._policies.list_policies()

    def update_individual_policy(
        self,
        employee_id: int,
        *,
        vacation_days: Optional[float] = None,
        sick_days: Optional[float] = None,
        personal_days: Optional[float] = None,
        additional_days: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> PtoPolicy:
        existing = self._policies.get_for_employee(int(employee_id))
        if not existing:
            raise NotFoundError("PTO policy not found")

        vacation = existing.vacation_days if vacation_days is None else float(vacation_days)
        sick = existing.sick_days if sick_days is None else float(sick_days)
        personal = existing.personal_days if personal_days is None else float(personal_days)
        additional = existing.additional_days if additional_days is None else float(additional_days)
        if min(vacation, sick, personal, additional) < 0:
            raise ValidationError("PTO days cannot be negative")

        base = vacation + sick + personal
        total = base + additional
        policy = replace(
            existing,
            policy_level=PolicyLevel.INDIVIDUAL,
            vacation_days=vacation,
            sick_days=sick,
            personal_days=personal,
            base_days=base,
            additional_days=additional,
            total_days=total,
            remaining_days=max(0.0, total - existing.used_days),
            notes=notes if notes is not None else existing.notes,
        )
        self._policies.save(policy)
        return policy

    def reset_all(self) -> dict:
        """Re-apply the allocation rules to every active user."""
        company = self.company_policy()
        results = {"updated": 0, "created": 0}
        for user in self._users.list_active():
            allocation = allocation_for(
                user.employment_type,
                department=user.department,
                position=user.position,
                role=user.role.value,
                company=company,
            )
            existing = self._policies.get_for_employee(user.user_id)
            if existing:
                total = allocation.total_days
                self._policies.save(
                    replace(
                        existing,
                        vacation_days=allocation.vacation_days,
                        sick_days=allocation.sick_days,
                        personal_days=allocation.personal_days,
                        base_days=total,
                        additional_days=0.0,
                        total_days=total,
                        remaining_days=max(0.0, total - existing.used_days),
                        notes="System Reset",
                    )
                )
                results["updated"] += 1
            else:
                self._policies.create(replace(new_policy(user.user_id, allocation), notes="System Initialized"))
                results["created"] += 1
        logger.info("PTO reset complete: %(updated)d updated, %(created)d created", results)
        return results
