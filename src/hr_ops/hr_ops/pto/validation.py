from __future__ import annotations

from datetime import date

from ..common.log import get_logger
from ..core.enums import PtoStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .policy import NON_PTO_EMPLOYMENT
from .repository import PtoRequestRepository

logger = get_logger(__name__)

ACTIVE_STATUSES = (PtoStatus.PENDING, PtoStatus.APPROVED)


class PtoRequestValidator:
    """Checks a new PTO request must pass, run in a fixed order.

    future date -> eligibility -> own overlaps -> department conflicts
    """

    def __init__(self, requests: PtoRequestRepository, users: UserRepository):
        self._requests = requests
        self._users = users

    @staticmethod
    def validate_future_date(start_date: date, *, today: date) -> None:
        if start_date < today:
            logger.info("PTO rejected: start date %s is in the past", start_date)
            raise ValidationError("PTO start date must be in the future")

    @staticmethod
    def validate_eligibility(employee: User) -> None:
        if employee.employment_type in NON_PTO_EMPLOYMENT:
            logger.info("PTO rejected: employee %s is %s", employee.user_id, employee.employment_type.value)
            raise ValidationError(f"PTO is not available for {employee.employment_type.value} employees")
        if (employee.department or "").strip().upper() == "SALES":
            logger.info("PTO rejected: employee %s is in Sales", employee.user_id)
            raise ValidationError("PTO is not available for Sales department employees")

    def validate_no_overlap(self, employee_id: int, start_date: date, end_date: date) -> None:
        existing = self._requests.find_overlapping(
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            statuses=ACTIVE_STATUSES,
        )
        if existing:
            first = existing[0]
            raise ConflictError(
                f"You already have a {first.status.value.lower()} PTO request for these dates "
                f"({first.start_date.isoformat()} to {first.end_date.isoformat()})"
            )

    def validate_department_conflict(self, employee: User, start_date: date, end_date: date) -> None:
        if not employee.department:
            return
        conflicts = self._requests.find_department_overlaps(
            department=employee.department,
            exclude_employee_id=employee.user_id,
            start_date=start_date,
            end_date=end_date,
            statuses=[PtoStatus.APPROVED],
        )
        if not conflicts:
            return
        conflict = conflicts[0]
        other = self._users.get_by_id(conflict.employee_id)
        name = other.full_name if other else f"Employee #{conflict.employee_id}"
        logger.info("PTO department conflict for %s: %s overlaps", employee.user_id, name)
        raise ConflictError(
            f"Department conflict: {name} already has approved PTO from "
            f"{conflict.start_date.isoformat()} to {conflict.end_date.isoformat()}"
        )

    def validate_request(self, employee_id: int, start_date: date, end_date: date, *, today: date) -> User:
        self.validate_future_date(start_date, today=today)

        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        self.validate_eligibility(employee)

        self.validate_no_overlap(employee.user_id, start_date, end_date)
        self.validate_department_conflict(employee, start_date, end_date)
        return employee
