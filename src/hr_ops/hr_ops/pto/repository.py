from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import PolicyLevel, PtoStatus, PtoType
from .model import BalanceChange, CompanyPolicy, PtoPolicy, PtoRequest


class PtoRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        days: float,
        pto_type: PtoType,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[PtoRequest]:
        raise NotImplementedError

    def update_review(
        self,
        *,
        request_id: int,
        status: PtoStatus,
        is_exempt: bool,
        reviewed_by: int,
        reviewed_at: datetime,
        review_notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PtoStatus] = None,
        limit: int = 200,
    ) -> Sequence[PtoRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        statuses: Optional[Iterable[PtoStatus]] = None,
    ) -> Sequence[PtoRequest]:
        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[PtoStatus],
    ) -> Sequence[PtoRequest]:
        raise NotImplementedError

    def find_department_overlaps(
        self,
        *,
        department: str,
        exclude_employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[PtoStatus],
    ) -> Sequence[PtoRequest]:
        """Requests of other employees in the same department overlapping the range."""

        raise NotImplementedError

    def list_starting_on(self, day: date, *, status: PtoStatus) -> Sequence[PtoRequest]:
        raise NotImplementedError

    def list_starting_in_year(self, year: int) -> Sequence[PtoRequest]:
        raise NotImplementedError


class PtoPolicyRepository(Protocol):
    def get_company_policy(self) -> Optional[CompanyPolicy]:
        raise NotImplementedError

    def save_company_policy(self, policy: CompanyPolicy, *, updated_by: Optional[int]) -> None:
        raise NotImplementedError

    def get_for_employee(self, employee_id: int) -> Optional[PtoPolicy]:
        raise NotImplementedError

    def list_policies(self, *, level: Optional[PolicyLevel] = None) -> Sequence[PtoPolicy]:
        raise NotImplementedError

    def create(self, policy: PtoPolicy) -> None:
        raise NotImplementedError

    def save(self, policy: PtoPolicy) -> bool:
        """Overwrite every allocation and balance column of an existing policy."""

        raise NotImplementedError

    def update_usage(self, *, employee_id: int, used_days: float, remaining_days: float) -> bool:
        raise NotImplementedError

    def log_balance_change(self, change: BalanceChange) -> None:
        raise NotImplementedError
