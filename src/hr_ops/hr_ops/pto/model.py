from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import BalanceChangeReason, PolicyLevel, PtoStatus, PtoType


@dataclass(frozen=True)
class PtoRequest:
    request_id: int
    employee_id: int
    start_date: date
    end_date: date
    days: float
    pto_type: PtoType
    reason: str
    status: PtoStatus
    is_exempt: bool = False
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "employeeId": self.employee_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "days": self.days,
            "type": self.pto_type.value,
            "reason": self.reason,
            "status": self.status.value,
            "isExempt": self.is_exempt,
            "reviewedBy": self.reviewed_by,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewNotes": self.review_notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Holiday:
    day: date
    name: str


@dataclass(frozen=True)
class CompanyPolicy:
    vacation_days: float
    sick_days: float
    personal_days: float
    holidays: Tuple[Holiday, ...] = ()
    notes: Optional[str] = None

    @property
    def total_days(self) -> float:
        return self.vacation_days + self.sick_days + self.personal_days

    def to_dict(self) -> dict:
        return {
            "vacationDays": self.vacation_days,
            "sickDays": self.sick_days,
            "personalDays": self.personal_days,
            "totalDays": self.total_days,
            "holidaySchedule": [{"date": h.day.isoformat(), "name": h.name} for h in self.holidays],
            "notes": self.notes,
        }


@dataclass(frozen=True)
class PtoPolicy:
    """Per-employee allocation and running balance."""

    employee_id: int
    policy_level: PolicyLevel
    vacation_days: float
    sick_days: float
    personal_days: float
    base_days: float
    additional_days: float
    total_days: float
    used_days: float
    remaining_days: float
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "policyLevel": self.policy_level.value,
            "vacationDays": self.vacation_days,
            "sickDays": self.sick_days,
            "personalDays": self.personal_days,
            "baseDays": self.base_days,
            "additionalDays": self.additional_days,
            "totalDays": self.total_days,
            "usedDays": self.used_days,
            "remainingDays": self.remaining_days,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class BalanceChange:
    employee_id: int
    request_id: int
    previous_used: float
    new_used: float
    previous_remaining: float
    new_remaining: float
    change_amount: float
    reason: BalanceChangeReason
    changed_by: Optional[int]
    timestamp: datetime


@dataclass(frozen=True)
class WinterStatus:
    required: float
    used: float
    remaining: float
    is_met: bool

    def to_dict(self) -> dict:
        return {"required": self.required, "used": self.used, "remaining": self.remaining, "isMet": self.is_met}


@dataclass(frozen=True)
class TypedBalance:
    pto_type: PtoType
    allowed: float
    used: float

    @property
    def remaining(self) -> float:
        return max(0.0, self.allowed - self.used)


@dataclass(frozen=True)
class CreatedRequest:
    request: PtoRequest
    winter_warning: Optional[str] = None
    notified_approvers: Tuple[str, ...] = field(default_factory=tuple)
