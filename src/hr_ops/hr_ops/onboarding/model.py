from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequirementStatus, TaskCategory, TaskStatus


@dataclass(frozen=True)
class OnboardingTask:
    task_id: int
    employee_id: int
    task_name: str
    description: Optional[str]
    category: TaskCategory
    due_date: Optional[date]
    status: TaskStatus
    completed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "employeeId": self.employee_id,
            "taskName": self.task_name,
            "description": self.description,
            "category": self.category.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "status": self.status.value,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass(frozen=True)
class NewOnboardingTask:
    task_name: str
    description: str
    category: TaskCategory
    due_date: date


@dataclass(frozen=True)
class RequirementTemplate:
    name: str
    description: str
    category: str
    employee_type: str
    days_until_due: int
    is_required: bool = True


@dataclass(frozen=True)
class OnboardingRequirement:
    requirement_id: int
    employee_id: int
    employee_type: str
    title: str
    description: Optional[str]
    category: str
    is_required: bool
    status: RequirementStatus
    due_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "id": self.requirement_id,
            "employeeId": self.employee_id,
            "employeeType": self.employee_type,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "isRequired": self.is_required,
            "status": self.status.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }


@dataclass(frozen=True)
class EquipmentToken:
    user_id: int
    token: str
    signer_name: str
    signer_email: str
    locked_until: date
    expires_at: datetime
    type: str = "receipt"
    status: str = "pending"
