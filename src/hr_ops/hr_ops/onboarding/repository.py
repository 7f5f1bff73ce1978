from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequirementStatus, TaskStatus
from .model import EquipmentToken, NewOnboardingTask, OnboardingRequirement, OnboardingTask, RequirementTemplate


class OnboardingTaskRepository(Protocol):
    def create_many(self, employee_id: int, tasks: Sequence[NewOnboardingTask]) -> int:
        raise NotImplementedError

    def get_by_id(self, task_id: int) -> Optional[OnboardingTask]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[OnboardingTask]:
        raise NotImplementedError

    def list_pending_due_before(self, day: date) -> Sequence[OnboardingTask]:
        """Pending tasks whose due date is strictly before ``day``."""

        raise NotImplementedError

    def list_pending_due_on_or_before(self, day: date) -> Sequence[OnboardingTask]:
        raise NotImplementedError

    def update_status(self, task_id: int, *, status: TaskStatus, completed_at: Optional[datetime]) -> bool:
        raise NotImplementedError


class OnboardingRequirementRepository(Protocol):
    def create_many(self, employee_id: int, templates: Sequence[RequirementTemplate], *, start: date) -> int:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[OnboardingRequirement]:
        raise NotImplementedError

    def update_status(self, requirement_id: int, *, status: RequirementStatus, changed_at: datetime) -> bool:
        raise NotImplementedError


class EquipmentTokenRepository(Protocol):
    def create(self, token: EquipmentToken) -> int:
        raise NotImplementedError


class WelcomePackageRepository(Protocol):
    def assign(self, *, user_id: int, package_id: int) -> int:
        raise NotImplementedError
