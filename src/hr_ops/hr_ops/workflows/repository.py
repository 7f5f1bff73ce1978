from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import ExecutionStatus, WorkflowTrigger
from .model import NewHrTask, StepExecution, Workflow, WorkflowExecution, WorkflowStep


class WorkflowRepository(Protocol):
    def get_by_id(self, workflow_id: int) -> Optional[Workflow]:
        raise NotImplementedError

    def list_active(self, trigger: WorkflowTrigger) -> Sequence[Workflow]:
        raise NotImplementedError

    def list_steps(self, workflow_id: int) -> Sequence[WorkflowStep]:
        """Steps ordered by ``step_order``."""
        raise NotImplementedError


class ExecutionRepository(Protocol):
    def create_execution(
        self, *, workflow_id: int, candidate_id: Optional[int], context: Dict[str, Any], started_at: datetime
    ) -> int:
        raise NotImplementedError

    def get_execution(self, execution_id: int) -> Optional[WorkflowExecution]:
        raise NotImplementedError

    def update_execution(
        self,
        execution_id: int,
        *,
        status: ExecutionStatus,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        raise NotImplementedError

    def create_step_execution(
        self,
        *,
        execution_id: int,
        step_id: int,
        status: ExecutionStatus,
        started_at: Optional[datetime] = None,
        scheduled_for: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def start_step_execution(self, step_execution_id: int, *, started_at: datetime) -> None:
        raise NotImplementedError

    def finish_step_execution(
        self,
        step_execution_id: int,
        *,
        status: ExecutionStatus,
        completed_at: datetime,
        result: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def list_due_step_executions(self, now: datetime) -> Sequence[StepExecution]:
        """PENDING step executions whose ``scheduled_for`` is at or before ``now``."""
        raise NotImplementedError


class HrTaskRepository(Protocol):
    def create(self, task: NewHrTask) -> int:
        raise NotImplementedError
