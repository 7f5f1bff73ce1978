from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..core.enums import ActionType, ExecutionStatus, StepType, WorkflowTrigger


@dataclass(frozen=True)
class Workflow:
    workflow_id: int
    name: str
    trigger_type: WorkflowTrigger
    trigger_conditions: Dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    description: Optional[str] = None


@dataclass(frozen=True)
class WorkflowStep:
    step_id: int
    workflow_id: int
    step_order: int
    title: str
    step_type: StepType
    action_type: Optional[ActionType] = None
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkflowExecution:
    execution_id: int
    workflow_id: int
    status: ExecutionStatus
    context: Dict[str, Any] = field(default_factory=dict)
    candidate_id: Optional[int] = None
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class StepExecution:
    step_execution_id: int
    execution_id: int
    step_id: int
    status: ExecutionStatus
    scheduled_for: Optional[datetime] = None


@dataclass(frozen=True)
class NewHrTask:
    title: str
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    candidate_id: Optional[int] = None
    due_date: Optional[date] = None
