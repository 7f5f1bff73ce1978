"""Runs workflow steps in order and records every run.

A run ends COMPLETED when the last step finishes or a CONDITION evaluates
false, FAILED as soon as a step fails. A DELAY step parks the run: the next
step gets a PENDING step execution with ``scheduled_for`` set, and
``process_delayed_steps`` picks it up once that time has passed.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..core.enums import ExecutionStatus
from ..core.exceptions import NotFoundError
from .factory import StepHandlerFactory
from .model import WorkflowStep
from .repository import ExecutionRepository, WorkflowRepository
from .steps.base import StepResult

logger = get_logger(__name__)


class WorkflowExecutor:
    def __init__(self, workflows: WorkflowRepository, executions: ExecutionRepository, handlers: StepHandlerFactory):
        self._workflows = workflows
        self._executions = executions
        self._handlers = handlers

    def execute(self, workflow_id: int, context: Dict[str, Any], *, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        workflow = self._workflows.get_by_id(int(workflow_id))
        if not workflow:
            raise NotFoundError(f"Workflow {workflow_id} not found")

        context = copy.deepcopy(context)
        execution_id = self._executions.create_execution(
            workflow_id=workflow.workflow_id,
            candidate_id=context.get("candidateId"),
            context=context,
            started_at=now,
        )
        logger.info("Workflow %s (%s) started as execution %s", workflow.workflow_id, workflow.name, execution_id)

        steps = self._workflows.list_steps(workflow.workflow_id)
        status = self._run(execution_id, steps, 0, context, now)
        return {"executionId": execution_id, "status": status.value}

    def process_delayed_steps(self, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        counts = {"due": 0, "completed": 0, "failed": 0, "paused": 0, "errors": 0}

        for pending in self._executions.list_due_step_executions(now):
            counts["due"] += 1
            try:
                execution = self._executions.get_execution(pending.execution_id)
                if not execution:
                    raise LookupError(f"Execution {pending.execution_id} not found")
                steps = self._workflows.list_steps(execution.workflow_id)
                index = next((i for i, s in enumerate(steps) if s.step_id == pending.step_id), None)
                if index is None:
                    raise LookupError(f"Step {pending.step_id} no longer exists")

                self._executions.update_execution(execution.execution_id, status=ExecutionStatus.RUNNING)
                status = self._run(
                    execution.execution_id,
                    steps,
                    index,
                    dict(execution.context),
                    now,
                    step_execution_id=pending.step_execution_id,
                )
            except Exception as exc:
                counts["errors"] += 1
                logger.exception("Delayed step execution %s failed", pending.step_execution_id)
                self._executions.finish_step_execution(
                    pending.step_execution_id, status=ExecutionStatus.FAILED, completed_at=now, error=str(exc)
                )
                self._executions.update_execution(
                    pending.execution_id, status=ExecutionStatus.FAILED, error=str(exc), completed_at=now
                )
                continue

            key = {ExecutionStatus.COMPLETED: "completed", ExecutionStatus.FAILED: "failed"}.get(status, "paused")
            counts[key] += 1

        if counts["due"]:
            logger.info("Delayed workflow steps: %s", counts)
        return counts

    def _run(
        self,
        execution_id: int,
        steps: Sequence[WorkflowStep],
        start: int,
        context: Dict[str, Any],
        now: datetime,
        *,
        step_execution_id: Optional[int] = None,
    ) -> ExecutionStatus:
        for index in range(start, len(steps)):
            step = steps[index]
            if step_execution_id is not None:
                self._executions.start_step_execution(step_execution_id, started_at=now)
            else:
                step_execution_id = self._executions.create_step_execution(
                    execution_id=execution_id, step_id=step.step_id, status=ExecutionStatus.RUNNING, started_at=now
                )

            result = self._run_step(step, context, now)
            self._executions.finish_step_execution(
                step_execution_id,
                status=ExecutionStatus.COMPLETED if result.success else ExecutionStatus.FAILED,
                completed_at=now,
                result=result.data or None,
                error=result.error,
            )
            step_execution_id = None
            context.setdefault("steps", {})[str(step.step_id)] = result.data

            if not result.success:
                logger.warning("Execution %s failed at step %s (%s): %s", execution_id, step.step_id, step.title, result.error)
                self._executions.update_execution(
                    execution_id, status=ExecutionStatus.FAILED, context=context, error=result.error, completed_at=now
                )
                return ExecutionStatus.FAILED

            if not result.proceed:
                logger.info("Execution %s stopped by condition at step %s", execution_id, step.step_id)
                break

            if result.resume_at is not None and index + 1 < len(steps):
                self._executions.create_step_execution(
                    execution_id=execution_id,
                    step_id=steps[index + 1].step_id,
                    status=ExecutionStatus.PENDING,
                    scheduled_for=result.resume_at,
                )
                self._executions.update_execution(execution_id, status=ExecutionStatus.PENDING, context=context)
                logger.info("Execution %s paused until %s", execution_id, result.resume_at.isoformat())
                return ExecutionStatus.PENDING

        self._executions.update_execution(execution_id, status=ExecutionStatus.COMPLETED, context=context, completed_at=now)
        logger.info("Execution %s completed", execution_id)
        return ExecutionStatus.COMPLETED

    def _run_step(self, step: WorkflowStep, context: Dict[str, Any], now: datetime) -> StepResult:
        try:
            return self._handlers.for_step(step).run(step, context, now=now)
        except Exception as exc:
            logger.exception("Step %s raised", step.step_id)
            return StepResult.failed(str(exc))
