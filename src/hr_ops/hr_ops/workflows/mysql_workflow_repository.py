from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ActionType, ExecutionStatus, StepType, WorkflowTrigger
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import NewHrTask, StepExecution, Workflow, WorkflowExecution, WorkflowStep
from .repository import ExecutionRepository, HrTaskRepository, WorkflowRepository


def _row_to_workflow(row: dict) -> Workflow:
    return Workflow(
        workflow_id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        trigger_type=WorkflowTrigger(row["trigger_type"]),
        trigger_conditions=load_json(row.get("trigger_conditions"), default={}),
        is_active=bool(row.get("is_active", True)),
    )


def _row_to_step(row: dict) -> WorkflowStep:
    return WorkflowStep(
        step_id=int(row["id"]),
        workflow_id=int(row["workflow_id"]),
        step_order=int(row["step_order"]),
        title=row["title"],
        step_type=StepType(row["step_type"]),
        action_type=ActionType(row["action_type"]) if row.get("action_type") else None,
        config=load_json(row.get("config"), default={}),
    )


class MySQLWorkflowRepository(WorkflowRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, workflow_id: int) -> Optional[Workflow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, description, trigger_type, trigger_conditions, is_active FROM workflows WHERE id=%s",
                (int(workflow_id),),
            )
            row = fetchone(cur)
            return _row_to_workflow(row) if row else None

    def list_active(self, trigger: WorkflowTrigger) -> Sequence[Workflow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, description, trigger_type, trigger_conditions, is_active
                FROM workflows
                WHERE trigger_type=%s AND is_active=1
                ORDER BY id
                """,
                (trigger.value,),
            )
            return [_row_to_workflow(r) for r in fetchall(cur)]

    def list_steps(self, workflow_id: int) -> Sequence[WorkflowStep]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, workflow_id, step_order, title, step_type, action_type, config
                FROM workflow_steps
                WHERE workflow_id=%s
                ORDER BY step_order, id
                """,
                (int(workflow_id),),
            )
            return [_row_to_step(r) for r in fetchall(cur)]


class MySQLExecutionRepository(ExecutionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_execution(
        self, *, workflow_id: int, candidate_id: Optional[int], context: Dict[str, Any], started_at: datetime
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO workflow_executions(workflow_id, candidate_id, status, context, started_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(workflow_id), candidate_id, ExecutionStatus.RUNNING.value, dump_json(context), started_at),
            )
            return int(cur.lastrowid)

    def get_execution(self, execution_id: int) -> Optional[WorkflowExecution]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, workflow_id, candidate_id, status, context, error, started_at, completed_at
                FROM workflow_executions
                WHERE id=%s
                """,
                (int(execution_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return WorkflowExecution(
                execution_id=int(row["id"]),
                workflow_id=int(row["workflow_id"]),
                candidate_id=row.get("candidate_id"),
                status=ExecutionStatus(row["status"]),
                context=load_json(row.get("context"), default={}),
                error=row.get("error"),
                started_at=row.get("started_at"),
                completed_at=row.get("completed_at"),
            )

    def update_execution(
        self,
        execution_id: int,
        *,
        status: ExecutionStatus,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        sets, params = ["status=%s", "error=%s", "completed_at=%s"], [status.value, error, completed_at]
        if context is not None:
            sets.append("context=%s")
            params.append(dump_json(context))
        params.append(int(execution_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE workflow_executions SET {', '.join(sets)} WHERE id=%s", tuple(params))

    def create_step_execution(
        self,
        *,
        execution_id: int,
        step_id: int,
        status: ExecutionStatus,
        started_at: Optional[datetime] = None,
        scheduled_for: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO workflow_step_executions(execution_id, step_id, status, started_at, scheduled_for)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(execution_id), int(step_id), status.value, started_at, scheduled_for),
            )
            return int(cur.lastrowid)

    def start_step_execution(self, step_execution_id: int, *, started_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE workflow_step_executions SET status=%s, started_at=%s WHERE id=%s",
                (ExecutionStatus.RUNNING.value, started_at, int(step_execution_id)),
            )

    def finish_step_execution(
        self,
        step_execution_id: int,
        *,
        status: ExecutionStatus,
        completed_at: datetime,
        result: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE workflow_step_executions
                SET status=%s, result=%s, error=%s, completed_at=%s
                WHERE id=%s
                """,
                (status.value, dump_json(result), error, completed_at, int(step_execution_id)),
            )

    def list_due_step_executions(self, now: datetime) -> Sequence[StepExecution]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, execution_id, step_id, status, scheduled_for
                FROM workflow_step_executions
                WHERE status=%s AND scheduled_for IS NOT NULL AND scheduled_for <= %s
                ORDER BY scheduled_for, id
                """,
                (ExecutionStatus.PENDING.value, now),
            )
            return [
                StepExecution(
                    step_execution_id=int(r["id"]),
                    execution_id=int(r["execution_id"]),
                    step_id=int(r["step_id"]),
                    status=ExecutionStatus(r["status"]),
                    scheduled_for=r.get("scheduled_for"),
                )
                for r in fetchall(cur)
            ]


class MySQLHrTaskRepository(HrTaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, task: NewHrTask) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO hr_tasks(title, description, assigned_to, candidate_id, due_date, status)
                VALUES(%s,%s,%s,%s,%s,'TODO')
                """,
                (task.title, task.description, task.assigned_to, task.candidate_id, task.due_date),
            )
            return int(cur.lastrowid)
