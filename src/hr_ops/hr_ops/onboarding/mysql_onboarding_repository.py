from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..core.enums import RequirementStatus, TaskCategory, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import EquipmentToken, NewOnboardingTask, OnboardingRequirement, OnboardingTask, RequirementTemplate
from .repository import (
    EquipmentTokenRepository,
    OnboardingRequirementRepository,
    OnboardingTaskRepository,
    WelcomePackageRepository,
)

_TASK_COLUMNS = "id, employee_id, task_name, description, category, due_date, status, completed_at"


def _row_to_task(row: dict) -> OnboardingTask:
    return OnboardingTask(
        task_id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        task_name=row["task_name"],
        description=row.get("description"),
        category=TaskCategory(row["category"]),
        due_date=as_date(row.get("due_date")),
        status=TaskStatus(row["status"]),
        completed_at=row.get("completed_at"),
    )


def _row_to_requirement(row: dict) -> OnboardingRequirement:
    return OnboardingRequirement(
        requirement_id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        employee_type=row["employee_type"],
        title=row["title"],
        description=row.get("description"),
        category=row["category"],
        is_required=bool(row.get("is_required", True)),
        status=RequirementStatus(row["status"]),
        due_date=as_date(row.get("due_date")),
    )


class MySQLOnboardingTaskRepository(OnboardingTaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, employee_id: int, tasks: Sequence[NewOnboardingTask]) -> int:
        rows = [
            (int(employee_id), t.task_name, t.description, t.category.value, t.due_date, TaskStatus.PENDING.value)
            for t in tasks
        ]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO onboarding_tasks(employee_id, task_name, description, category, due_date, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )
            return len(rows)

    def get_by_id(self, task_id: int) -> Optional[OnboardingTask]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TASK_COLUMNS} FROM onboarding_tasks WHERE id=%s", (int(task_id),))
            row = fetchone(cur)
            return _row_to_task(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[OnboardingTask]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_TASK_COLUMNS} FROM onboarding_tasks WHERE employee_id=%s ORDER BY due_date, id",
                (int(employee_id),),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def list_pending_due_before(self, day: date) -> Sequence[OnboardingTask]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TASK_COLUMNS} FROM onboarding_tasks
                WHERE status=%s AND due_date IS NOT NULL AND due_date<%s
                ORDER BY due_date
                """,
                (TaskStatus.PENDING.value, day),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def list_pending_due_on_or_before(self, day: date) -> Sequence[OnboardingTask]:
        return self.list_pending_due_before(day + timedelta(days=1))

    def update_status(self, task_id: int, *, status: TaskStatus, completed_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE onboarding_tasks SET status=%s, completed_at=%s WHERE id=%s",
                (status.value, completed_at, int(task_id)),
            )
            return cur.rowcount == 1


class MySQLOnboardingRequirementRepository(OnboardingRequirementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, employee_id: int, templates: Sequence[RequirementTemplate], *, start: date) -> int:
        rows = [
            (
                int(employee_id),
                t.employee_type,
                t.name,
                t.description,
                t.category,
                int(t.is_required),
                RequirementStatus.PENDING.value,
                start + timedelta(days=t.days_until_due),
            )
            for t in templates
        ]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO onboarding_requirements(
                    employee_id, employee_type, title, description, category, is_required, status, due_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )
            return len(rows)

    def list_for_employee(self, employee_id: int) -> Sequence[OnboardingRequirement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, employee_type, title, description, category, is_required, status, due_date
                FROM onboarding_requirements
                WHERE employee_id=%s
                ORDER BY due_date, id
                """,
                (int(employee_id),),
            )
            return [_row_to_requirement(r) for r in fetchall(cur)]

    def update_status(self, requirement_id: int, *, status: RequirementStatus, changed_at: datetime) -> bool:
        column = {RequirementStatus.SUBMITTED: "submitted_at", RequirementStatus.APPROVED: "approved_at"}.get(status)
        with db_cursor(self._conn_factory) as (_, cur):
            if column:
                cur.execute(
                    f"UPDATE onboarding_requirements SET status=%s, {column}=%s WHERE id=%s",
                    (status.value, changed_at, int(requirement_id)),
                )
            else:
                cur.execute(
                    "UPDATE onboarding_requirements SET status=%s WHERE id=%s",
                    (status.value, int(requirement_id)),
                )
            return cur.rowcount == 1


class MySQLEquipmentTokenRepository(EquipmentTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, token: EquipmentToken) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO equipment_signature_tokens(
                    user_id, token, type, signer_name, signer_email, status, locked_until, expires_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(token.user_id),
                    token.token,
                    token.type,
                    token.signer_name,
                    token.signer_email,
                    token.status,
                    token.locked_until,
                    token.expires_at,
                ),
            )
            return int(cur.lastrowid)


class MySQLWelcomePackageRepository(WelcomePackageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def assign(self, *, user_id: int, package_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO welcome_package_assignments(user_id, package_id) VALUES(%s,%s)",
                (int(user_id), int(package_id)),
            )
            return int(cur.lastrowid)
