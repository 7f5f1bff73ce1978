from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PolicyLevel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import BalanceChange, CompanyPolicy, Holiday, PtoPolicy
from .repository import PtoPolicyRepository

_POLICY_COLUMNS = """
    employee_id, policy_level, vacation_days, sick_days, personal_days, base_days,
    additional_days, total_days, used_days, remaining_days, notes
"""


def _row_to_policy(row: dict) -> PtoPolicy:
    return PtoPolicy(
        employee_id=int(row["employee_id"]),
        policy_level=PolicyLevel(row["policy_level"]),
        vacation_days=float(row["vacation_days"]),
        sick_days=float(row["sick_days"]),
        personal_days=float(row["personal_days"]),
        base_days=float(row["base_days"]),
        additional_days=float(row["additional_days"]),
        total_days=float(row["total_days"]),
        used_days=float(row["used_days"]),
        remaining_days=float(row["remaining_days"]),
        notes=row.get("notes"),
    )


def _parse_holidays(raw) -> tuple[Holiday, ...]:
    holidays = []
    for item in load_json(raw, default=[]) or []:
        if not isinstance(item, dict) or not item.get("date"):
            continue
        holidays.append(Holiday(day=as_date(item["date"]), name=str(item.get("name") or "")))
    return tuple(holidays)


class MySQLPtoPolicyRepository(PtoPolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_company_policy(self) -> Optional[CompanyPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT vacation_days, sick_days, personal_days, holiday_schedule, notes
                FROM company_pto_policy
                ORDER BY id DESC
                LIMIT 1
                """
            )
            row = fetchone(cur)
            if not row:
                return None
            return CompanyPolicy(
                vacation_days=float(row["vacation_days"]),
                sick_days=float(row["sick_days"]),
                personal_days=float(row["personal_days"]),
                holidays=_parse_holidays(row.get("holiday_schedule")),
                notes=row.get("notes"),
            )

    def save_company_policy(self, policy: CompanyPolicy, *, updated_by: Optional[int]) -> None:
        holidays = [{"date": h.day.isoformat(), "name": h.name} for h in policy.holidays]
        params = (
            policy.vacation_days,
            policy.sick_days,
            policy.personal_days,
            policy.total_days,
            dump_json(holidays),
            policy.notes,
            updated_by,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM company_pto_policy ORDER BY id DESC LIMIT 1")
            existing = fetchone(cur)
            if existing:
                cur.execute(
                    """
                    UPDATE company_pto_policy
                    SET vacation_days=%s, sick_days=%s, personal_days=%s, total_days=%s,
                        holiday_schedule=%s, notes=%s, updated_by=%s
                    WHERE id=%s
                    """,
                    params + (int(existing["id"]),),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO company_pto_policy(
                        vacation_days, sick_days, personal_days, total_days, holiday_schedule, notes, updated_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    params,
                )

    def get_for_employee(self, employee_id: int) -> Optional[PtoPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_POLICY_COLUMNS} FROM pto_policies WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _row_to_policy(row) if row else None

    def list_policies(self, *, level: Optional[PolicyLevel] = None) -> Sequence[PtoPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            if level is None:
                cur.execute(f"SELECT {_POLICY_COLUMNS} FROM pto_policies ORDER BY employee_id")
            else:
                cur.execute(
                    f"SELECT {_POLICY_COLUMNS} FROM pto_policies WHERE policy_level=%s ORDER BY employee_id",
                    (level.value,),
                )
            return [_row_to_policy(r) for r in fetchall(cur)]

    def create(self, policy: PtoPolicy) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO pto_policies({_POLICY_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(policy.employee_id),
                    policy.policy_level.value,
                    policy.vacation_days,
                    policy.sick_days,
                    policy.personal_days,
                    policy.base_days,
                    policy.additional_days,
                    policy.total_days,
                    policy.used_days,
                    policy.remaining_days,
                    policy.notes,
                ),
            )

    def save(self, policy: PtoPolicy) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE pto_policies
                SET policy_level=%s, vacation_days=%s, sick_days=%s, personal_days=%s, base_days=%s,
                    additional_days=%s, total_days=%s, used_days=%s, remaining_days=%s, notes=%s
                WHERE employee_id=%s
                """,
                (
                    policy.policy_level.value,
                    policy.vacation_days,
                    policy.sick_days,
                    policy.personal_days,
                    policy.base_days,
                    policy.additional_days,
                    policy.total_days,
                    policy.used_days,
                    policy.remaining_days,
                    policy.notes,
                    int(policy.employee_id),
                ),
            )
            return cur.rowcount == 1

    def update_usage(self, *, employee_id: int, used_days: float, remaining_days: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE pto_policies SET used_days=%s, remaining_days=%s WHERE employee_id=%s",
                (used_days, remaining_days, int(employee_id)),
            )
            return cur.rowcount == 1

    def log_balance_change(self, change: BalanceChange) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pto_balance_log(
                    employee_id, request_id, previous_used, new_used, previous_remaining,
                    new_remaining, change_amount, reason, changed_by, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(change.employee_id),
                    int(change.request_id),
                    change.previous_used,
                    change.new_used,
                    change.previous_remaining,
                    change.new_remaining,
                    change.change_amount,
                    change.reason.value,
                    change.changed_by,
                    change.timestamp,
                ),
            )
