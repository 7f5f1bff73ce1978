from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import PtoStatus, PtoType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause
from .model import PtoRequest
from .repository import PtoRequestRepository

_COLUMNS = """
    r.id, r.employee_id, r.start_date, r.end_date, r.days, r.type, r.reason, r.status,
    r.is_exempt, r.reviewed_by, r.reviewed_at, r.review_notes, r.created_at
"""


def _row_to_request(row: dict) -> PtoRequest:
    return PtoRequest(
        request_id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        start_date=as_date(row["start_date"]),
        end_date=as_date(row["end_date"]),
        days=float(row["days"]),
        pto_type=PtoType(row["type"]),
        reason=row["reason"],
        status=PtoStatus(row["status"]),
        is_exempt=bool(row.get("is_exempt")),
        reviewed_by=row.get("reviewed_by"),
        reviewed_at=row.get("reviewed_at"),
        review_notes=row.get("review_notes"),
        created_at=row.get("created_at"),
    )


def _status_values(statuses: Iterable[PtoStatus]) -> list[str]:
    return [PtoStatus(s).value for s in statuses]


class MySQLPtoRequestRepository(PtoRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: Sequence[object], *, suffix: str = "") -> list[PtoRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM pto_requests r
                JOIN users u ON u.id = r.employee_id
                WHERE {where}
                {suffix}
                """,
                tuple(params),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pto_requests(employee_id, start_date, end_date, days, type, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), start_date, end_date, days, pto_type.value, reason, PtoStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[PtoRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM pto_requests r WHERE r.id=%s", (int(request_id),))
            row = fetchone(cur)
            return _row_to_request(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE pto_requests
                SET status=%s, is_exempt=%s, reviewed_by=%s, reviewed_at=%s, review_notes=%s
                WHERE id=%s
                """,
                (status.value, int(is_exempt), int(reviewed_by), reviewed_at, review_notes, int(request_id)),
            )
            return cur.rowcount == 1

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PtoStatus] = None,
        limit: int = 200,
    ) -> Sequence[PtoRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        params.append(int(limit))
        return self._select(" AND ".join(clauses), params, suffix="ORDER BY r.created_at DESC LIMIT %s")

    def list_for_employee(
        self,
        employee_id: int,
        *,
        statuses: Optional[Iterable[PtoStatus]] = None,
    ) -> Sequence[PtoRequest]:
        clauses = ["r.employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if statuses is not None:
            values = _status_values(statuses)
            if not values:
                return []
            clauses.append(f"r.status IN ({in_clause(values)})")
            params.extend(values)
        return self._select(" AND ".join(clauses), params, suffix="ORDER BY r.start_date")

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[PtoStatus],
    ) -> Sequence[PtoRequest]:
        values = _status_values(statuses)
        return self._select(
            f"r.employee_id=%s AND r.status IN ({in_clause(values)}) AND r.start_date<=%s AND r.end_date>=%s",
            [int(employee_id), *values, end_date, start_date],
        )

    def find_department_overlaps(
        self,
        *,
        department: str,
        exclude_employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[PtoStatus],
    ) -> Sequence[PtoRequest]:
        values = _status_values(statuses)
        return self._select(
            f"""
            u.department=%s AND r.employee_id<>%s AND r.status IN ({in_clause(values)})
            AND r.start_date<=%s AND r.end_date>=%s
            """,
            [department, int(exclude_employee_id), *values, end_date, start_date],
        )

    def list_starting_on(self, day: date, *, status: PtoStatus) -> Sequence[PtoRequest]:
        return self._select("r.start_date=%s AND r.status=%s", [day, status.value])

    def list_starting_in_year(self, year: int) -> Sequence[PtoRequest]:
        return self._select(
            "r.start_date>=%s AND r.start_date<=%s",
            [date(int(year), 1, 1), date(int(year), 12, 31)],
            suffix="ORDER BY r.start_date",
        )
