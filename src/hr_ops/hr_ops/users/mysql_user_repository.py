from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import EmploymentType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause
from .model import NewUser, User
from .repository import UserRepository

_COLUMNS = """
    id, email, username, password_hash, first_name, last_name, role, employment_type,
    position, department, hire_date, phone, is_active, must_change_password,
    has_hr_access, has_training_access, has_field_access, has_leaderboard_access
"""


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        email=row["email"],
        username=row["username"],
        password_hash=row["password_hash"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        role=Role(row["role"]),
        employment_type=EmploymentType(row.get("employment_type") or EmploymentType.W2.value),
        position=row.get("position"),
        department=row.get("department"),
        hire_date=as_date(row.get("hire_date")),
        phone=row.get("phone"),
        is_active=bool(row.get("is_active", True)),
        must_change_password=bool(row.get("must_change_password", False)),
        has_hr_access=bool(row.get("has_hr_access", False)),
        has_training_access=bool(row.get("has_training_access", False)),
        has_field_access=bool(row.get("has_field_access", False)),
        has_leaderboard_access=bool(row.get("has_leaderboard_access", False)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("id=%s", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email=%s", email.strip().lower())

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username=%s", username.strip())

    def create_user(self, new_user: NewUser) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(
                    email, username, password_hash, first_name, last_name, role, employment_type,
                    position, department, hire_date, phone, is_active, must_change_password,
                    has_hr_access, has_training_access, has_field_access, has_leaderboard_access
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1,%s,%s,%s,%s,%s)
                """,
                (
                    new_user.email,
                    new_user.username,
                    new_user.password_hash,
                    new_user.first_name,
                    new_user.last_name,
                    new_user.role.value,
                    new_user.employment_type.value,
                    new_user.position,
                    new_user.department,
                    new_user.hire_date,
                    new_user.phone,
                    int(new_user.must_change_password),
                    int(new_user.has_hr_access),
                    int(new_user.has_training_access),
                    int(new_user.has_field_access),
                    int(new_user.has_leaderboard_access),
                ),
            )
            return int(cur.lastrowid)

    def list_active(self, *, roles: Optional[Iterable[Role]] = None) -> Sequence[User]:
        clauses = ["is_active=1"]
        params: list[object] = []
        role_values = [Role(r).value for r in roles] if roles is not None else None
        if role_values is not None:
            if not role_values:
                return []
            clauses.append(f"role IN ({in_clause(role_values)})")
            params.extend(role_values)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {' AND '.join(clauses)} ORDER BY last_name, first_name",
                tuple(params),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_active_by_emails(self, emails: Iterable[str]) -> Sequence[User]:
        values = sorted({e.strip().lower() for e in emails if e})
        if not values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE is_active=1 AND email IN ({in_clause(values)})",
                tuple(values),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_hr_admins(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE is_active=1 AND has_hr_access=1")
            return [_row_to_user(r) for r in fetchall(cur)]
