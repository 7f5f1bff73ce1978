from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import EmploymentType, Role


@dataclass(frozen=True)
class User:
    """Domain entity for an employee account.

    Plain data object; no database access lives here.
    """

    user_id: int
    email: str
    username: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role
    employment_type: EmploymentType = EmploymentType.W2
    position: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None
    phone: Optional[str] = None
    is_active: bool = True
    must_change_password: bool = False
    has_hr_access: bool = False
    has_training_access: bool = False
    has_field_access: bool = False
    has_leaderboard_access: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class NewUser:
    email: str
    username: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role
    employment_type: EmploymentType
    position: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None
    phone: Optional[str] = None
    must_change_password: bool = False
    has_hr_access: bool = False
    has_training_access: bool = False
    has_field_access: bool = False
    has_leaderboard_access: bool = False
