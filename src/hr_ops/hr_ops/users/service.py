from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.log import get_logger
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import UserRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    email: str
    full_name: str
    role: Role
    department: Optional[str]
    must_change_password: bool
    has_hr_access: bool
    has_training_access: bool
    has_field_access: bool
    has_leaderboard_access: bool

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "name": self.full_name,
            "role": self.role.value,
            "department": self.department,
            "has_hr_access": self.has_hr_access,
            "has_training_access": self.has_training_access,
            "has_field_access": self.has_field_access,
            "has_leaderboard_access": self.has_leaderboard_access,
        }


class AuthService:
    """Use case: authenticate a user by email or username."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, login: str, password: str) -> SessionUser:
        login = require_non_empty(login, "email")
        if "@" in login:
            user = self._users.get_by_email(login)
        else:
            user = self._users.get_by_username(login)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("Failed login for %s", login)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=user.user_id,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            department=user.department,
            must_change_password=user.must_change_password,
            has_hr_access=user.has_hr_access or user.role in {Role.SYSTEM_ADMIN, Role.HR_ADMIN},
            has_training_access=user.has_training_access,
            has_field_access=user.has_field_access,
            has_leaderboard_access=user.has_leaderboard_access,
        )
