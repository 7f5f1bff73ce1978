from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewUser, User


class UserRepository(Protocol):
    """Repository interface for users.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, new_user: NewUser) -> int:
        raise NotImplementedError

    def list_active(self, *, roles: Optional[Iterable[Role]] = None) -> Sequence[User]:
        raise NotImplementedError

    def list_active_by_emails(self, emails: Iterable[str]) -> Sequence[User]:
        raise NotImplementedError

    def list_hr_admins(self) -> Sequence[User]:
        """Active users with HR module access."""

        raise NotImplementedError
