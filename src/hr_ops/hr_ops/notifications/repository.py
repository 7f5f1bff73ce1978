from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EmailStatus, NotificationType
from .model import EmailMessage, Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        link: Optional[str] = None,
        ref_key: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError

    def unread_count(self, user_id: int) -> int:
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, user_id: int, read_at: datetime) -> bool:
        raise NotImplementedError

    def mark_all_read(self, *, user_id: int, read_at: datetime) -> int:
        raise NotImplementedError

    def exists_since(
        self, *, type: NotificationType, ref_key: str, since: datetime, user_id: Optional[int] = None
    ) -> bool:
        """Whether a notification of ``type`` about ``ref_key`` (for ``user_id``, if given) was created after ``since``."""

        raise NotImplementedError


class EmailLogRepository(Protocol):
    def record(self, message: EmailMessage, *, status: EmailStatus, error: Optional[str] = None) -> int:
        raise NotImplementedError
