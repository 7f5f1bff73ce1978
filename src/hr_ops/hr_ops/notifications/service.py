from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError
from .repository import NotificationRepository

logger = get_logger(__name__)


class NotificationService:
    """In-app notifications shown in the portal's bell menu."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        *,
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        link: Optional[str] = None,
        ref_key: Optional[str] = None,
    ) -> int:
        notification_id = self._notifications.create(
            user_id=int(user_id),
            type=type,
            title=title,
            message=message,
            link=link,
            ref_key=ref_key,
        )
        logger.debug("Notification %s (%s) -> user %s", notification_id, type.value, user_id)
        return notification_id

    def notify_many(
        self,
        user_ids: Iterable[int],
        *,
        type: NotificationType,
        title: str,
        message: str,
        link: Optional[str] = None,
        ref_key: Optional[str] = None,
    ) -> int:
        count = 0
        for user_id in user_ids:
            self.notify(user_id=user_id, type=type, title=title, message=message, link=link, ref_key=ref_key)
            count += 1
        return count

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> dict:
        limit = max(1, min(int(limit), 200))
        items = self._notifications.list_for_user(int(user_id), unread_only=unread_only, limit=limit)
        return {
            "notifications": [n.to_dict() for n in items],
            "unreadCount": self._notifications.unread_count(int(user_id)),
        }

    def unread_count(self, user_id: int) -> int:
        return self._notifications.unread_count(int(user_id))

    def mark_read(self, *, user_id: int, notification_id: int) -> None:
        if not self._notifications.mark_read(notification_id=int(notification_id), user_id=int(user_id), read_at=now_local()):
            raise NotFoundError("Notification not found")

    def mark_all_read(self, *, user_id: int) -> int:
        return self._notifications.mark_all_read(user_id=int(user_id), read_at=now_local())

    def was_sent_recently(
        self,
        *,
        type: NotificationType,
        ref_key: str,
        within: timedelta,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> bool:
        """Cooldown check; ``user_id`` narrows it to one recipient."""
        since = (now or now_local()) - within
        return self._notifications.exists_since(
            type=type, ref_key=ref_key, since=since, user_id=int(user_id) if user_id is not None else None
        )
