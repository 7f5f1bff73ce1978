from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EmailStatus, NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmailMessage, Notification
from .repository import EmailLogRepository, NotificationRepository


def _row_to_notification(row: dict) -> Notification:
    return Notification(
        notification_id=int(row["id"]),
        user_id=int(row["user_id"]),
        type=NotificationType(row["type"]),
        title=row["title"],
        message=row["message"],
        link=row.get("link"),
        ref_key=row.get("ref_key"),
        is_read=bool(row.get("is_read")),
        created_at=row.get("created_at"),
        read_at=row.get("read_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, type, title, message, link, ref_key)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), type.value, title, message, link, ref_key),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        where = "user_id=%s AND is_read=0" if unread_only else "user_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, user_id, type, title, message, link, ref_key, is_read, created_at, read_at
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def unread_count(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS c FROM notifications WHERE user_id=%s AND is_read=0", (int(user_id),))
            row = fetchone(cur)
            return int(row["c"]) if row else 0

    def mark_read(self, *, notification_id: int, user_id: int, read_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, read_at=%s WHERE id=%s AND user_id=%s",
                (read_at, int(notification_id), int(user_id)),
            )
            return cur.rowcount == 1

    def mark_all_read(self, *, user_id: int, read_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, read_at=%s WHERE user_id=%s AND is_read=0",
                (read_at, int(user_id)),
            )
            return int(cur.rowcount)

    def exists_since(
        self, *, type: NotificationType, ref_key: str, since: datetime, user_id: Optional[int] = None
    ) -> bool:
        where, params = "type=%s AND ref_key=%s AND created_at>=%s", [type.value, ref_key, since]
        if user_id is not None:
            where += " AND user_id=%s"
            params.append(int(user_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT 1 AS hit FROM notifications WHERE {where} LIMIT 1", tuple(params))
            return fetchone(cur) is not None


class MySQLEmailLogRepository(EmailLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, message: EmailMessage, *, status: EmailStatus, error: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO email_log(to_email, subject, body, template, status, error)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (message.to, message.subject, message.body, message.template, status.value, error),
            )
            return int(cur.lastrowid)
