from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.hr_ops.hr_ops.core.enums import EmailStatus, NotificationType
from src.hr_ops.hr_ops.core.exceptions import NotFoundError
from src.hr_ops.hr_ops.notifications import templates
from src.hr_ops.hr_ops.notifications.model import EmailMessage
from src.hr_ops.hr_ops.notifications.outbox import EmailOutbox
from src.hr_ops.hr_ops.notifications.service import NotificationService
from tests.fakes import FakeEmailLog, FakeNotificationsRepo


def test_list_mark_read_and_unread_count():
    repo = FakeNotificationsRepo()
    svc = NotificationService(repo)
    svc.notify_many([1, 1, 2], type=NotificationType.WORKFLOW, title="Hi", message="Hello")

    listing = svc.list_for_user(1)
    assert listing["unreadCount"] == 2
    assert len(listing["notifications"]) == 2

    svc.mark_read(user_id=1, notification_id=listing["notifications"][0]["id"])
    assert svc.unread_count(1) == 1
    assert svc.mark_all_read(user_id=1) == 1
    assert svc.unread_count(1) == 0
    assert svc.unread_count(2) == 1


def test_mark_read_of_someone_elses_notification_is_not_found():
    repo = FakeNotificationsRepo()
    svc = NotificationService(repo)
    nid = svc.notify(user_id=2, type=NotificationType.WORKFLOW, title="Hi", message="Hello")

    with pytest.raises(NotFoundError):
        svc.mark_read(user_id=1, notification_id=nid)


def test_was_sent_recently_respects_window():
    repo = FakeNotificationsRepo()
    repo.clock = datetime(2026, 3, 1, 9, 0)
    svc = NotificationService(repo)
    svc.notify(user_id=1, type=NotificationType.TASK_OVERDUE, title="t", message="m", ref_key="task:1")

    now = datetime(2026, 3, 1, 20, 0)
    assert svc.was_sent_recently(type=NotificationType.TASK_OVERDUE, ref_key="task:1", within=timedelta(hours=24), now=now)
    assert not svc.was_sent_recently(type=NotificationType.TASK_OVERDUE, ref_key="task:2", within=timedelta(hours=24), now=now)
    later = datetime(2026, 3, 2, 10, 0)
    assert not svc.was_sent_recently(type=NotificationType.TASK_OVERDUE, ref_key="task:1", within=timedelta(hours=24), now=later)


def test_was_sent_recently_can_be_scoped_to_recipient():
    repo = FakeNotificationsRepo()
    repo.clock = datetime(2026, 3, 1, 9, 0)
    svc = NotificationService(repo)
    svc.notify(user_id=1, type=NotificationType.TASK_OVERDUE, title="t", message="m", ref_key="task:1")
    now = datetime(2026, 3, 1, 12, 0)
    window = timedelta(hours=24)

    assert svc.was_sent_recently(type=NotificationType.TASK_OVERDUE, ref_key="task:1", within=window, user_id=1, now=now)
    assert not svc.was_sent_recently(
        type=NotificationType.TASK_OVERDUE, ref_key="task:1", within=window, user_id=2, now=now
    )


def test_outbox_queues_or_records_failure_when_disabled():
    log = FakeEmailLog()
    message = templates.candidate_reschedule(to="cand@example.com", first_name="Sam", position="Technician")

    EmailOutbox(log).send(message)
    EmailOutbox(log, enabled=False).send(message)

    assert [status for _, status in log.sent] == [EmailStatus.QUEUED, EmailStatus.FAILED]


def test_outbox_requires_recipient():
    with pytest.raises(ValueError):
        EmailOutbox(FakeEmailLog()).send(EmailMessage(to="", subject="s", body="b", template="t"))
