from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from src.hr_ops.hr_ops.common.http import register_error_handlers
from src.hr_ops.hr_ops.core.enums import NotificationType
from src.hr_ops.hr_ops.jobs.controller import register as register_cron
from src.hr_ops.hr_ops.jobs.guard import GuardedJob, JobOutcome
from src.hr_ops.hr_ops.notifications.controller import register as register_notifications
from src.hr_ops.hr_ops.notifications.service import NotificationService
from tests.fakes import FakeNotificationsRepo

SECRET = "test-cron-secret"


def _boom():
    raise RuntimeError("smtp relay unreachable")


@pytest.fixture()
def app():
    notifications = NotificationService(FakeNotificationsRepo())
    notifications.notify(user_id=1, type=NotificationType.WORKFLOW, title="Hello", message="First")
    notifications.notify(user_id=2, type=NotificationType.WORKFLOW, title="Hello", message="Other user")
    container = SimpleNamespace(
        notification_service=notifications,
        jobs={
            "interview-reminders": GuardedJob("interview-reminders", lambda: {"interviews": 0, "sent": 0, "errors": 0}),
            "onboarding-reminders": GuardedJob("onboarding-reminders", _boom),
        },
    )
    app = Flask(__name__)
    app.secret_key = "test"
    app.config.update(TESTING=True, CRON_SECRET=SECRET)
    register_error_handlers(app)
    register_notifications(app, container)
    register_cron(app, container)
    return app


def test_cron_requires_secret(app):
    client = app.test_client()

    assert client.get("/api/cron/interview-reminders").status_code == 401
    assert client.get("/api/cron/interview-reminders", headers={"X-Cron-Secret": "wrong"}).status_code == 401


def test_cron_disabled_when_secret_unset(app):
    app.config["CRON_SECRET"] = ""

    resp = app.test_client().get("/api/cron/health", headers={"X-Cron-Secret": ""})

    assert resp.status_code == 401


def test_cron_runs_job(app):
    resp = app.test_client().get("/api/cron/interview-reminders", headers={"X-Cron-Secret": SECRET})

    assert resp.status_code == 200
    assert resp.get_json() == {
        "success": True,
        "job": "interview-reminders",
        "result": {"interviews": 0, "sent": 0, "errors": 0},
    }


class _BusyJob(GuardedJob):
    def run(self):
        return JobOutcome(skipped=True)


def test_cron_reports_conflict_when_run_is_skipped():
    busy = _BusyJob("pto-reminders", lambda: {"sent": 1})
    busy.last_error = "failure from an earlier run"
    app = Flask(__name__)
    app.config.update(TESTING=True, CRON_SECRET=SECRET)
    register_error_handlers(app)
    register_cron(app, SimpleNamespace(jobs={"pto-reminders": busy}))

    resp = app.test_client().post("/api/cron/run/pto-reminders", headers={"X-Cron-Secret": SECRET})

    assert resp.status_code == 409
    assert resp.get_json()["skipped"] is True


def test_cron_reports_failures_and_unknown_jobs(app):
    client = app.test_client()
    headers = {"X-Cron-Secret": SECRET}

    failed = client.get("/api/cron/onboarding-reminders", headers=headers)
    assert failed.status_code == 500
    assert "smtp relay unreachable" in failed.get_json()["error"]

    assert client.post("/api/cron/run/nope", headers=headers).status_code == 404

    health = client.get("/api/cron/health", headers=headers).get_json()
    assert {j["name"]: j["lastError"] for j in health["jobs"]} == {
        "interview-reminders": None,
        "onboarding-reminders": "smtp relay unreachable",
    }


def test_notifications_need_login(app):
    assert app.test_client().get("/api/notifications").status_code == 401


def test_notifications_are_scoped_to_session_user(app):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["role"] = "EMPLOYEE"

    listing = client.get("/api/notifications").get_json()
    assert listing["unreadCount"] == 1
    assert [n["message"] for n in listing["notifications"]] == ["First"]

    assert client.patch("/api/notifications/2/read").status_code == 404
    assert client.patch("/api/notifications/1/read").get_json() == {"success": True}
    assert client.get("/api/notifications/count").get_json() == {"count": 0}
