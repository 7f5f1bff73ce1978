from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from src.hr_ops.hr_ops.common.http import register_error_handlers
from src.hr_ops.hr_ops.core.enums import CandidateStatus
from src.hr_ops.hr_ops.notifications.outbox import EmailOutbox
from src.hr_ops.hr_ops.recruiting.automation import CandidateStatusAutomation
from src.hr_ops.hr_ops.recruiting.controller import register as register_recruiting
from src.hr_ops.hr_ops.recruiting.hire import HireAutomation
from src.hr_ops.hr_ops.recruiting.model import Candidate
from src.hr_ops.hr_ops.recruiting.service import RecruitingService
from tests.fakes import (
    FakeCandidatesRepo,
    FakeEmailLog,
    FakeEquipmentTokens,
    FakeInterviewsRepo,
    FakeNotesRepo,
    FakePtoPoliciesRepo,
    FakeTasksRepo,
    FakeUsersRepo,
    FakeWelcomePackages,
    make_user,
)


@pytest.fixture()
def client():
    candidates = FakeCandidatesRepo(
        [
            Candidate(1, "Sam", "Rivera", "sam@example.com", "Installer", status=CandidateStatus.OFFER),
            Candidate(2, "Lee", "Park", "taken@example.com", "Installer", status=CandidateStatus.OFFER),
        ]
    )
    outbox = EmailOutbox(FakeEmailLog())
    service = RecruitingService(
        candidates,
        FakeInterviewsRepo(),
        automation=CandidateStatusAutomation(candidates, FakeNotesRepo(), outbox=outbox),
        hire_automation=HireAutomation(
            candidates=candidates,
            users=FakeUsersRepo([make_user(9, "taken@example.com")]),
            policies=FakePtoPoliciesRepo(),
            tasks=FakeTasksRepo(),
            equipment_tokens=FakeEquipmentTokens(),
            welcome_packages=FakeWelcomePackages(),
            outbox=outbox,
            temp_password="Welcome2026!",
            portal_url="https://portal.example.com",
            training_url="https://train.example.com",
        ),
    )
    app = Flask(__name__)
    app.secret_key = "test"
    app.config["TESTING"] = True
    register_error_handlers(app)
    register_recruiting(app, SimpleNamespace(recruiting_service=service))
    return app.test_client()


def _login(client, *, hr_access=True, role="MANAGER"):
    with client.session_transaction() as sess:
        sess["user_id"] = 50
        sess["role"] = role
        sess["has_hr_access"] = hr_access


HIRE = {"role": "FIELD_TECH", "startDate": "2026-04-06", "employmentType": "W2"}


def test_hr_module_access_required(client):
    assert client.get("/api/hr/candidates").status_code == 401
    _login(client, hr_access=False)
    assert client.get("/api/hr/candidates").status_code == 403
    _login(client, hr_access=False, role="SYSTEM_ADMIN")
    assert client.get("/api/hr/candidates").status_code == 200


def test_hire_endpoint_success(client):
    _login(client)

    resp = client.post("/api/hr/candidates/1/hire", json=HIRE)

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["message"] == "Candidate hired successfully"
    assert body["steps"]["userCreated"] and body["steps"]["emailSent"]
    assert client.get("/api/hr/candidates/1").get_json()["status"] == "hired"


def test_hire_endpoint_reports_fatal_failure(client):
    _login(client)

    resp = client.post("/api/hr/candidates/2/hire", json=HIRE)

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "User creation failed: User with email taken@example.com already exists"


def test_hire_endpoint_validation_and_missing_candidate(client):
    _login(client)

    assert client.post("/api/hr/candidates/1/hire", json={"role": "FIELD_TECH"}).status_code == 400
    assert client.post("/api/hr/candidates/99/hire", json=HIRE).status_code == 404


def test_status_endpoint_returns_automation(client):
    _login(client)

    resp = client.patch("/api/hr/candidates/1/status", json={"status": "DEAD_LOCATION"})

    assert resp.status_code == 200
    assert resp.get_json()["automation"]["actions"] == ["Sent rejection email"]
    assert client.patch("/api/hr/candidates/1/status", json={"status": "hired"}).status_code == 400
