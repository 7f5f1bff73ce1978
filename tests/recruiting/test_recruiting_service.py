from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_ops.hr_ops.core.enums import CandidateStatus, EmploymentType, InterviewStatus, Role
from src.hr_ops.hr_ops.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.hr_ops.hr_ops.notifications.outbox import EmailOutbox
from src.hr_ops.hr_ops.recruiting.automation import CandidateStatusAutomation
from src.hr_ops.hr_ops.recruiting.hire import HireAutomation
from src.hr_ops.hr_ops.recruiting.model import Candidate, Interview
from src.hr_ops.hr_ops.recruiting.service import RecruitingService, parse_candidate_status
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
)


class RecordingTriggers:
    def __init__(self):
        self.calls = []

    def on_candidate_created(self, candidate, *, triggered_by=None):
        self.calls.append(("created", candidate.candidate_id))
        return 0

    def on_stage_change(self, candidate, old_status, new_status, *, triggered_by=None):
        self.calls.append(("stage", candidate.candidate_id, old_status, new_status))
        return 0

    def on_interview_completed(self, candidate, interview_id, *, triggered_by=None):
        self.calls.append(("interview", candidate.candidate_id, interview_id))
        return 0


def _service(candidates=(), interviews=()):
    candidates_repo = FakeCandidatesRepo(candidates)
    interviews_repo = FakeInterviewsRepo(interviews)
    notes = FakeNotesRepo()
    email_log = FakeEmailLog()
    outbox = EmailOutbox(email_log)
    triggers = RecordingTriggers()
    hire = HireAutomation(
        candidates=candidates_repo,
        users=FakeUsersRepo(),
        policies=FakePtoPoliciesRepo(),
        tasks=FakeTasksRepo(),
        equipment_tokens=FakeEquipmentTokens(),
        welcome_packages=FakeWelcomePackages(),
        outbox=outbox,
        temp_password="Welcome2026!",
        portal_url="https://portal.example.com",
        training_url="https://train.example.com",
    )
    svc = RecruitingService(
        candidates_repo,
        interviews_repo,
        automation=CandidateStatusAutomation(candidates_repo, notes, outbox=outbox),
        hire_automation=hire,
        triggers=triggers,
    )
    return svc, candidates_repo, interviews_repo, triggers, email_log


CANDIDATE = Candidate(1, "Sam", "Rivera", "sam@example.com", "Field Technician", status=CandidateStatus.INTERVIEW)


@pytest.mark.parametrize(
    "raw, expected",
    [("screening", CandidateStatus.SCREENING), ("OFFER", CandidateStatus.OFFER), ("no_show", CandidateStatus.NO_SHOW)],
)
def test_parse_candidate_status_is_case_tolerant(raw, expected):
    assert parse_candidate_status(raw) == expected


def test_parse_candidate_status_rejects_unknown():
    with pytest.raises(ValidationError):
        parse_candidate_status("ghosted")


def test_create_candidate_validates_and_fires_trigger():
    svc, _, _, triggers, _ = _service()

    candidate = svc.create_candidate(
        {"firstName": "Ana", "lastName": "Lopez", "email": "Ana@Example.com", "position": "Installer"}, created_by=2
    )

    assert candidate.email == "ana@example.com"
    assert candidate.status == CandidateStatus.NEW
    assert triggers.calls == [("created", candidate.candidate_id)]

    with pytest.raises(ValidationError):
        svc.create_candidate({"firstName": "Ana", "lastName": "Lopez", "email": "nope", "position": "Installer"})


def test_change_status_to_dead_runs_automation_and_trigger():
    svc, candidates, _, triggers, email_log = _service([CANDIDATE])

    outcome = svc.change_status(1, "DEAD_TIMING", changed_by=2)

    assert outcome["candidate"]["status"] == "DEAD_TIMING"
    assert outcome["automation"]["actions"] == ["Sent rejection email"]
    assert "timing is not right" in email_log.messages[0].body
    assert triggers.calls == [("stage", 1, CandidateStatus.INTERVIEW, CandidateStatus.DEAD_TIMING)]


def test_change_status_without_automation_for_pipeline_moves():
    svc, _, _, triggers, email_log = _service([CANDIDATE])

    outcome = svc.change_status(1, "offer")

    assert outcome["automation"] == {"success": True, "actions": [], "errors": []}
    assert email_log.sent == []
    assert triggers.calls[0][3] == CandidateStatus.OFFER


def test_change_status_rejects_hired_and_bad_reason():
    svc, *_ = _service([CANDIDATE])

    with pytest.raises(ValidationError):
        svc.change_status(1, "hired")
    with pytest.raises(ValidationError):
        svc.change_status(1, "rejected", reason="too slow")


def test_same_status_does_not_fire_trigger():
    svc, _, _, triggers, _ = _service([CANDIDATE])

    svc.change_status(1, "interview")

    assert triggers.calls == []


def test_hire_marks_candidate_hired():
    svc, candidates, _, triggers, _ = _service([CANDIDATE])

    result = svc.hire(1, {"role": "field_tech", "startDate": "2026-04-06", "employmentType": "W2"}, hired_by=2)

    assert result.success
    assert candidates.get_by_id(1).status == CandidateStatus.HIRED
    assert triggers.calls == [("stage", 1, CandidateStatus.INTERVIEW, CandidateStatus.HIRED)]

    with pytest.raises(ConflictError):
        svc.hire(1, {"role": "field_tech", "startDate": "2026-04-06", "employmentType": "W2"})


@pytest.mark.parametrize(
    "payload",
    [
        {"role": "wizard", "startDate": "2026-04-06", "employmentType": "W2"},
        {"role": "EMPLOYEE", "employmentType": "W2"},
        {"role": "EMPLOYEE", "startDate": "2026-04-06", "employmentType": "CONTRACTOR"},
    ],
)
def test_hire_payload_validation(payload):
    svc, *_ = _service([CANDIDATE])

    with pytest.raises(ValidationError):
        svc.hire(1, payload)


def test_parse_hire_defaults():
    svc, *_ = _service([CANDIDATE])

    data = svc.parse_hire(1, {"role": "employee", "startDate": "2026-04-06", "employmentType": "1099", "welcomePackageId": "4"})

    assert data.role == "EMPLOYEE"
    assert data.start_date == date(2026, 4, 6)
    assert data.employment_type == EmploymentType.TEN99
    assert data.welcome_package_id == 4


def test_complete_interview_fires_trigger_once():
    interview = Interview(9, 1, datetime(2026, 3, 18, 9, 0), InterviewStatus.SCHEDULED)
    svc, _, interviews, triggers, _ = _service([CANDIDATE], [interview])

    svc.complete_interview(9, completed_by=2)

    assert interviews.get_by_id(9).status == InterviewStatus.COMPLETED
    assert triggers.calls == [("interview", 1, 9)]
    with pytest.raises(ConflictError):
        svc.complete_interview(9)
    with pytest.raises(NotFoundError):
        svc.complete_interview(99)
