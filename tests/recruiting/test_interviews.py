from __future__ import annotations

from datetime import datetime

from src.hr_ops.hr_ops.core.enums import CandidateStatus, InterviewStatus, NotificationType, NoteType, Role
from src.hr_ops.hr_ops.notifications.outbox import EmailOutbox
from src.hr_ops.hr_ops.notifications.service import NotificationService
from src.hr_ops.hr_ops.recruiting.automation import NO_SHOW_TAG, CandidateStatusAutomation
from src.hr_ops.hr_ops.recruiting.interviews import InterviewOverdueService, InterviewReminderService, days_since
from src.hr_ops.hr_ops.recruiting.model import Candidate, Interview
from tests.fakes import (
    FakeCandidatesRepo,
    FakeEmailLog,
    FakeInterviewsRepo,
    FakeNotesRepo,
    FakeNotificationsRepo,
    FakeUsersRepo,
    make_user,
)

NOW = datetime(2026, 3, 20, 10, 0)


def _interview(interview_id, candidate_id, scheduled_at, interviewer_id=20):
    return Interview(
        interview_id=interview_id,
        candidate_id=candidate_id,
        scheduled_at=scheduled_at,
        status=InterviewStatus.SCHEDULED,
        interviewer_id=interviewer_id,
        location="Main office",
    )


def _candidate(candidate_id):
    return Candidate(candidate_id, f"Cand{candidate_id}", "Smith", f"c{candidate_id}@example.com", "Installer")


def _service(interviews):
    candidates = FakeCandidatesRepo([_candidate(i.candidate_id) for i in interviews])
    notes = FakeNotesRepo()
    users = FakeUsersRepo(
        [
            make_user(20, "interviewer@example.com", role=Role.MANAGER, first_name="Ivy"),
            make_user(30, "hr@example.com", role=Role.HR_ADMIN, has_hr_access=True),
        ]
    )
    notifications = FakeNotificationsRepo()
    email_log = FakeEmailLog()
    outbox = EmailOutbox(email_log)
    repo = FakeInterviewsRepo(interviews)
    svc = InterviewOverdueService(
        interviews=repo,
        candidates=candidates,
        notes=notes,
        users=users,
        automation=CandidateStatusAutomation(candidates, notes, outbox=outbox),
        notifications=NotificationService(notifications),
        outbox=outbox,
    )
    return svc, repo, candidates, notes, notifications, email_log


def test_days_since_is_floored():
    assert days_since(datetime(2026, 3, 19, 11, 0), NOW) == 0
    assert days_since(datetime(2026, 3, 17, 9, 0), NOW) == 3


def test_one_action_per_interview_by_age():
    svc, repo, *_, email_log = _service(
        [
            _interview(1, 1, datetime(2026, 3, 20, 8, 0)),  # today, nothing yet
            _interview(2, 2, datetime(2026, 3, 18, 9, 0)),  # 2 days
            _interview(3, 3, datetime(2026, 3, 16, 9, 0)),  # 4 days
        ]
    )

    counts = svc.run(NOW)

    assert counts == {"checked": 3, "reminders": 1, "escalations": 1, "no_shows": 0, "errors": 0}
    templates_by_recipient = [(m.to, m.template) for m in email_log.messages]
    assert templates_by_recipient == [
        ("interviewer@example.com", "interview_feedback_reminder"),
        ("hr@example.com", "interview_escalation"),
    ]
    assert "in 3 days" in email_log.messages[1].body


def test_reminder_skipped_without_interviewer():
    svc, *_ = _service([_interview(1, 1, datetime(2026, 3, 18, 9, 0), interviewer_id=None)])

    assert svc.run(NOW)["reminders"] == 0


def test_week_old_interview_becomes_no_show():
    svc, repo, candidates, notes, notifications, email_log = _service([_interview(5, 4, datetime(2026, 3, 12, 9, 0))])

    counts = svc.run(NOW)

    assert counts["no_shows"] == 1
    assert repo.get_by_id(5).status == InterviewStatus.NO_SHOW
    candidate = candidates.get_by_id(4)
    assert candidate.status == CandidateStatus.DEAD_BY_CANDIDATE
    assert candidate.tags == (NO_SHOW_TAG,)
    assert [n.type for n in notes.items] == [NoteType.INTERVIEW, NoteType.SYSTEM]
    assert notifications.items[0].user_id == 30
    assert notifications.items[0].type == NotificationType.INTERVIEW_OVERDUE
    assert notifications.items[0].ref_key == "interview:5"
    assert [m.template for m in email_log.messages] == ["candidate_reschedule", "interview_auto_no_show"]

    # no longer scheduled, so the next run leaves it alone
    assert svc.run(NOW)["checked"] == 0


def test_upcoming_reminders_cover_tomorrow_only():
    interviews = FakeInterviewsRepo(
        [
            _interview(1, 1, datetime(2026, 3, 21, 14, 0)),
            _interview(2, 2, datetime(2026, 3, 22, 9, 0)),
            _interview(3, 3, datetime(2026, 3, 21, 9, 0), interviewer_id=None),
        ]
    )
    email_log = FakeEmailLog()
    svc = InterviewReminderService(
        interviews=interviews,
        candidates=FakeCandidatesRepo([_candidate(1), _candidate(2), _candidate(3)]),
        users=FakeUsersRepo([make_user(20, "interviewer@example.com")]),
        outbox=EmailOutbox(email_log),
    )

    assert svc.send_upcoming(NOW) == {"interviews": 2, "sent": 1, "errors": 0}
    assert email_log.messages[0].subject == "Interview tomorrow: Cand1 Smith"
