from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..core.constants import (
    INTERVIEW_AUTO_NO_SHOW_DAYS,
    INTERVIEW_ESCALATION_DAYS,
    INTERVIEW_FEEDBACK_REMINDER_DAYS,
)
from ..core.enums import CandidateStatus, InterviewStatus, NotificationType, NoteType
from ..notifications import templates
from ..notifications.outbox import EmailOutbox
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .automation import CandidateStatusAutomation
from .model import Candidate, CandidateNote, Interview
from .repository import CandidateNoteRepository, CandidateRepository, InterviewRepository

logger = get_logger(__name__)


def days_since(scheduled_at: datetime, now: datetime) -> int:
    """Whole days elapsed since the interview time (floored)."""
    return int((now - scheduled_at).total_seconds() // 86400)


class InterviewOverdueService:
    """Escalates SCHEDULED interviews nobody closed out.

    One action per interview per run, by age: 7+ days auto no-show, 3+ days
    escalation email to HR, 1+ day feedback reminder to the interviewer.
    """

    def __init__(
        self,
        *,
        interviews: InterviewRepository,
        candidates: CandidateRepository,
        notes: CandidateNoteRepository,
        users: UserRepository,
        automation: CandidateStatusAutomation,
        notifications: NotificationService,
        outbox: EmailOutbox,
    ):
        self._interviews = interviews
        self._candidates = candidates
        self._notes = notes
        self._users = users
        self._automation = automation
        self._notifications = notifications
        self._outbox = outbox

    def run(self, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        counts = {"checked": 0, "reminders": 0, "escalations": 0, "no_shows": 0, "errors": 0}

        for interview in self._interviews.list_scheduled_before(now):
            candidate = self._candidates.get_by_id(interview.candidate_id)
            if not candidate:
                continue
            counts["checked"] += 1
            elapsed = days_since(interview.scheduled_at, now)
            try:
                if elapsed >= INTERVIEW_AUTO_NO_SHOW_DAYS:
                    self._auto_no_show(interview, candidate, elapsed, now)
                    counts["no_shows"] += 1
                elif elapsed >= INTERVIEW_ESCALATION_DAYS:
                    self._escalate(interview, candidate, elapsed)
                    counts["escalations"] += 1
                elif elapsed >= INTERVIEW_FEEDBACK_REMINDER_DAYS:
                    if self._remind_interviewer(interview, candidate, elapsed):
                        counts["reminders"] += 1
            except Exception:
                counts["errors"] += 1
                logger.exception("Overdue handling failed for interview %s", interview.interview_id)

        logger.info("Interview overdue check: %s", counts)
        return counts

    def _interviewer_name(self, interview: Interview) -> str:
        interviewer = self._users.get_by_id(interview.interviewer_id) if interview.interviewer_id else None
        return interviewer.full_name if interviewer else "Not assigned"

    def _auto_no_show(self, interview: Interview, candidate: Candidate, elapsed: int, now: datetime) -> None:
        self._interviews.update_status(
            interview.interview_id,
            InterviewStatus.NO_SHOW,
            notes=f"Auto marked as NO_SHOW after {INTERVIEW_AUTO_NO_SHOW_DAYS} days overdue ({now.date().isoformat()})",
        )
        self._candidates.update_status(candidate.candidate_id, CandidateStatus.DEAD_BY_CANDIDATE)

        outcome = self._automation.execute(
            candidate.candidate_id,
            CandidateStatus.NO_SHOW,
            candidate.status,
            reason=CandidateStatus.DEAD_BY_CANDIDATE.value,
            interview_id=interview.interview_id,
            today=now.date(),
        )
        if not outcome.success:
            logger.warning("No-show automation for candidate %s: %s", candidate.candidate_id, outcome.errors)

        self._notes.create(
            CandidateNote(
                candidate_id=candidate.candidate_id,
                content=(
                    f"Automatically moved to DEAD due to interview no-show ({INTERVIEW_AUTO_NO_SHOW_DAYS}+ days "
                    f"overdue). Interview #{interview.interview_id} scheduled for "
                    f"{interview.scheduled_at.date().isoformat()}."
                ),
                type=NoteType.SYSTEM,
            )
        )

        for admin in self._users.list_hr_admins():
            self._notifications.notify(
                user_id=admin.user_id,
                type=NotificationType.INTERVIEW_OVERDUE,
                title="Interview auto-marked NO_SHOW",
                message=f"{candidate.full_name} was moved to DEAD after {elapsed} days without an interview outcome.",
                link=f"/hr/recruiting?candidate={candidate.candidate_id}",
                ref_key=f"interview:{interview.interview_id}",
            )
            self._outbox.send(
                templates.interview_auto_no_show(
                    to=admin.email, candidate_name=candidate.full_name, scheduled_at=interview.scheduled_at, days_since=elapsed
                )
            )
        logger.info("Interview %s marked NO_SHOW, candidate %s moved to DEAD", interview.interview_id, candidate.candidate_id)

    def _escalate(self, interview: Interview, candidate: Candidate, elapsed: int) -> None:
        admins = self._users.list_hr_admins()
        if not admins:
            logger.warning("No HR admins to escalate interview %s to", interview.interview_id)
            return
        interviewer_name = self._interviewer_name(interview)
        for admin in admins:
            self._outbox.send(
                templates.interview_escalation(
                    to=admin.email,
                    candidate_name=candidate.full_name,
                    interviewer_name=interviewer_name,
                    scheduled_at=interview.scheduled_at,
                    days_since=elapsed,
                    days_until_no_show=max(0, INTERVIEW_AUTO_NO_SHOW_DAYS - elapsed),
                )
            )

    def _remind_interviewer(self, interview: Interview, candidate: Candidate, elapsed: int) -> bool:
        interviewer = self._users.get_by_id(interview.interviewer_id) if interview.interviewer_id else None
        if not interviewer:
            logger.warning("Interview %s has no interviewer to remind", interview.interview_id)
            return False
        self._outbox.send(
            templates.interview_feedback_reminder(
                to=interviewer.email,
                interviewer_name=interviewer.first_name,
                candidate_name=candidate.full_name,
                scheduled_at=interview.scheduled_at,
                days_since=elapsed,
            )
        )
        return True


class InterviewReminderService:
    """Day-before reminders to the interviewer."""

    def __init__(
        self,
        *,
        interviews: InterviewRepository,
        candidates: CandidateRepository,
        users: UserRepository,
        outbox: EmailOutbox,
    ):
        self._interviews = interviews
        self._candidates = candidates
        self._users = users
        self._outbox = outbox

    def send_upcoming(self, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        start = datetime.combine(now.date() + timedelta(days=1), time.min)
        counts = {"interviews": 0, "sent": 0, "errors": 0}

        for interview in self._interviews.list_scheduled_between(start, start + timedelta(days=1)):
            counts["interviews"] += 1
            try:
                candidate = self._candidates.get_by_id(interview.candidate_id)
                interviewer = self._users.get_by_id(interview.interviewer_id) if interview.interviewer_id else None
                if not candidate or not interviewer:
                    continue
                self._outbox.send(
                    templates.interview_reminder(
                        to=interviewer.email,
                        recipient_name=interviewer.first_name,
                        candidate_name=candidate.full_name,
                        scheduled_at=interview.scheduled_at,
                        location=interview.location,
                    )
                )
                counts["sent"] += 1
            except Exception:
                counts["errors"] += 1
                logger.exception("Interview reminder failed for interview %s", interview.interview_id)

        logger.info("Interview reminders: %s", counts)
        return counts
