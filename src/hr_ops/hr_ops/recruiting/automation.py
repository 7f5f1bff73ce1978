from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.datetime_utils import today_local
from ..common.log import get_logger
from ..core.enums import CandidateStatus, NoteType
from ..notifications import templates
from ..notifications.outbox import EmailOutbox
from .model import AutomationResult, Candidate, CandidateNote
from .repository import CandidateNoteRepository, CandidateRepository

logger = get_logger(__name__)

NO_SHOW_TAG = "No Show"


class CandidateStatusAutomation:
    """Side effects of moving a candidate into a terminal or no-show state.

    * DEAD_* or rejected: rejection email worded by reason.
    * NO_SHOW: "No Show" tag (added once), an INTERVIEW note and a reschedule email.
    """

    def __init__(self, candidates: CandidateRepository, notes: CandidateNoteRepository, *, outbox: EmailOutbox):
        self._candidates = candidates
        self._notes = notes
        self._outbox = outbox

    def execute(
        self,
        candidate_id: int,
        new_status: CandidateStatus,
        old_status: Optional[CandidateStatus] = None,
        *,
        reason: Optional[str] = None,
        interview_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> AutomationResult:
        result = AutomationResult()
        candidate = self._candidates.get_by_id(int(candidate_id))
        if not candidate:
            result.success = False
            result.errors.append("Candidate not found")
            return result

        try:
            if new_status.is_dead:
                self._reject(candidate, new_status, reason)
                result.actions.append("Sent rejection email")
            if new_status == CandidateStatus.NO_SHOW:
                self._no_show(candidate, interview_id, today or today_local(), result)
        except Exception as exc:
            logger.exception("Status automation failed for candidate %s", candidate_id)
            result.success = False
            result.errors.append(f"Status automation failed: {exc}")
            return result

        logger.info(
            "Candidate %s: %s -> %s, actions=%s",
            candidate.candidate_id,
            old_status.value if old_status else "?",
            new_status.value,
            result.actions,
        )
        return result

    def _reject(self, candidate: Candidate, status: CandidateStatus, reason: Optional[str]) -> None:
        if reason is None and status.is_dead:
            reason = status.value
        self._outbox.send(
            templates.candidate_rejection(
                to=candidate.email, first_name=candidate.first_name, position=candidate.position, reason=reason
            )
        )

    def _no_show(self, candidate: Candidate, interview_id: Optional[int], today: date, result: AutomationResult) -> None:
        if NO_SHOW_TAG not in candidate.tags:
            self._candidates.update_tags(candidate.candidate_id, [*candidate.tags, NO_SHOW_TAG])
            result.actions.append("Added no-show tag")

        suffix = f" for interview #{interview_id}" if interview_id else ""
        self._notes.create(
            CandidateNote(
                candidate_id=candidate.candidate_id,
                content=f"Interview no-show on {today.isoformat()}{suffix}",
                type=NoteType.INTERVIEW,
            )
        )
        result.actions.append("Created no-show note")

        self._outbox.send(
            templates.candidate_reschedule(to=candidate.email, first_name=candidate.first_name, position=candidate.position)
        )
        result.actions.append("Sent reschedule email")
