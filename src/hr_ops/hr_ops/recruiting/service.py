from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import require_iso_date
from ..common.log import get_logger
from ..common.validators import normalize_email, require_email, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import CandidateStatus, EmploymentType, InterviewStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..workflows.triggers import WorkflowTriggerService
from .automation import CandidateStatusAutomation
from .hire import HireAutomation
from .model import AutomationResult, Candidate, HireData, HireResult, NewCandidate
from .repository import CandidateRepository, InterviewRepository

logger = get_logger(__name__)

HIRE_EMPLOYMENT_TYPES = (EmploymentType.W2.value, EmploymentType.TEN99.value)


def parse_candidate_status(value: Any) -> CandidateStatus:
    raw = str(value or "").strip()
    for candidate in (raw, raw.lower(), raw.upper()):
        try:
            return CandidateStatus(candidate)
        except ValueError:
            continue
    raise ValidationError(f"Invalid candidate status: {raw or '(empty)'}")


class RecruitingService:
    def __init__(
        self,
        candidates: CandidateRepository,
        interviews: InterviewRepository,
        *,
        automation: CandidateStatusAutomation,
        hire_automation: HireAutomation,
        triggers: Optional[WorkflowTriggerService] = None,
    ):
        self._candidates = candidates
        self._interviews = interviews
        self._automation = automation
        self._hire = hire_automation
        self._triggers = triggers

    def get_candidate(self, candidate_id: int) -> Candidate:
        candidate = self._candidates.get_by_id(int(candidate_id))
        if not candidate:
            raise NotFoundError("Candidate not found")
        return candidate

    def list_candidates(self, *, status: Optional[str] = None, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Candidate]:
        parsed = parse_candidate_status(status) if status else None
        return self._candidates.list_candidates(status=parsed, limit=max(1, min(int(limit), DEFAULT_LIST_LIMIT)))

    def create_candidate(self, payload: Mapping[str, Any], *, created_by: Optional[int] = None) -> Candidate:
        new = NewCandidate(
            first_name=require_non_empty(payload.get("firstName"), "firstName"),
            last_name=require_non_empty(payload.get("lastName"), "lastName"),
            email=normalize_email(require_email(payload.get("email"))),
            position=require_non_empty(payload.get("position"), "position"),
            phone=(payload.get("phone") or None),
            department=(payload.get("department") or None),
        )
        candidate = self.get_candidate(self._candidates.create(new))
        logger.info("Candidate %s created for %s", candidate.candidate_id, candidate.position)
        if self._triggers:
            self._triggers.on_candidate_created(candidate, triggered_by=created_by)
        return candidate

    def change_status(
        self,
        candidate_id: int,
        status: Any,
        *,
        reason: Optional[str] = None,
        interview_id: Optional[int] = None,
        changed_by: Optional[int] = None,
    ) -> dict:
        candidate = self.get_candidate(candidate_id)
        new_status = parse_candidate_status(status)
        if new_status == CandidateStatus.HIRED:
            raise ValidationError("Use the hire endpoint to hire a candidate")
        if reason and not reason.startswith("DEAD"):
            raise ValidationError(f"Invalid reason: {reason}")

        self._candidates.update_status(candidate.candidate_id, new_status)
        automation = AutomationResult()
        if new_status.is_dead or new_status == CandidateStatus.NO_SHOW:
            automation = self._automation.execute(
                candidate.candidate_id, new_status, candidate.status, reason=reason, interview_id=interview_id
            )
            if not automation.success:
                logger.warning("Status automation for candidate %s: %s", candidate.candidate_id, automation.errors)

        updated = self.get_candidate(candidate.candidate_id)
        if self._triggers and new_status != candidate.status:
            self._triggers.on_stage_change(updated, candidate.status, new_status, triggered_by=changed_by)
        return {"candidate": updated.to_dict(), "automation": automation.to_dict()}

    def parse_hire(self, candidate_id: int, payload: Mapping[str, Any]) -> HireData:
        role = require_non_empty(payload.get("role"), "role").upper()
        if role not in {r.value for r in Role}:
            raise ValidationError(f"Invalid role: {payload.get('role')}")
        if not payload.get("startDate"):
            raise ValidationError("startDate is required")
        start_date = require_iso_date(payload.get("startDate"), "startDate")
        employment = str(payload.get("employmentType") or "")
        if employment not in HIRE_EMPLOYMENT_TYPES:
            raise ValidationError("employmentType must be W2 or 1099")

        package = payload.get("welcomePackageId")
        return HireData(
            candidate_id=int(candidate_id),
            role=role,
            start_date=start_date,
            employment_type=EmploymentType(employment),
            position=str(payload.get("position") or ""),
            department=payload.get("department") or None,
            salary=payload.get("salary") or None,
            welcome_package_id=int(package) if package else None,
        )

    def hire(self, candidate_id: int, payload: Mapping[str, Any], *, hired_by: Optional[int] = None) -> HireResult:
        data = self.parse_hire(candidate_id, payload)
        candidate = self.get_candidate(candidate_id)
        if candidate.status == CandidateStatus.HIRED:
            raise ConflictError("Candidate is already hired")
        if not data.position:
            data = replace(data, position=candidate.position)

        result = self._hire.execute(data)
        if not result.success:
            logger.error("Hire chain failed for candidate %s: %s", candidate.candidate_id, result.errors)
            return result

        self._candidates.update_status(candidate.candidate_id, CandidateStatus.HIRED)
        if self._triggers:
            self._triggers.on_stage_change(
                self.get_candidate(candidate.candidate_id), candidate.status, CandidateStatus.HIRED, triggered_by=hired_by
            )
        return result

    def complete_interview(self, interview_id: int, *, completed_by: Optional[int] = None) -> None:
        interview = self._interviews.get_by_id(int(interview_id))
        if not interview:
            raise NotFoundError("Interview not found")
        if interview.status != InterviewStatus.SCHEDULED:
            raise ConflictError(f"Interview is already {interview.status.value}")
        self._interviews.update_status(interview.interview_id, InterviewStatus.COMPLETED)
        if self._triggers:
            self._triggers.on_interview_completed(
                self.get_candidate(interview.candidate_id), interview.interview_id, triggered_by=completed_by
            )
