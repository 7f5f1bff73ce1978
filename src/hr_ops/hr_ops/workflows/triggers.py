from __future__ import annotations

from typing import Any, Dict, Optional

from ..common.log import get_logger
from ..core.enums import CandidateStatus, WorkflowTrigger
from ..recruiting.model import Candidate
from .executor import WorkflowExecutor
from .model import Workflow
from .repository import WorkflowRepository

logger = get_logger(__name__)


def matches_stage_change(workflow: Workflow, old_stage: Optional[str], new_stage: str) -> bool:
    conditions = workflow.trigger_conditions or {}
    if conditions.get("fromStage") and conditions["fromStage"] != old_stage:
        return False
    if conditions.get("toStage") and conditions["toStage"] != new_stage:
        return False
    return True


class WorkflowTriggerService:
    """Starts the active workflows listening on a recruiting event.

    A failing workflow is logged and never blocks the event that fired it.
    """

    def __init__(self, workflows: WorkflowRepository, executor: WorkflowExecutor):
        self._workflows = workflows
        self._executor = executor

    def on_candidate_created(self, candidate: Candidate, *, triggered_by: Optional[int] = None) -> int:
        context = self._context(candidate, triggered_by)
        return self._fire(WorkflowTrigger.CANDIDATE_CREATED, context)

    def on_stage_change(
        self,
        candidate: Candidate,
        old_stage: Optional[CandidateStatus],
        new_stage: CandidateStatus,
        *,
        triggered_by: Optional[int] = None,
    ) -> int:
        old_value = old_stage.value if old_stage else None
        context = self._context(candidate, triggered_by)
        context.update(oldStage=old_value, newStage=new_stage.value)
        return self._fire(
            WorkflowTrigger.CANDIDATE_STAGE_CHANGE,
            context,
            accept=lambda wf: matches_stage_change(wf, old_value, new_stage.value),
        )

    def on_interview_completed(
        self, candidate: Candidate, interview_id: int, *, triggered_by: Optional[int] = None
    ) -> int:
        context = self._context(candidate, triggered_by)
        context["interviewId"] = int(interview_id)
        return self._fire(WorkflowTrigger.INTERVIEW_COMPLETED, context)

    @staticmethod
    def _context(candidate: Candidate, triggered_by: Optional[int]) -> Dict[str, Any]:
        return {
            "candidateId": candidate.candidate_id,
            "candidate": candidate.as_context(),
            "triggeredBy": triggered_by,
        }

    def _fire(self, trigger: WorkflowTrigger, context: Dict[str, Any], accept=None) -> int:
        started = 0
        for workflow in self._workflows.list_active(trigger):
            if accept is not None and not accept(workflow):
                continue
            try:
                self._executor.execute(workflow.workflow_id, context)
                started += 1
            except Exception:
                logger.exception("Workflow %s failed to start for %s", workflow.workflow_id, trigger.value)
        logger.info("%s: started %d workflow(s)", trigger.value, started)
        return started
