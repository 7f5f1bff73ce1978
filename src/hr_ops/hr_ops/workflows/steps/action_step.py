from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from ...core.enums import ActionType, CandidateStatus, NoteType
from ...notifications import templates
from ...notifications.model import EmailMessage
from ...notifications.outbox import EmailOutbox
from ...recruiting.model import CandidateNote
from ...recruiting.repository import CandidateNoteRepository, CandidateRepository
from ..model import NewHrTask, WorkflowStep
from ..repository import HrTaskRepository
from ..templating import render
from .base import StepHandler, StepResult


class ActionStepHandler(StepHandler):
    """SEND_EMAIL, UPDATE_STATUS, ASSIGN_TO, CREATE_TASK and ADD_NOTE."""

    def __init__(
        self,
        *,
        candidates: CandidateRepository,
        notes: CandidateNoteRepository,
        tasks: HrTaskRepository,
        outbox: EmailOutbox,
    ):
        self._candidates = candidates
        self._notes = notes
        self._tasks = tasks
        self._outbox = outbox
        self._actions = {
            ActionType.SEND_EMAIL: self._send_email,
            ActionType.UPDATE_STATUS: self._update_status,
            ActionType.ASSIGN_TO: self._assign_to,
            ActionType.CREATE_TASK: self._create_task,
            ActionType.ADD_NOTE: self._add_note,
        }

    def run(self, step: WorkflowStep, context: Dict[str, Any], *, now: datetime) -> StepResult:
        action = self._actions.get(step.action_type) if step.action_type else None
        if action is None:
            return StepResult.failed(f"Unknown action type: {step.action_type}")
        try:
            return action(step.config, context, now)
        except (KeyError, ValueError) as exc:
            return StepResult.failed(str(exc))

    @staticmethod
    def _candidate_id(context: Dict[str, Any], action: ActionType) -> int:
        candidate_id = context.get("candidateId")
        if not candidate_id:
            raise ValueError(f"candidateId required for {action.value}")
        return int(candidate_id)

    def _send_email(self, config: Dict[str, Any], context: Dict[str, Any], now: datetime) -> StepResult:
        candidate = context.get("candidate") or {}
        to = config.get("to") or candidate.get("email")
        if not to:
            raise ValueError("No recipient for SEND_EMAIL")
        first_name = candidate.get("firstName") or ""
        email_type = config.get("emailType")

        message: Optional[EmailMessage]
        if email_type == "status_change":
            status = context.get("newStage") or candidate.get("status") or ""
            message = templates.candidate_status(to=to, first_name=first_name, status=str(status))
        elif email_type == "offer":
            message = templates.candidate_offer(
                to=to,
                first_name=first_name,
                position=config.get("position") or candidate.get("position") or "",
                salary=config.get("salary") or "competitive",
                start_date=config.get("startDate") or "TBD",
            )
        elif config.get("subject") and config.get("body"):
            message = EmailMessage(
                to=to,
                subject=render(config["subject"], context),
                body=render(config["body"], context),
                template="workflow",
            )
        else:
            raise ValueError("SEND_EMAIL needs emailType or subject and body")

        self._outbox.send(message)
        return StepResult(data={"emailSent": True, "to": to})

    def _update_status(self, config: Dict[str, Any], context: Dict[str, Any], now: datetime) -> StepResult:
        candidate_id = self._candidate_id(context, ActionType.UPDATE_STATUS)
        if not config.get("status"):
            raise ValueError("status configuration required for UPDATE_STATUS")
        status = CandidateStatus(config["status"])
        self._candidates.update_status(candidate_id, status)
        if isinstance(context.get("candidate"), dict):
            context["candidate"]["status"] = status.value
        return StepResult(data={"newStatus": status.value})

    def _assign_to(self, config: Dict[str, Any], context: Dict[str, Any], now: datetime) -> StepResult:
        candidate_id = self._candidate_id(context, ActionType.ASSIGN_TO)
        if not config.get("userId"):
            raise ValueError("userId configuration required for ASSIGN_TO")
        user_id = int(config["userId"])
        self._candidates.assign(candidate_id, user_id)
        if isinstance(context.get("candidate"), dict):
            context["candidate"]["assignedTo"] = user_id
        return StepResult(data={"assignedTo": user_id})

    def _create_task(self, config: Dict[str, Any], context: Dict[str, Any], now: datetime) -> StepResult:
        if not config.get("title"):
            raise ValueError("title configuration required for CREATE_TASK")
        due_in = config.get("dueInDays")
        task_id = self._tasks.create(
            NewHrTask(
                title=render(config["title"], context),
                description=render(config["description"], context) if config.get("description") else None,
                assigned_to=config.get("assignedTo") or context.get("triggeredBy"),
                candidate_id=context.get("candidateId"),
                due_date=(now + timedelta(days=int(due_in))).date() if due_in is not None else None,
            )
        )
        return StepResult(data={"taskCreated": True, "taskId": task_id})

    def _add_note(self, config: Dict[str, Any], context: Dict[str, Any], now: datetime) -> StepResult:
        candidate_id = self._candidate_id(context, ActionType.ADD_NOTE)
        if not config.get("content"):
            raise ValueError("content configuration required for ADD_NOTE")
        self._notes.create(
            CandidateNote(
                candidate_id=candidate_id,
                content=render(config["content"], context),
                type=NoteType(config.get("type") or NoteType.GENERAL.value),
                author_id=context.get("triggeredBy"),
            )
        )
        return StepResult(data={"noteAdded": True})
