from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from ...core.enums import NotificationType, Role
from ...notifications.service import NotificationService
from ...users.repository import UserRepository
from ..model import WorkflowStep
from ..templating import render
from .base import StepHandler, StepResult


class NotificationStepHandler(StepHandler):
    """In-app notification to ``userId``, ``userIds``, users with ``roles``,
    or the candidate's assignee when none is given."""

    def __init__(self, notifications: NotificationService, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def run(self, step: WorkflowStep, context: Dict[str, Any], *, now: datetime) -> StepResult:
        config = step.config
        if not config.get("title") or not config.get("message"):
            return StepResult.failed("title and message required for NOTIFICATION step")

        recipients = self._recipients(config, context)
        if not recipients:
            return StepResult.failed("NOTIFICATION step has no recipients")

        sent = self._notifications.notify_many(
            recipients,
            type=NotificationType.WORKFLOW,
            title=render(config["title"], context),
            message=render(config["message"], context),
            link=config.get("link"),
            ref_key=f"workflow-step:{step.step_id}",
        )
        return StepResult(data={"notificationSent": True, "recipients": sent})

    def _recipients(self, config: Dict[str, Any], context: Dict[str, Any]) -> List[int]:
        if config.get("userId"):
            return [int(config["userId"])]
        if config.get("userIds"):
            return [int(u) for u in config["userIds"]]
        if config.get("roles"):
            return [u.user_id for u in self._users.list_active(roles=[Role(r) for r in config["roles"]])]
        assignee = (context.get("candidate") or {}).get("assignedTo")
        return [int(assignee)] if assignee else []
