from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import StepType
from .model import WorkflowStep
from .steps.action_step import ActionStepHandler
from .steps.base import StepHandler
from .steps.condition_step import ConditionStepHandler
from .steps.delay_step import DelayStepHandler
from .steps.notification_step import NotificationStepHandler


@dataclass(frozen=True)
class StepHandlerFactory:
    """Factory Pattern: pick the handler for a step's type."""

    action: ActionStepHandler
    notification: NotificationStepHandler
    condition: StepHandler = field(default_factory=ConditionStepHandler)
    delay: StepHandler = field(default_factory=DelayStepHandler)

    def for_step(self, step: WorkflowStep) -> StepHandler:
        handlers = {
            StepType.ACTION: self.action,
            StepType.CONDITION: self.condition,
            StepType.DELAY: self.delay,
            StepType.NOTIFICATION: self.notification,
        }
        try:
            return handlers[step.step_type]
        except KeyError:
            raise ValueError(f"Unknown step type: {step.step_type}")
