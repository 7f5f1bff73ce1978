from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from ...common.log import get_logger
from ..conditions import ConditionError, evaluate
from ..model import WorkflowStep
from .base import StepHandler, StepResult

logger = get_logger(__name__)


class ConditionStepHandler(StepHandler):
    """Stops the run when ``config.expression`` is false. No expression means pass."""

    def run(self, step: WorkflowStep, context: Dict[str, Any], *, now: datetime) -> StepResult:
        expression = (step.config.get("expression") or "").strip()
        if not expression:
            return StepResult()
        try:
            outcome = evaluate(expression, context)
        except ConditionError as exc:
            logger.warning("Step %s: bad expression %r: %s", step.step_id, expression, exc)
            return StepResult.failed(f"Invalid condition: {exc}")
        return StepResult(proceed=outcome, data={"expressionResult": outcome})
