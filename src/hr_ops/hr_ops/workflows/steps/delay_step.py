from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict

from ..model import WorkflowStep
from .base import StepHandler, StepResult

_UNITS = {"minutes", "hours", "days"}


class DelayStepHandler(StepHandler):
    """``{"duration": 2, "unit": "days"}`` pauses the run before the next step."""

    def run(self, step: WorkflowStep, context: Dict[str, Any], *, now: datetime) -> StepResult:
        duration = step.config.get("duration")
        unit = step.config.get("unit")
        if not duration or not unit:
            return StepResult.failed("duration and unit required for DELAY step")
        if unit not in _UNITS:
            return StepResult.failed(f"Unknown delay unit: {unit}")
        try:
            resume_at = now + timedelta(**{unit: float(duration)})
        except (TypeError, ValueError):
            return StepResult.failed(f"Invalid delay duration: {duration!r}")
        return StepResult(data={"scheduledFor": resume_at.isoformat()}, resume_at=resume_at)
