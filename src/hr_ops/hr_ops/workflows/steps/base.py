from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..model import WorkflowStep


@dataclass(frozen=True)
class StepResult:
    """Outcome of one step.

    ``proceed=False`` ends the run successfully; ``resume_at`` pauses it until then.
    """

    success: bool = True
    proceed: bool = True
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    resume_at: Optional[datetime] = None

    @classmethod
    def failed(cls, error: str) -> "StepResult":
        return cls(success=False, proceed=False, error=error)


class StepHandler(ABC):
    """Strategy Pattern: one handler per workflow step type."""

    @abstractmethod
    def run(self, step: WorkflowStep, context: Dict[str, Any], *, now: datetime) -> StepResult:
        raise NotImplementedError
