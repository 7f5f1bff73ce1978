from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..core.enums import CandidateStatus, EmploymentType, InterviewStatus, NoteType


@dataclass(frozen=True)
class Candidate:
    candidate_id: int
    first_name: str
    last_name: str
    email: str
    position: str
    status: CandidateStatus = CandidateStatus.NEW
    phone: Optional[str] = None
    department: Optional[str] = None
    assigned_to: Optional[int] = None
    score: Optional[int] = None
    tags: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.candidate_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "position": self.position,
            "department": self.department,
            "status": self.status.value,
            "assignedTo": self.assigned_to,
            "score": self.score,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def as_context(self) -> Dict[str, object]:
        """Flat view used by workflow condition expressions."""
        return {
            "id": self.candidate_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "position": self.position,
            "department": self.department,
            "status": self.status.value,
            "score": self.score,
            "assignedTo": self.assigned_to,
        }


@dataclass(frozen=True)
class NewCandidate:
    first_name: str
    last_name: str
    email: str
    position: str
    phone: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class Interview:
    interview_id: int
    candidate_id: int
    scheduled_at: datetime
    status: InterviewStatus
    interviewer_id: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class CandidateNote:
    candidate_id: int
    content: str
    type: NoteType = NoteType.GENERAL
    author_id: Optional[int] = None


@dataclass(frozen=True)
class HireData:
    candidate_id: int
    role: str
    start_date: date
    employment_type: EmploymentType
    position: str
    department: Optional[str] = None
    salary: Optional[str] = None
    welcome_package_id: Optional[int] = None


@dataclass
class AutomationResult:
    success: bool = True
    actions: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"success": self.success, "actions": list(self.actions), "errors": list(self.errors)}


@dataclass
class HireSteps:
    user_created: bool = False
    pto_created: bool = False
    package_assigned: bool = False
    receipt_created: bool = False
    tasks_created: bool = False
    email_sent: bool = False

    def to_dict(self) -> dict:
        return {
            "userCreated": self.user_created,
            "ptoCreated": self.pto_created,
            "packageAssigned": self.package_assigned,
            "receiptCreated": self.receipt_created,
            "tasksCreated": self.tasks_created,
            "emailSent": self.email_sent,
        }


@dataclass
class HireResult:
    success: bool = False
    user_id: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    steps: HireSteps = field(default_factory=HireSteps)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "userId": self.user_id,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "steps": self.steps.to_dict(),
        }
