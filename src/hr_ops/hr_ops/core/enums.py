from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    HR_ADMIN = "HR_ADMIN"
    GENERAL_MANAGER = "GENERAL_MANAGER"
    TERRITORY_MANAGER = "TERRITORY_MANAGER"
    MANAGER = "MANAGER"
    TEAM_LEAD = "TEAM_LEAD"
    EMPLOYEE = "EMPLOYEE"
    FIELD_TECH = "FIELD_TECH"
    SALES_REP = "SALES_REP"
    CONTRACTOR = "CONTRACTOR"
    SOURCER = "SOURCER"
    TRAINEE = "TRAINEE"


class EmploymentType(str, Enum):
    W2 = "W2"
    TEN99 = "1099"
    CONTRACTOR = "CONTRACTOR"
    SUB_CONTRACTOR = "SUB_CONTRACTOR"


class PtoStatus(str, Enum):
    """PTO request lifecycle: PENDING -> APPROVED | DENIED (revocable back to PENDING)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class PtoType(str, Enum):
    VACATION = "VACATION"
    SICK = "SICK"
    PERSONAL = "PERSONAL"


class PolicyLevel(str, Enum):
    COMPANY = "COMPANY"
    DEPARTMENT = "DEPARTMENT"
    INDIVIDUAL = "INDIVIDUAL"


class BalanceChangeReason(str, Enum):
    APPROVED = "APPROVED"
    DENIED = "DENIED"
    CANCELLED = "CANCELLED"


class CandidateStatus(str, Enum):
    """Candidate pipeline stages plus the terminal DEAD_* reasons."""

    NEW = "new"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"
    NO_SHOW = "NO_SHOW"
    DEAD_BY_CANDIDATE = "DEAD_BY_CANDIDATE"
    DEAD_BY_COMPANY = "DEAD_BY_COMPANY"
    DEAD_COMPENSATION = "DEAD_COMPENSATION"
    DEAD_LOCATION = "DEAD_LOCATION"
    DEAD_TIMING = "DEAD_TIMING"
    DEAD_QUALIFICATIONS = "DEAD_QUALIFICATIONS"
    DEAD_CULTURE_FIT = "DEAD_CULTURE_FIT"
    DEAD_OTHER = "DEAD_OTHER"

    @property
    def is_dead(self) -> bool:
        return self.value.startswith("DEAD") or self is CandidateStatus.REJECTED


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class NoteType(str, Enum):
    GENERAL = "GENERAL"
    INTERVIEW = "INTERVIEW"
    SYSTEM = "SYSTEM"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskCategory(str, Enum):
    PAPERWORK = "paperwork"
    TRAINING = "training"
    EQUIPMENT = "equipment"


class RequirementStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    PTO_REQUEST = "pto_request"
    PTO_APPROVED = "pto_approved"
    PTO_DENIED = "pto_denied"
    PTO_REMINDER = "pto_reminder"
    TASK_OVERDUE = "task_overdue"
    INTERVIEW_OVERDUE = "interview_overdue"
    WORKFLOW = "workflow"


class EmailStatus(str, Enum):
    QUEUED = "queued"
    SENT = "sent"
    FAILED = "failed"


class WorkflowTrigger(str, Enum):
    CANDIDATE_CREATED = "CANDIDATE_CREATED"
    CANDIDATE_STAGE_CHANGE = "CANDIDATE_STAGE_CHANGE"
    INTERVIEW_COMPLETED = "INTERVIEW_COMPLETED"


class StepType(str, Enum):
    ACTION = "ACTION"
    CONDITION = "CONDITION"
    DELAY = "DELAY"
    NOTIFICATION = "NOTIFICATION"


class ActionType(str, Enum):
    SEND_EMAIL = "SEND_EMAIL"
    UPDATE_STATUS = "UPDATE_STATUS"
    ASSIGN_TO = "ASSIGN_TO"
    CREATE_TASK = "CREATE_TASK"
    ADD_NOTE = "ADD_NOTE"


class ExecutionStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
