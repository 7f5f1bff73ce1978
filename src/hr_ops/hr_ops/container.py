from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Mapping, Optional

from config import pto_approvers

from .core.constants import DEFAULT_REQUIRED_WINTER_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .jobs.guard import GuardedJob
from .jobs.registry import build_jobs
from .notifications.mysql_notification_repository import MySQLEmailLogRepository, MySQLNotificationRepository
from .notifications.outbox import EmailOutbox
from .notifications.service import NotificationService
from .onboarding.mysql_onboarding_repository import (
    MySQLEquipmentTokenRepository,
    MySQLOnboardingRequirementRepository,
    MySQLOnboardingTaskRepository,
    MySQLWelcomePackageRepository,
)
from .onboarding.service import OnboardingOverdueService, OnboardingReminderService, OnboardingService
from .pto.approvers import ApprovalRouting
from .pto.balance import PtoBalanceService
from .pto.mysql_pto_policy_repository import MySQLPtoPolicyRepository
from .pto.mysql_pto_request_repository import MySQLPtoRequestRepository
from .pto.policy import PtoPolicyService
from .pto.reminders import PtoReminderService
from .pto.service import PtoService
from .pto.validation import PtoRequestValidator
from .recruiting.automation import CandidateStatusAutomation
from .recruiting.hire import HireAutomation
from .recruiting.interviews import InterviewOverdueService, InterviewReminderService
from .recruiting.mysql_recruiting_repository import (
    MySQLCandidateNoteRepository,
    MySQLCandidateRepository,
    MySQLInterviewRepository,
)
from .recruiting.service import RecruitingService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService
from .workflows.executor import WorkflowExecutor
from .workflows.factory import StepHandlerFactory
from .workflows.mysql_workflow_repository import MySQLExecutionRepository, MySQLHrTaskRepository, MySQLWorkflowRepository
from .workflows.steps.action_step import ActionStepHandler
from .workflows.steps.notification_step import NotificationStepHandler
from .workflows.triggers import WorkflowTriggerService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    pto_requests_repo: MySQLPtoRequestRepository
    pto_policies_repo: MySQLPtoPolicyRepository
    candidates_repo: MySQLCandidateRepository

    auth_service: AuthService
    notification_service: NotificationService
    outbox: EmailOutbox
    pto_service: PtoService
    pto_balance_service: PtoBalanceService
    pto_policy_service: PtoPolicyService
    onboarding_service: OnboardingService
    recruiting_service: RecruitingService
    workflow_executor: WorkflowExecutor

    jobs: Mapping[str, GuardedJob]


def _routing(settings: Optional[ModuleType]) -> ApprovalRouting:
    return ApprovalRouting.from_module(getattr(settings, "PTO_APPROVERS", pto_approvers))


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    def setting(name: str, default):
        return getattr(settings, name, default) if settings is not None else default

    users_repo = MySQLUserRepository(conn)
    pto_requests_repo = MySQLPtoRequestRepository(conn)
    pto_policies_repo = MySQLPtoPolicyRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    email_log_repo = MySQLEmailLogRepository(conn)
    tasks_repo = MySQLOnboardingTaskRepository(conn)
    requirements_repo = MySQLOnboardingRequirementRepository(conn)
    candidates_repo = MySQLCandidateRepository(conn)
    interviews_repo = MySQLInterviewRepository(conn)
    notes_repo = MySQLCandidateNoteRepository(conn)
    workflows_repo = MySQLWorkflowRepository(conn)

    auth_service = AuthService(users_repo)
    notification_service = NotificationService(notifications_repo)
    outbox = EmailOutbox(email_log_repo, enabled=bool(setting("EMAIL_ENABLED", True)))

    pto_balance_service = PtoBalanceService(pto_policies_repo, pto_requests_repo)
    pto_policy_service = PtoPolicyService(pto_policies_repo, users_repo)
    pto_service = PtoService(
        pto_requests_repo,
        pto_policies_repo,
        users_repo,
        validator=PtoRequestValidator(pto_requests_repo, users_repo),
        balances=pto_balance_service,
        routing=_routing(settings),
        notifications=notification_service,
        outbox=outbox,
        required_winter_days=float(setting("REQUIRED_WINTER_DAYS", DEFAULT_REQUIRED_WINTER_DAYS)),
        enforce_routing=bool(setting("PTO_ENFORCE_APPROVER_ROUTING", False)),
    )

    onboarding_service = OnboardingService(tasks_repo, requirements_repo)

    workflow_executor = WorkflowExecutor(
        workflows_repo,
        MySQLExecutionRepository(conn),
        StepHandlerFactory(
            action=ActionStepHandler(
                candidates=candidates_repo, notes=notes_repo, tasks=MySQLHrTaskRepository(conn), outbox=outbox
            ),
            notification=NotificationStepHandler(notification_service, users_repo),
        ),
    )

    status_automation = CandidateStatusAutomation(candidates_repo, notes_repo, outbox=outbox)
    portal_url = str(setting("PORTAL_URL", "http://localhost:5000"))
    recruiting_service = RecruitingService(
        candidates_repo,
        interviews_repo,
        automation=status_automation,
        hire_automation=HireAutomation(
            candidates=candidates_repo,
            users=users_repo,
            policies=pto_policies_repo,
            tasks=tasks_repo,
            equipment_tokens=MySQLEquipmentTokenRepository(conn),
            welcome_packages=MySQLWelcomePackageRepository(conn),
            outbox=outbox,
            temp_password=str(setting("HIRE_TEMP_PASSWORD", "ChangeMe2026!")),
            portal_url=portal_url,
            training_url=str(setting("TRAINING_URL", f"{portal_url}/training")),
        ),
        triggers=WorkflowTriggerService(workflows_repo, workflow_executor),
    )

    jobs = build_jobs(
        pto_reminders=PtoReminderService(
            pto_requests_repo, users_repo, notifications=notification_service, outbox=outbox
        ),
        onboarding_overdue=OnboardingOverdueService(
            tasks_repo, users_repo, notifications=notification_service, outbox=outbox
        ),
        onboarding_reminders=OnboardingReminderService(tasks_repo, users_repo, outbox=outbox),
        interview_overdue=InterviewOverdueService(
            interviews=interviews_repo,
            candidates=candidates_repo,
            notes=notes_repo,
            users=users_repo,
            automation=status_automation,
            notifications=notification_service,
            outbox=outbox,
        ),
        interview_reminders=InterviewReminderService(
            interviews=interviews_repo, candidates=candidates_repo, users=users_repo, outbox=outbox
        ),
        workflow_executor=workflow_executor,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        pto_requests_repo=pto_requests_repo,
        pto_policies_repo=pto_policies_repo,
        candidates_repo=candidates_repo,
        auth_service=auth_service,
        notification_service=notification_service,
        outbox=outbox,
        pto_service=pto_service,
        pto_balance_service=pto_balance_service,
        pto_policy_service=pto_policy_service,
        onboarding_service=onboarding_service,
        recruiting_service=recruiting_service,
        workflow_executor=workflow_executor,
        jobs=jobs,
    )
