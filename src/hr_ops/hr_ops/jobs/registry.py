from __future__ import annotations

from typing import Dict

from ..notifications.service import NotificationService
from ..onboarding.service import OnboardingOverdueService, OnboardingReminderService
from ..pto.reminders import PtoReminderService
from ..recruiting.interviews import InterviewOverdueService, InterviewReminderService
from ..workflows.executor import WorkflowExecutor
from .guard import GuardedJob

PTO_REMINDERS = "pto-reminders"
ONBOARDING_OVERDUE = "onboarding-overdue"
ONBOARDING_REMINDERS = "onboarding-reminders"
INTERVIEW_OVERDUE = "interview-overdue"
INTERVIEW_REMINDERS = "interview-reminders"
WORKFLOW_DELAYED_STEPS = "workflow-delayed-steps"


def build_jobs(
    *,
    pto_reminders: PtoReminderService,
    onboarding_overdue: OnboardingOverdueService,
    onboarding_reminders: OnboardingReminderService,
    interview_overdue: InterviewOverdueService,
    interview_reminders: InterviewReminderService,
    workflow_executor: WorkflowExecutor,
) -> Dict[str, GuardedJob]:
    jobs = [
        GuardedJob(PTO_REMINDERS, pto_reminders.send_reminders, description="PTO reminders 30/7/1 days ahead"),
        GuardedJob(ONBOARDING_OVERDUE, onboarding_overdue.run, description="Overdue onboarding task notifications"),
        GuardedJob(ONBOARDING_REMINDERS, onboarding_reminders.send_due, description="Onboarding task digest emails"),
        GuardedJob(INTERVIEW_OVERDUE, interview_overdue.run, description="Overdue interview escalation"),
        GuardedJob(INTERVIEW_REMINDERS, interview_reminders.send_upcoming, description="Interviews scheduled tomorrow"),
        GuardedJob(
            WORKFLOW_DELAYED_STEPS,
            workflow_executor.process_delayed_steps,
            description="Resume workflows paused by DELAY steps",
        ),
    ]
    return {job.name: job for job in jobs}
