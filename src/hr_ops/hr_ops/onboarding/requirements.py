"""Default onboarding paperwork and the standard first-week task list."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.enums import EmploymentType, RequirementStatus, TaskCategory
from .model import NewOnboardingTask, OnboardingRequirement, RequirementTemplate

REQUIREMENT_CATEGORIES = ("tax", "insurance", "legal", "training", "equipment")

_COMMON = (
    RequirementTemplate("Employee Handbook Acknowledgment", "Review and sign the employee handbook", "legal", "BOTH", 7),
    RequirementTemplate("Emergency Contact Information", "Provide emergency contact details", "legal", "BOTH", 7),
    RequirementTemplate("Complete Safety Training", "Complete OSHA safety training", "training", "BOTH", 14),
)

_W2_ONLY = (
    RequirementTemplate("W-4 Tax Form", "Complete federal tax withholding form", "tax", "W2", 7),
    RequirementTemplate("Form I-9 (Employment Eligibility)", "Verify identity and employment authorization", "legal", "W2", 3),
    RequirementTemplate("Direct Deposit Form", "Set up direct deposit for payroll", "tax", "W2", 7),
    RequirementTemplate("Benefits Enrollment", "Select health insurance and other benefits", "insurance", "W2", 30, False),
    RequirementTemplate("State Tax Withholding Form", "Complete state tax withholding", "tax", "W2", 7),
)

_CONTRACTOR_ONLY = (
    RequirementTemplate("W-9 Tax Form", "Provide taxpayer identification for 1099 reporting", "tax", "1099", 7),
    RequirementTemplate("Workers Compensation Insurance", "Provide proof of workers comp coverage", "insurance", "1099", 14),
    RequirementTemplate("Independent Contractor Agreement", "Sign the contractor service agreement", "legal", "1099", 7),
    RequirementTemplate("General Liability Insurance", "Provide proof of general liability coverage", "insurance", "1099", 14),
    RequirementTemplate("Business License/EIN", "Provide business license or EIN documentation", "legal", "1099", 14),
    RequirementTemplate(
        "Certificate of Insurance (COI)",
        "Submit a Certificate of Insurance naming the company as additional insured",
        "insurance",
        "1099",
        14,
    ),
)

_DONE = frozenset({RequirementStatus.APPROVED, RequirementStatus.SUBMITTED})


def default_requirements(employment_type: EmploymentType | str) -> List[RequirementTemplate]:
    if EmploymentType(employment_type) == EmploymentType.W2:
        return [*_COMMON, *_W2_ONLY]
    return [*_COMMON, *_CONTRACTOR_ONLY]


def requirements_by_category(requirements: Iterable[OnboardingRequirement]) -> Dict[str, List[OnboardingRequirement]]:
    grouped: Dict[str, List[OnboardingRequirement]] = {c: [] for c in REQUIREMENT_CATEGORIES}
    for requirement in requirements:
        if requirement.category in grouped:
            grouped[requirement.category].append(requirement)
    return grouped


def completion_percentage(requirements: Sequence[OnboardingRequirement]) -> int:
    if not requirements:
        return 0
    done = sum(1 for r in requirements if r.status in _DONE)
    return int(round(done * 100 / len(requirements)))


def is_requirement_overdue(requirement: OnboardingRequirement, *, today: date) -> bool:
    if requirement.status in _DONE or requirement.due_date is None:
        return False
    return requirement.due_date < today


def first_week_tasks(start_date: date, *, training_url: Optional[str] = None) -> List[NewOnboardingTask]:
    """The six tasks every new hire gets, due relative to the start date."""
    training = "Complete required online training modules"
    if training_url:
        training += f" at {training_url}"
    return [
        NewOnboardingTask(
            "Complete I-9 Form",
            "Submit Employment Eligibility Verification (I-9) form with required documents",
            TaskCategory.PAPERWORK,
            start_date,
        ),
        NewOnboardingTask(
            "Sign Employment Contract",
            "Review and sign your employment contract",
            TaskCategory.PAPERWORK,
            start_date,
        ),
        NewOnboardingTask(
            "Complete Safety Training",
            "Complete OSHA safety training and certification",
            TaskCategory.TRAINING,
            start_date + timedelta(days=3),
        ),
        NewOnboardingTask(
            "Tools & Equipment Assignment",
            "Review and sign equipment receipt for assigned tools",
            TaskCategory.EQUIPMENT,
            start_date,
        ),
        NewOnboardingTask(
            "Benefits Enrollment",
            "Complete benefits enrollment forms (health, dental, 401k)",
            TaskCategory.PAPERWORK,
            start_date + timedelta(days=7),
        ),
        # pre-boarding: due the day before the first day
        NewOnboardingTask("Complete Online Training", training, TaskCategory.TRAINING, start_date - timedelta(days=1)),
    ]
