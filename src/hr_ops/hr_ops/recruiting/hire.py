"""Hire automation chain.

Runs when a candidate is hired:

1. user account with a temporary password (must be changed on first login)
2. PTO policy from the employment allocation
3. welcome package assignment (optional)
4. equipment receipt signing token, locked until the start date
5. six first-week onboarding tasks
6. welcome email

Only step 1 is fatal. Later failures are collected as warnings and the chain
moves on; nothing is rolled back.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local
from ..common.log import get_logger
from ..common.validators import normalize_email
from ..core.constants import EQUIPMENT_TOKEN_EXPIRY_DAYS
from ..core.enums import Role
from ..notifications import templates
from ..notifications.outbox import EmailOutbox
from ..onboarding.model import EquipmentToken
from ..onboarding.repository import EquipmentTokenRepository, OnboardingTaskRepository, WelcomePackageRepository
from ..onboarding.requirements import first_week_tasks
from ..pto.policy import allocation_for, new_policy
from ..pto.repository import PtoPolicyRepository
from ..users.model import NewUser, User
from ..users.repository import UserRepository
from .model import Candidate, HireData, HireResult
from .repository import CandidateRepository

logger = get_logger(__name__)


class HireAutomation:
    def __init__(
        self,
        *,
        candidates: CandidateRepository,
        users: UserRepository,
        policies: PtoPolicyRepository,
        tasks: OnboardingTaskRepository,
        equipment_tokens: EquipmentTokenRepository,
        welcome_packages: WelcomePackageRepository,
        outbox: EmailOutbox,
        temp_password: str,
        portal_url: str,
        training_url: str,
    ):
        self._candidates = candidates
        self._users = users
        self._policies = policies
        self._tasks = tasks
        self._equipment_tokens = equipment_tokens
        self._welcome_packages = welcome_packages
        self._outbox = outbox
        self._temp_password = temp_password
        self._portal_url = portal_url.rstrip("/")
        self._training_url = training_url

    def execute(self, data: HireData, *, now: Optional[datetime] = None) -> HireResult:
        now = now or now_local()
        result = HireResult()
        candidate = self._candidates.get_by_id(data.candidate_id)
        if not candidate:
            result.errors.append("Candidate not found")
            return result

        logger.info("Hire chain started for candidate %s (%s)", candidate.candidate_id, candidate.email)
        try:
            user = self._create_user(candidate, data)
        except Exception as exc:
            logger.exception("Hire step 1 failed for candidate %s", candidate.candidate_id)
            result.errors.append(f"User creation failed: {exc}")
            return result
        result.steps.user_created = True
        result.user_id = user.user_id
        logger.info("Hire step 1 ok: user %s created", user.user_id)

        try:
            self._create_pto_policy(user, data)
            result.steps.pto_created = True
        except Exception as exc:
            logger.exception("Hire step 2 failed for user %s", user.user_id)
            result.errors.append(f"PTO policy creation failed: {exc}")
            result.warnings.append("PTO policy not created - please create manually")

        if data.welcome_package_id:
            try:
                self._welcome_packages.assign(user_id=user.user_id, package_id=int(data.welcome_package_id))
                result.steps.package_assigned = True
            except Exception as exc:
                logger.exception("Hire step 3 failed for user %s", user.user_id)
                result.warnings.append(f"Welcome package assignment failed: {exc}")
        else:
            result.steps.package_assigned = True

        token: Optional[str] = None
        try:
            token = self._create_equipment_receipt(user, candidate, data, now)
            result.steps.receipt_created = True
        except Exception as exc:
            logger.exception("Hire step 4 failed for user %s", user.user_id)
            result.warnings.append(f"Equipment receipt creation failed: {exc}")

        try:
            self._tasks.create_many(user.user_id, first_week_tasks(data.start_date, training_url=self._training_url))
            result.steps.tasks_created = True
        except Exception as exc:
            logger.exception("Hire step 5 failed for user %s", user.user_id)
            result.warnings.append(f"Onboarding tasks creation failed: {exc}")

        try:
            self._send_welcome(user, data, token)
            result.steps.email_sent = True
        except Exception as exc:
            logger.exception("Hire step 6 failed for user %s", user.user_id)
            result.warnings.append(f"Welcome email failed: {exc}")

        result.success = True
        logger.info("Hire chain finished for user %s: %s", user.user_id, result.steps.to_dict())
        return result

    def _create_user(self, candidate: Candidate, data: HireData) -> User:
        email = normalize_email(candidate.email)
        if self._users.get_by_email(email):
            raise ValueError(f"User with email {email} already exists")

        user_id = self._users.create_user(
            NewUser(
                email=email,
                username=email.split("@")[0],
                password_hash=generate_password_hash(self._temp_password),
                first_name=candidate.first_name,
                last_name=candidate.last_name,
                role=Role(data.role.strip().upper()),
                employment_type=data.employment_type,
                position=data.position,
                department=data.department,
                hire_date=data.start_date,
                phone=candidate.phone,
                must_change_password=True,
                has_training_access=True,
            )
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise LookupError(f"User {user_id} not found after insert")
        return user

    def _create_pto_policy(self, user: User, data: HireData) -> None:
        allocation = allocation_for(
            data.employment_type,
            department=data.department,
            position=data.position,
            role=data.role,
            company=self._policies.get_company_policy(),
        )
        self._policies.create(new_policy(user.user_id, allocation))

    def _create_equipment_receipt(self, user: User, candidate: Candidate, data: HireData, now: datetime) -> str:
        token = secrets.token_hex(32)
        self._equipment_tokens.create(
            EquipmentToken(
                user_id=user.user_id,
                token=token,
                signer_name=candidate.full_name,
                signer_email=candidate.email,
                locked_until=data.start_date,
                expires_at=now + timedelta(days=EQUIPMENT_TOKEN_EXPIRY_DAYS),
            )
        )
        logger.info("Equipment receipt token for user %s locked until %s", user.user_id, data.start_date)
        return token

    def _send_welcome(self, user: User, data: HireData, token: Optional[str]) -> None:
        self._outbox.send(
            templates.welcome(
                to=user.email,
                first_name=user.first_name,
                position=data.position,
                start_date=data.start_date,
                temp_password=self._temp_password,
                portal_url=self._portal_url,
                training_url=self._training_url,
                equipment_url=f"{self._portal_url}/equipment/sign/{token}" if token else None,
            )
        )
