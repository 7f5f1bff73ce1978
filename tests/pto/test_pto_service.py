from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_ops.hr_ops.core.enums import EmailStatus, EmploymentType, NotificationType, PtoStatus, PtoType, Role
from src.hr_ops.hr_ops.core.exceptions import AuthorizationError, ConflictError, ValidationError
from src.hr_ops.hr_ops.notifications.outbox import EmailOutbox
from src.hr_ops.hr_ops.notifications.service import NotificationService
from src.hr_ops.hr_ops.pto.approvers import ApprovalRouting
from src.hr_ops.hr_ops.pto.balance import PtoBalanceService
from src.hr_ops.hr_ops.pto.model import PtoRequest
from src.hr_ops.hr_ops.pto.policy import allocation_for, new_policy
from src.hr_ops.hr_ops.pto.reminders import PtoReminderService
from src.hr_ops.hr_ops.pto.service import PtoService
from src.hr_ops.hr_ops.pto.validation import PtoRequestValidator
from tests.fakes import (
    FakeEmailLog,
    FakeNotificationsRepo,
    FakePtoPoliciesRepo,
    FakePtoRequestsRepo,
    FakeUsersRepo,
    make_user,
)

TODAY = date(2026, 3, 1)
NOW = datetime(2026, 3, 1, 10, 0)


def _setup(*, enforce_routing=False, requests=()):
    users = FakeUsersRepo(
        [
            make_user(1, "emp@example.com", department="Operations"),
            make_user(2, "hr@example.com", role=Role.HR_ADMIN),
            make_user(3, "lead@example.com", role=Role.MANAGER),
            make_user(4, "peer@example.com", department="Operations", first_name="Pat", last_name="Peer"),
            make_user(5, "gig@example.com", employment_type=EmploymentType.TEN99),
            make_user(6, "rep@example.com", department="Sales"),
        ]
    )
    reqs = FakePtoRequestsRepo(requests)
    reqs.departments = {"Operations": {1, 4}}
    policies = FakePtoPoliciesRepo([new_policy(1, allocation_for(EmploymentType.W2))])
    notifications = FakeNotificationsRepo()
    email_log = FakeEmailLog()
    svc = PtoService(
        reqs,
        policies,
        users,
        validator=PtoRequestValidator(reqs, users),
        balances=PtoBalanceService(policies, reqs),
        routing=ApprovalRouting.from_config(core=[{"email": "hr@example.com", "name": "HR"}]),
        notifications=NotificationService(notifications),
        outbox=EmailOutbox(email_log),
        enforce_routing=enforce_routing,
    )
    return svc, reqs, policies, notifications, email_log


def _create(svc, employee_id=1, start=date(2026, 3, 2), end=date(2026, 3, 6)):
    return svc.create_request(
        current_user_id=employee_id,
        current_role=Role.EMPLOYEE,
        start_date=start,
        end_date=end,
        reason="Family trip",
        today=TODAY,
    )


def test_create_request_counts_business_days_and_notifies_approvers():
    svc, reqs, _, notifications, _ = _setup()

    created = _create(svc)

    assert created.request.days == 5
    assert created.request.status == PtoStatus.PENDING
    assert created.notified_approvers == ("hr@example.com",)
    assert created.winter_warning.startswith("You have 5 winter PTO days remaining")
    assert [n.user_id for n in notifications.items] == [2]
    assert notifications.items[0].type == NotificationType.PTO_REQUEST


def test_create_request_rejects_past_start_date():
    svc, *_ = _setup()

    with pytest.raises(ValidationError):
        _create(svc, start=date(2026, 2, 27), end=date(2026, 3, 2))


@pytest.mark.parametrize("employee_id", [5, 6])
def test_create_request_rejects_ineligible_employees(employee_id):
    svc, *_ = _setup()

    with pytest.raises(ValidationError):
        _create(svc, employee_id=employee_id)


def test_create_request_rejects_own_overlap():
    svc, *_ = _setup()
    _create(svc)

    with pytest.raises(ConflictError) as exc:
        _create(svc, start=date(2026, 3, 5), end=date(2026, 3, 10))
    assert "pending PTO request" in str(exc.value)


def test_create_request_rejects_department_conflict():
    approved = PtoRequest(
        request_id=10,
        employee_id=4,
        start_date=date(2026, 3, 4),
        end_date=date(2026, 3, 5),
        days=2,
        pto_type=PtoType.VACATION,
        reason="x",
        status=PtoStatus.APPROVED,
    )
    svc, *_ = _setup(requests=[approved])

    with pytest.raises(ConflictError) as exc:
        _create(svc)
    assert "Department conflict: Pat Peer" in str(exc.value)


def test_weekend_only_request_is_rejected():
    svc, *_ = _setup()

    with pytest.raises(ValidationError):
        _create(svc, start=date(2026, 3, 7), end=date(2026, 3, 8))


def test_employee_cannot_file_for_someone_else():
    svc, *_ = _setup()

    with pytest.raises(AuthorizationError):
        svc.create_request(
            current_user_id=1,
            current_role=Role.EMPLOYEE,
            start_date=date(2026, 3, 2),
            end_date=date(2026, 3, 6),
            reason="x",
            employee_id=4,
            today=TODAY,
        )


@pytest.mark.parametrize("employee_id", ["abc", "-2", True, "12x"])
def test_manager_filing_rejects_malformed_employee_id(employee_id):
    svc, *_ = _setup()

    with pytest.raises(ValidationError, match="employeeId must be a positive integer"):
        svc.create_request(
            current_user_id=3,
            current_role=Role.MANAGER,
            start_date=date(2026, 3, 2),
            end_date=date(2026, 3, 6),
            reason="Covering leave",
            employee_id=employee_id,
            today=TODAY,
        )


def test_manager_can_file_with_string_employee_id():
    svc, *_ = _setup()

    created = svc.create_request(
        current_user_id=3,
        current_role=Role.MANAGER,
        start_date=date(2026, 3, 2),
        end_date=date(2026, 3, 6),
        reason="Covering leave",
        employee_id="1",
        today=TODAY,
    )

    assert created.request.employee_id == 1


def test_approve_then_deny_moves_balance_both_ways():
    svc, _, policies, notifications, email_log = _setup()
    rid = _create(svc).request.request_id

    svc.update_status(reviewer_id=2, reviewer_role=Role.HR_ADMIN, request_id=rid, status="approved", now=NOW)
    assert policies.get_for_employee(1).used_days == 5
    assert policies.get_for_employee(1).remaining_days == 12
    assert email_log.messages[-1].template == "pto_approved"
    assert notifications.items[-1].type == NotificationType.PTO_APPROVED

    svc.update_status(reviewer_id=2, reviewer_role=Role.HR_ADMIN, request_id=rid, status="DENIED", now=NOW)
    assert policies.get_for_employee(1).used_days == 0
    assert [c.reason.value for c in policies.changes] == ["APPROVED", "DENIED"]
    assert email_log.messages[-1].template == "pto_denied"
    assert email_log.sent[-1][1] == EmailStatus.QUEUED


def test_exempt_approval_does_not_touch_balance():
    svc, _, policies, *_ = _setup()
    rid = _create(svc).request.request_id

    updated = svc.update_status(
        reviewer_id=2, reviewer_role=Role.HR_ADMIN, request_id=rid, status="APPROVED", is_exempt=True, now=NOW
    )

    assert updated.is_exempt
    assert policies.get_for_employee(1).used_days == 0


def test_only_exempt_roles_can_mark_exempt():
    svc, *_ = _setup()
    rid = _create(svc).request.request_id

    with pytest.raises(AuthorizationError):
        svc.update_status(reviewer_id=3, reviewer_role=Role.MANAGER, request_id=rid, status="APPROVED", is_exempt=True)


def test_employees_cannot_review():
    svc, *_ = _setup()
    rid = _create(svc).request.request_id

    with pytest.raises(AuthorizationError):
        svc.update_status(reviewer_id=4, reviewer_role=Role.EMPLOYEE, request_id=rid, status="APPROVED")


def test_invalid_status_is_rejected():
    svc, *_ = _setup()
    rid = _create(svc).request.request_id

    with pytest.raises(ValidationError):
        svc.update_status(reviewer_id=2, reviewer_role=Role.HR_ADMIN, request_id=rid, status="MAYBE")


def test_routing_enforcement_blocks_unlisted_manager():
    svc, *_ = _setup(enforce_routing=True)
    rid = _create(svc).request.request_id

    with pytest.raises(AuthorizationError):
        svc.update_status(reviewer_id=3, reviewer_role=Role.MANAGER, request_id=rid, status="APPROVED", now=NOW)


def test_reminders_go_to_employee_and_managers():
    start = date(2026, 3, 9)
    request = PtoRequest(
        request_id=1,
        employee_id=1,
        start_date=start,
        end_date=date(2026, 3, 10),
        days=2,
        pto_type=PtoType.VACATION,
        reason="x",
        status=PtoStatus.APPROVED,
    )
    users = FakeUsersRepo(
        [
            make_user(1, "emp@example.com"),
            make_user(2, "hr@example.com", role=Role.HR_ADMIN),
            make_user(3, "gm@example.com", role=Role.GENERAL_MANAGER),
        ]
    )
    email_log = FakeEmailLog()
    notifications = FakeNotificationsRepo()
    svc = PtoReminderService(
        FakePtoRequestsRepo([request]),
        users,
        notifications=NotificationService(notifications),
        outbox=EmailOutbox(email_log),
    )

    counts = svc.send_reminders(today=date(2026, 3, 2))

    assert counts == {"sent_30_day": 0, "sent_7_day": 1, "sent_1_day": 0, "errors": 0}
    assert [m.to for m in email_log.messages] == ["emp@example.com", "hr@example.com", "gm@example.com"]
    assert email_log.messages[0].template == "pto_reminder_7"
    assert notifications.items[0].ref_key == "pto:1:7"


def test_second_reminder_run_same_day_sends_nothing():
    request = PtoRequest(
        request_id=1,
        employee_id=1,
        start_date=date(2026, 3, 9),
        end_date=date(2026, 3, 10),
        days=2,
        pto_type=PtoType.VACATION,
        reason="x",
        status=PtoStatus.APPROVED,
    )
    users = FakeUsersRepo([make_user(1, "emp@example.com"), make_user(2, "hr@example.com", role=Role.HR_ADMIN)])
    email_log = FakeEmailLog()
    notifications = FakeNotificationsRepo()
    run_at = datetime(2026, 3, 2, 21, 0)
    notifications.clock = run_at
    svc = PtoReminderService(
        FakePtoRequestsRepo([request]),
        users,
        notifications=NotificationService(notifications),
        outbox=EmailOutbox(email_log),
    )

    first = svc.send_reminders(now=run_at)
    second = svc.send_reminders(now=run_at.replace(hour=22))

    assert first["sent_7_day"] == 1
    assert second == {"sent_30_day": 0, "sent_7_day": 0, "sent_1_day": 0, "errors": 0}
    assert [m.to for m in email_log.messages] == ["emp@example.com", "hr@example.com"]
    assert len(notifications.items) == 1
