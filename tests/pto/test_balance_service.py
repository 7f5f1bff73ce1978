from __future__ import annotations

from dataclasses import replace
from datetime import date

from src.hr_ops.hr_ops.core.enums import BalanceChangeReason, EmploymentType, PtoStatus, PtoType
from src.hr_ops.hr_ops.pto.balance import PtoBalanceService
from src.hr_ops.hr_ops.pto.model import PtoRequest
from src.hr_ops.hr_ops.pto.policy import allocation_for, new_policy
from tests.fakes import FakePtoPoliciesRepo, FakePtoRequestsRepo


def _request(rid, start, days, *, status=PtoStatus.APPROVED, pto_type=PtoType.VACATION, is_exempt=False):
    return PtoRequest(
        request_id=rid,
        employee_id=1,
        start_date=start,
        end_date=start,
        days=days,
        pto_type=pto_type,
        reason="r",
        status=status,
        is_exempt=is_exempt,
    )


def _service(requests=(), policies=None):
    if policies is None:
        policies = [new_policy(1, allocation_for(EmploymentType.W2))]
    policies_repo = FakePtoPoliciesRepo(policies)
    return PtoBalanceService(policies_repo, FakePtoRequestsRepo(requests)), policies_repo


def test_deduct_auto_creates_policy_on_first_use():
    svc, repo = _service(policies=[])

    change = svc.deduct(employee_id=1, days=3, request_id=7)

    assert repo.policies[1].used_days == 3
    assert repo.policies[1].remaining_days == 14
    assert change.previous_used == 0.0 and change.change_amount == -3.0
    assert repo.changes == [change]


def test_exempt_and_zero_day_requests_do_not_touch_balance():
    svc, repo = _service()

    assert svc.deduct(employee_id=1, days=2, request_id=1, is_exempt=True) is None
    assert svc.deduct(employee_id=1, days=0, request_id=2) is None
    assert repo.policies[1].used_days == 0
    assert repo.changes == []


def test_transitions_restore_with_matching_reason():
    svc, repo = _service()
    pending = _request(1, date(2026, 3, 2), 2, status=PtoStatus.PENDING)
    approved = replace(pending, status=PtoStatus.APPROVED)

    svc.apply_transition(pending, approved)
    assert repo.policies[1].used_days == 2

    denied = svc.apply_transition(approved, replace(approved, status=PtoStatus.DENIED))
    assert denied.reason == BalanceChangeReason.DENIED
    assert repo.policies[1].used_days == 0

    svc.apply_transition(pending, approved)
    cancelled = svc.apply_transition(approved, replace(approved, status=PtoStatus.PENDING))
    assert cancelled.reason == BalanceChangeReason.CANCELLED


def test_marking_approved_request_exempt_gives_days_back():
    svc, repo = _service()
    approved = _request(1, date(2026, 3, 2), 3)
    svc.deduct(employee_id=1, days=3, request_id=1)

    svc.apply_transition(approved, replace(approved, is_exempt=True))

    assert repo.policies[1].used_days == 0
    assert repo.policies[1].remaining_days == 17


def test_recalculate_counts_only_approved_non_exempt_in_year():
    requests = [
        _request(1, date(2026, 2, 2), 2),
        _request(2, date(2026, 5, 4), 1.5, pto_type=PtoType.SICK),
        _request(3, date(2026, 6, 1), 4, is_exempt=True),
        _request(4, date(2025, 12, 29), 3),
        _request(5, date(2026, 7, 6), 5, status=PtoStatus.PENDING),
    ]
    svc, repo = _service(requests)

    policy = svc.recalculate(1, 2026)

    assert policy.used_days == 3.5
    assert policy.remaining_days == 13.5
    assert repo.policies[1].used_days == 3.5
    assert svc.recalculate(99, 2026) is None

    typed = {b.pto_type: b for b in svc.typed_balance(1, 2026)}
    assert typed[PtoType.VACATION].used == 2
    assert typed[PtoType.VACATION].remaining == 8
    assert typed[PtoType.SICK].used == 1.5
    assert typed[PtoType.PERSONAL].allowed == 2
