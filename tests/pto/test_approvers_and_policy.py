from __future__ import annotations

from src.hr_ops.hr_ops.core.enums import EmploymentType, PolicyLevel, Role
from src.hr_ops.hr_ops.pto.approvers import ApprovalRouting
from src.hr_ops.hr_ops.pto.policy import PtoPolicyService, allocation_for
from tests.fakes import FakePtoPoliciesRepo, FakeUsersRepo, make_user

ROUTING = ApprovalRouting.from_config(
    core=[{"email": "Owner@Example.com", "name": "Owner"}, {"email": "hr@example.com", "name": "HR"}],
    departments={"Operations": [{"email": "ops.lead@example.com", "name": "Ops Lead"}, {"email": "hr@example.com", "name": "HR"}]},
    special={"vip@example.com": ["owner@example.com"]},
)


def test_core_plus_department_approvers_without_duplicates():
    assert ROUTING.approvers_for("emp@example.com", "operations") == [
        "owner@example.com",
        "hr@example.com",
        "ops.lead@example.com",
    ]


def test_requester_never_approves_own_request():
    assert "hr@example.com" not in ROUTING.approvers_for("HR@example.com", "Operations")


def test_special_routing_wins():
    assert ROUTING.approvers_for("vip@example.com", "Operations") == ["owner@example.com"]
    assert not ROUTING.can_approve("hr@example.com", "vip@example.com")


def test_department_approver_flag_excludes_core():
    assert ROUTING.is_department_approver("ops.lead@example.com")
    assert not ROUTING.is_department_approver("hr@example.com")


def test_allocation_rules():
    assert allocation_for(EmploymentType.W2).total_days == 17
    assert allocation_for("1099").notes == "1099 contractor - no PTO"
    assert allocation_for(EmploymentType.CONTRACTOR).total_days == 0
    assert allocation_for(EmploymentType.W2, department="Sales").notes == "Sales role - no PTO"
    assert allocation_for(EmploymentType.W2, position="Senior Sales Rep").total_days == 0


def test_reset_all_creates_and_updates_policies():
    users = FakeUsersRepo(
        [
            make_user(1, "a@example.com"),
            make_user(2, "b@example.com", employment_type=EmploymentType.TEN99),
            make_user(3, "c@example.com", role=Role.SALES_REP),
        ]
    )
    policies = FakePtoPoliciesRepo()
    svc = PtoPolicyService(policies, users)

    assert svc.reset_all() == {"updated": 0, "created": 3}
    assert policies.get_for_employee(1).total_days == 17
    assert policies.get_for_employee(2).total_days == 0
    assert policies.get_for_employee(3).notes == "System Initialized"

    assert svc.reset_all() == {"updated": 3, "created": 0}
    assert policies.get_for_employee(1).notes == "System Reset"


def test_individual_policy_switches_level_and_keeps_usage():
    users = FakeUsersRepo([make_user(1, "a@example.com")])
    policies = FakePtoPoliciesRepo()
    svc = PtoPolicyService(policies, users)
    svc.reset_all()
    policies.update_usage(employee_id=1, used_days=4, remaining_days=13)

    policy = svc.update_individual_policy(1, additional_days=3)

    assert policy.policy_level == PolicyLevel.INDIVIDUAL
    assert policy.total_days == 20
    assert policy.remaining_days == 16
