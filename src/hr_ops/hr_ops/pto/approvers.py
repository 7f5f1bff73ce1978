from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..common.validators import normalize_email


@dataclass(frozen=True)
class Approver:
    email: str
    name: str
    role: Optional[str] = None


@dataclass(frozen=True)
class ApprovalRouting:
    """Who may approve whose PTO.

    Special routing wins outright. Otherwise every core approver plus the
    approvers of the employee's department, without duplicates and never the
    requester.
    """

    core: Tuple[Approver, ...]
    departments: Mapping[str, Tuple[Approver, ...]] = field(default_factory=dict)
    special: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_config(
        cls,
        *,
        core: Sequence[dict],
        departments: Optional[Mapping[str, Sequence[dict]]] = None,
        special: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> "ApprovalRouting":
        def _approver(raw: dict) -> Approver:
            return Approver(email=normalize_email(raw["email"]), name=str(raw.get("name") or ""), role=raw.get("role"))

        return cls(
            core=tuple(_approver(a) for a in core),
            departments={
                str(dept).strip().lower(): tuple(_approver(a) for a in approvers)
                for dept, approvers in (departments or {}).items()
            },
            special={
                normalize_email(email): tuple(normalize_email(a) for a in approvers)
                for email, approvers in (special or {}).items()
            },
        )

    @classmethod
    def from_module(cls, module: ModuleType) -> "ApprovalRouting":
        return cls.from_config(
            core=getattr(module, "CORE_APPROVERS", []),
            departments=getattr(module, "DEPARTMENT_APPROVERS", {}),
            special=getattr(module, "SPECIAL_ROUTING", {}),
        )

    def approvers_for(self, employee_email: str, department: Optional[str] = None) -> List[str]:
        requester = normalize_email(employee_email)
        if requester in self.special:
            return list(self.special[requester])

        emails = [a.email for a in self.core]
        if department:
            emails.extend(a.email for a in self.departments.get(department.strip().lower(), ()))

        seen: Dict[str, None] = {}
        for email in emails:
            if email != requester:
                seen.setdefault(email, None)
        return list(seen)

    def can_approve(self, approver_email: str, employee_email: str, department: Optional[str] = None) -> bool:
        return normalize_email(approver_email) in self.approvers_for(employee_email, department)

    def approver_by_email(self, email: str) -> Optional[Approver]:
        wanted = normalize_email(email)
        for approver in self.core:
            if approver.email == wanted:
                return approver
        for approvers in self.departments.values():
            for approver in approvers:
                if approver.email == wanted:
                    return approver
        return None

    def is_core_approver(self, email: str) -> bool:
        wanted = normalize_email(email)
        return any(a.email == wanted for a in self.core)

    def is_department_approver(self, email: str) -> bool:
        """True only for secondary (department) approvers that are not also core."""
        wanted = normalize_email(email)
        if self.is_core_approver(wanted):
            return False
        return any(a.email == wanted for approvers in self.departments.values() for a in approvers)
