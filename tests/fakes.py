"""In-memory repositories shared by the service tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta

from src.hr_ops.hr_ops.common.datetime_utils import ranges_overlap
from src.hr_ops.hr_ops.core.enums import (
    CandidateStatus,
    EmploymentType,
    ExecutionStatus,
    InterviewStatus,
    PtoStatus,
    RequirementStatus,
    Role,
    TaskStatus,
)
from src.hr_ops.hr_ops.notifications.model import Notification
from src.hr_ops.hr_ops.onboarding.model import OnboardingRequirement, OnboardingTask
from src.hr_ops.hr_ops.pto.model import PtoRequest
from src.hr_ops.hr_ops.recruiting.model import Candidate, Interview
from src.hr_ops.hr_ops.users.model import User
from src.hr_ops.hr_ops.workflows.model import StepExecution, WorkflowExecution


def make_user(user_id, email, *, role=Role.EMPLOYEE, department=None, employment_type=EmploymentType.W2, **kwargs):
    return User(
        user_id=user_id,
        email=email,
        username=email.split("@")[0],
        password_hash="x",
        first_name=kwargs.pop("first_name", email.split("@")[0].capitalize()),
        last_name=kwargs.pop("last_name", "Doe"),
        role=role,
        employment_type=employment_type,
        department=department,
        **kwargs,
    )


class FakeUsersRepo:
    def __init__(self, users=()):
        self._users = {u.user_id: u for u in users}
        self._next_id = max(self._users, default=0) + 1

    def get_by_id(self, user_id):
        return self._users.get(int(user_id)) if user_id is not None else None

    def get_by_email(self, email):
        return next((u for u in self._users.values() if u.email == email), None)

    def get_by_username(self, username):
        return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, new_user):
        uid = self._next_id
        self._next_id += 1
        self._users[uid] = User(user_id=uid, is_active=True, **new_user.__dict__)
        return uid

    def list_active(self, *, roles=None):
        wanted = set(roles) if roles else None
        return [u for u in self._users.values() if u.is_active and (wanted is None or u.role in wanted)]

    def list_active_by_emails(self, emails):
        wanted = set(emails)
        return [u for u in self._users.values() if u.is_active and u.email in wanted]

    def list_hr_admins(self):
        return [u for u in self._users.values() if u.is_active and u.has_hr_access]


class FakePtoRequestsRepo:
    def __init__(self, requests=()):
        self.items = {r.request_id: r for r in requests}
        self._next_id = max(self.items, default=0) + 1

    def create(self, *, employee_id, start_date, end_date, days, pto_type, reason):
        rid = self._next_id
        self._next_id += 1
        self.items[rid] = PtoRequest(
            request_id=rid,
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            days=days,
            pto_type=pto_type,
            reason=reason,
            status=PtoStatus.PENDING,
        )
        return rid

    def get_by_id(self, request_id):
        return self.items.get(int(request_id))

    def update_review(self, *, request_id, status, is_exempt, reviewed_by, reviewed_at, review_notes):
        req = self.items[int(request_id)]
        self.items[req.request_id] = replace(
            req,
            status=status,
            is_exempt=is_exempt,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_notes=review_notes,
        )
        return True

    def list_requests(self, *, employee_id=None, status=None, limit=200):
        return [
            r
            for r in self.items.values()
            if (employee_id is None or r.employee_id == employee_id) and (status is None or r.status == status)
        ][:limit]

    def list_for_employee(self, employee_id, *, statuses=None):
        wanted = set(statuses) if statuses else None
        return [r for r in self.items.values() if r.employee_id == employee_id and (wanted is None or r.status in wanted)]

    def find_overlapping(self, *, employee_id, start_date, end_date, statuses):
        return [
            r
            for r in self.list_for_employee(employee_id, statuses=statuses)
            if ranges_overlap(r.start_date, r.end_date, start_date, end_date)
        ]

    def find_department_overlaps(self, *, department, exclude_employee_id, start_date, end_date, statuses):
        # tests register department membership explicitly
        members = getattr(self, "departments", {}).get(department, set())
        return [
            r
            for r in self.items.values()
            if r.employee_id in members
            and r.employee_id != exclude_employee_id
            and r.status in set(statuses)
            and ranges_overlap(r.start_date, r.end_date, start_date, end_date)
        ]

    def list_starting_on(self, day, *, status):
        return [r for r in self.items.values() if r.start_date == day and r.status == status]

    def list_starting_in_year(self, year):
        return [r for r in self.items.values() if r.start_date.year == year]


class FakePtoPoliciesRepo:
    def __init__(self, policies=(), company=None):
        self.policies = {p.employee_id: p for p in policies}
        self.company = company
        self.changes = []

    def get_company_policy(self):
        return self.company

    def save_company_policy(self, policy, *, updated_by):
        self.company = policy

    def get_for_employee(self, employee_id):
        return self.policies.get(int(employee_id))

    def list_policies(self, *, level=None):
        return [p for p in self.policies.values() if level is None or p.policy_level == level]

    def create(self, policy):
        self.policies[policy.employee_id] = policy

    def save(self, policy):
        self.policies[policy.employee_id] = policy
        return True

    def update_usage(self, *, employee_id, used_days, remaining_days):
        policy = self.policies[int(employee_id)]
        self.policies[policy.employee_id] = replace(policy, used_days=used_days, remaining_days=remaining_days)
        return True

    def log_balance_change(self, change):
        self.changes.append(change)


class FakeNotificationsRepo:
    def __init__(self):
        self.items = []

    def create(self, *, user_id, type, title, message, link=None, ref_key=None):
        nid = len(self.items) + 1
        self.items.append(
            Notification(
                notification_id=nid,
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                link=link,
                ref_key=ref_key,
                created_at=getattr(self, "clock", datetime(2026, 1, 1, 9, 0)),
            )
        )
        return nid

    def list_for_user(self, user_id, *, unread_only=False, limit=50):
        items = [n for n in reversed(self.items) if n.user_id == user_id and (not unread_only or not n.is_read)]
        return items[:limit]

    def unread_count(self, user_id):
        return sum(1 for n in self.items if n.user_id == user_id and not n.is_read)

    def mark_read(self, *, notification_id, user_id, read_at):
        for i, n in enumerate(self.items):
            if n.notification_id == notification_id and n.user_id == user_id:
                self.items[i] = replace(n, is_read=True, read_at=read_at)
                return True
        return False

    def mark_all_read(self, *, user_id, read_at):
        count = 0
        for i, n in enumerate(self.items):
            if n.user_id == user_id and not n.is_read:
                self.items[i] = replace(n, is_read=True, read_at=read_at)
                count += 1
        return count

    def exists_since(self, *, type, ref_key, since, user_id=None):
        return any(
            n.type == type
            and n.ref_key == ref_key
            and n.created_at >= since
            and (user_id is None or n.user_id == user_id)
            for n in self.items
        )


class FakeEmailLog:
    def __init__(self):
        self.sent = []

    def record(self, message, *, status, error=None):
        self.sent.append((message, status))
        return len(self.sent)

    @property
    def messages(self):
        return [m for m, _ in self.sent]


class FakeTasksRepo:
    def __init__(self, tasks=()):
        self.items = {t.task_id: t for t in tasks}
        self.fail = False

    def create_many(self, employee_id, tasks):
        if self.fail:
            raise RuntimeError("tasks table unavailable")
        for t in tasks:
            tid = len(self.items) + 1
            self.items[tid] = OnboardingTask(
                task_id=tid,
                employee_id=employee_id,
                task_name=t.task_name,
                description=t.description,
                category=t.category,
                due_date=t.due_date,
                status=TaskStatus.PENDING,
            )
        return len(tasks)

    def get_by_id(self, task_id):
        return self.items.get(int(task_id))

    def list_for_employee(self, employee_id):
        return [t for t in self.items.values() if t.employee_id == employee_id]

    def list_pending_due_before(self, day):
        return [t for t in self.items.values() if t.status == TaskStatus.PENDING and t.due_date and t.due_date < day]

    def list_pending_due_on_or_before(self, day):
        return [t for t in self.items.values() if t.status == TaskStatus.PENDING and t.due_date and t.due_date <= day]

    def update_status(self, task_id, *, status, completed_at):
        task = self.items.get(int(task_id))
        if not task:
            return False
        self.items[task.task_id] = replace(task, status=status, completed_at=completed_at)
        return True


class FakeRequirementsRepo:
    def __init__(self):
        self.items = {}

    def create_many(self, employee_id, templates, *, start):
        for tpl in templates:
            rid = len(self.items) + 1
            self.items[rid] = OnboardingRequirement(
                requirement_id=rid,
                employee_id=employee_id,
                employee_type=tpl.employee_type,
                title=tpl.name,
                description=tpl.description,
                category=tpl.category,
                is_required=tpl.is_required,
                status=RequirementStatus.PENDING,
                due_date=start + timedelta(days=tpl.days_until_due),
            )
        return len(templates)

    def list_for_employee(self, employee_id):
        return [r for r in self.items.values() if r.employee_id == employee_id]

    def update_status(self, requirement_id, *, status, changed_at):
        req = self.items.get(int(requirement_id))
        if not req:
            return False
        self.items[req.requirement_id] = replace(req, status=status)
        return True


class FakeEquipmentTokens:
    def __init__(self):
        self.items = []

    def create(self, token):
        self.items.append(token)
        return len(self.items)


class FakeWelcomePackages:
    def __init__(self):
        self.assigned = []

    def assign(self, *, user_id, package_id):
        self.assigned.append((user_id, package_id))
        return len(self.assigned)


class FakeCandidatesRepo:
    def __init__(self, candidates=()):
        self.items = {c.candidate_id: c for c in candidates}

    def create(self, candidate):
        cid = max(self.items, default=0) + 1
        self.items[cid] = Candidate(candidate_id=cid, **candidate.__dict__)
        return cid

    def get_by_id(self, candidate_id):
        return self.items.get(int(candidate_id))

    def list_candidates(self, *, status=None, limit=200):
        return [c for c in self.items.values() if status is None or c.status == status][:limit]

    def update_status(self, candidate_id, status):
        self.items[candidate_id] = replace(self.items[candidate_id], status=status)
        return True

    def update_tags(self, candidate_id, tags):
        self.items[candidate_id] = replace(self.items[candidate_id], tags=tuple(tags))
        return True

    def assign(self, candidate_id, user_id):
        self.items[candidate_id] = replace(self.items[candidate_id], assigned_to=user_id)
        return True


class FakeInterviewsRepo:
    def __init__(self, interviews=()):
        self.items = {i.interview_id: i for i in interviews}

    def get_by_id(self, interview_id):
        return self.items.get(int(interview_id))

    def list_scheduled_before(self, moment):
        return [i for i in self.items.values() if i.status == InterviewStatus.SCHEDULED and i.scheduled_at < moment]

    def list_scheduled_between(self, start, end):
        return [
            i for i in self.items.values() if i.status == InterviewStatus.SCHEDULED and start <= i.scheduled_at < end
        ]

    def update_status(self, interview_id, status, *, notes=None):
        interview = self.items[interview_id]
        self.items[interview_id] = replace(interview, status=status, notes=notes if notes is not None else interview.notes)
        return True


class FakeNotesRepo:
    def __init__(self):
        self.items = []

    def create(self, note):
        self.items.append(note)
        return len(self.items)

    def list_for_candidate(self, candidate_id):
        return [n for n in self.items if n.candidate_id == candidate_id]


class FakeWorkflowsRepo:
    def __init__(self, workflows=(), steps=()):
        self.workflows = {w.workflow_id: w for w in workflows}
        self.steps = list(steps)

    def get_by_id(self, workflow_id):
        return self.workflows.get(int(workflow_id))

    def list_active(self, trigger):
        return [w for w in self.workflows.values() if w.is_active and w.trigger_type == trigger]

    def list_steps(self, workflow_id):
        return sorted((s for s in self.steps if s.workflow_id == workflow_id), key=lambda s: s.step_order)


class FakeExecutionsRepo:
    def __init__(self):
        self.executions = {}
        self.step_executions = {}

    def create_execution(self, *, workflow_id, candidate_id, context, started_at):
        eid = len(self.executions) + 1
        self.executions[eid] = WorkflowExecution(
            execution_id=eid,
            workflow_id=workflow_id,
            candidate_id=candidate_id,
            status=ExecutionStatus.RUNNING,
            context=dict(context),
            started_at=started_at,
        )
        return eid

    def get_execution(self, execution_id):
        return self.executions.get(int(execution_id))

    def update_execution(self, execution_id, *, status, context=None, error=None, completed_at=None):
        current = self.executions[execution_id]
        self.executions[execution_id] = replace(
            current,
            status=status,
            context=dict(context) if context is not None else current.context,
            error=error,
            completed_at=completed_at,
        )

    def create_step_execution(self, *, execution_id, step_id, status, started_at=None, scheduled_for=None):
        sid = len(self.step_executions) + 1
        self.step_executions[sid] = {
            "execution": StepExecution(sid, execution_id, step_id, status, scheduled_for),
            "result": None,
            "error": None,
        }
        return sid

    def start_step_execution(self, step_execution_id, *, started_at):
        row = self.step_executions[step_execution_id]
        row["execution"] = replace(row["execution"], status=ExecutionStatus.RUNNING)

    def finish_step_execution(self, step_execution_id, *, status, completed_at, result=None, error=None):
        row = self.step_executions[step_execution_id]
        row["execution"] = replace(row["execution"], status=status)
        row["result"] = result
        row["error"] = error

    def list_due_step_executions(self, now):
        return [
            row["execution"]
            for row in self.step_executions.values()
            if row["execution"].status == ExecutionStatus.PENDING
            and row["execution"].scheduled_for is not None
            and row["execution"].scheduled_for <= now
        ]

    def statuses(self):
        return [row["execution"].status for row in self.step_executions.values()]


class FakeHrTasksRepo:
    def __init__(self):
        self.items = []

    def create(self, task):
        self.items.append(task)
        return len(self.items)
