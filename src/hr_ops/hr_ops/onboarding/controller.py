from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import require_iso_date, today_local
from ..common.http import current_role, current_user_id, json_body, login_required, roles_required
from ..core.constants import HR_ROLES, MANAGER_ROLES
from ..core.enums import EmploymentType, RequirementStatus, TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container


def _check_access(employee_id: int) -> None:
    if employee_id != current_user_id() and current_role() not in MANAGER_ROLES:
        raise AuthorizationError("Insufficient permissions")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/hr/onboarding/tasks", methods=["GET"], endpoint="onboarding_tasks")
    @login_required
    def list_tasks():
        employee_id = request.args.get("employeeId", type=int) or current_user_id()
        _check_access(employee_id)
        return jsonify([t.to_dict() for t in container.onboarding_service.list_tasks(employee_id)])

    @app.route("/api/hr/onboarding/tasks/<int:task_id>", methods=["PATCH"], endpoint="onboarding_task_update")
    @login_required
    def update_task(task_id: int):
        task = container.onboarding_service.get_task(task_id)
        _check_access(task.employee_id)
        try:
            status = TaskStatus(str(json_body().get("status") or ""))
        except ValueError:
            raise ValidationError("Invalid task status")
        return jsonify(container.onboarding_service.set_task_status(task_id, status).to_dict())

    @app.route(
        "/api/hr/onboarding/requirements/<int:employee_id>", methods=["GET"], endpoint="onboarding_requirements"
    )
    @login_required
    def requirements(employee_id: int):
        _check_access(employee_id)
        return jsonify(container.onboarding_service.requirements_overview(employee_id, today=today_local()))

    @app.route(
        "/api/hr/onboarding/requirements/<int:employee_id>",
        methods=["POST"],
        endpoint="onboarding_requirements_create",
    )
    @roles_required(*HR_ROLES)
    def create_requirements(employee_id: int):
        employee = container.users_repo.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        data = json_body()
        start = require_iso_date(data["startDate"], "startDate") if data.get("startDate") else today_local()
        created = container.onboarding_service.create_requirements(
            employee_id, EmploymentType(employee.employment_type), start=start
        )
        return jsonify({"success": True, "created": created}), 201

    @app.route(
        "/api/hr/onboarding/requirements/item/<int:requirement_id>",
        methods=["PATCH"],
        endpoint="onboarding_requirement_update",
    )
    @roles_required(*HR_ROLES)
    def update_requirement(requirement_id: int):
        try:
            status = RequirementStatus(str(json_body().get("status") or ""))
        except ValueError:
            raise ValidationError("Invalid requirement status")
        container.onboarding_service.set_requirement_status(requirement_id, status)
        return jsonify({"success": True})
