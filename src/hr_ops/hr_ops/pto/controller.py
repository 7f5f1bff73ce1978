from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, require_iso_date
from ..common.http import current_role, current_user_id, json_body, login_required, roles_required
from ..core.constants import EXEMPT_ROLES, HR_ROLES, MANAGER_ROLES
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import Holiday
from .service import parse_type


def _request_payload(req) -> dict:
    payload = req.to_dict()
    payload["status"] = req.status.value.lower()
    return payload


def _year_arg() -> int:
    return request.args.get("year", type=int) or now_local().year


def _own_or_manager(employee_id: int) -> int:
    if employee_id != current_user_id() and current_role() not in MANAGER_ROLES:
        raise AuthorizationError("Insufficient permissions")
    return employee_id


def _number(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def register(app: Flask, container: Container) -> None:
    # -------- requests --------
    @app.route("/api/hr/pto", methods=["GET"], endpoint="pto_list")
    @login_required
    def list_requests():
        items = container.pto_service.list_requests(
            current_user_id=current_user_id(),
            current_role=current_role(),
            status=request.args.get("status"),
            employee_id=request.args.get("employeeId", type=int),
        )
        return jsonify([_request_payload(r) for r in items])

    @app.route("/api/hr/pto", methods=["POST"], endpoint="pto_create")
    @login_required
    def create_request():
        data = json_body()
        if not data.get("startDate") or not data.get("endDate") or not data.get("reason"):
            raise ValidationError("startDate, endDate and reason are required")
        created = container.pto_service.create_request(
            current_user_id=current_user_id(),
            current_role=current_role(),
            start_date=require_iso_date(data.get("startDate"), "startDate"),
            end_date=require_iso_date(data.get("endDate"), "endDate"),
            reason=str(data.get("reason") or ""),
            pto_type=parse_type(data.get("type")),
            employee_id=data.get("employeeId"),
        )
        body = _request_payload(created.request)
        body["winterWarning"] = created.winter_warning
        return jsonify(body), 201

    @app.route("/api/hr/pto/<int:request_id>", methods=["PATCH"], endpoint="pto_update_status")
    @roles_required(*MANAGER_ROLES)
    def update_status(request_id: int):
        data = json_body()
        is_exempt = data.get("isExempt")
        updated = container.pto_service.update_status(
            reviewer_id=current_user_id(),
            reviewer_role=current_role(),
            request_id=request_id,
            status=str(data.get("status") or ""),
            is_exempt=None if is_exempt is None else bool(is_exempt),
            review_notes=data.get("reviewNotes"),
        )
        return jsonify({"success": True, "request": _request_payload(updated)})

    @app.route("/api/hr/pto/approvers/<int:employee_id>", methods=["GET"], endpoint="pto_approvers")
    @login_required
    def approvers(employee_id: int):
        emails = container.pto_service.approver_emails(_own_or_manager(employee_id))
        return jsonify({"approvers": emails})

    @app.route("/api/hr/pto/winter-status", methods=["GET"], endpoint="pto_winter_status")
    @login_required
    def winter_status():
        employee_id = _own_or_manager(request.args.get("employeeId", type=int) or current_user_id())
        return jsonify(container.pto_service.winter_status(employee_id, year=_year_arg()).to_dict())

    @app.route("/api/hr/pto/balance", methods=["GET"], endpoint="pto_balance")
    @login_required
    def balance():
        employee_id = _own_or_manager(request.args.get("employeeId", type=int) or current_user_id())
        return jsonify(container.pto_service.balance(employee_id, year=_year_arg()))

    @app.route("/api/hr/pto/balance/<int:employee_id>/recalculate", methods=["POST"], endpoint="pto_recalculate")
    @roles_required(*HR_ROLES)
    def recalculate(employee_id: int):
        policy = container.pto_balance_service.recalculate(employee_id, _year_arg())
        return jsonify({"success": policy is not None, "policy": policy.to_dict() if policy else None})

    # -------- policies --------
    @app.route("/api/hr/pto-policies/company-policy", methods=["GET"], endpoint="pto_company_policy")
    @login_required
    def company_policy():
        return jsonify(container.pto_policy_service.company_policy().to_dict())

    @app.route("/api/hr/pto-policies/company-policy", methods=["PUT"], endpoint="pto_company_policy_update")
    @roles_required(*EXEMPT_ROLES)
    def update_company_policy():
        data = json_body()
        holidays = None
        if data.get("holidaySchedule") is not None:
            holidays = [
                Holiday(day=require_iso_date(h.get("date"), "holidaySchedule.date"), name=str(h.get("name") or ""))
                for h in data["holidaySchedule"]
                if isinstance(h, dict)
            ]
        policy = container.pto_policy_service.update_company_policy(
            vacation_days=_number(data, "vacationDays"),
            sick_days=_number(data, "sickDays"),
            personal_days=_number(data, "personalDays"),
            holidays=holidays,
            notes=data.get("notes"),
            updated_by=current_user_id(),
        )
        return jsonify(policy.to_dict())

    @app.route("/api/hr/pto-policies/individual-policies", methods=["GET"], endpoint="pto_individual_policies")
    @roles_required(*MANAGER_ROLES)
    def individual_policies():
        return jsonify([p.to_dict() for p in container.pto_policy_service.list_policies()])

    @app.route("/api/hr/pto-policies/employee/<int:employee_id>", methods=["GET"], endpoint="pto_employee_policy")
    @login_required
    def employee_policy(employee_id: int):
        return jsonify(container.pto_policy_service.employee_policy(_own_or_manager(employee_id)).to_dict())

    @app.route(
        "/api/hr/pto-policies/individual-policies/<int:employee_id>",
        methods=["PUT"],
        endpoint="pto_individual_policy_update",
    )
    @roles_required(*HR_ROLES)
    def update_individual_policy(employee_id: int):
        data = json_body()
        policy = container.pto_policy_service.update_individual_policy(
            employee_id,
            vacation_days=_number(data, "vacationDays"),
            sick_days=_number(data, "sickDays"),
            personal_days=_number(data, "personalDays"),
            additional_days=_number(data, "additionalDays"),
            notes=data.get("notes"),
        )
        return jsonify(policy.to_dict())

    @app.route("/api/hr/pto-policies/admin/reset-all", methods=["POST"], endpoint="pto_reset_all")
    @roles_required(*HR_ROLES)
    def reset_all():
        results = container.pto_policy_service.reset_all()
        return jsonify(
            {
                "success": True,
                "message": f"Reset complete: {results['updated']} updated, {results['created']} created",
                "results": results,
            }
        )

    # -------- analytics --------
    @app.route("/api/hr/pto-analytics/overview", methods=["GET"], endpoint="pto_analytics_overview")
    @roles_required(*MANAGER_ROLES)
    def analytics_overview():
        return jsonify(container.pto_service.analytics_overview(year=_year_arg()))

    @app.route("/api/hr/pto-analytics/usage-by-employee", methods=["GET"], endpoint="pto_analytics_usage")
    @roles_required(*MANAGER_ROLES)
    def usage_by_employee():
        return jsonify(container.pto_service.usage_by_employee(year=_year_arg()))
