from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_user_id, json_body, module_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/hr/candidates", methods=["GET"], endpoint="candidates_list")
    @module_required("has_hr_access")
    def list_candidates():
        items = container.recruiting_service.list_candidates(
            status=request.args.get("status"),
            limit=request.args.get("limit", default=200, type=int),
        )
        return jsonify([c.to_dict() for c in items])

    @app.route("/api/hr/candidates", methods=["POST"], endpoint="candidates_create")
    @module_required("has_hr_access")
    def create_candidate():
        candidate = container.recruiting_service.create_candidate(json_body(), created_by=current_user_id())
        return jsonify(candidate.to_dict()), 201

    @app.route("/api/hr/candidates/<int:candidate_id>", methods=["GET"], endpoint="candidates_get")
    @module_required("has_hr_access")
    def get_candidate(candidate_id: int):
        return jsonify(container.recruiting_service.get_candidate(candidate_id).to_dict())

    @app.route("/api/hr/candidates/<int:candidate_id>/status", methods=["PATCH"], endpoint="candidates_status")
    @module_required("has_hr_access")
    def change_status(candidate_id: int):
        data = json_body()
        result = container.recruiting_service.change_status(
            candidate_id,
            data.get("status"),
            reason=data.get("reason") or None,
            interview_id=data.get("interviewId"),
            changed_by=current_user_id(),
        )
        return jsonify(result)

    @app.route("/api/hr/candidates/<int:candidate_id>/hire", methods=["POST"], endpoint="candidates_hire")
    @module_required("has_hr_access")
    def hire(candidate_id: int):
        result = container.recruiting_service.hire(candidate_id, json_body(), hired_by=current_user_id())
        body = result.to_dict()
        if not result.success:
            body["error"] = "; ".join(result.errors) or "Hire automation failed"
            return jsonify(body), 500
        body["message"] = "Candidate hired successfully"
        return jsonify(body)

    @app.route("/api/hr/interviews/<int:interview_id>/complete", methods=["POST"], endpoint="interviews_complete")
    @module_required("has_hr_access")
    def complete_interview(interview_id: int):
        container.recruiting_service.complete_interview(interview_id, completed_by=current_user_id())
        return jsonify({"success": True})
