from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, module_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/hr/workflows/<int:workflow_id>/execute", methods=["POST"], endpoint="workflows_execute")
    @module_required("has_hr_access")
    def execute(workflow_id: int):
        data = json_body()
        context = dict(data.get("context") or {})
        if data.get("candidateId"):
            candidate = container.recruiting_service.get_candidate(int(data["candidateId"]))
            context.update(candidateId=candidate.candidate_id, candidate=candidate.as_context())
        return jsonify(container.workflow_executor.execute(workflow_id, context))
