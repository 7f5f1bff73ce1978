from __future__ import annotations

import hmac
from functools import wraps

from flask import Flask, current_app, jsonify, request

from ..common.http import error_response
from ..container import Container
from .registry import INTERVIEW_REMINDERS, ONBOARDING_REMINDERS


def cron_secret_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("CRON_SECRET") or ""
        provided = request.headers.get("X-Cron-Secret", "")
        if not expected or not hmac.compare_digest(provided, expected):
            return error_response("Invalid cron secret", 401)
        return view(*args, **kwargs)

    return wrapper


def register(app: Flask, container: Container) -> None:
    def _run(name: str):
        job = container.jobs.get(name)
        if job is None:
            return error_response(f"Unknown job: {name}", 404)
        outcome = job.run()
        if outcome.skipped:
            return jsonify({"success": False, "job": name, "skipped": True, "message": "Job already running"}), 409
        if outcome.error is not None:
            return error_response(f"Job {name} failed: {outcome.error}", 500, job=name)
        return jsonify({"success": True, "job": name, "result": outcome.result})

    @app.route("/api/cron/interview-reminders", methods=["GET"], endpoint="cron_interview_reminders")
    @cron_secret_required
    def interview_reminders():
        return _run(INTERVIEW_REMINDERS)

    @app.route("/api/cron/onboarding-reminders", methods=["GET"], endpoint="cron_onboarding_reminders")
    @cron_secret_required
    def onboarding_reminders():
        return _run(ONBOARDING_REMINDERS)

    @app.route("/api/cron/run/<job_name>", methods=["POST"], endpoint="cron_run")
    @cron_secret_required
    def run_job(job_name: str):
        return _run(job_name)

    @app.route("/api/cron/health", methods=["GET"], endpoint="cron_health")
    @cron_secret_required
    def health():
        return jsonify({"success": True, "jobs": [job.status() for job in container.jobs.values()]})
