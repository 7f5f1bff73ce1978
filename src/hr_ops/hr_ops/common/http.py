"""Helpers shared by the JSON controllers."""

from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import DomainError
from .log import get_logger

logger = get_logger(__name__)


def error_response(message: str, status: int, **extra: Any):
    payload = {"success": False, "error": message}
    payload.update(extra)
    return jsonify(payload), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        return error_response(str(exc), exc.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return error_response(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("Internal server error", 500)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def current_user_id() -> Optional[int]:
    value = session.get("user_id")
    return int(value) if value is not None else None


def current_role() -> Optional[Role]:
    value = session.get("role")
    try:
        return Role(value) if value else None
    except ValueError:
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {Role(r) for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Authentication required", 401)
            if current_role() not in allowed:
                return error_response("Insufficient permissions", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def module_required(flag: str):
    """Require a module access flag (e.g. ``has_hr_access``) stored in the session.

    System admins always pass.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Authentication required", 401)
            if current_role() != Role.SYSTEM_ADMIN and not session.get(flag):
                return error_response("Module access denied", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator
