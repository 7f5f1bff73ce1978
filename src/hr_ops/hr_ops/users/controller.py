from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import current_user_id, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(
            str(data.get("email") or data.get("username") or ""),
            str(data.get("password") or ""),
        )
        session.clear()
        session.update(user.to_session())
        return jsonify({"success": True, "user": user.to_session(), "mustChangePassword": user.must_change_password})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        user = container.users_repo.get_by_id(current_user_id())
        if not user or not user.is_active:
            session.clear()
            return jsonify({"success": False, "error": "Authentication required"}), 401
        return jsonify(
            {
                "id": user.user_id,
                "email": user.email,
                "firstName": user.first_name,
                "lastName": user.last_name,
                "role": user.role.value,
                "department": user.department,
                "position": user.position,
                "employmentType": user.employment_type.value,
                "mustChangePassword": user.must_change_password,
            }
        )
