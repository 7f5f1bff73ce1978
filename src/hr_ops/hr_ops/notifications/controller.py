from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def list_notifications():
        unread_only = request.args.get("unreadOnly", "").lower() in {"1", "true", "yes"}
        limit = request.args.get("limit", type=int) or 50
        return jsonify(
            container.notification_service.list_for_user(current_user_id(), unread_only=unread_only, limit=limit)
        )

    @app.route("/api/notifications/count", methods=["GET"], endpoint="notifications_count")
    @login_required
    def unread_count():
        return jsonify({"count": container.notification_service.unread_count(current_user_id())})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PATCH"], endpoint="notifications_read")
    @login_required
    def mark_read(notification_id: int):
        container.notification_service.mark_read(user_id=current_user_id(), notification_id=notification_id)
        return jsonify({"success": True})

    @app.route("/api/notifications/read-all", methods=["PATCH"], endpoint="notifications_read_all")
    @login_required
    def mark_all_read():
        updated = container.notification_service.mark_all_read(user_id=current_user_id())
        return jsonify({"success": True, "updated": updated})
