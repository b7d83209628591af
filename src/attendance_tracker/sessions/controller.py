from __future__ import annotations

from flask import Blueprint, Flask, jsonify

from ..common.gateway import build_auth_required, current_user
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container, *, url_prefix: str = "/api") -> None:
    bp = Blueprint("attendance_sessions", __name__, url_prefix=f"{url_prefix}/attendanceSession")
    auth_required = build_auth_required(container.auth_service)
    sessions = container.session_service

    @bp.route("/sessions", methods=["POST"], endpoint="create_session")
    @auth_required
    def create_session():
        data = json_body()
        session = sessions.create_session(current_user(), location=data.get("location"))
        return jsonify(session.to_dict()), 201

    @bp.route("/sessions", methods=["GET"], endpoint="list_sessions")
    @auth_required
    def list_sessions():
        rows = sessions.list_sessions(current_user().user_id)
        return jsonify([s.to_dict() for s in rows])

    @bp.route("/sessions/active", methods=["GET"], endpoint="list_active_sessions")
    @auth_required
    def list_active_sessions():
        rows = sessions.list_active(current_user().user_id)
        return jsonify({"count": len(rows), "sessions": [s.to_dict() for s in rows]})

    @bp.route("/sessions/<int:session_id>", methods=["PATCH"], endpoint="update_session")
    @auth_required
    def update_session(session_id: int):
        data = json_body()
        session = sessions.update_status(current_user().user_id, session_id, data.get("status"))
        return jsonify(session.to_dict())

    @bp.route("/sessions/<int:session_id>/attendance", methods=["GET"], endpoint="session_attendance")
    @auth_required
    def session_attendance(session_id: int):
        rows = container.attendance_service.list_for_session(current_user().user_id, session_id)
        return jsonify([r.to_dict() for r in rows])

    @bp.route("/sessions/<int:session_id>/qr", methods=["GET"], endpoint="session_qr")
    @auth_required
    def session_qr(session_id: int):
        payload = sessions.qr_payload(current_user().user_id, session_id)
        return jsonify(payload.to_dict())

    app.register_blueprint(bp)
