from __future__ import annotations

from flask import Blueprint, Flask, jsonify

from ..common.gateway import build_auth_required, current_user
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container, *, url_prefix: str = "/api") -> None:
    bp = Blueprint("attendance", __name__, url_prefix=f"{url_prefix}/attendance")
    auth_required = build_auth_required(container.auth_service)

    @bp.route("/mark", methods=["POST"], endpoint="mark")
    @auth_required
    def mark():
        """Body: ``{sessionId: <code>, location: {latitude, longitude}}``.

        A scanned ``qrPayload`` may be sent instead of ``sessionId``.
        """
        data = json_body()
        code = data.get("sessionId")
        if code is None and "qrPayload" in data:
            code = container.session_service.code_from_qr_payload(data["qrPayload"])

        container.attendance_service.mark_attendance(current_user().user_id, code, data.get("location"))
        return jsonify({"message": "Attendance marked successfully"}), 201

    @bp.route("/history", methods=["GET"], endpoint="history")
    @auth_required
    def history():
        rows = container.attendance_service.history(current_user().user_id)
        return jsonify([r.to_dict() for r in rows])

    app.register_blueprint(bp)
