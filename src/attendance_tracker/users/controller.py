from __future__ import annotations

from flask import Blueprint, Flask, jsonify

from ..common.gateway import build_auth_required, current_user
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container, *, url_prefix: str = "/api") -> None:
    bp = Blueprint("auth", __name__, url_prefix=f"{url_prefix}/auth")
    auth_required = build_auth_required(container.auth_service)

    @bp.route("/register", methods=["POST"], endpoint="register")
    def register_user():
        data = json_body()
        container.auth_service.register(
            data.get("username"),
            data.get("password"),
            data.get("role"),
            email=data.get("email"),
        )
        return jsonify({"message": "User registered successfully"}), 201

    @bp.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        result = container.auth_service.login(data.get("username"), data.get("password"))
        return jsonify(result.to_dict()), 200

    @bp.route("/validate", methods=["GET"], endpoint="validate")
    @auth_required
    def validate():
        user = current_user()
        return jsonify(
            {
                "userId": user.user_id,
                "username": user.username,
                "role": user.role.value,
                "message": "Token is valid",
            }
        )

    app.register_blueprint(bp)
