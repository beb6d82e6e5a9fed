from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import json_body, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        result = auth.login(str(data.get("username", "")), str(data.get("password", "")))
        return jsonify({"success": True, "user": result.user.public_view(), "token": result.token}), 200

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @token_required(auth)
    def api_me():
        claims = g.claims
        return jsonify(
            {
                "success": True,
                "user_id": claims.user_id,
                "role": claims.role.value,
                "username": claims.username,
                "expires_at": claims.expires_at_ms,
            }
        ), 200
