from __future__ import annotations

from flask import Flask, jsonify, session

from ..app_logger import get_logger
from ..common.web import SESSION_KEY, fail, json_body
from ..core.exceptions import AuthenticationError
from ..container import Container

logger = get_logger("auth.controller")


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        try:
            container.auth_service.authenticate(str(data.get("password", "")))
        except AuthenticationError as e:
            logger.info("operator login rejected")
            return fail(str(e), 401)

        session.clear()
        session[SESSION_KEY] = True
        session.permanent = bool(data.get("remember"))
        return jsonify({"success": True, "message": "Login berhasil", "schoolName": container.settings_store.school_name})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Anda telah keluar."})
