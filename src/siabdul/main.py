from __future__ import annotations

import atexit
import importlib
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .app_logger import get_logger, setup_logging
from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .snapshot.controller import register as register_snapshot
from .students.controller import register as register_students

logger = get_logger("main")


def create_app(settings: Optional[ModuleType] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    if settings is None:
        settings = importlib.import_module(get_settings_module())

    setup_logging(getattr(settings, "LOG_LEVEL", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        container = build_container(settings)
        atexit.register(container.close)
    app.extensions["siabdul"] = container

    logger.info(
        "starting %s (school=%s, wa_mode=%s)",
        settings.__name__,
        container.settings_store.school_name,
        container.settings_store.config.mode.value,
    )

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("unhandled error")
        message = f"Kesalahan sistem: {e}" if app.config["DEBUG"] else "Kesalahan sistem"
        return jsonify({"success": False, "message": message}), 500

    register_auth(app, container)
    register_attendance(app, container)
    register_students(app, container)
    register_reports(app, container)
    register_notifications(app, container)
    register_snapshot(app, container)

    return app
