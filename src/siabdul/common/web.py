from __future__ import annotations

from datetime import date
from functools import wraps

from flask import jsonify, request, session

from ..core.exceptions import ValidationError
from .datetime_utils import now_local, parse_iso_date

SESSION_KEY = "operator"


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get(SESSION_KEY):
            return jsonify({"success": False, "message": "Silakan login terlebih dahulu!"}), 401
        return view(*args, **kwargs)

    return wrapper


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def date_arg(name: str = "date") -> date:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return now_local().date()
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"Tanggal tidak valid: {raw}")
