from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.web import fail, json_body, login_required
from ..core.enums import DispatchStatus
from ..core.exceptions import GatewayConfigError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    store = container.settings_store

    def settings_payload() -> dict:
        return {
            "success": True,
            "schoolName": store.school_name,
            "waConfig": store.config.to_dict(),
            "gateway": store.gateway_status(),
        }

    @app.route("/api/settings/whatsapp", methods=["GET"], endpoint="api_wa_settings")
    @login_required
    def api_wa_settings():
        return jsonify(settings_payload())

    @app.route("/api/settings/whatsapp", methods=["PUT"], endpoint="api_update_wa_settings")
    @login_required
    def api_update_wa_settings():
        data = json_body()
        try:
            store.update_config(data.get("waConfig") if isinstance(data.get("waConfig"), dict) else data)
        except ValidationError as e:
            return fail(str(e))
        school_name = str(data.get("schoolName") or "").strip()
        if school_name:
            store.set_school_name(school_name)
        return jsonify({**settings_payload(), "message": "Pengaturan disimpan"})

    @app.route("/api/gateway/status", methods=["GET"], endpoint="api_gateway_status")
    @login_required
    def api_gateway_status():
        return jsonify({"success": True, **store.gateway_status()})

    @app.route("/api/gateway/pair", methods=["POST"], endpoint="api_gateway_pair")
    @login_required
    def api_gateway_pair():
        store.pair()
        return jsonify({"success": True, "message": "WhatsApp Terhubung!", **store.gateway_status()})

    @app.route("/api/gateway/unpair", methods=["POST"], endpoint="api_gateway_unpair")
    @login_required
    def api_gateway_unpair():
        store.unpair()
        return jsonify({"success": True, "message": "Koneksi WhatsApp diputus", **store.gateway_status()})

    @app.route("/api/gateway/logs", methods=["GET"], endpoint="api_gateway_logs")
    @login_required
    def api_gateway_logs():
        return jsonify({"success": True, "logs": [e.to_dict() for e in container.notification_log.list_recent()]})

    @app.route("/api/gateway/logs", methods=["DELETE"], endpoint="api_clear_gateway_logs")
    @login_required
    def api_clear_gateway_logs():
        container.notification_log.clear()
        return jsonify({"success": True, "message": "Log dibersihkan"})

    @app.route("/api/students/<student_id>/notify", methods=["POST"], endpoint="api_notify_guardian")
    @login_required
    def api_notify_guardian(student_id: str):
        try:
            student = container.roster_service.get_student(student_id)
        except ValidationError as e:
            return fail(str(e), 404)

        now = now_local()
        record = container.ledger.get_for_student_and_date(student.student_id, now.date())
        outcome = container.router.dispatch(
            student,
            record.timestamp if record else now,
            is_automatic=False,
            context=store.current(),
        )

        if outcome.status == DispatchStatus.SKIPPED:
            return fail(outcome.detail)
        if outcome.error is not None:
            status = 400 if isinstance(outcome.error, GatewayConfigError) else 502
            return jsonify({"success": False, "message": str(outcome.error), "outcome": outcome.to_dict()}), status
        return jsonify({"success": True, "message": "Notifikasi dikirim", "outcome": outcome.to_dict()})
