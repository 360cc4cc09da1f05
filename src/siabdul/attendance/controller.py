from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import date_arg, fail, json_body, login_required
from ..core.enums import AttendanceStatus, ScanOutcome
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def scan_response(result):
        if result is None:
            return jsonify({"success": True, "pending": True})
        body = {"success": not result.is_error, **result.to_dict()}
        status = 404 if result.outcome == ScanOutcome.UNKNOWN else 200
        return jsonify(body), status

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @login_required
    def api_scan():
        code = str(json_body().get("code", "")).strip()
        if not code:
            return fail("Kode QR tidak boleh kosong")
        return scan_response(container.scan_engine.scan(code))

    @app.route("/api/scan/manual", methods=["POST"], endpoint="api_scan_manual")
    @login_required
    def api_scan_manual():
        data = json_body()
        text = str(data.get("text", ""))
        if data.get("submit"):
            return scan_response(container.scan_engine.submit_manual(text))
        return scan_response(container.scan_engine.feed_manual_input(text))

    @app.route("/api/scan/next", methods=["POST"], endpoint="api_scan_next")
    @login_required
    def api_scan_next():
        container.scan_engine.reset()
        return jsonify({"success": True, "message": "Siap memindai berikutnya"})

    @app.route("/api/attendance/unmarked", methods=["GET"], endpoint="api_unmarked")
    @login_required
    def api_unmarked():
        try:
            work_date = date_arg()
        except ValidationError as e:
            return fail(str(e))
        class_label = (request.args.get("class") or "").strip()
        students = container.marking_service.unmarked_students(class_label, work_date)
        return jsonify(
            {
                "success": True,
                "students": [
                    {"id": s.student_id, "nisn": s.code, "name": s.name, "class": s.class_label}
                    for s in students
                ],
            }
        )

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_mark")
    @login_required
    def api_mark():
        data = json_body()
        try:
            try:
                status = AttendanceStatus.parse(str(data.get("status", "")))
            except ValueError:
                raise ValidationError("Status kehadiran tidak valid")
            record = container.marking_service.mark(str(data.get("studentId", "")), status)
        except ValidationError as e:
            return fail(str(e))
        return jsonify(
            {
                "success": True,
                "message": "Status kehadiran disimpan",
                "record": {
                    "id": record.record_id,
                    "studentId": record.student_id,
                    "timestamp": record.timestamp.isoformat(timespec="seconds"),
                    "status": record.status.value,
                },
            }
        )

    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @login_required
    def api_dashboard():
        try:
            work_date = date_arg()
        except ValidationError as e:
            return fail(str(e))
        return jsonify(
            {
                "success": True,
                "schoolName": container.settings_store.school_name,
                "overview": container.attendance_service.day_overview(work_date),
                "activity": container.attendance_service.get_activity_ui(),
            }
        )

    @app.route("/api/attendance/reset", methods=["POST"], endpoint="api_reset_ledger")
    @login_required
    def api_reset_ledger():
        if not json_body().get("confirm"):
            return fail("Reset data memerlukan konfirmasi")
        removed = container.attendance_service.reset_ledger()
        return jsonify({"success": True, "message": "Data kehadiran telah direset", "removed": removed})
