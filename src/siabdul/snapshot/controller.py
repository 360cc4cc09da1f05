from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import fail, login_required
from ..core.exceptions import ImportValidationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/snapshot", methods=["GET"], endpoint="api_export_snapshot")
    @login_required
    def api_export_snapshot():
        filename = f"siabdul_backup_{now_local().strftime('%Y-%m-%d')}.json"
        return app.response_class(
            container.snapshot_service.export_json().encode("utf-8"),
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/snapshot", methods=["POST"], endpoint="api_import_snapshot")
    @login_required
    def api_import_snapshot():
        confirmed = (request.args.get("confirm") or request.form.get("confirm") or "").lower() in {"1", "true", "yes"}
        upload = request.files.get("file")
        try:
            if upload is not None:
                try:
                    text = upload.read().decode("utf-8-sig")
                except UnicodeDecodeError:
                    raise ImportValidationError("File backup tidak valid.")
                result = container.snapshot_service.import_json(text, confirmed=confirmed)
            else:
                document = request.get_json(silent=True)
                result = container.snapshot_service.import_snapshot(document, confirmed=confirmed)
        except (ImportValidationError, ValidationError) as e:
            return fail(str(e))

        container.scan_engine.reset()
        return jsonify({"success": True, "message": "Data berhasil dipulihkan!", **result.to_dict()})
