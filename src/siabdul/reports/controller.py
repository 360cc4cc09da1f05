from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import date_arg, fail, json_body, login_required
from ..core.exceptions import ValidationError
from ..container import Container
from .model import DailyRow


def register(app: Flask, container: Container) -> None:
    def _class_arg() -> str:
        class_label = (request.args.get("class") or "").strip()
        if not class_label:
            raise ValidationError("Kelas harus dipilih")
        return class_label

    def _csv_response(*, fieldnames: list[str], rows: list[dict], filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/daily", methods=["GET"], endpoint="api_report_daily")
    @login_required
    def api_report_daily():
        try:
            class_label = _class_arg()
            work_date = date_arg()
        except ValidationError as e:
            return fail(str(e))
        rows = container.report_service.daily_rows(class_label, work_date)
        return jsonify({"success": True, "class": class_label, "date": work_date.isoformat(), "rows": [r.to_dict() for r in rows]})

    @app.route("/api/reports/daily.csv", methods=["GET"], endpoint="api_report_daily_csv")
    @login_required
    def api_report_daily_csv():
        try:
            class_label = _class_arg()
            work_date = date_arg()
        except ValidationError as e:
            return fail(str(e))
        rows = container.report_service.daily_rows(class_label, work_date)
        return _csv_response(
            fieldnames=list(DailyRow.HEADERS),
            rows=[r.to_dict() for r in rows],
            filename=f"Absensi_Harian_{class_label.replace(' ', '_')}_{work_date.isoformat()}.csv",
        )

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="api_report_monthly")
    @login_required
    def api_report_monthly():
        month_key = (request.args.get("month") or now_local().strftime("%Y-%m")).strip()
        try:
            matrix = container.report_service.monthly_matrix(_class_arg(), month_key)
        except ValidationError as e:
            return fail(str(e))
        except ValueError:
            return fail(f"Bulan tidak valid: {month_key}")
        return jsonify({"success": True, **matrix.to_dict()})

    @app.route("/api/reports/monthly.csv", methods=["GET"], endpoint="api_report_monthly_csv")
    @login_required
    def api_report_monthly_csv():
        month_key = (request.args.get("month") or now_local().strftime("%Y-%m")).strip()
        try:
            matrix = container.report_service.monthly_matrix(_class_arg(), month_key)
        except ValidationError as e:
            return fail(str(e))
        except ValueError:
            return fail(f"Bulan tidak valid: {month_key}")
        data = matrix.to_dict()
        return _csv_response(
            fieldnames=data["headers"],
            rows=data["rows"],
            filename=f"Absensi_Bulanan_{matrix.class_label.replace(' ', '_')}_{month_key}.csv",
        )

    @app.route("/api/reports/summary", methods=["POST"], endpoint="api_report_summary")
    @login_required
    def api_report_summary():
        raw = str(json_body().get("date") or "").strip()
        try:
            work_date = parse_iso_date(raw) if raw else now_local().date()
        except ValueError:
            return fail(f"Tanggal tidak valid: {raw}")
        result = container.summary_service.generate(work_date)
        return jsonify({"success": result.ok, "status": result.status, "report": result.text})
